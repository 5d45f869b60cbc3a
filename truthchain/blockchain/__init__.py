"""On-chain storage of verification verdicts."""

from .registry import BlockchainRegistry, load_abi

__all__ = ["BlockchainRegistry", "load_abi"]
