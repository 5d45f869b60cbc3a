"""
Smart-contract registry for verification verdicts

Verdicts are keyed by the keccak-256 hash of the submitted content. Writes are
signed locally with the configured private key and sent as EIP-1559
transactions; reads go through a plain ``eth_call``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from ..models import BlockchainConfig, ContentType, VerificationRecord, VerificationResult
from ..utils.helpers import generate_content_hash

logger = logging.getLogger(__name__)

ABI_PATH = Path(__file__).parent / "truthchain_abi.json"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def load_abi(path: Path = ABI_PATH) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class BlockchainRegistry:
    """Records and reads verification verdicts on chain"""

    def __init__(self,
                 web3: Web3,
                 contract_address: str,
                 abi: Optional[List[Dict[str, Any]]] = None,
                 private_key: Optional[str] = None,
                 chain_id: Optional[int] = None,
                 receipt_timeout_seconds: int = 120,
                 gas_buffer: int = 20000):
        self.web3 = web3
        self.contract_address = Web3.to_checksum_address(contract_address)
        self.contract = web3.eth.contract(address=self.contract_address, abi=abi or load_abi())
        self.chain_id = chain_id
        self.receipt_timeout_seconds = receipt_timeout_seconds
        self.gas_buffer = gas_buffer
        self.logger = logger.getChild("registry")

        self._private_key = private_key
        self.account = web3.eth.account.from_key(private_key) if private_key else None

    @classmethod
    def from_config(cls, config: BlockchainConfig) -> "BlockchainRegistry":
        """Build a registry connected over HTTP to the configured RPC endpoint"""
        web3 = Web3(Web3.HTTPProvider(config.rpc_url))
        return cls(
            web3,
            config.contract_address,
            private_key=config.private_key,
            chain_id=config.chain_id,
            receipt_timeout_seconds=config.receipt_timeout_seconds,
            gas_buffer=config.gas_buffer,
        )

    @property
    def can_write(self) -> bool:
        return self.account is not None and self.contract_address != ZERO_ADDRESS

    def is_connected(self) -> bool:
        try:
            return bool(self.web3.is_connected())
        except (Web3Exception, OSError) as e:
            self.logger.warning(f"RPC connection check failed: {e}")
            return False

    def generate_content_hash(self, content: str) -> str:
        return generate_content_hash(content)

    def _fee_params(self) -> Dict[str, int]:
        """EIP-1559 fees: twice the latest base fee plus the suggested tip"""
        try:
            max_priority_fee = self.web3.eth.max_priority_fee
            base_fee = self.web3.eth.get_block("latest")["baseFeePerGas"]
            max_fee = base_fee * 2 + max_priority_fee
            return {"maxFeePerGas": max_fee, "maxPriorityFeePerGas": max_priority_fee}
        except (Web3Exception, ValueError, KeyError, OSError) as e:
            self.logger.warning(f"Could not fetch EIP-1559 fees, using 2 gwei: {e}")
            fallback = Web3.to_wei(2, "gwei")
            return {"maxFeePerGas": fallback, "maxPriorityFeePerGas": fallback}

    def record_verification(self,
                            content: str,
                            result: VerificationResult,
                            content_type: ContentType) -> Optional[str]:
        """
        Store a verdict for content on chain

        Args:
            content: Original content (hashed before sending)
            result: Verdict to record
            content_type: Type of the content

        Returns:
            Transaction hash as 0x-prefixed hex, or None if the write failed
        """
        if not self.can_write:
            self.logger.warning("Blockchain registry is read-only (no private key or contract address)")
            return None

        content_hash = Web3.keccak(text=content)
        call = self.contract.functions.verifyContent(
            content_hash,
            result.is_verified,
            result.confidence_score,
            ContentType(content_type).value,
            result.ai_model_used,
        )

        try:
            gas_estimate = call.estimate_gas({"from": self.account.address})
            tx = call.build_transaction({
                "from": self.account.address,
                "nonce": self.web3.eth.get_transaction_count(self.account.address),
                "gas": gas_estimate + self.gas_buffer,
                "chainId": self.chain_id or self.web3.eth.chain_id,
                **self._fee_params(),
            })

            signed = self.web3.eth.account.sign_transaction(tx, self._private_key)
            tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout_seconds
            )
        except ContractLogicError as e:
            self.logger.error(f"Contract rejected verification: {e}")
            return None
        except (Web3Exception, ValueError, OSError) as e:
            self.logger.error(f"Failed to record verification: {e}")
            return None

        tx_hex = Web3.to_hex(tx_hash)
        if receipt["status"] != 1:
            self.logger.error(f"Verification transaction reverted: {tx_hex}")
            return None

        self.logger.info(f"Recorded verification in block {receipt['blockNumber']}: {tx_hex}")
        return tx_hex

    def get_verification(self, content: str) -> Optional[VerificationRecord]:
        """
        Fetch the on-chain record for content

        Returns:
            VerificationRecord, or None when nothing is recorded or the call fails
        """
        content_hash = Web3.keccak(text=content)
        try:
            verifier, timestamp, is_verified, confidence, content_type, model = (
                self.contract.functions.getVerification(content_hash).call()
            )
        except (Web3Exception, ValueError, OSError) as e:
            self.logger.error(f"Failed to get verification: {e}")
            return None

        if not verifier or int(verifier, 16) == 0:
            return None

        return VerificationRecord(
            verifier=verifier,
            timestamp=int(timestamp),
            is_verified=bool(is_verified),
            confidence_score=int(confidence),
            content_type=content_type,
            ai_model_used=model,
        )
