"""Tests for the on-chain verification registry."""

from unittest.mock import MagicMock

import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from truthchain.blockchain import BlockchainRegistry, load_abi
from truthchain.models import BlockchainConfig, ContentType, VerificationResult

CONTRACT_ADDRESS = "0x" + "42" * 20
ACCOUNT_ADDRESS = "0x" + "12" * 20
PRIVATE_KEY = "0x" + "11" * 32
TX_HASH = bytes.fromhex("ab" * 32)

RESULT = VerificationResult(
    is_verified=True,
    confidence_score=85,
    ai_model_used="Google Gemini 2.0 Flash",
    explanation="Looks fine",
)


def _mock_web3():
    web3 = MagicMock()
    web3.eth.account.from_key.return_value.address = ACCOUNT_ADDRESS
    web3.eth.max_priority_fee = 1
    web3.eth.get_block.return_value = {"baseFeePerGas": 10}
    web3.eth.get_transaction_count.return_value = 3
    web3.eth.send_raw_transaction.return_value = TX_HASH
    web3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "blockNumber": 5}
    contract = web3.eth.contract.return_value
    contract.functions.verifyContent.return_value.estimate_gas.return_value = 50000
    contract.functions.verifyContent.return_value.build_transaction.side_effect = lambda tx: tx
    return web3


@pytest.fixture
def web3():
    return _mock_web3()


@pytest.fixture
def registry(web3):
    return BlockchainRegistry(web3, CONTRACT_ADDRESS, private_key=PRIVATE_KEY, chain_id=11155111)


class TestRegistrySetup:
    def test_abi_declares_contract_functions(self):
        names = {entry.get("name") for entry in load_abi()}

        assert {"verifyContent", "getVerification", "ContentVerified"} <= names

    def test_address_is_checksummed(self, registry):
        assert registry.contract_address == Web3.to_checksum_address(CONTRACT_ADDRESS)

    def test_read_only_without_key(self, web3):
        registry = BlockchainRegistry(web3, CONTRACT_ADDRESS)

        assert registry.can_write is False
        assert registry.record_verification("x", RESULT, ContentType.TEXT) is None
        web3.eth.send_raw_transaction.assert_not_called()

    def test_read_only_with_zero_address(self, web3):
        registry = BlockchainRegistry(web3, "0x" + "00" * 20, private_key=PRIVATE_KEY)

        assert registry.can_write is False

    def test_from_config(self):
        registry = BlockchainRegistry.from_config(BlockchainConfig(contract_address=CONTRACT_ADDRESS))

        assert registry.contract_address == Web3.to_checksum_address(CONTRACT_ADDRESS)
        assert registry.can_write is False

    def test_is_connected(self, registry, web3):
        web3.is_connected.return_value = True

        assert registry.is_connected() is True

    def test_connection_error_means_disconnected(self, registry, web3):
        web3.is_connected.side_effect = OSError("connection refused")

        assert registry.is_connected() is False

    def test_content_hash(self, registry):
        assert registry.generate_content_hash("") == (
            "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )


class TestRecordVerification:
    """Tests for signed verdict transactions."""

    def test_successful_write(self, registry, web3):
        tx_hex = registry.record_verification("Some claim", RESULT, ContentType.TEXT)

        assert tx_hex == "0x" + "ab" * 32

        verify_call = web3.eth.contract.return_value.functions.verifyContent
        verify_call.assert_called_once_with(
            Web3.keccak(text="Some claim"), True, 85, "text", "Google Gemini 2.0 Flash"
        )

        tx = verify_call.return_value.build_transaction.call_args.args[0]
        assert tx["from"] == ACCOUNT_ADDRESS
        assert tx["nonce"] == 3
        assert tx["gas"] == 50000 + 20000
        assert tx["chainId"] == 11155111
        assert tx["maxFeePerGas"] == 10 * 2 + 1
        assert tx["maxPriorityFeePerGas"] == 1

        web3.eth.account.sign_transaction.assert_called_once_with(tx, PRIVATE_KEY)
        web3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HASH, timeout=120)

    def test_fee_fallback(self, registry, web3):
        web3.eth.get_block.return_value = {}

        registry.record_verification("Some claim", RESULT, ContentType.TEXT)

        tx = web3.eth.contract.return_value.functions.verifyContent.return_value.build_transaction.call_args.args[0]
        assert tx["maxFeePerGas"] == Web3.to_wei(2, "gwei")
        assert tx["maxPriorityFeePerGas"] == Web3.to_wei(2, "gwei")

    def test_contract_rejection(self, registry, web3):
        verify_call = web3.eth.contract.return_value.functions.verifyContent.return_value
        verify_call.estimate_gas.side_effect = ContractLogicError("execution reverted")

        assert registry.record_verification("Some claim", RESULT, ContentType.TEXT) is None
        web3.eth.send_raw_transaction.assert_not_called()

    def test_rpc_failure(self, registry, web3):
        web3.eth.send_raw_transaction.side_effect = Web3Exception("connection refused")

        assert registry.record_verification("Some claim", RESULT, ContentType.TEXT) is None

    def test_reverted_receipt(self, registry, web3):
        web3.eth.wait_for_transaction_receipt.return_value = {"status": 0, "blockNumber": 5}

        assert registry.record_verification("Some claim", RESULT, ContentType.TEXT) is None


class TestGetVerification:
    """Tests for reading verdicts back."""

    def _call(self, web3):
        return web3.eth.contract.return_value.functions.getVerification.return_value.call

    def test_existing_record(self, registry, web3):
        self._call(web3).return_value = [ACCOUNT_ADDRESS, 1700000000, True, 88, "url", "Google Gemini 2.0 Flash"]

        record = registry.get_verification("https://example.com")

        assert record.verifier == ACCOUNT_ADDRESS
        assert record.timestamp == 1700000000
        assert record.is_verified is True
        assert record.confidence_score == 88
        assert record.content_type == "url"
        web3.eth.contract.return_value.functions.getVerification.assert_called_once_with(
            Web3.keccak(text="https://example.com")
        )

    def test_missing_record(self, registry, web3):
        self._call(web3).return_value = ["0x" + "00" * 20, 0, False, 0, "", ""]

        assert registry.get_verification("never stored") is None

    def test_call_failure(self, registry, web3):
        self._call(web3).side_effect = Web3Exception("boom")

        assert registry.get_verification("anything") is None
