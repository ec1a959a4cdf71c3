"""
Unit tests for the EVM contract clients.

AsyncWeb3 is replaced by mocks; transactions are signed with a real
eth_account key.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from web3 import Web3

from scholarfi.domain.exceptions import (
    ChainNotConfiguredError,
    ContractCallError,
    TransactionRevertedError,
    ValidationError,
)
from scholarfi.infrastructure.blockchain.base_splitter_client import (
    BaseSplitterClient,
)
from scholarfi.infrastructure.blockchain.celo_verifier_client import (
    CeloVerifierClient,
)
from scholarfi.infrastructure.blockchain.oasis_datastore_client import (
    ZERO_ADDRESS,
    OasisDatastoreClient,
)

from tests.helpers.builders import (
    CHECKING_WALLET,
    CHILD_ADDRESS,
    PARENT_WALLET,
    TEST_PRIVATE_KEY,
    TEST_SIGNER_ADDRESS,
    VAULT_WALLET,
)

CONTRACT_ADDRESS = "0x9999999999999999999999999999999999999999"
TX_HASH = bytes.fromhex("ab" * 32)


async def _value(value):
    return value


def _mock_web3(receipt_status: int = 1):
    """AsyncWeb3 stand-in with a single mocked contract."""
    w3 = MagicMock()
    contract = MagicMock()
    w3.eth.contract.return_value = contract
    w3.eth.get_transaction_count = AsyncMock(return_value=7)
    w3.eth.send_raw_transaction = AsyncMock(return_value=TX_HASH)
    w3.eth.wait_for_transaction_receipt = AsyncMock(
        return_value={"status": receipt_status}
    )
    w3.provider.disconnect = AsyncMock()
    return w3, contract


def _stub_build(contract, function: str, chain_id: int = 84532):
    tx = {
        "to": CONTRACT_ADDRESS,
        "value": 0,
        "gas": 200000,
        "gasPrice": 1000000000,
        "nonce": 7,
        "chainId": chain_id,
        "data": "0x",
    }
    getattr(contract.functions, function).return_value.build_transaction = AsyncMock(
        return_value=tx
    )


class TestEvmTransactions:
    """Write path shared by all contract clients."""

    async def test_register_child_wallets_sends_signed_tx(self):
        w3, contract = _mock_web3()
        _stub_build(contract, "registerChildWallets")
        client = BaseSplitterClient(
            "http://rpc", CONTRACT_ADDRESS, private_key=TEST_PRIVATE_KEY, web3=w3
        )

        tx_hash = await client.register_child_wallets(
            CHILD_ADDRESS, CHECKING_WALLET, VAULT_WALLET
        )

        assert tx_hash == "0x" + "ab" * 32
        assert client.signer_address == TEST_SIGNER_ADDRESS
        contract.functions.registerChildWallets.assert_called_once_with(
            CHILD_ADDRESS, CHECKING_WALLET, VAULT_WALLET
        )
        build = contract.functions.registerChildWallets.return_value.build_transaction
        build.assert_awaited_once_with({"from": TEST_SIGNER_ADDRESS, "nonce": 7})
        w3.eth.get_transaction_count.assert_awaited_once_with(
            TEST_SIGNER_ADDRESS, "pending"
        )
        w3.eth.send_raw_transaction.assert_awaited_once()

    async def test_reverted_receipt_raises(self):
        w3, contract = _mock_web3(receipt_status=0)
        _stub_build(contract, "registerChild", chain_id=11142220)
        client = CeloVerifierClient(
            "http://rpc", CONTRACT_ADDRESS, private_key=TEST_PRIVATE_KEY, web3=w3
        )

        with pytest.raises(TransactionRevertedError):
            await client.register_child(CHILD_ADDRESS, PARENT_WALLET)

    async def test_send_failure_becomes_contract_call_error(self):
        w3, contract = _mock_web3()
        _stub_build(contract, "markAgeVerified", chain_id=23295)
        w3.eth.send_raw_transaction.side_effect = RuntimeError("nonce too low")
        client = OasisDatastoreClient(
            "http://rpc", CONTRACT_ADDRESS, private_key=TEST_PRIVATE_KEY, web3=w3
        )

        with pytest.raises(ContractCallError) as exc_info:
            await client.mark_age_verified(CHILD_ADDRESS)

        assert exc_info.value.chain == "oasis"
        assert exc_info.value.function == "markAgeVerified"

    async def test_write_without_signer_is_not_configured(self):
        w3, _ = _mock_web3()
        client = BaseSplitterClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        with pytest.raises(ChainNotConfiguredError):
            await client.register_child_wallets(
                CHILD_ADDRESS, CHECKING_WALLET, VAULT_WALLET
            )

    async def test_missing_contract_address_is_not_configured(self):
        w3, _ = _mock_web3()
        client = OasisDatastoreClient("http://rpc", None, web3=w3)

        with pytest.raises(ChainNotConfiguredError):
            await client.get_child_by_wallet(VAULT_WALLET)

    async def test_close_disconnects_provider(self):
        w3, _ = _mock_web3()
        client = BaseSplitterClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        await client.close()

        w3.provider.disconnect.assert_awaited_once()


class TestCeloVerifierClient:
    """Read path of the Celo verifier."""

    async def test_events_are_mapped_and_sorted(self):
        w3, contract = _mock_web3()
        contract.events.ChildVerified.get_logs = AsyncMock(
            return_value=[
                {
                    "args": {
                        "childAddress": VAULT_WALLET,
                        "parentAddress": PARENT_WALLET,
                        "timestamp": 20,
                    },
                    "blockNumber": 12,
                    "logIndex": 0,
                    "transactionHash": bytes.fromhex("02" * 32),
                },
                {
                    "args": {
                        "childAddress": CHILD_ADDRESS,
                        "parentAddress": PARENT_WALLET,
                        "timestamp": 10,
                    },
                    "blockNumber": 11,
                    "logIndex": 4,
                    "transactionHash": bytes.fromhex("01" * 32),
                },
            ]
        )
        client = CeloVerifierClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        events = await client.get_verification_events(10, 20)

        contract.events.ChildVerified.get_logs.assert_awaited_once_with(
            from_block=10, to_block=20
        )
        assert [e.child_address for e in events] == [CHILD_ADDRESS, VAULT_WALLET]
        assert events[0].transaction_hash == "0x" + "01" * 32
        assert events[0].timestamp == 10

    async def test_log_query_failure(self):
        w3, contract = _mock_web3()
        contract.events.ChildVerified.get_logs = AsyncMock(
            side_effect=RuntimeError("range too large")
        )
        client = CeloVerifierClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        with pytest.raises(ContractCallError):
            await client.get_verification_events(0, 10)

    async def test_block_number(self):
        w3, _ = _mock_web3()
        w3.eth.block_number = _value(5000)
        client = CeloVerifierClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        assert await client.get_block_number() == 5000

    async def test_is_child_verified(self):
        w3, contract = _mock_web3()
        contract.functions.isChildVerified.return_value.call = AsyncMock(
            return_value=True
        )
        client = CeloVerifierClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        assert await client.is_child_verified(CHILD_ADDRESS) is True


class TestOasisDatastoreClient:
    """Read path of the Oasis datastore."""

    async def test_get_child_profile_decodes_tuple(self):
        w3, contract = _mock_web3()
        contract.functions.getChildProfile.return_value.call = AsyncMock(
            return_value=(
                "Alex",
                1000000000,
                "parent@example.com",
                "did:x:1",
                "did:privy:parent",
                CHECKING_WALLET,
                VAULT_WALLET,
                PARENT_WALLET,
                False,
                10**18,
                1700000000,
            )
        )
        client = OasisDatastoreClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        profile = await client.get_child_profile(CHILD_ADDRESS)

        assert profile.child_provider_id == "did:x:1"
        assert profile.vault_wallet == VAULT_WALLET
        assert profile.total_deposited == 10**18
        assert profile.is_linked

    async def test_unregistered_wallet_resolves_to_none(self):
        w3, contract = _mock_web3()
        contract.functions.walletToChild.return_value.call = AsyncMock(
            return_value=ZERO_ADDRESS
        )
        client = OasisDatastoreClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        assert await client.get_child_by_wallet(CHECKING_WALLET) is None

    async def test_registered_wallet_resolves_to_child(self):
        w3, contract = _mock_web3()
        contract.functions.walletToChild.return_value.call = AsyncMock(
            return_value=CHILD_ADDRESS
        )
        client = OasisDatastoreClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        resolved = await client.get_child_by_wallet(CHECKING_WALLET.lower())

        assert resolved == CHILD_ADDRESS
        contract.functions.walletToChild.assert_called_once_with(
            Web3.to_checksum_address(CHECKING_WALLET)
        )

    @pytest.mark.parametrize("address", ["not-an-address", "0x1234", ""])
    async def test_malformed_wallet_is_rejected(self, address):
        w3, contract = _mock_web3()
        client = OasisDatastoreClient("http://rpc", CONTRACT_ADDRESS, web3=w3)

        with pytest.raises(ValidationError):
            await client.get_child_by_wallet(address)

        contract.functions.walletToChild.assert_not_called()
