"""
EVM contract client base.

Shared read/write plumbing for the Base, Celo and Oasis contract clients.
"""

import asyncio
import time
from typing import Any, Optional

from eth_account import Account
from web3 import AsyncWeb3, Web3

from scholarfi.domain.exceptions import (
    BlockchainError,
    ChainNotConfiguredError,
    ContractCallError,
    TransactionRevertedError,
)
from scholarfi.infrastructure.monitoring import get_logger, metrics

logger = get_logger(__name__)


class EvmContractClient:
    """
    Async web3 client bound to one contract on one chain.

    Design:
    - AsyncWeb3 provider is created lazily on first use
    - One server signer per chain, loaded from configuration
    - Writes are serialized per client so nonces never collide
    - Every write waits for its receipt and checks the status
    """

    chain: str = "evm"

    def __init__(
        self,
        rpc_url: str,
        contract_address: Optional[str],
        abi: list,
        private_key: Optional[str] = None,
        receipt_timeout: float = 120.0,
        web3: Optional[AsyncWeb3] = None,
    ):
        """
        Initialize contract client.

        Args:
            rpc_url: JSON-RPC endpoint
            contract_address: Deployed contract address
            abi: Contract ABI
            private_key: Server signer key (required for writes)
            receipt_timeout: Seconds to wait for a transaction receipt
            web3: Optional AsyncWeb3 instance (tests)
        """
        self.rpc_url = rpc_url
        self.contract_address = contract_address
        self.abi = abi
        self.receipt_timeout = receipt_timeout
        self._account = Account.from_key(private_key) if private_key else None
        self._w3: Optional[AsyncWeb3] = web3
        self._contract = None
        self._tx_lock = asyncio.Lock()

    @property
    def signer_address(self) -> Optional[str]:
        return self._account.address if self._account else None

    def _ensure_web3(self) -> AsyncWeb3:
        if self._w3 is None:
            self._w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.rpc_url))
        return self._w3

    def _get_contract(self):
        if not self.contract_address:
            raise ChainNotConfiguredError(self.chain, "contract address")
        if self._contract is None:
            self._contract = self._ensure_web3().eth.contract(
                address=Web3.to_checksum_address(self.contract_address),
                abi=self.abi,
            )
        return self._contract

    async def close(self) -> None:
        """Disconnect the RPC provider."""
        if self._w3 is not None:
            provider = self._w3.provider
            disconnect = getattr(provider, "disconnect", None)
            if disconnect is not None:
                await disconnect()
            self._w3 = None
            self._contract = None

    async def get_block_number(self) -> int:
        """Current chain height."""
        try:
            return await self._ensure_web3().eth.block_number
        except Exception as e:
            metrics.blockchain_errors_total.labels(
                chain=self.chain, function="blockNumber"
            ).inc()
            raise ContractCallError(self.chain, "blockNumber", str(e))

    async def _call(self, function: str, *args: Any) -> Any:
        """
        Execute a view function.

        Args:
            function: Contract function name
            *args: Function arguments

        Returns:
            Decoded return value

        Raises:
            ChainNotConfiguredError: If the contract address is missing
            ContractCallError: If the call fails
        """
        contract = self._get_contract()
        try:
            return await getattr(contract.functions, function)(*args).call()
        except Exception as e:
            metrics.blockchain_errors_total.labels(
                chain=self.chain, function=function
            ).inc()
            raise ContractCallError(self.chain, function, str(e))

    async def _transact(self, function: str, *args: Any) -> str:
        """
        Sign, send and confirm a state-changing call.

        Args:
            function: Contract function name
            *args: Function arguments

        Returns:
            Transaction hash (0x-prefixed)

        Raises:
            ChainNotConfiguredError: If signer or contract is missing
            ContractCallError: If submission or confirmation fails
            TransactionRevertedError: If the transaction reverted
        """
        if self._account is None:
            raise ChainNotConfiguredError(self.chain, "private key")
        contract = self._get_contract()
        w3 = self._ensure_web3()

        start_time = time.time()
        metrics.blockchain_transactions_total.labels(
            chain=self.chain, function=function
        ).inc()

        async with self._tx_lock:
            try:
                nonce = await w3.eth.get_transaction_count(
                    self._account.address, "pending"
                )
                tx = await getattr(contract.functions, function)(
                    *args
                ).build_transaction(
                    {"from": self._account.address, "nonce": nonce}
                )
                signed = self._account.sign_transaction(tx)
                tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
                logger.info(
                    f"{self.chain}.{function} submitted: {Web3.to_hex(tx_hash)}"
                )
                receipt = await w3.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=self.receipt_timeout
                )
            except BlockchainError:
                raise
            except Exception as e:
                metrics.blockchain_errors_total.labels(
                    chain=self.chain, function=function
                ).inc()
                raise ContractCallError(self.chain, function, str(e))
            finally:
                metrics.blockchain_request_duration_seconds.labels(
                    chain=self.chain, function=function
                ).observe(time.time() - start_time)

        tx_hex = Web3.to_hex(tx_hash)
        if receipt["status"] != 1:
            metrics.blockchain_errors_total.labels(
                chain=self.chain, function=function
            ).inc()
            raise TransactionRevertedError(self.chain, tx_hex)

        return tx_hex
