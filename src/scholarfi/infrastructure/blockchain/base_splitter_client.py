"""
ParentDepositSplitter client (Base Sepolia).
"""

from scholarfi.domain.services.i_chain_registrar import IBaseSplitter
from scholarfi.infrastructure.blockchain.abis import BASE_SPLITTER_ABI
from scholarfi.infrastructure.blockchain.evm_contract_client import (
    EvmContractClient,
)
from scholarfi.infrastructure.monitoring import get_logger

logger = get_logger(__name__)


class BaseSplitterClient(EvmContractClient, IBaseSplitter):
    """Registers child wallets with the deposit splitter."""

    chain = "base"

    def __init__(self, rpc_url: str, contract_address: str, **kwargs):
        super().__init__(rpc_url, contract_address, BASE_SPLITTER_ABI, **kwargs)

    async def register_child_wallets(
        self, child_address: str, checking_wallet: str, vault_wallet: str
    ) -> str:
        logger.info(f"Registering child {child_address} on Base")
        tx_hash = await self._transact(
            "registerChildWallets",
            child_address,
            checking_wallet,
            vault_wallet,
        )
        logger.info(f"Registered on Base: {tx_hash}")
        return tx_hash
