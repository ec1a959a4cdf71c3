"""
ScholarFiAgeVerifier client (Celo Sepolia).

Registers children and reads ChildVerified events emitted after Self
protocol age verification.
"""

from typing import List

from web3 import Web3

from scholarfi.domain.entities.verification import VerificationEvent
from scholarfi.domain.exceptions import ContractCallError
from scholarfi.domain.services.i_chain_registrar import ICeloVerifier
from scholarfi.infrastructure.blockchain.abis import CELO_VERIFIER_ABI
from scholarfi.infrastructure.blockchain.evm_contract_client import (
    EvmContractClient,
)
from scholarfi.infrastructure.monitoring import get_logger, metrics

logger = get_logger(__name__)


class CeloVerifierClient(EvmContractClient, ICeloVerifier):
    """Age verifier contract client."""

    chain = "celo"

    def __init__(self, rpc_url: str, contract_address: str, **kwargs):
        super().__init__(rpc_url, contract_address, CELO_VERIFIER_ABI, **kwargs)

    async def register_child(self, child_address: str, parent_address: str) -> str:
        logger.info(f"Registering child {child_address} on Celo")
        tx_hash = await self._transact("registerChild", child_address, parent_address)
        logger.info(f"Registered on Celo: {tx_hash}")
        return tx_hash

    async def is_child_verified(self, child_address: str) -> bool:
        return bool(await self._call("isChildVerified", child_address))

    async def get_verification_events(
        self, from_block: int, to_block: int
    ) -> List[VerificationEvent]:
        """
        Get ChildVerified events in [from_block, to_block].

        Args:
            from_block: First block to scan
            to_block: Last block to scan

        Returns:
            Events sorted by (block number, log index)

        Raises:
            ContractCallError: If the log query fails
        """
        contract = self._get_contract()
        try:
            logs = await contract.events.ChildVerified.get_logs(
                from_block=from_block, to_block=to_block
            )
        except Exception as e:
            metrics.blockchain_errors_total.labels(
                chain=self.chain, function="ChildVerified"
            ).inc()
            raise ContractCallError(self.chain, "ChildVerified", str(e))

        events = [
            VerificationEvent(
                child_address=log["args"]["childAddress"],
                parent_address=log["args"]["parentAddress"],
                timestamp=int(log["args"]["timestamp"]),
                block_number=log["blockNumber"],
                transaction_hash=Web3.to_hex(log["transactionHash"]),
                log_index=log["logIndex"],
            )
            for log in logs
        ]
        return sorted(events, key=lambda e: (e.block_number, e.log_index))
