"""
ChildDataStore client (Oasis Sapphire).

Holds the confidential child profile, including the wallet provider
identities the reconciliation loop needs.
"""

from typing import Optional

from web3 import Web3

from scholarfi.domain.entities.child_account import ChildProfile
from scholarfi.domain.exceptions import ValidationError
from scholarfi.domain.services.i_chain_registrar import IOasisDatastore
from scholarfi.infrastructure.blockchain.abis import OASIS_DATASTORE_ABI
from scholarfi.infrastructure.blockchain.evm_contract_client import (
    EvmContractClient,
)
from scholarfi.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class OasisDatastoreClient(EvmContractClient, IOasisDatastore):
    """Confidential profile datastore client."""

    chain = "oasis"

    def __init__(self, rpc_url: str, contract_address: str, **kwargs):
        super().__init__(rpc_url, contract_address, OASIS_DATASTORE_ABI, **kwargs)

    async def create_child_profile(self, profile: ChildProfile) -> str:
        logger.info(f"Creating Oasis profile for child {profile.child_address}")
        tx_hash = await self._transact(
            "createChildProfile",
            profile.child_address,
            profile.name,
            profile.date_of_birth,
            profile.email,
            profile.child_provider_id,
            profile.parent_provider_id,
            profile.checking_wallet,
            profile.vault_wallet,
            profile.parent_wallet,
        )
        logger.info(f"Created Oasis profile: {tx_hash}")
        return tx_hash

    async def get_child_profile(self, child_address: str) -> ChildProfile:
        (
            name,
            date_of_birth,
            email,
            child_provider_id,
            parent_provider_id,
            checking_wallet,
            vault_wallet,
            parent_wallet,
            is_verified,
            total_deposited,
            last_updated,
        ) = await self._call("getChildProfile", child_address)

        return ChildProfile(
            child_address=child_address,
            name=name,
            date_of_birth=int(date_of_birth),
            email=email,
            child_provider_id=child_provider_id,
            parent_provider_id=parent_provider_id,
            checking_wallet=checking_wallet,
            vault_wallet=vault_wallet,
            parent_wallet=parent_wallet,
            is_verified=bool(is_verified),
            total_deposited=int(total_deposited),
            last_updated=int(last_updated),
        )

    async def mark_age_verified(self, child_address: str) -> str:
        logger.info(f"Marking child {child_address} as age verified on Oasis")
        return await self._transact("markAgeVerified", child_address)

    async def get_child_by_wallet(self, wallet_address: str) -> Optional[str]:
        if not Web3.is_address(wallet_address):
            raise ValidationError(
                "wallet_address", f"not an EVM address: {wallet_address}"
            )
        child_address = await self._call(
            "walletToChild", Web3.to_checksum_address(wallet_address)
        )
        if not child_address or child_address == ZERO_ADDRESS:
            return None
        return child_address

    async def record_deposit(self, child_address: str, amount: int) -> str:
        logger.info(f"Recording deposit of {amount} wei for child {child_address}")
        return await self._transact("recordDeposit", child_address, amount)
