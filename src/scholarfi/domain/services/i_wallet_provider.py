"""
Wallet provider service interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from scholarfi.domain.entities.child_account import (
    ProviderUser,
    WalletPolicy,
    WalletPurpose,
    WalletRecord,
)
from scholarfi.domain.value_objects.owner_policy import OwnerPolicy


class IWalletProvider(ABC):
    """
    Abstract interface for the custody vendor (Privy).

    Covers user, key quorum, wallet and policy CRUD. Implementations
    raise ProviderError subclasses on failure.
    """

    @abstractmethod
    async def verify_gas_sponsorship(self, chain_id: int) -> bool:
        """
        Check whether gas sponsorship is enabled.

        Fails open: returns True when the provider cannot be queried.

        Args:
            chain_id: EVM chain ID to check

        Returns:
            True if sponsorship is enabled or unknown
        """

    @abstractmethod
    async def get_user(self, user_id: str) -> ProviderUser:
        """
        Get provider user.

        Args:
            user_id: Provider user ID

        Returns:
            ProviderUser with email and embedded wallet when present
        """

    @abstractmethod
    async def get_user_wallet(self, user_id: str) -> Optional[str]:
        """
        Get the user's embedded wallet address.

        Args:
            user_id: Provider user ID

        Returns:
            Wallet address, or None if the user has no embedded wallet
        """

    @abstractmethod
    async def create_user(self, email: str, metadata: dict) -> ProviderUser:
        """
        Create provider user.

        Args:
            email: Email linked to the new user
            metadata: Custom metadata stored with the user

        Returns:
            Created ProviderUser
        """

    @abstractmethod
    async def create_key_quorum(
        self, user_ids: Sequence[str], threshold: int, display_name: str
    ) -> OwnerPolicy:
        """
        Create key quorum over provider users.

        Args:
            user_ids: Member user IDs
            threshold: Signatures required to authorize an action
            display_name: Human-readable quorum name

        Returns:
            Quorum owner policy
        """

    @abstractmethod
    async def create_wallet(
        self,
        owner: OwnerPolicy,
        purpose: WalletPurpose,
        time_lock: Optional[int] = None,
    ) -> WalletRecord:
        """
        Create Ethereum wallet.

        Args:
            owner: Single user or quorum owner
            purpose: Checking or vault
            time_lock: Optional unlock timestamp (vault only)

        Returns:
            Created WalletRecord
        """

    @abstractmethod
    async def create_wallet_policy(
        self,
        wallet_address: str,
        signers: Sequence[str],
        time_lock: Optional[int] = None,
    ) -> WalletPolicy:
        """
        Create signer policy for a wallet.

        Args:
            wallet_address: Wallet the policy applies to
            signers: Provider user IDs allowed to sign
            time_lock: Optional unlock timestamp

        Returns:
            Created WalletPolicy
        """

    @abstractmethod
    async def list_wallet_policies(self, wallet_address: str) -> List[WalletPolicy]:
        """
        List policies attached to a wallet.

        Args:
            wallet_address: Wallet address

        Returns:
            Policies in provider order
        """

    @abstractmethod
    async def update_wallet_policy(self, policy: WalletPolicy) -> WalletPolicy:
        """
        Replace signers and time-lock of an existing policy.

        Args:
            policy: Policy with updated signers and time_lock

        Returns:
            Updated WalletPolicy
        """

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP resources."""
