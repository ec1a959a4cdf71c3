"""
Chain registrar service interfaces.

One interface per contract the backend writes to.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from scholarfi.domain.entities.child_account import ChildProfile
from scholarfi.domain.entities.verification import VerificationEvent


class IBaseSplitter(ABC):
    """ParentDepositSplitter on Base Sepolia."""

    @abstractmethod
    async def register_child_wallets(
        self, child_address: str, checking_wallet: str, vault_wallet: str
    ) -> str:
        """
        Register checking and vault wallets for a child.

        Args:
            child_address: Derived child address
            checking_wallet: Checking wallet address
            vault_wallet: Vault wallet address

        Returns:
            Transaction hash
        """

    @abstractmethod
    async def close(self) -> None:
        """Release RPC resources."""


class ICeloVerifier(ABC):
    """ScholarFiAgeVerifier on Celo Sepolia."""

    @abstractmethod
    async def register_child(self, child_address: str, parent_address: str) -> str:
        """
        Link child to parent wallet for self-verification.

        Args:
            child_address: Derived child address
            parent_address: Parent embedded wallet address

        Returns:
            Transaction hash
        """

    @abstractmethod
    async def is_child_verified(self, child_address: str) -> bool:
        """Whether the child has completed age verification."""

    @abstractmethod
    async def get_block_number(self) -> int:
        """Current chain height."""

    @abstractmethod
    async def get_verification_events(
        self, from_block: int, to_block: int
    ) -> List[VerificationEvent]:
        """
        Get ChildVerified events in an inclusive block range.

        Args:
            from_block: First block to scan
            to_block: Last block to scan

        Returns:
            Events in ascending (block, log index) order
        """

    @abstractmethod
    async def close(self) -> None:
        """Release RPC resources."""


class IOasisDatastore(ABC):
    """ChildDataStore on Oasis Sapphire."""

    @abstractmethod
    async def create_child_profile(self, profile: ChildProfile) -> str:
        """
        Store confidential child profile.

        Args:
            profile: Profile to write

        Returns:
            Transaction hash
        """

    @abstractmethod
    async def get_child_profile(self, child_address: str) -> ChildProfile:
        """
        Read child profile.

        Args:
            child_address: Derived child address

        Returns:
            Decoded ChildProfile
        """

    @abstractmethod
    async def mark_age_verified(self, child_address: str) -> str:
        """
        Flag profile as age-verified.

        Args:
            child_address: Derived child address

        Returns:
            Transaction hash
        """

    @abstractmethod
    async def get_child_by_wallet(self, wallet_address: str) -> Optional[str]:
        """
        Resolve a checking or vault wallet to its child.

        Args:
            wallet_address: Wallet address

        Returns:
            Child address, or None if the wallet is not registered
        """

    @abstractmethod
    async def record_deposit(self, child_address: str, amount: int) -> str:
        """
        Add a deposit to the child's running total.

        Args:
            child_address: Derived child address
            amount: Deposit amount in wei

        Returns:
            Transaction hash
        """

    @abstractmethod
    async def close(self) -> None:
        """Release RPC resources."""
