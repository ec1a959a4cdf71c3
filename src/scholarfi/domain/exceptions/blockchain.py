"""
Blockchain-related exceptions.

Defines exceptions for contract calls on Base, Celo and Oasis.
"""

from scholarfi.domain.exceptions.base import ScholarFiException


class BlockchainError(ScholarFiException):
    """Base exception for blockchain operations."""

    def __init__(self, message: str):
        super().__init__(message, code="BLOCKCHAIN_ERROR")


class ChainNotConfiguredError(BlockchainError):
    """Raised when a chain client lacks an RPC, signer or contract address."""

    def __init__(self, chain: str, missing: str):
        """
        Initialize chain not configured error.

        Args:
            chain: Chain name (base, celo, oasis)
            missing: Name of the missing setting
        """
        super().__init__(f"{chain} is not configured: {missing} missing")
        self.chain = chain
        self.missing = missing


class ContractCallError(BlockchainError):
    """Raised when a contract read or write fails before confirmation."""

    def __init__(self, chain: str, function: str, reason: str):
        """
        Initialize contract call error.

        Args:
            chain: Chain name
            function: Contract function name
            reason: Underlying error description
        """
        super().__init__(f"{chain}.{function} failed: {reason}")
        self.chain = chain
        self.function = function


class TransactionRevertedError(BlockchainError):
    """Raised when a mined transaction has a failed status."""

    def __init__(self, chain: str, tx_hash: str):
        """
        Initialize transaction reverted error.

        Args:
            chain: Chain name
            tx_hash: Hash of the reverted transaction
        """
        super().__init__(f"Transaction reverted on {chain}: {tx_hash}")
        self.chain = chain
        self.tx_hash = tx_hash


class ProfileNotLinkedError(BlockchainError):
    """Raised when an Oasis profile has no wallet provider identity."""

    def __init__(self, child_address: str):
        super().__init__(
            f"No provider user ID found for child {child_address}"
        )
        self.child_address = child_address
