"""
Domain exceptions for Scholar-Fi.
"""

from scholarfi.domain.exceptions.auth import (
    AuthenticationError,
    InvalidSignatureError,
)
from scholarfi.domain.exceptions.base import (
    EntityNotFoundError,
    ScholarFiException,
    ValidationError,
)
from scholarfi.domain.exceptions.blockchain import (
    BlockchainError,
    ChainNotConfiguredError,
    ContractCallError,
    ProfileNotLinkedError,
    TransactionRevertedError,
)
from scholarfi.domain.exceptions.provider import (
    ParentWalletMissingError,
    PolicyUpdateError,
    ProviderError,
    ProviderUserCreationError,
    WalletCreationError,
)

__all__ = [
    # Base
    "ScholarFiException",
    "EntityNotFoundError",
    "ValidationError",
    # Auth
    "AuthenticationError",
    "InvalidSignatureError",
    # Provider
    "ProviderError",
    "ParentWalletMissingError",
    "ProviderUserCreationError",
    "WalletCreationError",
    "PolicyUpdateError",
    # Blockchain
    "BlockchainError",
    "ChainNotConfiguredError",
    "ContractCallError",
    "TransactionRevertedError",
    "ProfileNotLinkedError",
]
