"""
Domain entities.
"""

from scholarfi.domain.entities.child_account import (
    ADULTHOOD_SECONDS,
    AccountCreationResult,
    ChildProfile,
    ProviderUser,
    WalletPolicy,
    WalletPurpose,
    WalletRecord,
    vault_unlock_date,
)
from scholarfi.domain.entities.verification import (
    VerificationEvent,
    VerificationReport,
)

__all__ = [
    "ADULTHOOD_SECONDS",
    "AccountCreationResult",
    "ChildProfile",
    "ProviderUser",
    "WalletPolicy",
    "WalletPurpose",
    "WalletRecord",
    "vault_unlock_date",
    "VerificationEvent",
    "VerificationReport",
]
