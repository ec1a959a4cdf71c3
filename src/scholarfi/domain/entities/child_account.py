"""
Child account entities - Wallets, policies and profiles of a child.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional

from scholarfi.domain.value_objects.owner_policy import OwnerPolicy

# 18 years of 365 days; leap days are not counted
ADULTHOOD_SECONDS = 18 * 365 * 24 * 60 * 60


def vault_unlock_date(date_of_birth: int) -> int:
    """Unix timestamp at which the vault time-lock expires."""
    return date_of_birth + ADULTHOOD_SECONDS


class WalletPurpose(str, Enum):
    """Purpose of a child wallet."""

    CHECKING = "checking"
    VAULT = "vault"


@dataclass
class ProviderUser:
    """
    User record held by the wallet provider.

    Only the fields the backend reads are mapped.
    """

    id: str
    email: Optional[str] = None
    embedded_wallet: Optional[str] = None


@dataclass
class WalletRecord:
    """
    WalletRecord entity representing a provider-custodied wallet.

    Business rules:
    - Created once during account creation, never deleted
    - Vault wallets carry a time-lock until the child turns 18
    - Checking wallets never carry a time-lock
    """

    id: str
    address: str
    purpose: WalletPurpose
    owner: OwnerPolicy
    time_lock: Optional[int] = None

    def __post_init__(self):
        """Validate wallet data after initialization."""
        if not self.address:
            raise ValueError("Wallet address is required")

        if self.purpose == WalletPurpose.CHECKING and self.time_lock is not None:
            raise ValueError("Checking wallets cannot be time-locked")


@dataclass
class WalletPolicy:
    """
    Signer policy attached to a provider wallet.

    Business rules:
    - At least one signer
    - Time-lock cleared and signer added once the child is verified
    """

    id: str
    wallet_address: str
    signers: List[str] = field(default_factory=list)
    time_lock: Optional[int] = None

    def unlocked_for(self, signer_id: str) -> "WalletPolicy":
        """
        Return the policy after granting a signer full access.

        Args:
            signer_id: Provider user ID to add

        Returns:
            New policy with signer appended and time-lock removed
        """
        signers = list(self.signers)
        if signer_id not in signers:
            signers.append(signer_id)
        return WalletPolicy(
            id=self.id,
            wallet_address=self.wallet_address,
            signers=signers,
            time_lock=None,
        )


@dataclass
class ChildProfile:
    """
    Confidential child profile stored on Oasis Sapphire.

    Provider identities live in dedicated fields so the email field only
    ever holds an email address.
    """

    child_address: str
    name: str
    date_of_birth: int
    email: str
    child_provider_id: str
    parent_provider_id: str
    checking_wallet: str
    vault_wallet: str
    parent_wallet: str
    is_verified: bool = False
    total_deposited: int = 0
    last_updated: int = 0

    @property
    def is_linked(self) -> bool:
        """Whether the profile references a provider identity."""
        return bool(self.child_provider_id)


@dataclass
class AccountCreationResult:
    """
    Outcome of the child account creation saga.

    There is no overall success flag: every degradable step reports its
    own boolean and callers inspect each one.
    """

    child_address: str
    child_user_id: str
    child_privy_email: str
    checking_wallet: str
    vault_wallet: str
    parent_wallet: str
    checking_wallet_id: str
    vault_wallet_id: str
    quorum_id: str
    vault_unlock_date: int
    gas_sponsorship_enabled: bool = True
    policies_created: bool = False
    base_registered: bool = False
    celo_registered: bool = False
    oasis_profile_created: bool = False
    message: str = ""

    def failed_steps(self) -> List[str]:
        """Names of degradable steps that did not succeed."""
        flags = {
            "policies": self.policies_created,
            "base": self.base_registered,
            "celo": self.celo_registered,
            "oasis": self.oasis_profile_created,
        }
        return [name for name, ok in flags.items() if not ok]

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AccountCreationResult":
        """Rebuild from to_dict() output."""
        return cls(**data)
