"""
Wallet provider exceptions.

Raised by the Privy client and by the account creation steps that
depend on it.
"""

from scholarfi.domain.exceptions.base import ScholarFiException


class ProviderError(ScholarFiException):
    """Raised when a wallet provider API call fails."""

    def __init__(self, message: str, status_code: int = None):
        """
        Initialize provider error.

        Args:
            message: Error message
            status_code: HTTP status code returned by the provider
        """
        super().__init__(message, code="PROVIDER_ERROR")
        self.status_code = status_code


class ParentWalletMissingError(ProviderError):
    """Raised when the parent has no embedded wallet on file."""

    def __init__(self, parent_user_id: str):
        super().__init__(
            f"Parent {parent_user_id} does not have an embedded wallet"
        )
        self.code = "PARENT_WALLET_MISSING"
        self.parent_user_id = parent_user_id


class ProviderUserCreationError(ProviderError):
    """Raised when the child identity cannot be created."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to create child user: {reason}")
        self.code = "PROVIDER_USER_CREATION_FAILED"


class WalletCreationError(ProviderError):
    """
    Raised when a key quorum or wallet cannot be created.

    The child identity already exists at this point, so the error carries
    its ID for manual cleanup.
    """

    def __init__(self, purpose: str, child_user_id: str, reason: str):
        super().__init__(
            f"Failed to create {purpose} for child user "
            f"{child_user_id}: {reason}"
        )
        self.code = "WALLET_CREATION_FAILED"
        self.purpose = purpose
        self.child_user_id = child_user_id


class PolicyUpdateError(ProviderError):
    """Raised when a wallet policy cannot be created or updated."""

    def __init__(self, wallet_address: str, reason: str):
        super().__init__(
            f"Failed to update policy for wallet {wallet_address}: {reason}"
        )
        self.code = "POLICY_UPDATE_FAILED"
        self.wallet_address = wallet_address
