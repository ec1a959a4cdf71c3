"""
API schemas for child account operations.

Request and response models use camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scholarfi.domain.entities.child_account import AccountCreationResult

# ================================================================
# Request Schemas
# ================================================================


class CreateChildAccountRequest(BaseModel):
    """
    Request schema for creating a child account.

    Fields are optional here so missing values surface as
    VALIDATION_ERROR (400) from the route.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    parent_user_id: Optional[str] = Field(
        default=None, description="Parent Privy user ID"
    )
    child_name: Optional[str] = Field(default=None, description="Child name")
    child_date_of_birth: Optional[int] = Field(
        default=None, description="Date of birth (unix seconds)"
    )
    parent_email: Optional[str] = Field(default=None, description="Parent email")
    idempotency_key: Optional[str] = Field(
        default=None, description="Optional idempotency key"
    )


# ================================================================
# Response Schemas
# ================================================================


class AccountCreationResponse(BaseModel):
    """Response schema for child account creation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

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
    oasis_profile_created: bool
    celo_registered: bool
    base_registered: bool
    policies_created: bool
    gas_sponsorship_enabled: bool
    message: str

    @classmethod
    def from_result(cls, result: AccountCreationResult) -> "AccountCreationResponse":
        """Build response from use case result."""
        return cls(**result.to_dict())
