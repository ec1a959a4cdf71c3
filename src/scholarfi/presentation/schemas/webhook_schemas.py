"""
API schemas for webhook endpoints.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# ================================================================
# Privy Webhook Schemas
# ================================================================


class BalanceChangeData(BaseModel):
    """Data block of a Privy wallet.balance_changed event."""

    model_config = ConfigDict(extra="allow")

    wallet_id: Optional[str] = None
    user_id: Optional[str] = None
    address: Optional[str] = None
    balance_change: Optional[Union[int, str]] = Field(
        default=None, description="Signed change in wei (integer string)"
    )
    chain_type: Optional[str] = None
    timestamp: Optional[int] = None


class PrivyWebhookPayload(BaseModel):
    """Privy webhook envelope."""

    model_config = ConfigDict(extra="allow")

    event: Optional[str] = None
    data: BalanceChangeData = Field(default_factory=BalanceChangeData)


# ================================================================
# Celo Verification Schemas
# ================================================================


class VerificationEventResponse(BaseModel):
    """One processed ChildVerified event."""

    childAddress: str
    parentAddress: str
    timestamp: int
    blockNumber: int
    transactionHash: str


class VerificationCheckResponse(BaseModel):
    """Response schema for a reconciliation pass."""

    success: bool = True
    eventsProcessed: int
    lastBlock: int
    events: List[VerificationEventResponse] = Field(default_factory=list)
