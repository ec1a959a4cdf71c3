"""
Child account API routes.

Handles custodial child account creation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse

from scholarfi.application.use_cases.create_child_account import (
    CreateChildAccount,
)
from scholarfi.di.dependencies import get_create_child_account
from scholarfi.domain.exceptions import ScholarFiException, ValidationError
from scholarfi.infrastructure.monitoring import get_logger
from scholarfi.presentation.schemas.child_account_schemas import (
    AccountCreationResponse,
    CreateChildAccountRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/child-account", tags=["child-account"])

REQUIRED_FIELDS = ("parentUserId", "childName", "childDateOfBirth", "parentEmail")


# ================================================================
# Create Child Account
# ================================================================


@router.post(
    "/create",
    response_model=AccountCreationResponse,
    status_code=status.HTTP_200_OK,
    summary="Create child account",
    description="Create child identity, wallets and on-chain registrations",
)
async def create_child_account(
    request: CreateChildAccountRequest,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    use_case: CreateChildAccount = Depends(get_create_child_account),
):
    """
    Create a complete child account.

    Flow:
    1. Validate required fields
    2. Create child Privy user, quorum, checking and vault wallets
    3. Register child on Base, Celo and Oasis

    Chain registration failures do not fail the request: check the
    per-step flags in the response.
    """
    body = request.model_dump(by_alias=True)
    missing = [name for name in REQUIRED_FIELDS if body.get(name) in (None, "")]
    if missing:
        raise ValidationError(", ".join(missing), "missing required fields")

    try:
        result = await use_case.execute(
            parent_user_id=request.parent_user_id,
            child_name=request.child_name,
            child_date_of_birth=request.child_date_of_birth,
            parent_email=request.parent_email,
            idempotency_key=idempotency_key or request.idempotency_key,
        )
    except ScholarFiException:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating child account: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "INTERNAL_ERROR", "message": str(e)},
        )

    return AccountCreationResponse.from_result(result)
