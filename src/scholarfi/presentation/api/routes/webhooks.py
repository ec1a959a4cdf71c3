"""
Webhook API routes.

Privy balance notifications and Celo verification reconciliation.
"""

from fastapi import APIRouter, Depends, Request, status

from scholarfi.application.use_cases.check_verifications import (
    CheckVerifications,
)
from scholarfi.application.use_cases.handle_balance_change import (
    HandleBalanceChange,
)
from scholarfi.config.settings import Settings
from scholarfi.di.dependencies import (
    get_app_settings,
    get_check_verifications,
    get_handle_balance_change,
)
from scholarfi.domain.exceptions import InvalidSignatureError, ValidationError
from scholarfi.infrastructure.auth import verify_signature
from scholarfi.infrastructure.monitoring import get_logger
from scholarfi.presentation.schemas.webhook_schemas import (
    PrivyWebhookPayload,
    VerificationCheckResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

SIGNATURE_HEADER = "x-privy-signature"


# ================================================================
# Privy Webhook
# ================================================================


@router.post(
    "/privy",
    status_code=status.HTTP_200_OK,
    summary="Privy webhook",
    description="Receive wallet.balance_changed events and record deposits",
)
async def privy_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    use_case: HandleBalanceChange = Depends(get_handle_balance_change),
):
    """
    Handle Privy webhook.

    The signature is computed over the raw request body, so the body is
    read before any JSON parsing.
    """
    raw_body = await request.body()

    signature = request.headers.get(SIGNATURE_HEADER, "")
    if not verify_signature(raw_body, signature, settings.PRIVY_WEBHOOK_SECRET):
        raise InvalidSignatureError("Privy webhook")

    try:
        payload = PrivyWebhookPayload.model_validate_json(raw_body)
    except ValueError as e:
        raise ValidationError("body", f"invalid webhook payload: {e}")

    logger.info(f"Received Privy webhook: {payload.event}")

    return await use_case.execute(
        event_type=payload.event,
        wallet_address=payload.data.address,
        balance_change=payload.data.balance_change,
    )


# ================================================================
# Celo Verification Check
# ================================================================


@router.api_route(
    "/celo/check",
    methods=["GET", "POST"],
    response_model=VerificationCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Check Celo verifications",
    description="Run one reconciliation pass over ChildVerified events",
)
async def check_celo_verifications(
    use_case: CheckVerifications = Depends(get_check_verifications),
):
    """
    Process new age verifications.

    Can be called as a cron job or manually.
    """
    logger.info("Manual trigger: checking Celo verifications")
    report = await use_case.execute()
    return report.to_dict()
