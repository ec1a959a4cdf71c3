"""
Handle Balance Change use case.

Records deposits reported by Privy balance webhooks on the child's
Oasis profile.
"""

from typing import Any, Dict, Optional

from scholarfi.domain.exceptions import ScholarFiException, ValidationError
from scholarfi.domain.services.i_chain_registrar import IOasisDatastore
from scholarfi.infrastructure.monitoring import get_logger, metrics

logger = get_logger(__name__)

BALANCE_EVENT_TYPE = "wallet.balance_changed"


def parse_amount(value: Any) -> int:
    """
    Parse a wei amount from a webhook field.

    Args:
        value: Integer or decimal string

    Returns:
        Amount in wei, 0 when the value is not an integer
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


class HandleBalanceChange:
    """
    Turn a balance-change event into a recorded deposit.

    Business rules:
    - Only wallet.balance_changed events are handled
    - Zero or negative changes (withdrawals) are acknowledged and ignored
    - Unknown wallets are acknowledged and ignored
    - A failed deposit write is reported, never raised
    """

    def __init__(self, oasis_datastore: IOasisDatastore):
        """
        Initialize use case with dependencies.

        Args:
            oasis_datastore: Oasis profile datastore client
        """
        self.oasis_datastore = oasis_datastore

    async def execute(
        self,
        event_type: Optional[str],
        wallet_address: Optional[str],
        balance_change: Any,
    ) -> Dict[str, Any]:
        """
        Execute deposit recording.

        Args:
            event_type: Webhook event type
            wallet_address: Wallet whose balance changed
            balance_change: Signed change in wei

        Returns:
            Acknowledgement body for the webhook caller

        Raises:
            ValidationError: If a deposit has no wallet address
            BlockchainError: If the wallet cannot be resolved on Oasis
        """
        if event_type != BALANCE_EVENT_TYPE:
            return {"message": "Event ignored"}

        amount = parse_amount(balance_change)
        if amount <= 0:
            metrics.deposits_recorded_total.labels(outcome="ignored").inc()
            return {"success": True, "message": "Withdrawal ignored"}

        if not wallet_address:
            raise ValidationError("wallet_address", "is required")

        child_address = await self.oasis_datastore.get_child_by_wallet(wallet_address)
        if child_address is None:
            logger.warning(f"Wallet not registered: {wallet_address}")
            metrics.deposits_recorded_total.labels(outcome="unregistered").inc()
            return {"success": True, "message": "Wallet not registered"}

        deposit_recorded = True
        try:
            await self.oasis_datastore.record_deposit(child_address, amount)
            logger.info(f"Deposit recorded for {child_address}: {amount} wei")
            metrics.deposits_recorded_total.labels(outcome="recorded").inc()
        except ScholarFiException as e:
            logger.error(f"Failed to record deposit for {child_address}: {e.message}")
            metrics.deposits_recorded_total.labels(outcome="failed").inc()
            deposit_recorded = False

        return {
            "success": True,
            "childAddress": child_address,
            "walletAddress": wallet_address,
            "depositAmount": str(amount),
            "depositRecorded": deposit_recorded,
        }
