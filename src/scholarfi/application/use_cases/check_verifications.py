"""
Check Verifications use case.

Reconciles ChildVerified events on Celo into vault unlocks on Privy and
Oasis. Safe to re-run: every per-event effect is idempotent.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from scholarfi.application.saga import FailurePolicy, SagaRunner, SagaStep
from scholarfi.domain.entities.child_account import ChildProfile
from scholarfi.domain.entities.verification import (
    VerificationEvent,
    VerificationReport,
)
from scholarfi.domain.exceptions import (
    PolicyUpdateError,
    ProfileNotLinkedError,
    ProviderError,
    ScholarFiException,
)
from scholarfi.domain.repositories.i_cursor_store import ICursorStore
from scholarfi.domain.services.i_chain_registrar import (
    ICeloVerifier,
    IOasisDatastore,
)
from scholarfi.domain.services.i_notification_sender import INotificationSender
from scholarfi.domain.services.i_wallet_provider import IWalletProvider
from scholarfi.infrastructure.monitoring import get_logger, metrics

logger = get_logger(__name__)

CURSOR_NAME = "celo_child_verified"


@dataclass
class VerificationContext:
    """State threaded through the per-event steps."""

    event: VerificationEvent
    profile: Optional[ChildProfile] = None


class CheckVerifications:
    """
    Process new ChildVerified events since the stored cursor.

    Per event (failure policy):
    1. load Oasis profile (skip event if it has no provider identity)
    2. unlock vault policy on Privy (degrade)
    3. mark profile age-verified on Oasis (abort this event)
    4. notify the child (degrade)

    Passes never overlap. The cursor always advances to the chain height
    read at the start of the pass once the event query succeeded.
    """

    def __init__(
        self,
        celo_verifier: ICeloVerifier,
        oasis_datastore: IOasisDatastore,
        wallet_provider: IWalletProvider,
        notification_sender: INotificationSender,
        cursor_store: ICursorStore,
        lookback_blocks: int = 1000,
    ):
        """
        Initialize use case with dependencies.

        Args:
            celo_verifier: Celo age verifier client
            oasis_datastore: Oasis profile datastore client
            wallet_provider: Custody vendor client
            notification_sender: Notification delivery
            cursor_store: Last scanned block persistence
            lookback_blocks: Blocks scanned when no cursor is stored
        """
        self.celo_verifier = celo_verifier
        self.oasis_datastore = oasis_datastore
        self.wallet_provider = wallet_provider
        self.notification_sender = notification_sender
        self.cursor_store = cursor_store
        self.lookback_blocks = lookback_blocks
        self._lock = asyncio.Lock()

        self.saga = SagaRunner(
            "check_verifications",
            [
                SagaStep("lookup_profile", self._lookup_profile, FailurePolicy.SKIP),
                SagaStep(
                    "update_vault_policy",
                    self._update_vault_policy,
                    FailurePolicy.DEGRADE,
                ),
                SagaStep("mark_verified", self._mark_verified),
                SagaStep("notify", self._notify, FailurePolicy.DEGRADE),
            ],
        )

    async def execute(self) -> VerificationReport:
        """
        Run one reconciliation pass.

        A second caller waits for the running pass to finish before
        starting its own.

        Returns:
            VerificationReport with processed events and the new cursor

        Raises:
            BlockchainError: If the chain height or events cannot be read
        """
        async with self._lock:
            return await self._reconcile()

    async def _reconcile(self) -> VerificationReport:
        current_block = await self.celo_verifier.get_block_number()
        cursor = await self.cursor_store.load(CURSOR_NAME)

        if cursor is None:
            cursor = max(0, current_block - self.lookback_blocks)
            logger.info(f"No verification cursor stored, starting at block {cursor}")

        if cursor >= current_block:
            return VerificationReport(last_block=cursor)

        events = await self.celo_verifier.get_verification_events(
            cursor + 1, current_block
        )
        logger.info(
            f"Found {len(events)} verification events "
            f"in blocks {cursor + 1}-{current_block}"
        )

        report = VerificationReport(last_block=current_block)
        for event in events:
            try:
                saga_report = await self.saga.run(VerificationContext(event=event))
            except ScholarFiException as e:
                logger.error(
                    f"Failed to process verification for {event.child_address}: "
                    f"{e.message}"
                )
                report.failed += 1
                metrics.verification_events_total.labels(outcome="failed").inc()
                continue

            if saga_report.skipped:
                report.skipped += 1
                metrics.verification_events_total.labels(outcome="skipped").inc()
                continue

            report.events.append(event)
            metrics.verification_events_total.labels(outcome="processed").inc()

        await self.cursor_store.save(CURSOR_NAME, current_block)
        return report

    # ================================================================
    # Steps
    # ================================================================

    async def _lookup_profile(self, ctx: VerificationContext) -> None:
        child_address = ctx.event.child_address
        logger.info(f"Processing verification for child: {child_address}")
        profile = await self.oasis_datastore.get_child_profile(child_address)
        if not profile.is_linked:
            raise ProfileNotLinkedError(child_address)
        ctx.profile = profile

    async def _update_vault_policy(self, ctx: VerificationContext) -> None:
        profile = ctx.profile
        policies = await self.wallet_provider.list_wallet_policies(profile.vault_wallet)
        if not policies:
            logger.warning("No vault policy found - child will need manual access")
            return

        updated = policies[0].unlocked_for(profile.child_provider_id)
        try:
            await self.wallet_provider.update_wallet_policy(updated)
        except ProviderError as e:
            raise PolicyUpdateError(profile.vault_wallet, e.message)
        logger.info(f"Vault unlocked for {ctx.event.child_address}")

    async def _mark_verified(self, ctx: VerificationContext) -> None:
        await self.oasis_datastore.mark_age_verified(ctx.event.child_address)

    async def _notify(self, ctx: VerificationContext) -> None:
        child_user = await self.wallet_provider.get_user(ctx.profile.child_provider_id)
        if not child_user.email:
            logger.warning(
                f"No email found for child {ctx.event.child_address}, "
                f"skipping notification"
            )
            return

        await self.notification_sender.send_vault_unlocked(
            child_user.email, ctx.event.child_address
        )
