"""
Unit tests for CheckVerifications use case.
"""

import asyncio

import pytest

from scholarfi.application.use_cases.check_verifications import (
    CURSOR_NAME,
    CheckVerifications,
)
from scholarfi.domain.entities.child_account import ProviderUser, WalletPolicy
from scholarfi.domain.entities.verification import VerificationEvent
from scholarfi.domain.exceptions import ContractCallError, ProviderError
from scholarfi.infrastructure.persistence.cursor_store import InMemoryCursorStore

from tests.helpers.builders import (
    CHILD_ADDRESS,
    CHILD_USER_ID,
    PARENT_USER_ID,
    PARENT_WALLET,
    VAULT_WALLET,
    make_profile,
)

OTHER_CHILD = "0x5555555555555555555555555555555555555555"


def _event(child_address: str = CHILD_ADDRESS, block: int = 4990) -> VerificationEvent:
    return VerificationEvent(
        child_address=child_address,
        parent_address=PARENT_WALLET,
        timestamp=1700000000,
        block_number=block,
        transaction_hash="0x" + "ab" * 32,
    )


class TestCheckVerifications:
    """Unit tests for CheckVerifications."""

    # ================================================================
    # Helper Methods
    # ================================================================

    @pytest.fixture
    def cursor_store(self):
        return InMemoryCursorStore()

    @pytest.fixture
    def use_case(
        self,
        celo_verifier,
        oasis_datastore,
        wallet_provider,
        notification_sender,
        cursor_store,
    ):
        celo_verifier.get_block_number.return_value = 5000
        oasis_datastore.get_child_profile.side_effect = (
            lambda child_address: make_profile(child_address)
        )
        wallet_provider.list_wallet_policies.return_value = [
            WalletPolicy("pol-1", VAULT_WALLET, [PARENT_USER_ID], 1567648000)
        ]
        wallet_provider.get_user.return_value = ProviderUser(
            id=CHILD_USER_ID, email="child@example.com"
        )
        return CheckVerifications(
            celo_verifier=celo_verifier,
            oasis_datastore=oasis_datastore,
            wallet_provider=wallet_provider,
            notification_sender=notification_sender,
            cursor_store=cursor_store,
            lookback_blocks=1000,
        )

    # ================================================================
    # Cursor handling
    # ================================================================

    async def test_first_run_uses_lookback_window(
        self, use_case, celo_verifier, cursor_store
    ):
        report = await use_case.execute()

        celo_verifier.get_verification_events.assert_awaited_once_with(4001, 5000)
        assert report.last_block == 5000
        assert await cursor_store.load(CURSOR_NAME) == 5000

    async def test_lookback_is_clamped_at_genesis(self, use_case, celo_verifier):
        celo_verifier.get_block_number.return_value = 300

        await use_case.execute()

        celo_verifier.get_verification_events.assert_awaited_once_with(1, 300)

    async def test_resumes_from_stored_cursor(
        self, use_case, celo_verifier, cursor_store
    ):
        await cursor_store.save(CURSOR_NAME, 4500)

        await use_case.execute()

        celo_verifier.get_verification_events.assert_awaited_once_with(4501, 5000)

    async def test_no_new_blocks_is_noop(self, use_case, celo_verifier, cursor_store):
        await cursor_store.save(CURSOR_NAME, 5000)

        report = await use_case.execute()

        celo_verifier.get_verification_events.assert_not_awaited()
        assert report.events_processed == 0
        assert report.last_block == 5000

    async def test_event_query_failure_keeps_cursor(
        self, use_case, celo_verifier, cursor_store
    ):
        await cursor_store.save(CURSOR_NAME, 4500)
        celo_verifier.get_verification_events.side_effect = ContractCallError(
            "celo", "ChildVerified", "rpc down"
        )

        with pytest.raises(ContractCallError):
            await use_case.execute()

        assert await cursor_store.load(CURSOR_NAME) == 4500

    # ================================================================
    # Event processing
    # ================================================================

    async def test_unlocks_vault_marks_verified_and_notifies(
        self,
        use_case,
        celo_verifier,
        oasis_datastore,
        wallet_provider,
        notification_sender,
    ):
        celo_verifier.get_verification_events.return_value = [_event()]

        report = await use_case.execute()

        assert report.events_processed == 1
        assert report.events[0].child_address == CHILD_ADDRESS
        wallet_provider.list_wallet_policies.assert_awaited_once_with(VAULT_WALLET)
        updated = wallet_provider.update_wallet_policy.call_args.args[0]
        assert updated.signers == [PARENT_USER_ID, CHILD_USER_ID]
        assert updated.time_lock is None
        oasis_datastore.mark_age_verified.assert_awaited_once_with(CHILD_ADDRESS)
        notification_sender.send_vault_unlocked.assert_awaited_once_with(
            "child@example.com", CHILD_ADDRESS
        )

    async def test_second_pass_without_new_events_changes_nothing(
        self, use_case, celo_verifier, wallet_provider
    ):
        celo_verifier.get_verification_events.return_value = [_event()]
        await use_case.execute()

        celo_verifier.get_verification_events.return_value = []
        celo_verifier.get_block_number.return_value = 5010
        report = await use_case.execute()

        assert report.events_processed == 0
        assert wallet_provider.update_wallet_policy.await_count == 1

    async def test_unlinked_profile_is_skipped(
        self, use_case, celo_verifier, oasis_datastore, wallet_provider
    ):
        oasis_datastore.get_child_profile.side_effect = (
            lambda child_address: make_profile(child_address, child_provider_id="")
        )
        celo_verifier.get_verification_events.return_value = [_event()]

        report = await use_case.execute()

        assert report.events_processed == 0
        assert report.skipped == 1
        wallet_provider.update_wallet_policy.assert_not_awaited()
        oasis_datastore.mark_age_verified.assert_not_awaited()

    async def test_mark_failure_omits_event_but_advances_cursor(
        self, use_case, celo_verifier, oasis_datastore, cursor_store
    ):
        celo_verifier.get_verification_events.return_value = [
            _event(CHILD_ADDRESS, 4990),
            _event(OTHER_CHILD, 4995),
        ]

        async def _mark(child_address):
            if child_address == CHILD_ADDRESS:
                raise ContractCallError("oasis", "markAgeVerified", "reverted")
            return "0xok"

        oasis_datastore.mark_age_verified.side_effect = _mark

        report = await use_case.execute()

        assert [e.child_address for e in report.events] == [OTHER_CHILD]
        assert report.failed == 1
        assert await cursor_store.load(CURSOR_NAME) == 5000

    async def test_policy_failure_degrades(
        self, use_case, celo_verifier, oasis_datastore, wallet_provider
    ):
        wallet_provider.update_wallet_policy.side_effect = ProviderError("boom", 500)
        celo_verifier.get_verification_events.return_value = [_event()]

        report = await use_case.execute()

        assert report.events_processed == 1
        oasis_datastore.mark_age_verified.assert_awaited_once()

    async def test_missing_vault_policy_still_marks_verified(
        self, use_case, celo_verifier, oasis_datastore, wallet_provider
    ):
        wallet_provider.list_wallet_policies.return_value = []
        celo_verifier.get_verification_events.return_value = [_event()]

        report = await use_case.execute()

        wallet_provider.update_wallet_policy.assert_not_awaited()
        oasis_datastore.mark_age_verified.assert_awaited_once()
        assert report.events_processed == 1

    async def test_missing_email_skips_notification(
        self, use_case, celo_verifier, wallet_provider, notification_sender
    ):
        wallet_provider.get_user.return_value = ProviderUser(id=CHILD_USER_ID)
        celo_verifier.get_verification_events.return_value = [_event()]

        report = await use_case.execute()

        notification_sender.send_vault_unlocked.assert_not_awaited()
        assert report.events_processed == 1

    async def test_notification_failure_degrades(
        self, use_case, celo_verifier, notification_sender
    ):
        notification_sender.send_vault_unlocked.side_effect = ProviderError("smtp")
        celo_verifier.get_verification_events.return_value = [_event()]

        report = await use_case.execute()

        assert report.events_processed == 1

    # ================================================================
    # Single flight
    # ================================================================

    async def test_passes_never_overlap(self, use_case, celo_verifier):
        active = 0
        peak = 0

        async def _events(from_block, to_block):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return []

        celo_verifier.get_verification_events.side_effect = _events
        celo_verifier.get_block_number.side_effect = [5000, 5010]

        await asyncio.gather(use_case.execute(), use_case.execute())

        assert peak == 1
        assert celo_verifier.get_verification_events.await_args_list[1].args == (
            5001,
            5010,
        )
