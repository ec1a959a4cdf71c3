"""
Unit tests for HandleBalanceChange use case.
"""

import pytest

from scholarfi.application.use_cases.handle_balance_change import (
    BALANCE_EVENT_TYPE,
    HandleBalanceChange,
    parse_amount,
)
from scholarfi.domain.exceptions import ContractCallError, ValidationError

from tests.helpers.builders import CHECKING_WALLET, CHILD_ADDRESS


class TestParseAmount:
    """Tests for wei amount parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1000000000000000000", 10**18),
            (" 42 ", 42),
            ("-5", -5),
            (7, 7),
            (None, 0),
            ("", 0),
            ("1.5", 0),
            ("abc", 0),
            (True, 0),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_amount(value) == expected


class TestHandleBalanceChange:
    """Unit tests for HandleBalanceChange."""

    @pytest.fixture
    def use_case(self, oasis_datastore):
        oasis_datastore.get_child_by_wallet.return_value = CHILD_ADDRESS
        return HandleBalanceChange(oasis_datastore=oasis_datastore)

    # ================================================================
    # Ignored events
    # ================================================================

    async def test_other_events_ignored(self, use_case, oasis_datastore):
        result = await use_case.execute("user.created", CHECKING_WALLET, "100")

        assert result == {"message": "Event ignored"}
        oasis_datastore.get_child_by_wallet.assert_not_awaited()

    @pytest.mark.parametrize("change", ["0", "-100", None, "garbage"])
    async def test_withdrawals_ignored_without_lookup(
        self, use_case, oasis_datastore, change
    ):
        result = await use_case.execute(BALANCE_EVENT_TYPE, CHECKING_WALLET, change)

        assert result == {"success": True, "message": "Withdrawal ignored"}
        oasis_datastore.get_child_by_wallet.assert_not_awaited()

    async def test_unregistered_wallet(self, use_case, oasis_datastore):
        oasis_datastore.get_child_by_wallet.return_value = None

        result = await use_case.execute(BALANCE_EVENT_TYPE, CHECKING_WALLET, "100")

        assert result == {"success": True, "message": "Wallet not registered"}
        oasis_datastore.record_deposit.assert_not_awaited()

    # ================================================================
    # Deposits
    # ================================================================

    async def test_deposit_recorded(self, use_case, oasis_datastore):
        result = await use_case.execute(
            BALANCE_EVENT_TYPE, CHECKING_WALLET, "1000000000000000000"
        )

        oasis_datastore.record_deposit.assert_awaited_once_with(CHILD_ADDRESS, 10**18)
        assert result == {
            "success": True,
            "childAddress": CHILD_ADDRESS,
            "walletAddress": CHECKING_WALLET,
            "depositAmount": "1000000000000000000",
            "depositRecorded": True,
        }

    async def test_deposit_write_failure_is_reported(self, use_case, oasis_datastore):
        oasis_datastore.record_deposit.side_effect = ContractCallError(
            "oasis", "recordDeposit", "reverted"
        )

        result = await use_case.execute(BALANCE_EVENT_TYPE, CHECKING_WALLET, "100")

        assert result["success"] is True
        assert result["depositRecorded"] is False

    async def test_deposit_without_address_rejected(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.execute(BALANCE_EVENT_TYPE, None, "100")

    async def test_lookup_failure_propagates(self, use_case, oasis_datastore):
        oasis_datastore.get_child_by_wallet.side_effect = ContractCallError(
            "oasis", "walletToChild", "rpc down"
        )

        with pytest.raises(ContractCallError):
            await use_case.execute(BALANCE_EVENT_TYPE, CHECKING_WALLET, "100")
