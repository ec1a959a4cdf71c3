"""Application use cases."""

from scholarfi.application.use_cases.check_verifications import (
    CheckVerifications,
)
from scholarfi.application.use_cases.create_child_account import (
    CreateChildAccount,
)
from scholarfi.application.use_cases.handle_balance_change import (
    HandleBalanceChange,
)

__all__ = [
    "CheckVerifications",
    "CreateChildAccount",
    "HandleBalanceChange",
]
