"""
FastAPI dependency injection.

Provides dependencies for FastAPI routes using the DI container.
"""

from scholarfi.application.use_cases.check_verifications import (
    CheckVerifications,
)
from scholarfi.application.use_cases.create_child_account import (
    CreateChildAccount,
)
from scholarfi.application.use_cases.handle_balance_change import (
    HandleBalanceChange,
)
from scholarfi.config.settings import Settings, get_settings
from scholarfi.di.container import get_container

# ================================================================
# Configuration Dependencies
# ================================================================


def get_app_settings() -> Settings:
    """Get application settings dependency."""
    return get_settings()


# ================================================================
# Use Case Dependencies
# ================================================================


def get_create_child_account() -> CreateChildAccount:
    """Get CreateChildAccount use case dependency."""
    return get_container().create_child_account


def get_check_verifications() -> CheckVerifications:
    """Get CheckVerifications use case dependency."""
    return get_container().check_verifications


def get_handle_balance_change() -> HandleBalanceChange:
    """Get HandleBalanceChange use case dependency."""
    return get_container().handle_balance_change
