"""
Dependency Injection module for Scholar-Fi.

Provides container and dependency functions for FastAPI routes.
"""

from scholarfi.di.container import (
    DIContainer,
    get_container,
    initialize_container,
    reset_container,
    shutdown_container,
)
from scholarfi.di.dependencies import (
    get_app_settings,
    get_check_verifications,
    get_create_child_account,
    get_handle_balance_change,
)

__all__ = [
    # Container
    "DIContainer",
    "get_container",
    "initialize_container",
    "reset_container",
    "shutdown_container",
    # Dependencies
    "get_app_settings",
    "get_check_verifications",
    "get_create_child_account",
    "get_handle_balance_change",
]
