"""API routes."""

from scholarfi.presentation.api.routes import child_account, webhooks

__all__ = ["child_account", "webhooks"]
