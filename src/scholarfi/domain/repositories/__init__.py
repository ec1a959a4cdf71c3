"""
Domain repository interfaces.
"""

from scholarfi.domain.repositories.i_cursor_store import ICursorStore
from scholarfi.domain.repositories.i_idempotency_store import IIdempotencyStore

__all__ = ["ICursorStore", "IIdempotencyStore"]
