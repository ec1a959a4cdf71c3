"""
Persistence infrastructure.
"""

from scholarfi.infrastructure.persistence.cursor_store import (
    InMemoryCursorStore,
    SqlCursorStore,
)
from scholarfi.infrastructure.persistence.database import Database
from scholarfi.infrastructure.persistence.idempotency_store import (
    InMemoryIdempotencyStore,
    SqlIdempotencyStore,
)

__all__ = [
    "Database",
    "InMemoryCursorStore",
    "SqlCursorStore",
    "InMemoryIdempotencyStore",
    "SqlIdempotencyStore",
]
