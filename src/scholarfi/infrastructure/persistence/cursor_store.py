"""
Verification cursor stores.
"""

from typing import Dict, Optional

from sqlalchemy import select

from scholarfi.domain.repositories.i_cursor_store import ICursorStore
from scholarfi.infrastructure.persistence.database import Database
from scholarfi.infrastructure.persistence.models import VerificationCursorModel


class InMemoryCursorStore(ICursorStore):
    """
    Process-local cursor store.

    Lost on restart: the reconciliation loop then falls back to its
    lookback window, and older events are missed unless replayed.
    """

    def __init__(self):
        self._cursors: Dict[str, int] = {}

    async def load(self, name: str) -> Optional[int]:
        return self._cursors.get(name)

    async def save(self, name: str, block_number: int) -> None:
        current = self._cursors.get(name)
        if current is None or block_number > current:
            self._cursors[name] = block_number


class SqlCursorStore(ICursorStore):
    """Cursor store persisted in the verification_cursors table."""

    def __init__(self, database: Database):
        """
        Initialize store.

        Args:
            database: Connected Database instance
        """
        self.database = database

    async def load(self, name: str) -> Optional[int]:
        async with self.database.session() as session:
            result = await session.execute(
                select(VerificationCursorModel.block_number).where(
                    VerificationCursorModel.name == name
                )
            )
            return result.scalar_one_or_none()

    async def save(self, name: str, block_number: int) -> None:
        async with self.database.session() as session:
            model = await session.get(VerificationCursorModel, name)
            if model is None:
                session.add(
                    VerificationCursorModel(name=name, block_number=block_number)
                )
            elif block_number > model.block_number:
                model.block_number = block_number
