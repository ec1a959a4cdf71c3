"""
Idempotency stores for completed operation results.
"""

import json
import time
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from sqlalchemy import delete

from scholarfi.domain.repositories.i_idempotency_store import IIdempotencyStore
from scholarfi.infrastructure.persistence.database import Database
from scholarfi.infrastructure.persistence.models import IdempotencyRecordModel


class InMemoryIdempotencyStore(IIdempotencyStore):
    """
    In-memory idempotency store.

    Data is lost on restart. Use SqlIdempotencyStore when a database is
    configured.
    """

    def __init__(self):
        self._store: Dict[str, Tuple[dict, float]] = {}

    async def get(self, key: str) -> Optional[dict]:
        entry = self._store.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if time.time() > expires_at:
            del self._store[key]
            return None
        return value

    async def set(self, key: str, value: dict, ttl: int = 86400) -> None:
        now = time.time()
        self._prune(now)
        self._store[key] = (value, now + ttl)

    def _prune(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._store.items() if now > expires_at]
        for key in expired:
            del self._store[key]


class SqlIdempotencyStore(IIdempotencyStore):
    """Idempotency store persisted in the idempotency_records table."""

    def __init__(self, database: Database):
        self.database = database

    async def get(self, key: str) -> Optional[dict]:
        async with self.database.session() as session:
            record = await session.get(IdempotencyRecordModel, key)
            if record is None:
                return None
            if record.expires_at < datetime.now():
                await session.delete(record)
                return None
            return json.loads(record.result)

    async def set(self, key: str, value: dict, ttl: int = 86400) -> None:
        now = datetime.now()
        async with self.database.session() as session:
            await session.execute(
                delete(IdempotencyRecordModel).where(
                    IdempotencyRecordModel.key == key
                )
            )
            session.add(
                IdempotencyRecordModel(
                    key=key,
                    result=json.dumps(value),
                    created_at=now,
                    expires_at=now + timedelta(seconds=ttl),
                )
            )
