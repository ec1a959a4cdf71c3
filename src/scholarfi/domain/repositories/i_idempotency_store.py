"""
Idempotency store interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IIdempotencyStore(ABC):
    """Caches completed operation results by idempotency key."""

    @abstractmethod
    async def get(self, key: str) -> Optional[dict]:
        """
        Get cached result.

        Args:
            key: Idempotency key

        Returns:
            Cached result, or None if absent or expired
        """

    @abstractmethod
    async def set(self, key: str, value: dict, ttl: int = 86400) -> None:
        """
        Store result.

        Args:
            key: Idempotency key
            value: JSON-serializable result
            ttl: Time to live in seconds
        """
