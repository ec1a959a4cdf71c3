"""
Verification cursor store interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ICursorStore(ABC):
    """Persists the last fully-scanned block per named cursor."""

    @abstractmethod
    async def load(self, name: str) -> Optional[int]:
        """
        Get stored block number.

        Args:
            name: Cursor name

        Returns:
            Block number, or None if the cursor was never saved
        """

    @abstractmethod
    async def save(self, name: str, block_number: int) -> None:
        """
        Store block number.

        A value lower than the stored one is ignored.

        Args:
            name: Cursor name
            block_number: Last fully-scanned block
        """
