"""
Notification sender service interface.
"""

from abc import ABC, abstractmethod


class INotificationSender(ABC):
    """Delivers user-facing notifications."""

    @abstractmethod
    async def send_vault_unlocked(self, email: str, child_address: str) -> None:
        """
        Notify a child that their vault is unlocked.

        Args:
            email: Recipient email
            child_address: Derived child address
        """

    async def close(self) -> None:
        """Release resources (no-op by default)."""
