"""
Notification senders.

LoggingNotificationSender records the message in the application log.
WebhookNotificationSender posts it to an HTTP endpoint (email relay,
chat hook) when one is configured.
"""

from typing import Optional

import httpx

from scholarfi.domain.exceptions import ProviderError
from scholarfi.domain.services.i_notification_sender import INotificationSender
from scholarfi.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

VAULT_UNLOCKED_SUBJECT = "Your Scholar-Fi Vault is Now Unlocked!"
VAULT_UNLOCKED_BODY = (
    "Congratulations! You've been age-verified. "
    "Login to Scholar-Fi to access your vault funds."
)


class LoggingNotificationSender(INotificationSender):
    """Writes notifications to the log instead of delivering them."""

    async def send_vault_unlocked(self, email: str, child_address: str) -> None:
        logger.info(
            f"Email notification for {email}: {VAULT_UNLOCKED_SUBJECT}",
            extra={
                "notification": "vault_unlocked",
                "child_address": child_address,
            },
        )


class WebhookNotificationSender(INotificationSender):
    """
    Posts notifications as JSON to an HTTP endpoint.

    Attributes:
        webhook_url: Endpoint receiving the notification
        timeout: HTTP request timeout in seconds
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook sender.

        Args:
            webhook_url: Endpoint receiving the notification
            timeout: HTTP request timeout in seconds
            transport: Optional transport override (tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._client

    async def send_vault_unlocked(self, email: str, child_address: str) -> None:
        """
        Post vault-unlocked notification.

        Raises:
            ProviderError: If the endpoint rejects or cannot be reached
        """
        payload = {
            "type": "vault_unlocked",
            "to": email,
            "subject": VAULT_UNLOCKED_SUBJECT,
            "message": VAULT_UNLOCKED_BODY,
            "data": {"childAddress": child_address},
        }
        try:
            response = await self.client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Notification webhook failed: {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            raise ProviderError(f"Notification webhook unreachable: {e}")

        logger.info(f"Vault unlocked notification sent for {child_address}")

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
