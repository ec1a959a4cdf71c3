"""
Unit tests for notification senders.
"""

import json
import logging

import httpx
import pytest

from scholarfi.domain.exceptions import ProviderError
from scholarfi.infrastructure.notifications.notifier import (
    VAULT_UNLOCKED_SUBJECT,
    LoggingNotificationSender,
    WebhookNotificationSender,
)

from tests.helpers.builders import CHILD_ADDRESS


class TestLoggingNotificationSender:
    """Tests for LoggingNotificationSender."""

    async def test_logs_subject(self, caplog):
        sender = LoggingNotificationSender()

        with caplog.at_level(logging.INFO):
            await sender.send_vault_unlocked("kid@example.com", CHILD_ADDRESS)

        assert VAULT_UNLOCKED_SUBJECT in caplog.text
        assert "kid@example.com" in caplog.text


class TestWebhookNotificationSender:
    """Tests for WebhookNotificationSender."""

    async def test_posts_notification(self):
        received = []

        def _handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(202)

        sender = WebhookNotificationSender(
            "https://hooks.test/notify", transport=httpx.MockTransport(_handler)
        )

        await sender.send_vault_unlocked("kid@example.com", CHILD_ADDRESS)
        await sender.close()

        assert received == [
            {
                "type": "vault_unlocked",
                "to": "kid@example.com",
                "subject": VAULT_UNLOCKED_SUBJECT,
                "message": received[0]["message"],
                "data": {"childAddress": CHILD_ADDRESS},
            }
        ]

    async def test_rejected_notification_raises(self):
        sender = WebhookNotificationSender(
            "https://hooks.test/notify",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        with pytest.raises(ProviderError) as exc_info:
            await sender.send_vault_unlocked("kid@example.com", CHILD_ADDRESS)

        assert exc_info.value.status_code == 500
        await sender.close()
