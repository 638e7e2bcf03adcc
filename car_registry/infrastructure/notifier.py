"""Notifiers — delivery channels for the post-create notification hook.

Invariants:
    - notify() either completes or raises; callers decide whether to swallow
    - WebhookNotifier never retries (fire-and-forget: one attempt per event)

Design Decisions:
    - Webhook over SMTP: delivery is delegated to whatever listens on the URL
      (mail relay, chat bridge); the registry only knows subject and body
    - LogNotifier as default when no webhook is configured: local runs and
      tests need no external service
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class LogNotifier:
    """Writes notifications to the application log."""
    channel = "log"

    async def notify(self, subject: str, body: str) -> None:
        logger.info(f"Notification: {subject} — {body}")


class WebhookNotifier:
    """POSTs notifications as JSON to a configured URL."""
    channel = "webhook"

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def notify(self, subject: str, body: str) -> None:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport,
        ) as client:
            response = await client.post(
                self.url, json={"subject": subject, "body": body},
            )
            response.raise_for_status()
        logger.debug(f"Notification delivered to {self.url}: {subject}")
