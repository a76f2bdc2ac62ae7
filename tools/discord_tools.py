"""
Discord webhook delivery.
"""

import logging
from typing import Optional

import httpx

from models.notification import DeliveryResult

# Setup logging
logger = logging.getLogger(__name__)

# Discord message content limit
MAX_CONTENT_LENGTH = 2000


class DiscordWebhookClient:
    """Posts plain-text messages to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport
        self.messages_sent = 0
        self.messages_failed = 0

    async def send_message(self, content: str) -> DeliveryResult:
        """
        Post a message to the webhook.

        Never raises for delivery problems; a non-204 status, an unusable URL
        or a transport error is logged and reported through the result.

        Args:
            content: Message text

        Returns:
            Delivery result
        """
        if len(content) > MAX_CONTENT_LENGTH:
            content = content[: MAX_CONTENT_LENGTH - 3] + "..."

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json={"content": content},
                    headers={"Content-Type": "application/json"}
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.messages_failed += 1
            logger.error(f"Webhook request failed: {e}")
            return DeliveryResult(success=False, error_message=f"Request failed: {e}")

        if response.status_code != httpx.codes.NO_CONTENT:
            self.messages_failed += 1
            logger.error(
                f"Unexpected webhook response code {response.status_code}: {response.text[:200]}"
            )
            return DeliveryResult(
                success=False,
                status_code=response.status_code,
                error_message=f"Unexpected HTTP status {response.status_code}"
            )

        self.messages_sent += 1
        return DeliveryResult(success=True, status_code=response.status_code)
