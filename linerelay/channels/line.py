"""
LINE channel integration.

Talks to the LINE Messaging API over httpx with support for:
- Replying to an event through its reply token
- Truncating replies to the platform's text limit
- Mapping API rejections to DeliveryError
"""

from typing import Any

import httpx
from loguru import logger

from linerelay.config.schema import LineConfig
from linerelay.errors import DeliveryError


# LINE rejects text messages longer than this
MAX_TEXT_LENGTH = 5000


class LineChannel:
    """
    LINE Messaging API client.

    Configuration (via LineConfig):
    - channel_access_token: Bearer token for the Messaging API
    - channel_secret: Channel secret (kept for signature checks)
    - api_base: API host, overridable for tests or proxies
    - timeout_seconds: Per-request timeout
    """

    name = "line"

    def __init__(self, config: LineConfig, client: httpx.AsyncClient | None = None):
        """
        Initialize LINE channel.

        Args:
            config: LINE configuration.
            client: Optional preconfigured HTTP client.
        """
        self.channel_access_token = config.channel_access_token
        self.channel_secret = config.channel_secret
        self.api_base = config.api_base.rstrip("/")
        self.timeout = config.timeout_seconds

        self._client = client
        self._owns_client = client is None
        self._sent_count = 0
        self._failed_count = 0

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    @staticmethod
    def build_text_message(text: str) -> dict[str, str]:
        """Build a text message object, truncated to the platform limit."""
        if len(text) > MAX_TEXT_LENGTH:
            text = text[: MAX_TEXT_LENGTH - 1] + "…"
        return {"type": "text", "text": text}

    async def reply_text(self, reply_token: str, text: str) -> dict[str, Any]:
        """
        Reply to an event with a single text message.

        Args:
            reply_token: Token from the inbound event.
            text: Message text.

        Returns:
            Decoded API response body ({} when empty).

        Raises:
            DeliveryError: If the request fails or the API rejects it.
        """
        return await self.reply_message(reply_token, [self.build_text_message(text)])

    async def reply_message(
        self,
        reply_token: str,
        messages: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Send message objects to ``/v2/bot/message/reply``."""
        url = f"{self.api_base}/v2/bot/message/reply"
        headers = {
            "Authorization": f"Bearer {self.channel_access_token}",
            "Content-Type": "application/json",
        }
        payload = {"replyToken": reply_token, "messages": messages}

        try:
            response = await self._get_client().post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            self._failed_count += 1
            raise DeliveryError(f"LINE reply timed out: {e}") from e
        except httpx.HTTPError as e:
            self._failed_count += 1
            raise DeliveryError(f"LINE reply failed: {e}") from e

        if response.status_code >= 400:
            self._failed_count += 1
            raise DeliveryError(
                f"LINE API returned HTTP {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code,
            )

        self._sent_count += 1
        logger.debug(f"Replied to {reply_token[:8]}... ({response.status_code})")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or "no body"
        if isinstance(data, dict):
            return data.get("message", str(data))
        return str(data)

    def get_status(self) -> dict[str, Any]:
        """Get delivery counters."""
        return {
            "configured": bool(self.channel_access_token and self.channel_secret),
            "sent_count": self._sent_count,
            "failed_count": self._failed_count,
        }

    async def close(self) -> None:
        """Close the HTTP client if this channel created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
