"""
Discord transport handler using webhooks.
"""

from typing import Any, Dict, Mapping, Optional

import aiohttp
import discord

from ..core.config import is_valid_webhook_url, mask_webhook_url
from ..core.exceptions import ConfigurationError
from ..types.models import FormattedMessage
from .base import DeliveryHandler


class WebhookHandler(DeliveryHandler):
    """Delivers log entries through a webhook, optionally with a custom avatar."""

    kind = "webhook"

    def __init__(
        self,
        url: str,
        avatar_url: Optional[str] = None,
        colors: Optional[Mapping[str, int]] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Prepare a Discord webhook-based transport handler.

        Args:
            url: Webhook URL at which to emit log entries
            avatar_url: URL of an avatar to associate with log entries
            colors: Optional per-level color overrides
            session: Optional aiohttp session to use

        Raises:
            ConfigurationError: If the URL is not a Discord webhook URL
        """
        if not url or not is_valid_webhook_url(url):
            raise ConfigurationError(
                "Invalid Discord webhook URL",
                invalid_values={'url': mask_webhook_url(url or '')}
            )

        super().__init__(colors, session)
        self.url = url
        self.avatar_url = avatar_url
        self.masked_url = mask_webhook_url(url)

    async def send(self, message: FormattedMessage) -> None:
        kwargs: Dict[str, Any] = {"embed": message.to_discord_embed()}
        if self.avatar_url:
            kwargs["avatar_url"] = self.avatar_url

        async with self._session_scope() as session:
            webhook = discord.Webhook.from_url(self.url, session=session)
            await webhook.send(**kwargs)
