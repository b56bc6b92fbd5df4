"""
Discord transport handler using bots.

Messages are posted to the channel message-creation endpoint of the Discord
REST API, authenticated with the bot token.
"""

from typing import Mapping, Optional

import aiohttp

from ..core.exceptions import DeliveryError
from ..types.models import FormattedMessage
from .base import DeliveryHandler

DISCORD_API_BASE = "https://discord.com/api/v10"


class BotHandler(DeliveryHandler):
    """Delivers log entries to a channel as a bot user."""

    kind = "bot"

    def __init__(
        self,
        token: str,
        channel: str,
        colors: Optional[Mapping[str, int]] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Prepare a Discord bot-based transport handler.

        Args:
            token: Bot token authorized to send messages; the bot must be a
                   member of the server owning the channel
            channel: Id of the channel that receives log entries
            colors: Optional per-level color overrides
            session: Optional aiohttp session to use
        """
        super().__init__(colors, session)
        self.token = token
        self.channel = str(channel)

    @property
    def endpoint(self) -> str:
        return f"{DISCORD_API_BASE}/channels/{self.channel}/messages"

    async def send(self, message: FormattedMessage) -> None:
        headers = {"Authorization": f"Bot {self.token}"}

        async with self._session_scope() as session:
            async with session.post(self.endpoint, json=message.to_payload(), headers=headers) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    raise DeliveryError(
                        f"Discord API error {response.status}: {error_text}",
                        status_code=response.status,
                        operation="create_message",
                        destination=f"channel {self.channel}"
                    )
