"""
Base class for Discord delivery handlers.

A delivery handler owns one destination and knows how to send a formatted
message there. The shared ``log`` coroutine formats the entry, performs a
single send attempt, contains any failure and always signals completion.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional

import aiohttp

from ..types.models import FormattedMessage, LogEntry
from ..utils.message_formatter import format_message

logger = logging.getLogger("discord_transport")


class DeliveryHandler:
    """
    Interface contract of a transport handler.

    Subclasses implement ``send``; failure containment and the completion
    callback live here so every variant behaves the same way.
    """

    kind = "base"

    def __init__(
        self,
        colors: Optional[Mapping[str, int]] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the handler.

        Args:
            colors: Optional per-level color overrides
            session: Optional aiohttp session to use; a short-lived session is
                     opened per send when omitted
        """
        self.colors: Optional[Dict[str, int]] = dict(colors) if colors else None
        self.session = session

        # Success/failure tracking
        self.total_sent = 0
        self.total_failed = 0
        self.last_success: Optional[datetime] = None

    async def log(
        self,
        entry: LogEntry,
        meta: Optional[Mapping[str, Any]] = None,
        on_done: Optional[Callable[[], Any]] = None
    ) -> bool:
        """
        Log an entry through this handler.

        Args:
            entry: The log entry
            meta: Global metadata to include in the message
            on_done: Called exactly once after the attempt, success or not

        Returns:
            bool: True if the message was delivered
        """
        try:
            message = format_message(entry, meta or {}, self.colors)
            await self.send(message)
        except Exception as e:
            self._handle_failure(e)
            return False
        else:
            self._handle_success()
            return True
        finally:
            if on_done is not None:
                on_done()

    async def send(self, message: FormattedMessage) -> None:
        """Send a formatted message to the destination."""
        raise NotImplementedError

    @asynccontextmanager
    async def _session_scope(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self.session is not None:
            yield self.session
            return

        async with aiohttp.ClientSession() as session:
            yield session

    def _handle_success(self) -> None:
        """Handle successful delivery."""
        self.total_sent += 1
        self.last_success = datetime.now(timezone.utc)

    def _handle_failure(self, error: Exception) -> None:
        """Handle delivery failure."""
        self.total_failed += 1
        logger.error(f"Failed sending to Discord via {self.kind}: {error}")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind!r}>"
