"""
Data models and type definitions for the Discord log transport.

This module defines the structures that flow through the transport: the
severity vocabulary, the per-call log entry, the formatted embed message
and the two destination variants a transport can deliver to.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

import discord


# Extra levels understood by the transport but not shipped with ``logging``
VERBOSE = 15
SILLY = 5

logging.addLevelName(VERBOSE, "VERBOSE")
logging.addLevelName(SILLY, "SILLY")


class LogLevel(Enum):
    """Severity levels used for embed colors and handler filtering."""
    SILLY = "silly"
    DEBUG = "debug"
    VERBOSE = "verbose"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        """Numeric ``logging`` level for this severity."""
        return _LOGGING_LEVELS[self]

    @classmethod
    def from_string(cls, level_str: Optional[str]) -> Optional["LogLevel"]:
        """
        Convert a level name to a LogLevel.

        Unknown names yield ``None`` instead of raising so that entries with
        an unrecognized level can still be formatted.
        """
        if not isinstance(level_str, str):
            return None

        name = level_str.strip().lower()
        name = _LEVEL_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None

    @classmethod
    def from_logging(cls, levelno: int) -> "LogLevel":
        """Map a numeric ``logging`` level to the closest level at or below it."""
        for level in sorted(cls, key=lambda lvl: lvl.logging_level, reverse=True):
            if levelno >= level.logging_level:
                return level
        return cls.SILLY


_LOGGING_LEVELS = {
    LogLevel.SILLY: SILLY,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.VERBOSE: VERBOSE,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

_LEVEL_ALIASES = {
    "warning": "warn",
    "critical": "error",
    "fatal": "error",
}


@dataclass
class LogEntry:
    """
    A single log entry as seen by the transport.

    ``splat`` holds the extra positional arguments of the logging call; an
    exception found there is promoted to ``error`` during formatting.
    ``error`` is usually an exception, but any explicit value is kept and
    rendered as text.
    """
    level: str
    message: Optional[str] = None
    error: Any = None
    meta: Dict[str, Any] = field(default_factory=dict)
    splat: List[Any] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LogEntry":
        """Build an entry from a ``{level, message, error?, meta?, splat?}`` mapping."""
        meta = data.get("meta")
        splat = data.get("splat")

        return cls(
            level=data.get("level"),
            message=data.get("message"),
            error=data.get("error"),
            meta=dict(meta) if isinstance(meta, Mapping) else {},
            splat=list(splat) if isinstance(splat, (list, tuple)) else [],
        )

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        """
        Build an entry from a ``logging.LogRecord``.

        Args:
            record: The record handed to ``logging.Handler.emit``.

        Returns:
            LogEntry: Entry carrying the record's level, message, exception,
            positional arguments and ``extra={"meta": {...}}`` metadata.
        """
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Arguments that don't match the format string, e.g.
            # logger.error("failed", exc) without a placeholder
            message = str(record.msg)

        error = None
        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]

        meta = getattr(record, "meta", None)

        return cls(
            level=LogLevel.from_logging(record.levelno).value,
            message=message,
            error=error,
            meta=dict(meta) if isinstance(meta, Mapping) else {},
            splat=list(record.args) if isinstance(record.args, tuple) else [],
        )


@dataclass
class EmbedField:
    """A single embed field."""
    name: str
    value: str
    inline: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "inline": self.inline}


@dataclass
class FormattedMessage:
    """Represents a log entry rendered as a Discord embed."""

    title: Optional[str] = None
    fields: List[EmbedField] = field(default_factory=list)
    color: Optional[int] = None
    description: Optional[str] = None

    def to_embed(self) -> Dict[str, Any]:
        """
        Convert to a Discord embed object.

        Returns:
            Dict: Embed with absent title, description and color omitted
        """
        embed: Dict[str, Any] = {}

        if self.title is not None:
            embed["title"] = self.title

        if self.description is not None:
            embed["description"] = self.description

        if self.color is not None:
            embed["color"] = self.color

        embed["fields"] = [f.to_dict() for f in self.fields]

        return embed

    def to_payload(self) -> Dict[str, Any]:
        """Convert to a Discord message-creation payload."""
        return {"embeds": [self.to_embed()]}

    def to_discord_embed(self) -> discord.Embed:
        """Convert to a discord.py ``Embed``."""
        return discord.Embed.from_dict(self.to_embed())


@dataclass(frozen=True)
class BotDestination:
    """Deliver through a bot account posting into a channel."""
    channel_id: str
    token: str

    @property
    def kind(self) -> str:
        return "bot"


@dataclass(frozen=True)
class WebhookDestination:
    """Deliver through a webhook URL."""
    url: str
    avatar_url: Optional[str] = None

    @property
    def kind(self) -> str:
        return "webhook"


Destination = Union[BotDestination, WebhookDestination]
