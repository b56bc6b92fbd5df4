"""
Transport configuration management.

This module handles loading and validating the transport options, either
passed explicitly as dataclasses / mappings or picked up from environment
variables (optionally loaded from a ``.env`` file).
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from ..types.models import LogLevel

logger = logging.getLogger("discord_transport")

# Environment fallbacks
WEBHOOK_URL_ENV = 'DISCORD_LOGGING_WEBHOOK_URL'
BOT_CHANNEL_ENV = 'DISCORD_LOGGING_BOT_CHANNEL'
BOT_TOKEN_ENV = 'DISCORD_LOGGING_BOT_TOKEN'
LEVEL_ENV = 'DISCORD_LOGGING_LEVEL'
SILENT_ENV = 'DISCORD_LOGGING_SILENT'

DEFAULT_LEVEL = 'info'

_WEBHOOK_URL_PATTERN = re.compile(
    r'^https://(?:ptb\.|canary\.)?discord(?:app)?\.com/api(?:/v\d+)?/webhooks/\d+/[\w.-]+/?$'
)


@dataclass
class BotOptions:
    """Options for delivering through a Discord bot."""
    channel: Optional[str] = None
    token: Optional[str] = None


@dataclass
class WebhookOptions:
    """Options for delivering through a Discord webhook (recommended)."""
    url: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass
class DiscordOptions:
    """Discord-specific transport options."""
    bot: BotOptions = field(default_factory=BotOptions)
    webhook: WebhookOptions = field(default_factory=WebhookOptions)


@dataclass
class TransportOptions:
    """
    Configurable properties of the Discord transport.

    Every field is optional; missing destination settings fall back to the
    ``DISCORD_LOGGING_*`` environment variables at resolution time.
    """
    discord: DiscordOptions = field(default_factory=DiscordOptions)
    colors: Dict[str, int] = field(default_factory=dict)
    metadata: Dict[str, str] = field(default_factory=dict)
    level: Optional[str] = None
    silent: Optional[bool] = None
    env_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TransportOptions":
        """
        Build options from a plain mapping.

        Accepts ``{discord: {bot: {channel, token}, webhook: {url, avatarUrl}},
        colors, metadata, level, silent, env_file}``; both ``avatarUrl`` and
        ``avatar_url`` spellings are understood.
        """
        data = data or {}
        discord_data = data.get('discord') or {}
        bot_data = discord_data.get('bot') or {}
        webhook_data = discord_data.get('webhook') or {}

        return cls(
            discord=DiscordOptions(
                bot=BotOptions(
                    channel=_as_str(bot_data.get('channel')),
                    token=bot_data.get('token'),
                ),
                webhook=WebhookOptions(
                    url=webhook_data.get('url'),
                    avatar_url=webhook_data.get('avatar_url', webhook_data.get('avatarUrl')),
                ),
            ),
            colors=dict(data.get('colors') or {}),
            metadata=dict(data.get('metadata') or {}),
            level=data.get('level'),
            silent=data.get('silent'),
            env_file=data.get('env_file'),
        )

    def validate(self) -> List[str]:
        """
        Validate the transport options.

        Returns:
            List[str]: List of validation errors, empty if valid.
        """
        errors = []

        if self.level is not None and LogLevel.from_string(self.level) is None:
            errors.append(f"Invalid level: {self.level}")

        for level, color in self.colors.items():
            if LogLevel.from_string(level) is None:
                errors.append(f"Color given for unknown level: {level}")
            if not isinstance(color, int) or isinstance(color, bool):
                errors.append(f"Invalid color for {level}: {color!r}. Must be an integer.")

        for key in self.metadata:
            if not isinstance(key, str):
                errors.append(f"Metadata keys must be strings, got {key!r}")

        url = self.discord.webhook.url
        if url and not is_valid_webhook_url(url):
            errors.append(f"Invalid webhook URL: {mask_webhook_url(url)}")

        return errors


def is_valid_webhook_url(url: str) -> bool:
    """
    Validate a Discord webhook URL.

    Args:
        url: The webhook URL to validate.

    Returns:
        bool: True if the URL is valid, False otherwise.
    """
    return bool(_WEBHOOK_URL_PATTERN.match(url))


def mask_webhook_url(url: str) -> str:
    """Mask the token part of a webhook URL for logging."""
    parts = url.rstrip('/').split('/')
    if len(parts) >= 2:
        return '/'.join(parts[:-1] + ['***'])
    return '***masked***'


def _parse_bool(value: str) -> bool:
    """
    Parse a string to boolean.

    Args:
        value: String value to parse.

    Returns:
        bool: Parsed boolean value.
    """
    return value.strip().lower() in ('true', 'yes', '1', 'y', 't')


def _as_str(value: Any) -> Optional[str]:
    # Channel ids are commonly given as ints
    if value is None or value == '':
        return None
    return str(value)


def get_env(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Read an environment fallback, treating empty strings as unset."""
    environ = os.environ if environ is None else environ
    return environ.get(name) or None


def resolve_level(options: TransportOptions, environ: Optional[Mapping[str, str]] = None) -> LogLevel:
    """
    Determine the minimum level the transport forwards.

    Falls back to ``DISCORD_LOGGING_LEVEL`` and then to ``info``; an invalid
    name is logged and treated as ``info``.
    """
    name = options.level or get_env(LEVEL_ENV, environ) or DEFAULT_LEVEL
    level = LogLevel.from_string(name)
    if level is None:
        logger.warning(f"Invalid log level: {name}, defaulting to {DEFAULT_LEVEL}")
        return LogLevel.INFO
    return level


def resolve_silent(options: TransportOptions, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Determine whether the transport is silenced."""
    if options.silent is not None:
        return bool(options.silent)

    value = get_env(SILENT_ENV, environ)
    return _parse_bool(value) if value else False


def load_environment(env_file_path: Optional[str] = None) -> bool:
    """
    Load environment variables from a .env file.

    Variables already present in the environment are not overridden.

    Args:
        env_file_path: Optional path to .env file. If not provided, looks
                       for config/.env relative to the working directory.

    Returns:
        bool: True if a file was found and loaded
    """
    env_path = Path(env_file_path) if env_file_path else Path('config') / '.env'

    if not env_path.exists():
        logger.warning(f"Environment file not found at {env_path}")
        return False

    load_dotenv(dotenv_path=env_path, override=False)
    logger.debug(f"Loaded environment from {env_path}")
    return True
