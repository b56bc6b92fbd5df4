"""
Discord Logging Transport.

Forwards records from the standard ``logging`` module to a Discord channel,
either through a webhook (recommended) or through a bot account.

Key Features:
- Webhook-first handler resolution with environment variable fallbacks
- Compact embeds with sorted metadata and level colors
- Tracebacks rendered as code blocks for error entries
- Best-effort delivery that never raises into the logging call site

Usage:
    import logging
    from discord_transport import setup_discord_logging

    setup_discord_logging({"metadata": {"service": "api"}})
    logging.getLogger(__name__).error("disk check failed", exc_info=True)
"""

import logging
from typing import Any, Mapping, Optional, Union

from .core.config import TransportOptions, BotOptions, WebhookOptions, DiscordOptions
from .core.exceptions import TransportError, ConfigurationError, DeliveryError
from .handlers import BotHandler, WebhookHandler, DeliveryHandler, resolve_handler
from .transport import DiscordTransport
from .types.models import LogEntry, LogLevel, FormattedMessage
from .utils.message_formatter import format_message, resolve_color, DEFAULT_COLORS

__version__ = "1.0.0"

__all__ = [
    'DiscordTransport',
    'TransportOptions',
    'BotOptions',
    'WebhookOptions',
    'DiscordOptions',
    'DeliveryHandler',
    'BotHandler',
    'WebhookHandler',
    'resolve_handler',
    'LogEntry',
    'LogLevel',
    'FormattedMessage',
    'format_message',
    'resolve_color',
    'DEFAULT_COLORS',
    'TransportError',
    'ConfigurationError',
    'DeliveryError',
    'setup_discord_logging',
]


def setup_discord_logging(
    options: Optional[Union[TransportOptions, Mapping[str, Any]]] = None,
    logger: Optional[logging.Logger] = None,
    **kwargs
) -> DiscordTransport:
    """
    Set up Discord logging.

    Args:
        options: Optional TransportOptions or mapping. Destination settings
                 missing here are loaded from environment variables.
        logger: Logger to attach the transport to, defaults to the root logger
        **kwargs: Passed through to DiscordTransport

    Returns:
        DiscordTransport: The attached transport
    """
    transport = DiscordTransport(options, **kwargs)
    (logger or logging.getLogger()).addHandler(transport)
    return transport
