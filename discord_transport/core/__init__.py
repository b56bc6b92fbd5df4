"""
Core module for the Discord log transport.

This module contains the configuration layer and the exception hierarchy.
"""

from .config import (
    BotOptions,
    WebhookOptions,
    DiscordOptions,
    TransportOptions,
    WEBHOOK_URL_ENV,
    BOT_CHANNEL_ENV,
    BOT_TOKEN_ENV,
    LEVEL_ENV,
    SILENT_ENV,
    is_valid_webhook_url,
    load_environment
)
from .exceptions import (
    TransportError,
    ConfigurationError,
    DeliveryError
)

__all__ = [
    # Configuration
    'BotOptions',
    'WebhookOptions',
    'DiscordOptions',
    'TransportOptions',
    'WEBHOOK_URL_ENV',
    'BOT_CHANNEL_ENV',
    'BOT_TOKEN_ENV',
    'LEVEL_ENV',
    'SILENT_ENV',
    'is_valid_webhook_url',
    'load_environment',

    # Exception classes
    'TransportError',
    'ConfigurationError',
    'DeliveryError'
]
