"""
Type definitions and data models for the Discord log transport.
"""

from .models import (
    # Levels
    LogLevel,
    VERBOSE,
    SILLY,

    # Entries and messages
    LogEntry,
    EmbedField,
    FormattedMessage,

    # Destinations
    BotDestination,
    WebhookDestination,
    Destination
)

__all__ = [
    # Levels
    'LogLevel',
    'VERBOSE',
    'SILLY',

    # Entries and messages
    'LogEntry',
    'EmbedField',
    'FormattedMessage',

    # Destinations
    'BotDestination',
    'WebhookDestination',
    'Destination'
]
