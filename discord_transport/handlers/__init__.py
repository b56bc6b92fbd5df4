"""
Delivery handlers for the Discord log transport.
"""

from .base import DeliveryHandler
from .bot import BotHandler
from .webhook import WebhookHandler
from .resolver import create_handler, resolve_destination, resolve_handler

__all__ = [
    'DeliveryHandler',
    'BotHandler',
    'WebhookHandler',
    'create_handler',
    'resolve_destination',
    'resolve_handler'
]
