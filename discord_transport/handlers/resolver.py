"""
Handler resolution.

Determines the delivery handler to use from transport options and
environment variables. Webhooks are preferred: they need no bot account or
authenticated client, so they are the recommended setup. Bots are the
fallback when both a channel id and a token are available.
"""

import logging
from typing import Mapping, Optional

import aiohttp

from ..core.config import (
    BOT_CHANNEL_ENV,
    BOT_TOKEN_ENV,
    WEBHOOK_URL_ENV,
    TransportOptions,
    get_env
)
from ..core.exceptions import ConfigurationError
from ..types.models import BotDestination, Destination, WebhookDestination
from .base import DeliveryHandler
from .bot import BotHandler
from .webhook import WebhookHandler

logger = logging.getLogger("discord_transport")


def resolve_destination(
    options: Optional[TransportOptions] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Optional[Destination]:
    """
    Pick the destination from explicit options, then environment fallbacks.

    Args:
        options: Transport options
        environ: Environment to read fallbacks from, defaults to os.environ

    Returns:
        Optional[Destination]: Webhook if a URL is known, else bot if both
        channel and token are known, else None
    """
    options = options or TransportOptions()
    discord_options = options.discord

    # Webhook (preferred)
    webhook_url = discord_options.webhook.url or get_env(WEBHOOK_URL_ENV, environ)
    if webhook_url:
        return WebhookDestination(webhook_url, discord_options.webhook.avatar_url)

    # Bot
    channel = discord_options.bot.channel or get_env(BOT_CHANNEL_ENV, environ)
    token = discord_options.bot.token or get_env(BOT_TOKEN_ENV, environ)
    if channel and token:
        return BotDestination(str(channel), token)

    return None


def create_handler(
    destination: Destination,
    colors: Optional[Mapping[str, int]] = None,
    session: Optional[aiohttp.ClientSession] = None
) -> DeliveryHandler:
    """Construct the handler variant matching a destination."""
    if isinstance(destination, WebhookDestination):
        return WebhookHandler(destination.url, destination.avatar_url, colors, session)

    if isinstance(destination, BotDestination):
        return BotHandler(destination.token, destination.channel_id, colors, session)

    raise ConfigurationError(f"Unsupported destination: {destination!r}")


def resolve_handler(
    options: Optional[TransportOptions] = None,
    environ: Optional[Mapping[str, str]] = None,
    session: Optional[aiohttp.ClientSession] = None
) -> Optional[DeliveryHandler]:
    """
    Determine the appropriate handler. Never raises.

    Args:
        options: Transport options
        environ: Environment to read fallbacks from, defaults to os.environ
        session: Optional aiohttp session handed to the handler

    Returns:
        Optional[DeliveryHandler]: The handler, or None when no usable
        configuration exists (the reason is logged)
    """
    options = options or TransportOptions()

    try:
        destination = resolve_destination(options, environ)
        if destination is None:
            raise ConfigurationError(
                "No webhook or bot configurations found in transport options or environment variables.",
                missing_keys=[
                    f"discord.webhook.url / {WEBHOOK_URL_ENV}",
                    f"discord.bot.channel / {BOT_CHANNEL_ENV} and discord.bot.token / {BOT_TOKEN_ENV}",
                ],
                env_file_path=options.env_file
            )

        handler = create_handler(destination, options.colors, session)
        logger.debug(f"Using Discord {handler.kind} handler")
        return handler

    except ConfigurationError as e:
        logger.error(f"Failed determining Discord transport handler. {e.get_troubleshooting_message()}")
    except Exception as e:
        logger.error(f"Failed determining Discord transport handler: {e}")

    return None
