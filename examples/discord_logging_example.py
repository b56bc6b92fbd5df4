"""
Example script demonstrating how to use the Discord logging transport.

Usage:
    python examples/discord_logging_example.py

Environment Variables:
    DISCORD_LOGGING_WEBHOOK_URL: Discord webhook URL (preferred)
    DISCORD_LOGGING_BOT_CHANNEL: Channel id, used with a bot token
    DISCORD_LOGGING_BOT_TOKEN: Bot token, used with a channel id
"""

import asyncio
import logging

from discord_transport import setup_discord_logging

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("discord_example")


async def main():
    """Main example function."""
    transport = setup_discord_logging(
        {
            'metadata': {
                'service': 'discord_example',
                'context': 'example run'
            },
            'colors': {'info': 0x3498DB}
        },
        logger=logger
    )

    if transport.discord_handler is None:
        logger.warning("No Discord destination configured, nothing will be sent")
        return

    # Example 1: info entry with entry-level metadata
    logger.info("This is an example info message", extra={'meta': {'step': '1'}})

    # Example 2: warning entry
    logger.warning("This is an example warning message")

    # Example 3: error entry with traceback
    try:
        1 / 0
    except ZeroDivisionError:
        logger.exception("Division failed")

    # Example 4: exception passed as an argument
    logger.error("Disk check failed: %s", OSError("disk full"))

    logger.info("Discord logging example completed")
    await transport.drain()


if __name__ == "__main__":
    asyncio.run(main())
