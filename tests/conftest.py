"""
Pytest Configuration and Fixtures.

This module provides the shared fixtures for the transport test suite:
environment isolation, sample entries and mocked aiohttp sessions.
"""

import os
from unittest.mock import patch

import pytest

from discord_transport.types.models import LogEntry
from tests.mocks import make_session

DISCORD_ENV_VARS = [
    'DISCORD_LOGGING_WEBHOOK_URL',
    'DISCORD_LOGGING_BOT_CHANNEL',
    'DISCORD_LOGGING_BOT_TOKEN',
    'DISCORD_LOGGING_LEVEL',
    'DISCORD_LOGGING_SILENT'
]


@pytest.fixture(autouse=True)
def cleanup_environment():
    """Keep DISCORD_LOGGING_* variables from leaking into or out of tests."""
    original_env = dict(os.environ)
    for var in DISCORD_ENV_VARS:
        os.environ.pop(var, None)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fixed_host():
    """Pin the hostname shown in formatted messages."""
    with patch("discord_transport.utils.message_formatter.socket.gethostname", return_value="test-host"):
        yield "test-host"


@pytest.fixture
def raised_error():
    """An exception carrying a traceback."""
    try:
        raise ValueError("disk full")
    except ValueError as e:
        return e


@pytest.fixture
def info_entry():
    return LogEntry(level="info", message="This is the log message.", meta={"request": "42"})


@pytest.fixture
def error_entry(raised_error):
    return LogEntry(level="error", message="disk check failed", error=raised_error)


@pytest.fixture
def ok_session():
    return make_session(200)


@pytest.fixture
def failing_session():
    return make_session(500, "Server Error")
