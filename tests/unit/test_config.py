"""
Unit tests for transport configuration and exceptions.
"""

import logging
import os

import pytest

from discord_transport.core.config import (
    BOT_CHANNEL_ENV,
    LEVEL_ENV,
    SILENT_ENV,
    WEBHOOK_URL_ENV,
    TransportOptions,
    get_env,
    is_valid_webhook_url,
    load_environment,
    mask_webhook_url,
    resolve_level,
    resolve_silent
)
from discord_transport.core.exceptions import ConfigurationError, DeliveryError, TransportError
from discord_transport.types.models import LogLevel
from tests.mocks import BOT_CHANNEL, BOT_TOKEN, WEBHOOK_URL


class TestTransportOptions:
    """Tests for building and validating options."""

    def test_defaults(self):
        options = TransportOptions()

        assert options.discord.bot.channel is None
        assert options.discord.webhook.url is None
        assert options.colors == {}
        assert options.metadata == {}
        assert options.level is None
        assert options.silent is None

    def test_from_dict(self):
        options = TransportOptions.from_dict({
            'discord': {
                'bot': {'channel': 987654321098765432, 'token': BOT_TOKEN},
                'webhook': {'url': WEBHOOK_URL, 'avatarUrl': 'https://example.com/a.png'}
            },
            'colors': {'error': 1},
            'metadata': {'service': 'svc1'},
            'level': 'warn',
            'silent': True
        })

        assert options.discord.bot.channel == BOT_CHANNEL
        assert options.discord.bot.token == BOT_TOKEN
        assert options.discord.webhook.url == WEBHOOK_URL
        assert options.discord.webhook.avatar_url == 'https://example.com/a.png'
        assert options.colors == {'error': 1}
        assert options.metadata == {'service': 'svc1'}
        assert options.level == 'warn'
        assert options.silent is True

    def test_from_dict_snake_case_avatar(self):
        options = TransportOptions.from_dict({'discord': {'webhook': {'avatar_url': 'a'}}})

        assert options.discord.webhook.avatar_url == 'a'

    def test_from_dict_empty(self):
        assert TransportOptions.from_dict(None) == TransportOptions()
        assert TransportOptions.from_dict({'discord': None}) == TransportOptions()

    def test_validate_ok(self):
        options = TransportOptions.from_dict({
            'discord': {'webhook': {'url': WEBHOOK_URL}},
            'colors': {'info': 0x3498DB},
            'level': 'debug'
        })

        assert options.validate() == []

    def test_validate_reports_each_problem(self):
        options = TransportOptions.from_dict({
            'discord': {'webhook': {'url': 'https://example.com/hook'}},
            'colors': {'notice': 1, 'info': '#fff'},
            'level': 'loud'
        })

        errors = options.validate()

        assert "Invalid level: loud" in errors
        assert "Color given for unknown level: notice" in errors
        assert any(e.startswith("Invalid color for info") for e in errors)
        assert any(e.startswith("Invalid webhook URL") for e in errors)


class TestWebhookUrl:
    """Tests for webhook URL helpers."""

    @pytest.mark.parametrize("url", [
        WEBHOOK_URL,
        "https://discordapp.com/api/webhooks/1/abc-DEF_123",
        "https://canary.discord.com/api/v10/webhooks/1/abc",
    ])
    def test_valid(self, url):
        assert is_valid_webhook_url(url)

    @pytest.mark.parametrize("url", [
        "http://discord.com/api/webhooks/1/abc",
        "https://example.com/api/webhooks/1/abc",
        "https://discord.com/api/webhooks/abc/def",
        "not a url",
    ])
    def test_invalid(self, url):
        assert not is_valid_webhook_url(url)

    def test_mask_hides_token(self):
        masked = mask_webhook_url(WEBHOOK_URL)

        assert masked == "https://discord.com/api/webhooks/123456789012345678/***"
        assert "AAAA" not in masked


class TestEnvironmentFallbacks:
    """Tests for level, silent and environment lookups."""

    def test_get_env_treats_empty_as_unset(self):
        assert get_env(WEBHOOK_URL_ENV, {WEBHOOK_URL_ENV: ''}) is None
        assert get_env(WEBHOOK_URL_ENV, {WEBHOOK_URL_ENV: 'x'}) == 'x'

    def test_get_env_defaults_to_process_environment(self):
        os.environ[BOT_CHANNEL_ENV] = BOT_CHANNEL

        assert get_env(BOT_CHANNEL_ENV) == BOT_CHANNEL

    def test_level_default(self):
        assert resolve_level(TransportOptions(), {}) is LogLevel.INFO

    def test_level_from_options_beats_environment(self):
        options = TransportOptions(level='error')

        assert resolve_level(options, {LEVEL_ENV: 'debug'}) is LogLevel.ERROR

    def test_level_from_environment(self):
        assert resolve_level(TransportOptions(), {LEVEL_ENV: 'warning'}) is LogLevel.WARN

    def test_invalid_level_logged_and_defaulted(self, caplog):
        with caplog.at_level(logging.WARNING, logger="discord_transport"):
            level = resolve_level(TransportOptions(level='loud'), {})

        assert level is LogLevel.INFO
        assert "Invalid log level: loud" in caplog.text

    @pytest.mark.parametrize("value,expected", [
        ('true', True),
        ('1', True),
        ('yes', True),
        ('false', False),
        ('0', False),
        ('', False),
    ])
    def test_silent_from_environment(self, value, expected):
        assert resolve_silent(TransportOptions(), {SILENT_ENV: value}) is expected

    def test_silent_option_beats_environment(self):
        assert resolve_silent(TransportOptions(silent=False), {SILENT_ENV: 'true'}) is False


class TestLoadEnvironment:
    """Tests for .env loading."""

    def test_loads_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"{WEBHOOK_URL_ENV}={WEBHOOK_URL}\n")

        assert load_environment(str(env_file)) is True
        assert os.environ[WEBHOOK_URL_ENV] == WEBHOOK_URL

    def test_does_not_override_existing(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"{BOT_CHANNEL_ENV}=from-file\n")
        os.environ[BOT_CHANNEL_ENV] = "from-process"

        load_environment(str(env_file))

        assert os.environ[BOT_CHANNEL_ENV] == "from-process"

    def test_missing_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="discord_transport"):
            assert load_environment(str(tmp_path / "missing.env")) is False

        assert "Environment file not found" in caplog.text


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_configuration_error(self):
        error = ConfigurationError(
            "No destination configured",
            missing_keys=[WEBHOOK_URL_ENV],
            env_file_path="config/.env"
        )

        assert isinstance(error, TransportError)
        assert str(error) == "[CONFIG_ERROR] No destination configured"
        assert error.context == {'missing_keys': [WEBHOOK_URL_ENV], 'env_file_path': "config/.env"}

        message = error.get_troubleshooting_message()
        assert WEBHOOK_URL_ENV in message
        assert "config/.env" in message

    def test_delivery_error(self):
        error = DeliveryError("HTTP 500", status_code=500, operation="create_message", destination="bot")

        assert str(error) == "[DELIVERY_ERROR] HTTP 500"
        assert error.context == {'status_code': 500, 'operation': 'create_message', 'destination': 'bot'}

    def test_default_error_code(self):
        assert TransportError("x").error_code == "TRANSPORTERROR"
