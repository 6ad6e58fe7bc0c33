"""
Unit tests for settings loading from the environment.
"""

import logging
import math

import pytest

from common import settings as settings_module
from common.settings import (
    DEFAULT_INTERFACE,
    DEFAULT_LIMIT_GIB,
    DEFAULT_LOGS_DIR,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_VNSTAT_TIMEOUT,
    _parse_log_level,
    get_settings,
)
from reporter.errors import MissingCredentialsError


class TestGetSettings:
    """Test the reporter Settings built by get_settings()."""

    def test_defaults_applied(self, credentials):
        """Test unset optional values fall back to their defaults."""
        settings = get_settings()

        assert settings.bot_token == "123456:TEST-TOKEN"
        assert settings.chat_id == "-1001234567890"
        assert settings.interface == DEFAULT_INTERFACE == "eth0"
        assert settings.limit_gib == DEFAULT_LIMIT_GIB == 1024.0
        assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT

    def test_values_read_from_environment(self, credentials, monkeypatch):
        """Test explicit interface and limit are honoured."""
        monkeypatch.setenv("INTERFACE", "ens3")
        monkeypatch.setenv("LIMIT_GIB", "2048.5")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "3")

        settings = get_settings()

        assert settings.interface == "ens3"
        assert settings.limit_gib == 2048.5
        assert settings.request_timeout == 3.0

    def test_empty_interface_uses_default(self, credentials, monkeypatch):
        """Test an empty INTERFACE behaves like an unset one."""
        monkeypatch.setenv("INTERFACE", "")

        assert get_settings().interface == "eth0"

    @pytest.mark.parametrize("raw", ["", "lots", "1,024"])
    def test_unparsable_limit_keeps_default(self, credentials, monkeypatch, raw):
        """Test empty or unparsable LIMIT_GIB values are ignored."""
        monkeypatch.setenv("LIMIT_GIB", raw)

        assert get_settings().limit_gib == 1024.0

    @pytest.mark.parametrize("raw", ["0", "-5", "250e-1", "inf"])
    def test_any_parsed_limit_kept(self, credentials, monkeypatch, raw):
        """Test zero, negative and exponent forms are taken as given."""
        monkeypatch.setenv("LIMIT_GIB", raw)

        assert get_settings().limit_gib == float(raw)

    def test_nan_limit_kept(self, credentials, monkeypatch):
        monkeypatch.setenv("LIMIT_GIB", "nan")

        assert math.isnan(get_settings().limit_gib)

    def test_logging_defaults(self, credentials, monkeypatch):
        """Test LOG_LEVEL defaults to INFO and LOGS_DIR to ./logs."""
        monkeypatch.delenv("LOGS_DIR")

        settings = get_settings()

        assert settings.log_level == logging.INFO
        assert settings.logs_dir == DEFAULT_LOGS_DIR == "logs"

    def test_logging_from_environment(self, credentials, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOGS_DIR", "/var/log/vnstat-report")

        settings = get_settings()

        assert settings.log_level == logging.DEBUG
        assert settings.logs_dir == "/var/log/vnstat-report"

    def test_empty_logs_dir_means_console_only(self, credentials):
        assert get_settings().logs_dir == ""

    def test_non_positive_timeout_keeps_default(self, credentials, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "0")
        monkeypatch.setenv("VNSTAT_TIMEOUT_SECONDS", "-1")

        settings = get_settings()

        assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT
        assert settings.vnstat_timeout == DEFAULT_VNSTAT_TIMEOUT

    def test_missing_token(self, monkeypatch):
        """Test a missing bot token is reported."""
        monkeypatch.setenv("TELEGRAM_CHAT_ID", "42")

        with pytest.raises(MissingCredentialsError, match="TELEGRAM_BOT_TOKEN"):
            get_settings()

    def test_missing_chat_id(self, monkeypatch):
        """Test a missing chat id is reported."""
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "token")

        with pytest.raises(MissingCredentialsError, match="TELEGRAM_CHAT_ID"):
            get_settings()

    def test_missing_credentials_is_value_error(self):
        """Test callers catching ValueError still see credential errors."""
        with pytest.raises(ValueError):
            get_settings()

    def test_env_file_loaded(self, credentials, monkeypatch):
        """Test .env loading is attempted and a miss is only logged."""
        calls = []
        monkeypatch.setattr(
            settings_module, "load_dotenv", lambda *a, **kw: calls.append(1) or False
        )

        get_settings()

        assert calls == [1]


class TestParseLogLevel:
    """Test LOG_LEVEL parsing."""

    def test_names_and_numbers(self):
        assert _parse_log_level("debug") == logging.DEBUG
        assert _parse_log_level(" Warning ") == logging.WARNING
        assert _parse_log_level("30") == 30

    @pytest.mark.parametrize("raw", [None, "", "chatty", "-10"])
    def test_unknown_falls_back_to_info(self, raw):
        assert _parse_log_level(raw) == logging.INFO
