from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from reporter.errors import MissingCredentialsError

ENV_BOT_TOKEN = "TELEGRAM_BOT_TOKEN"
ENV_CHAT_ID = "TELEGRAM_CHAT_ID"
ENV_INTERFACE = "INTERFACE"
ENV_LIMIT_GIB = "LIMIT_GIB"
ENV_REQUEST_TIMEOUT = "REQUEST_TIMEOUT_SECONDS"
ENV_VNSTAT_TIMEOUT = "VNSTAT_TIMEOUT_SECONDS"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOGS_DIR = "LOGS_DIR"

DEFAULT_INTERFACE = "eth0"
DEFAULT_LIMIT_GIB = 1024.0  # 1 TiB
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_VNSTAT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOGS_DIR = "logs"

LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Plain logger: logging_setup imports this module.
logger = logging.getLogger(__name__)


def _load_env_file() -> None:
    if not load_dotenv():
        logger.info("No .env file loaded; using process environment only.")


def _parse_float(value: Optional[str], default: float) -> float:
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_timeout(value: Optional[str], default: float) -> float:
    timeout = _parse_float(value, default)
    return timeout if timeout > 0 else default


def _parse_log_level(value: Optional[str]) -> int:
    """LOG_LEVEL as a level name ("debug") or number ("10"); INFO otherwise."""
    name = (value or "").strip().upper()
    if name.isdigit():
        return int(name)
    if name in LOG_LEVEL_NAMES:
        return getattr(logging, name)
    return DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Settings:
    bot_token: str
    chat_id: str
    interface: str = DEFAULT_INTERFACE
    limit_gib: float = DEFAULT_LIMIT_GIB
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    vnstat_timeout: float = DEFAULT_VNSTAT_TIMEOUT
    log_level: int = DEFAULT_LOG_LEVEL
    logs_dir: str = DEFAULT_LOGS_DIR  # "" = console only


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Build the reporter settings from the environment (and .env, if present).

    Raises MissingCredentialsError when the bot token or chat id is empty.
    """
    _load_env_file()

    bot_token = os.getenv(ENV_BOT_TOKEN, "")
    chat_id = os.getenv(ENV_CHAT_ID, "")
    if not bot_token or not chat_id:
        raise MissingCredentialsError(
            f"Missing {ENV_BOT_TOKEN} or {ENV_CHAT_ID}"
        )

    return Settings(
        bot_token=bot_token,
        chat_id=chat_id,
        interface=os.getenv(ENV_INTERFACE) or DEFAULT_INTERFACE,
        limit_gib=_parse_float(os.getenv(ENV_LIMIT_GIB), DEFAULT_LIMIT_GIB),
        request_timeout=_parse_timeout(
            os.getenv(ENV_REQUEST_TIMEOUT), DEFAULT_REQUEST_TIMEOUT
        ),
        vnstat_timeout=_parse_timeout(
            os.getenv(ENV_VNSTAT_TIMEOUT), DEFAULT_VNSTAT_TIMEOUT
        ),
        log_level=_parse_log_level(os.getenv(ENV_LOG_LEVEL)),
        logs_dir=os.getenv(ENV_LOGS_DIR, DEFAULT_LOGS_DIR),
    )
