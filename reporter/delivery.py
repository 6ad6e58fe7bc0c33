from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Optional

from common.utils.logging_setup import setup_logger
from reporter.errors import DeliveryError

logger = setup_logger("delivery")

TELEGRAM_API_BASE = "https://api.telegram.org"


def send_url(token: str) -> str:
    return f"{TELEGRAM_API_BASE}/bot{token}/sendMessage"


def send_telegram_message(
    token: str,
    chat_id: str,
    text: str,
    timeout: Optional[float] = None,
) -> None:
    """
    POST the message to the Telegram Bot API sendMessage endpoint.

    The response body is read and discarded. Transport failures and HTTP
    error statuses raise DeliveryError; nothing is retried.
    """
    data = json.dumps({"chat_id": chat_id, "text": text}).encode("utf-8")
    req = urllib.request.Request(
        send_url(token),
        data=data,
        method="POST",
        headers={"Content-Type": "application/json"},
    )

    # Error messages never include the URL: it carries the bot token.
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            resp.read()
            logger.debug("Telegram accepted message (status %s).", resp.status)
    except urllib.error.HTTPError as exc:
        raise DeliveryError(
            f"Telegram HTTP error ({exc.code}): {exc.reason}", status=exc.code
        ) from exc
    except urllib.error.URLError as exc:
        raise DeliveryError(f"Telegram unreachable: {exc.reason}") from exc
    except OSError as exc:
        raise DeliveryError(f"Telegram request failed: {exc}") from exc
