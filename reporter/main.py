from __future__ import annotations

from common.settings import get_settings
from common.utils.logging_setup import run_logging, setup_logger
from common.utils.timer import BlockTimer
from reporter.delivery import send_telegram_message
from reporter.errors import (
    DeliveryError,
    GeolocationError,
    MissingCredentialsError,
    UsageCollectionError,
)
from reporter.formatter import render_message
from reporter.geo_collector import collect_location
from reporter.usage_collector import collect_usage

logger = setup_logger("reporter")


def run() -> None:
    """
    One reporter pass: settings -> vnstat -> ipinfo -> message -> Telegram.

    Every handled failure prints a one-line diagnostic and returns normally,
    skipping the remaining steps.
    """
    try:
        settings = get_settings()
    except MissingCredentialsError as exc:
        print(exc)
        return

    with run_logging(settings), BlockTimer("Report run", logger):
        logger.info("Collecting vnstat usage for %s.", settings.interface)
        try:
            usage = collect_usage(settings.interface, timeout=settings.vnstat_timeout)
        except UsageCollectionError as exc:
            logger.error("Usage collection failed: %s", exc)
            print("vnstat error:", exc)
            return

        logger.info("Looking up public IP location.")
        try:
            location = collect_location(timeout=settings.request_timeout)
        except GeolocationError as exc:
            logger.error("Geolocation failed: %s", exc)
            print("IP info error:", exc)
            return

        message = render_message(usage, location, settings.limit_gib)

        try:
            send_telegram_message(
                settings.bot_token,
                settings.chat_id,
                message,
                timeout=settings.request_timeout,
            )
        except DeliveryError as exc:
            logger.error("Delivery failed: %s", exc)
            print("Telegram error:", exc)
            return

        logger.info(
            "Report for %s (%s) delivered to chat %s.",
            usage.interface_name,
            usage.period_label,
            settings.chat_id,
        )


def main() -> None:
    try:
        run()
    except Exception:
        logger.exception("Reporter run failed")
        raise


if __name__ == "__main__":
    main()
