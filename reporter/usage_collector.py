from __future__ import annotations

import calendar
import json
import subprocess
from dataclasses import dataclass
from typing import Any, List, Optional

from common.utils.logging_setup import setup_logger
from reporter.errors import UsageCollectionError

logger = setup_logger("usage_collector")

VNSTAT_BINARY = "vnstat"


@dataclass(frozen=True)
class UsageReport:
    """
    Monthly traffic counters for one interface, as reported by vnstat.
    """

    interface_name: str
    rx_bytes: int  # Received this month
    tx_bytes: int  # Transmitted this month
    period_label: str  # e.g. "March 2024"

    @property
    def total_bytes(self) -> int:
        return self.rx_bytes + self.tx_bytes


def build_vnstat_command(interface_name: str) -> List[str]:
    return [VNSTAT_BINARY, "-i", interface_name, "--json", "m", "1"]


def collect_usage(interface_name: str, timeout: Optional[float] = None) -> UsageReport:
    """
    Runs vnstat for the interface and returns the current month's counters.

    Raises UsageCollectionError if vnstat cannot be run, fails, or prints
    output that does not describe at least one interface and one month.
    """
    args = build_vnstat_command(interface_name)
    logger.debug("Running %s", " ".join(args))

    try:
        proc = subprocess.run(
            args, capture_output=True, text=True, timeout=timeout, check=True
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise UsageCollectionError(
            f"vnstat exited with status {exc.returncode}"
            + (f": {stderr}" if stderr else "")
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise UsageCollectionError(f"vnstat timed out after {exc.timeout}s") from exc
    except OSError as exc:
        raise UsageCollectionError(f"could not run vnstat: {exc}") from exc

    return parse_vnstat_output(proc.stdout)


def parse_vnstat_output(raw: str) -> UsageReport:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise UsageCollectionError("invalid vnstat output") from exc

    interfaces = data.get("interfaces") if isinstance(data, dict) else None
    if not interfaces:
        raise UsageCollectionError("invalid vnstat output")
    if len(interfaces) > 1:
        logger.debug("vnstat returned %s interfaces; using the first.", len(interfaces))

    iface = interfaces[0]
    try:
        months = iface["traffic"]["month"]
        month = months[0]
        year = int(month["date"]["year"])
        month_number = int(month["date"]["month"])
        rx = _counter(month["rx"])
        tx = _counter(month["tx"])
        name = str(iface["name"])
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise UsageCollectionError(f"unexpected vnstat output: {exc!r}") from exc

    return UsageReport(
        interface_name=name,
        rx_bytes=rx,
        tx_bytes=tx,
        period_label=period_label(year, month_number),
    )


def period_label(year: int, month: int) -> str:
    if not 1 <= month <= 12:
        raise UsageCollectionError(f"month out of range: {month}")
    return f"{calendar.month_name[month]} {year:04d}"


def _counter(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"byte counter must be a non-negative integer, got {value!r}")
    return value
