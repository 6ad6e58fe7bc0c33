"""
Rendering of the monthly usage message.

Everything here is pure: the same UsageReport, LocationInfo and limit always
produce the same text.
"""

from __future__ import annotations

import math

from reporter.geo_collector import LocationInfo
from reporter.usage_collector import UsageReport

BYTES_PER_GIB = 1024 * 1024 * 1024
PROGRESS_BAR_WIDTH = 20
FILLED_BLOCK = "█"
EMPTY_BLOCK = "░"
REGIONAL_INDICATOR_OFFSET = 127397  # ord("🇦") - ord("A")

EMOJI_LOW = "🟢"
EMOJI_MEDIUM = "🟡"
EMOJI_HIGH = "🔴"

MESSAGE_TEMPLATE = (
    "📊 VNSTAT\n"
    "Usage on {iface} in {period}:\n"
    "\n"
    "⬇️ RX: {rx}\n"
    "⬆️ TX: {tx} (limit: {limit:.0f} GiB)\n"
    "Total: {total}\n"
    "\n"
    "TX Limit: {emoji} {percent:.2f}% used\n"
    "{bar}\n"
    "🌐 Public IP: {ip} {flag}\n"
    "📍 Location: {city}, {region}\n"
    "🏢 ISP: {org}"
)


def format_bytes(num_bytes: int) -> str:
    """Binary gigabytes with one decimal, labelled "GB" (1073741824 -> "1.0 GB")."""
    return f"{num_bytes / BYTES_PER_GIB:.1f} GB"


def percent_used(tx_bytes: int, limit_gib: float) -> float:
    # Not clamped: an exceeded quota reports above 100.
    if limit_gib == 0:
        return math.inf if tx_bytes else 0.0
    return (tx_bytes / BYTES_PER_GIB) / limit_gib * 100


def usage_emoji(percent: float) -> str:
    if percent < 50:
        return EMOJI_LOW
    if percent < 80:
        return EMOJI_MEDIUM
    return EMOJI_HIGH


def progress_bar(percent: float, width: int = PROGRESS_BAR_WIDTH) -> str:
    ratio = percent / 100 * width
    # NaN fails every comparison, so it lands in the empty branch.
    if not ratio > 0:
        filled = 0
    elif ratio >= width:
        filled = width
    else:
        filled = math.trunc(ratio)
    return f"[{FILLED_BLOCK * filled}{EMPTY_BLOCK * (width - filled)}]"


def country_flag_emoji(code: str) -> str:
    code = code.upper()
    if len(code) != 2:
        return ""
    return "".join(chr(ord(char) + REGIONAL_INDICATOR_OFFSET) for char in code)


def render_message(usage: UsageReport, location: LocationInfo, limit_gib: float) -> str:
    percent = percent_used(usage.tx_bytes, limit_gib)
    return MESSAGE_TEMPLATE.format(
        iface=usage.interface_name,
        period=usage.period_label,
        rx=format_bytes(usage.rx_bytes),
        tx=format_bytes(usage.tx_bytes),
        limit=limit_gib,
        total=format_bytes(usage.total_bytes),
        emoji=usage_emoji(percent),
        percent=percent,
        bar=progress_bar(percent),
        ip=location.ip,
        flag=country_flag_emoji(location.country),
        city=location.city,
        region=location.region,
        org=location.org,
    )
