from __future__ import annotations

import http.client
import ipaddress
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Optional

from common.utils.logging_setup import setup_logger
from reporter.errors import GeolocationError

logger = setup_logger("geo_collector")

IPINFO_URL = "https://ipinfo.io"
# ipinfo.io answers curl-like clients with plain JSON.
USER_AGENT = "curl/7.81.0"


@dataclass(frozen=True)
class LocationInfo:
    ip: str  # Public IPv4, or "" when the service returned anything else
    city: str
    region: str
    country: str  # ISO 3166-1 alpha-2
    org: str  # ISP / AS name

    @classmethod
    def from_json(cls, data: dict) -> "LocationInfo":
        def field(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        return cls(
            ip=ipv4_or_blank(field("ip")),
            city=field("city"),
            region=field("region"),
            country=field("country"),
            org=field("org"),
        )


def ipv4_or_blank(ip: str) -> str:
    """Clears addresses that parse as IP but are not IPv4; leaves anything else alone."""
    try:
        parsed = ipaddress.ip_address(ip)
    except ValueError:
        return ip
    if parsed.version == 4:
        return ip
    # IPv4-mapped IPv6 (::ffff:a.b.c.d) still names an IPv4 host.
    return ip if parsed.ipv4_mapped is not None else ""


# Binding the local end to the IPv4 wildcard makes every IPv6 candidate
# from name resolution fail at bind(), so only A records get dialled.
IPV4_ANY = ("0.0.0.0", 0)


class IPv4HTTPSConnection(http.client.HTTPSConnection):
    def __init__(self, *args, **kwargs) -> None:
        kwargs.setdefault("source_address", IPV4_ANY)
        super().__init__(*args, **kwargs)


class IPv4HTTPSHandler(urllib.request.HTTPSHandler):
    def https_open(self, req):
        return self.do_open(IPv4HTTPSConnection, req, context=self._context)


def build_ipv4_opener() -> urllib.request.OpenerDirector:
    return urllib.request.build_opener(IPv4HTTPSHandler())


def collect_location(
    timeout: Optional[float] = None,
    opener: Optional[urllib.request.OpenerDirector] = None,
) -> LocationInfo:
    """
    Looks up the public IP and its location via ipinfo.io over IPv4.

    Raises GeolocationError on transport failures, HTTP error statuses and
    bodies that are not a JSON object.
    """
    opener = opener or build_ipv4_opener()
    req = urllib.request.Request(
        IPINFO_URL,
        method="GET",
        headers={"User-Agent": USER_AGENT},
    )

    try:
        with opener.open(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as exc:
        raise GeolocationError(f"ipinfo HTTP error ({exc.code}): {exc.reason}") from exc
    except urllib.error.URLError as exc:
        raise GeolocationError(f"ipinfo unreachable: {exc.reason}") from exc
    except OSError as exc:
        raise GeolocationError(f"ipinfo request failed: {exc}") from exc

    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise GeolocationError(f"invalid ipinfo response: {exc}") from exc
    if not isinstance(data, dict):
        raise GeolocationError("invalid ipinfo response: expected a JSON object")

    info = LocationInfo.from_json(data)
    logger.debug("Public IP %r located in %s/%s", info.ip, info.city, info.country)
    return info
