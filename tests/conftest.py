"""
Shared fixtures for the reporter test suite.
"""

import pytest

from common import settings as settings_module

ENV_VARS = (
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "INTERFACE",
    "LIMIT_GIB",
    "REQUEST_TIMEOUT_SECONDS",
    "VNSTAT_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)

VNSTAT_MARCH_2024 = """
{
  "vnstatversion": "2.9",
  "jsonversion": "2",
  "interfaces": [
    {
      "name": "eth0",
      "alias": "",
      "traffic": {
        "month": [
          {
            "id": 12,
            "date": {"year": 2024, "month": 3},
            "rx": 500000000000,
            "tx": 600000000000
          }
        ]
      }
    }
  ]
}
"""

IPINFO_RESPONSE = {
    "ip": "203.0.113.7",
    "hostname": "host.example.net",
    "city": "Frankfurt am Main",
    "region": "Hesse",
    "country": "DE",
    "loc": "50.1155,8.6842",
    "org": "AS24940 Hetzner Online GmbH",
    "timezone": "Europe/Berlin",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate every test from the real environment and any local .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Console-only logging unless a test points LOGS_DIR somewhere.
    monkeypatch.setenv("LOGS_DIR", "")
    monkeypatch.setattr(settings_module, "load_dotenv", lambda *a, **kw: False)
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:TEST-TOKEN")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "-1001234567890")


@pytest.fixture
def vnstat_output():
    return VNSTAT_MARCH_2024


@pytest.fixture
def ipinfo_response():
    return dict(IPINFO_RESPONSE)
