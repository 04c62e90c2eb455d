"""Pytest configuration and fixtures for OpenSense Network integration tests."""

from __future__ import annotations

import json
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from custom_components.opensensenetwork.const import (
    CONF_PASSWORD,
    CONF_THING_TYPE,
    CONF_TIMEOUT,
    CONF_URL,
    CONF_USERNAME,
    DOMAIN,
    THING_TYPE_WEATHER,
)
from custom_components.opensensenetwork.core.api_client import ClientConfig, OpenSenseApiClient


class FakeResponse:
    """Stand-in for an aiohttp response used as `async with` target."""

    def __init__(
        self,
        status: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        raw: Optional[bytes] = None,
    ) -> None:
        self.status = status
        if raw is None:
            raw = (text if text is not None else json.dumps(body)).encode("utf-8")
        self._raw = raw

    async def text(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        return self._raw.decode(encoding, errors)

    async def json(self, content_type: Optional[str] = None) -> Any:
        return json.loads(self._raw.decode("utf-8"))

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


def make_item(**overrides: Any) -> dict[str, Any]:
    """Return one well-formed item object."""
    item = {
        "link": "http://x/items/a",
        "state": "12",
        "editable": False,
        "type": "Number",
        "name": "a",
        "label": "Temperature",
        "tags": [],
        "groupNames": [],
    }
    item.update(overrides)
    return item


@pytest.fixture
def mock_hass() -> HomeAssistant:
    """Mock Home Assistant instance."""
    hass = MagicMock(spec=HomeAssistant)
    hass.data = {DOMAIN: {}}
    return hass


@pytest.fixture
def mock_config_entry() -> ConfigEntry:
    """Mock config entry."""
    entry = MagicMock(spec=ConfigEntry)
    entry.entry_id = "test_entry_id"
    entry.title = "Weather (x)"
    entry.data = {
        CONF_URL: "http://x",
        CONF_USERNAME: "user",
        CONF_PASSWORD: "pass",
        CONF_THING_TYPE: THING_TYPE_WEATHER,
        CONF_TIMEOUT: 10,
    }
    entry.options = {}
    return entry


@pytest.fixture
def client_config() -> ClientConfig:
    """Client config pointing at a fake endpoint."""
    return ClientConfig(base_url="http://x", credential="dXNlcjpwYXNz", timeout=5)


@pytest.fixture
def mock_session() -> MagicMock:
    """aiohttp session whose `request` results are set per test."""
    session = MagicMock()
    session.request = MagicMock(return_value=FakeResponse(body=[]))
    return session


@pytest.fixture
def api_client(mock_session: MagicMock, client_config: ClientConfig) -> OpenSenseApiClient:
    """API client on top of the mock session."""
    return OpenSenseApiClient(mock_session, client_config)


@pytest.fixture
def sample_items_payload() -> list[dict[str, Any]]:
    """Items body with a temperature and a humidity item."""
    return [
        make_item(),
        make_item(
            link="http://x/items/b",
            state="65.6",
            name="b",
            label="Humidity",
            category="humidity",
            stateDescription={"pattern": "%.1f %%", "readOnly": True},
            tags=["Measurement", "Humidity", "Measurement"],
            groupNames=["Outdoor", "Weather"],
        ),
    ]


@pytest.fixture
def mock_api_client():
    """Mock HTTP API client."""
    client = MagicMock()
    client.fetch_items = AsyncMock()
    return client
