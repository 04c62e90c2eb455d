"""Tests for setup, services and teardown of OpenSense Network integration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from homeassistant.config_entries import ConfigEntry
from homeassistant.exceptions import HomeAssistantError

from custom_components.opensensenetwork import async_setup_entry, async_unload_entry
from custom_components.opensensenetwork.const import DOMAIN
from custom_components.opensensenetwork.core.api_client import OpenSenseApiClient
from custom_components.opensensenetwork.core.exceptions import TransportError
from custom_components.opensensenetwork.core.item_lookup import (
    ItemLookup,
    LookupResult,
    LookupStatus,
)
from custom_components.opensensenetwork.coordinators.items_coordinator import ItemsCoordinator
from custom_components.opensensenetwork.models.item import Item

from .conftest import make_item


@pytest.fixture
def hass() -> MagicMock:
    """Mock hass with the parts setup touches."""
    hass = MagicMock()
    hass.data = {}
    hass.config_entries.async_forward_entry_setups = AsyncMock(return_value=True)
    hass.config_entries.async_unload_platforms = AsyncMock(return_value=True)
    hass.services.has_service = MagicMock(return_value=False)
    # Background tasks are not run in these tests
    hass.async_create_task = MagicMock(side_effect=lambda coro, *a, **kw: coro.close())
    return hass


def _service_handler(hass: MagicMock, service: str):
    for call in hass.services.async_register.call_args_list:
        if call.args[1] == service:
            return call.args[2]
    raise AssertionError(f"{service} not registered")


async def _setup(hass: MagicMock, entry: ConfigEntry) -> bool:
    with patch("custom_components.opensensenetwork.async_get_clientsession"):
        return await async_setup_entry(hass, entry)


@pytest.mark.asyncio
async def test_setup_entry_success(hass, mock_config_entry):
    """Test successful setup of integration."""
    result = await _setup(hass, mock_config_entry)

    assert result is True
    entry_data = hass.data[DOMAIN][mock_config_entry.entry_id]
    assert isinstance(entry_data["api_client"], OpenSenseApiClient)
    assert isinstance(entry_data["lookup"], ItemLookup)
    assert isinstance(entry_data["coordinator"], ItemsCoordinator)
    assert entry_data["api_client"].config.credential == "dXNlcjpwYXNz"
    assert entry_data["api_client"].config.timeout == 10.0
    hass.async_create_task.assert_called_once()
    hass.config_entries.async_forward_entry_setups.assert_awaited_once()
    assert hass.services.async_register.call_count == 2


@pytest.mark.asyncio
async def test_lookup_link_service(hass, mock_config_entry):
    """Test the lookup service returns the link of the match."""
    await _setup(hass, mock_config_entry)
    lookup = MagicMock()
    lookup.lookup_link = AsyncMock(
        return_value=LookupResult(LookupStatus.MATCH, item=Item.from_json(make_item()))
    )
    hass.data[DOMAIN][mock_config_entry.entry_id]["lookup"] = lookup
    call = MagicMock()
    call.data = {"label": "temperature"}

    response = await _service_handler(hass, "lookup_link")(call)

    assert response == {"label": "temperature", "status": "match", "link": "http://x/items/a"}


@pytest.mark.asyncio
async def test_lookup_link_service_no_match(hass, mock_config_entry):
    """Test no match is a response, not an error."""
    await _setup(hass, mock_config_entry)
    lookup = MagicMock()
    lookup.lookup_link = AsyncMock(return_value=LookupResult(LookupStatus.NO_MATCH))
    hass.data[DOMAIN][mock_config_entry.entry_id]["lookup"] = lookup
    call = MagicMock()
    call.data = {"label": "pressure", "entry_id": mock_config_entry.entry_id}

    response = await _service_handler(hass, "lookup_link")(call)

    assert response == {"label": "pressure", "status": "no_match", "link": None}


@pytest.mark.asyncio
async def test_lookup_link_service_unavailable(hass, mock_config_entry):
    """Test an unavailable lookup raises."""
    await _setup(hass, mock_config_entry)
    lookup = MagicMock()
    lookup.lookup_link = AsyncMock(
        return_value=LookupResult(LookupStatus.UNAVAILABLE, error=TransportError("down"))
    )
    hass.data[DOMAIN][mock_config_entry.entry_id]["lookup"] = lookup
    call = MagicMock()
    call.data = {"label": "temperature"}

    with pytest.raises(HomeAssistantError):
        await _service_handler(hass, "lookup_link")(call)


@pytest.mark.asyncio
async def test_list_labels_service(hass, mock_config_entry):
    """Test the list service returns labels, and raises when unavailable."""
    await _setup(hass, mock_config_entry)
    lookup = MagicMock()
    lookup.list_labels = AsyncMock(return_value=["Temperature", "Humidity"])
    hass.data[DOMAIN][mock_config_entry.entry_id]["lookup"] = lookup
    call = MagicMock()
    call.data = {}
    handler = _service_handler(hass, "list_labels")

    assert await handler(call) == {"labels": ["Temperature", "Humidity"]}

    lookup.list_labels.return_value = None
    with pytest.raises(HomeAssistantError):
        await handler(call)


@pytest.mark.asyncio
async def test_service_unknown_entry(hass, mock_config_entry):
    """Test services reject unknown entry ids."""
    await _setup(hass, mock_config_entry)
    call = MagicMock()
    call.data = {"entry_id": "missing"}

    with pytest.raises(HomeAssistantError):
        await _service_handler(hass, "list_labels")(call)


@pytest.mark.asyncio
async def test_unload_entry_success(hass, mock_config_entry):
    """Test successful unload of integration."""
    await _setup(hass, mock_config_entry)

    result = await async_unload_entry(hass, mock_config_entry)

    assert result is True
    assert mock_config_entry.entry_id not in hass.data.get(DOMAIN, {})
    assert hass.services.async_remove.call_count == 2


@pytest.mark.asyncio
async def test_unload_entry_no_data(hass, mock_config_entry):
    """Test unload when entry data is missing."""
    result = await async_unload_entry(hass, mock_config_entry)

    assert result is True


@pytest.mark.asyncio
async def test_unload_entry_failed_keeps_data(hass, mock_config_entry):
    """Test a failed platform unload leaves entry data and services in place."""
    await _setup(hass, mock_config_entry)
    hass.config_entries.async_unload_platforms.return_value = False

    result = await async_unload_entry(hass, mock_config_entry)

    assert result is False
    assert mock_config_entry.entry_id in hass.data[DOMAIN]
    hass.services.async_remove.assert_not_called()
