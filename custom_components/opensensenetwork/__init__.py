"""OpenSense Network integration for Home Assistant."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import voluptuous as vol

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    DOMAIN, _LOGGER, CONF_URL, CONF_USERNAME, CONF_PASSWORD, CONF_TIMEOUT,
    DEFAULT_TIMEOUT, SERVICE_LOOKUP_LINK, SERVICE_LIST_LABELS, ATTR_LABEL,
)
from .core.api_client import ClientConfig, OpenSenseApiClient
from .core.item_lookup import ItemLookup, LookupStatus
from .coordinators.items_coordinator import ItemsCoordinator

PLATFORMS: list[Platform] = [Platform.SENSOR, Platform.BINARY_SENSOR]

ATTR_ENTRY_ID = "entry_id"

LOOKUP_LINK_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_LABEL): cv.string,
        vol.Optional(ATTR_ENTRY_ID): cv.string,
    }
)
LIST_LABELS_SCHEMA = vol.Schema({vol.Optional(ATTR_ENTRY_ID): cv.string})


def client_config_from_entry(entry: ConfigEntry) -> ClientConfig:
    """Build the REST client settings stored in a config entry."""
    return ClientConfig.from_login(
        entry.data[CONF_URL],
        entry.data[CONF_USERNAME],
        entry.data[CONF_PASSWORD],
        timeout=float(entry.data.get(CONF_TIMEOUT, DEFAULT_TIMEOUT)),
    )


async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Set up the OpenSense Network integration."""
    # Config flow is handled automatically by Home Assistant
    # when config_flow: true is set in manifest.json
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up OpenSense Network from a config entry."""
    _LOGGER.info(f"Setting up OpenSense Network: {entry.title} ({entry.entry_id})")
    hass.data.setdefault(DOMAIN, {})

    session = async_get_clientsession(hass)
    api_client = OpenSenseApiClient(session, client_config_from_entry(entry))
    coordinator = ItemsCoordinator(hass, entry, api_client)

    hass.data[DOMAIN][entry.entry_id] = {
        "api_client": api_client,
        "lookup": ItemLookup(api_client),
        "coordinator": coordinator,
    }

    # Entities start unknown; the first fetch decides reachability in the background
    hass.async_create_task(coordinator.async_refresh())

    _async_register_services(hass)
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info(f"Setup complete for {entry.title} ({coordinator.thing_type})")
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.info(f"Unloading OpenSense Network: {entry.title}")

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        entry_data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
        if entry_data is None:
            _LOGGER.warning(f"No entry data {entry.entry_id} to clean.")
        elif _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Removed entry data %s.", entry.entry_id)

        # Session is managed by HA; services go with the last entry
        if not hass.data.get(DOMAIN):
            hass.services.async_remove(DOMAIN, SERVICE_LOOKUP_LINK)
            hass.services.async_remove(DOMAIN, SERVICE_LIST_LABELS)

    _LOGGER.info(f"Unload {entry.title}: {'OK' if unload_ok else 'Failed'}.")
    return unload_ok


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when its options change."""
    await hass.config_entries.async_reload(entry.entry_id)


def _resolve_lookup(hass: HomeAssistant, entry_id: Optional[str]) -> ItemLookup:
    """Return the lookup of `entry_id`, or of the first loaded entry."""
    domain_data: Dict[str, Dict[str, Any]] = hass.data.get(DOMAIN, {})
    if entry_id is not None:
        entry_data = domain_data.get(entry_id)
        if entry_data is None:
            raise HomeAssistantError(f"Unknown OpenSense Network entry: {entry_id}")
        return entry_data["lookup"]
    for entry_data in domain_data.values():
        return entry_data["lookup"]
    raise HomeAssistantError("No OpenSense Network entry is loaded")


def _async_register_services(hass: HomeAssistant) -> None:
    """Register the lookup services once per domain."""
    if hass.services.has_service(DOMAIN, SERVICE_LOOKUP_LINK):
        return

    async def _svc_lookup_link(call: ServiceCall) -> ServiceResponse:
        """Resolve a label to its item link."""
        label = call.data[ATTR_LABEL]
        lookup = _resolve_lookup(hass, call.data.get(ATTR_ENTRY_ID))
        result = await lookup.lookup_link(label)
        if result.status is LookupStatus.UNAVAILABLE:
            raise HomeAssistantError(f"Lookup of '{label}' unavailable: {result.error}")
        return {"label": label, "status": result.status.value, "link": result.link}

    async def _svc_list_labels(call: ServiceCall) -> ServiceResponse:
        """List every item label."""
        lookup = _resolve_lookup(hass, call.data.get(ATTR_ENTRY_ID))
        labels = await lookup.list_labels()
        if labels is None:
            raise HomeAssistantError("Listing labels unavailable")
        return {"labels": labels}

    hass.services.async_register(
        DOMAIN, SERVICE_LOOKUP_LINK, _svc_lookup_link,
        schema=LOOKUP_LINK_SCHEMA, supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        DOMAIN, SERVICE_LIST_LABELS, _svc_list_labels,
        schema=LIST_LABELS_SCHEMA, supports_response=SupportsResponse.ONLY,
    )
