"""Diagnostics support for OpenSense Network integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN, CONF_PASSWORD, CONF_USERNAME
from .coordinators.items_coordinator import ItemsCoordinator

TO_REDACT = {CONF_PASSWORD, CONF_USERNAME, "credential", "token", "secret"}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    entry_data = hass.data.get(DOMAIN, {}).get(entry.entry_id, {})

    diagnostics_data: dict[str, Any] = {
        "entry": {
            "entry_id": entry.entry_id,
            "title": entry.title,
            "data": async_redact_data(entry.data, TO_REDACT),
            "options": dict(entry.options),
        },
    }

    api_client = entry_data.get("api_client")
    if api_client is not None:
        config = api_client.config
        diagnostics_data["client"] = {
            "items_url": config.items_url,
            "timeout": config.timeout,
            "max_attempts": config.max_attempts,
        }

    coordinator = entry_data.get("coordinator")
    if isinstance(coordinator, ItemsCoordinator):
        snapshot = coordinator.data
        diagnostics_data["coordinator"] = {
            "thing_type": coordinator.thing_type,
            "last_update_success": coordinator.last_update_success,
            "update_interval": str(coordinator.update_interval),
            "last_exception": str(coordinator.last_exception) if coordinator.last_exception else None,
        }
        if snapshot is not None:
            diagnostics_data["items"] = [item.as_dict() for item in snapshot.items]
            diagnostics_data["channels"] = {
                channel: (
                    {"value": update.value, "unit": update.unit, "item": update.item.name}
                    if update is not None
                    else None
                )
                for channel, update in snapshot.channels.items()
            }
    else:
        diagnostics_data["coordinator"] = {"status": "not_initialized"}

    return diagnostics_data
