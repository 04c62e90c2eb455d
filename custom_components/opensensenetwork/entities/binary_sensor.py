"""Binary sensor entities for OpenSense Network integration."""

import logging

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
    BinarySensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from ..const import DOMAIN, KEY_REACHABLE
from ..coordinators.items_coordinator import ItemsCoordinator
from .base_entity import OpenSenseBaseEntity

_LOGGER = logging.getLogger(__name__)

REACHABLE_DESCRIPTION = BinarySensorEntityDescription(
    key=KEY_REACHABLE,
    name="Reachable",
    device_class=BinarySensorDeviceClass.CONNECTIVITY,
    entity_category=EntityCategory.DIAGNOSTIC,
)


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up binary sensor platform."""
    _LOGGER.debug(f"Setting up binary sensor platform for {entry.title}")

    try:
        coordinator: ItemsCoordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
    except KeyError as exc:
        _LOGGER.error(f"Missing key {exc} for binary sensors")
        return

    async_add_entities([OpenSenseReachableSensor(coordinator)])


class OpenSenseReachableSensor(OpenSenseBaseEntity, BinarySensorEntity):
    """Connectivity of the items endpoint, as of the last fetch."""

    def __init__(self, coordinator: ItemsCoordinator) -> None:
        """Initialize reachable sensor."""
        super().__init__(coordinator, KEY_REACHABLE)
        self.entity_description = REACHABLE_DESCRIPTION

    @property
    def available(self) -> bool:
        """Always report, so an unreachable endpoint shows as off."""
        return True

    @property
    def is_on(self) -> bool:
        """Return True if the last fetch succeeded."""
        return bool(self.coordinator.last_update_success and self.coordinator.data is not None)
