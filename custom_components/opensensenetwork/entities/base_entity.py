"""Base entity class for OpenSense Network integration."""

from typing import Optional
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from ..const import DOMAIN
from ..coordinators.items_coordinator import ItemsCoordinator

_LOGGER = logging.getLogger(__name__)


def build_device_info(entry: ConfigEntry, thing_type: str) -> DeviceInfo:
    """Return the device registry entry for one configured thing."""
    return DeviceInfo(
        identifiers={(DOMAIN, entry.entry_id)},
        name=entry.title,
        manufacturer="OpenSense Network",
        model=thing_type.capitalize(),
    )


class OpenSenseBaseEntity(CoordinatorEntity[ItemsCoordinator]):
    """Base class for OpenSense Network entities."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: ItemsCoordinator, key: str) -> None:
        """Initialize base entity.

        Args:
            coordinator: Items coordinator feeding this entity
            key: Channel or status key, unique within the thing
        """
        super().__init__(coordinator)
        entry_id = coordinator.entry.entry_id
        self._key = key
        self._attr_unique_id: Optional[str] = f"{entry_id}_{key}"
        self._attr_device_info = build_device_info(coordinator.entry, coordinator.thing_type)

    @property
    def key(self) -> str:
        """Return the channel or status key."""
        return self._key
