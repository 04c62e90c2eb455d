"""Sensor entities for OpenSense Network integration."""

from typing import Any, Dict, Optional
import logging

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from ..const import CHANNEL_HUMIDITY, CHANNEL_TEMPERATURE, DOMAIN
from ..coordinators.items_coordinator import ItemsCoordinator
from ..core.channel_mapper import ChannelUpdate
from .base_entity import OpenSenseBaseEntity

_LOGGER = logging.getLogger(__name__)

CHANNEL_SENSOR_DESCRIPTIONS: Dict[str, SensorEntityDescription] = {
    CHANNEL_TEMPERATURE: SensorEntityDescription(
        key=CHANNEL_TEMPERATURE,
        name="Temperature",
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
        suggested_display_precision=1,
    ),
    CHANNEL_HUMIDITY: SensorEntityDescription(
        key=CHANNEL_HUMIDITY,
        name="Humidity",
        native_unit_of_measurement=PERCENTAGE,
        device_class=SensorDeviceClass.HUMIDITY,
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:water-percent",
        suggested_display_precision=1,
    ),
}


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensor platform."""
    _LOGGER.debug(f"Setting up sensor platform for {entry.title}")

    try:
        coordinator: ItemsCoordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
    except KeyError as exc:
        _LOGGER.error(f"Missing key {exc} for sensors")
        return

    entities = [
        OpenSenseChannelSensor(coordinator, CHANNEL_SENSOR_DESCRIPTIONS[channel])
        for channel in coordinator.channels
        if channel in CHANNEL_SENSOR_DESCRIPTIONS
    ]

    if entities:
        async_add_entities(entities)
        _LOGGER.info(f"Added {len(entities)} sensors for {entry.title}")
    else:
        _LOGGER.info(f"Thing type {coordinator.thing_type} has no sensor channels")


class OpenSenseChannelSensor(OpenSenseBaseEntity, SensorEntity):
    """Sensor showing one channel of a thing."""

    def __init__(
        self, coordinator: ItemsCoordinator, description: SensorEntityDescription
    ) -> None:
        """Initialize channel sensor."""
        super().__init__(coordinator, description.key)
        self.entity_description = description

    @property
    def _channel_update(self) -> Optional[ChannelUpdate]:
        data = self.coordinator.data
        if data is None:
            return None
        return data.channels.get(self.key)

    @property
    def available(self) -> bool:
        """Return True if the last fetch succeeded and found this channel's item."""
        return super().available and self._channel_update is not None

    @property
    def native_value(self) -> Optional[float]:
        """Return the channel value."""
        update = self._channel_update
        return update.value if update else None

    @property
    def extra_state_attributes(self) -> Optional[Dict[str, Any]]:
        """Return the source item of this channel."""
        update = self._channel_update
        if update is None:
            return None
        return {
            "link": update.item.link,
            "item_name": update.item.name,
            "item_label": update.item.label,
            "raw_state": update.item.state,
            "tags": list(update.item.tags),
            "group_names": list(update.item.group_names),
        }
