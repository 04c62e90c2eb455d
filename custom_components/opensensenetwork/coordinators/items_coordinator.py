"""Items coordinator for OpenSense Network integration."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from ..const import (
    CONF_LABEL_FORMAT,
    CONF_SCAN_INTERVAL,
    CONF_THING_TYPE,
    DEFAULT_CHANNEL_LABELS,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    THING_CHANNELS,
    THING_TYPE_WEATHER,
)
from ..core.api_client import OpenSenseApiClient
from ..core.channel_mapper import ChannelUpdate, map_item_to_channel
from ..core.exceptions import UnexpectedStatus
from ..core.item_lookup import match_label
from ..models.item import Item

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemsSnapshot:
    """Items from one fetch and the channel values derived from them."""

    items: Tuple[Item, ...] = ()
    channels: Dict[str, Optional[ChannelUpdate]] = field(default_factory=dict)


def channel_label(entry: ConfigEntry, channel: str) -> str:
    """Return the measurand label configured for `channel`."""
    key = CONF_LABEL_FORMAT.format(channel=channel)
    return entry.options.get(key) or DEFAULT_CHANNEL_LABELS.get(channel, channel)


class ItemsCoordinator(DataUpdateCoordinator[ItemsSnapshot]):
    """Coordinator to fetch the item collection and resolve channel values."""

    def __init__(
        self, hass: HomeAssistant, entry: ConfigEntry, api_client: OpenSenseApiClient
    ) -> None:
        """Initialize the coordinator.

        Args:
            hass: Home Assistant instance
            entry: Config entry holding thing type and channel labels
            api_client: API client for HTTP requests
        """
        self.entry = entry
        self.api_client = api_client
        self.thing_type: str = entry.data.get(CONF_THING_TYPE, THING_TYPE_WEATHER)
        update_interval = datetime.timedelta(
            seconds=entry.options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
        )

        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=f"{DOMAIN}_items_{entry.entry_id}",
            update_interval=update_interval,
        )

        _LOGGER.info(
            f"Initialized items coordinator for {entry.title} ({self.thing_type}) "
            f"with interval: {update_interval}"
        )

    @property
    def channels(self) -> Tuple[str, ...]:
        """Return the channels of this coordinator's thing type."""
        return tuple(THING_CHANNELS.get(self.thing_type, ()))

    async def _async_update_data(self) -> ItemsSnapshot:
        """Fetch items and map them onto channels.

        Raises:
            ConfigEntryAuthFailed: If the endpoint rejects the credential
            UpdateFailed: If the fetch fails for any other reason
        """
        result = await self.api_client.fetch_items()

        if not result.ok:
            err = result.error
            if isinstance(err, UnexpectedStatus) and err.is_auth_error:
                _LOGGER.error(f"Authentication error fetching items: {err}. Reconfiguration required")
                raise ConfigEntryAuthFailed(f"Authentication error: {err}") from err
            raise UpdateFailed(f"Error fetching items: {err}") from err

        items = result.items or ()
        channels: Dict[str, Optional[ChannelUpdate]] = {}
        for channel in self.channels:
            label = channel_label(self.entry, channel)
            item = match_label(items, label)
            if item is None:
                _LOGGER.warning(f"No item labelled '{label}' for channel {channel}")
                channels[channel] = None
                continue
            channels[channel] = map_item_to_channel(item, self.thing_type, channel)

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Resolved channels: %s", channels)
        return ItemsSnapshot(items=items, channels=channels)
