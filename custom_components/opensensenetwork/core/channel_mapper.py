"""Map fetched items onto thing channels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging
import re

from homeassistant.const import PERCENTAGE, UnitOfTemperature

from ..const import (
    CHANNEL_HUMIDITY,
    CHANNEL_TEMPERATURE,
    THING_CHANNELS,
    UNDEFINED_STATES,
)
from ..models.item import Item

_LOGGER = logging.getLogger(__name__)

CHANNEL_UNITS = {
    CHANNEL_TEMPERATURE: UnitOfTemperature.CELSIUS,
    CHANNEL_HUMIDITY: PERCENTAGE,
}

# Leading number of states such as "21.5", "21.5 °C" or "-3e1"
_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


@dataclass(frozen=True)
class ChannelUpdate:
    """Typed value for one channel, taken from one item."""

    channel: str
    value: Optional[float]
    unit: Optional[str]
    item: Item


def parse_numeric_state(state: str) -> Optional[float]:
    """Return the numeric part of an item state, or None if it has none."""
    if state.strip().upper() in UNDEFINED_STATES:
        return None
    match = _NUMBER_RE.match(state)
    if not match:
        return None
    return float(match.group(1))


def channel_applies(thing_type: str, channel: str) -> bool:
    """Return True if `thing_type` exposes `channel`."""
    return channel in THING_CHANNELS.get(thing_type, ())


def map_item_to_channel(
    item: Item, thing_type: str, channel: str
) -> Optional[ChannelUpdate]:
    """Produce the channel update for `item`, or None if the channel does not apply."""
    if not channel_applies(thing_type, channel):
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Channel %s not applicable to thing type %s", channel, thing_type)
        return None

    value = parse_numeric_state(item.state)
    if value is None and item.state.strip().upper() not in UNDEFINED_STATES:
        _LOGGER.warning(
            f"Item '{item.name}' state '{item.state}' is not numeric for channel {channel}"
        )
    return ChannelUpdate(
        channel=channel,
        value=value,
        unit=CHANNEL_UNITS.get(channel),
        item=item,
    )
