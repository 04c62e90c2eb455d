# /config/custom_components/opensensenetwork/const.py

import logging
from typing import Final

DOMAIN: Final = "opensensenetwork"
_LOGGER = logging.getLogger(__package__)

# --- HTTP API Constants ---
DEFAULT_BASE_URL: Final = "https://home.myopenhab.org"
URL_ITEMS: Final = "/rest/items"

DEFAULT_HEADERS: Final = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# --- Configuration Keys ---
CONF_URL: Final = "url"
CONF_USERNAME: Final = "username"
CONF_PASSWORD: Final = "password"
CONF_THING_TYPE: Final = "thing_type"
CONF_TIMEOUT: Final = "timeout"
CONF_SCAN_INTERVAL: Final = "scan_interval"
CONF_LABEL_FORMAT: Final = "{channel}_label"

# --- Polling and Timeout ---
DEFAULT_TIMEOUT: Final = 30            # seconds per request
DEFAULT_SCAN_INTERVAL: Final = 300     # 5 minutes
MIN_SCAN_INTERVAL: Final = 30

# --- Thing Types ---
THING_TYPE_WEATHER: Final = "weather"
THING_TYPE_ENVIRONMENT: Final = "environment"
THING_TYPES: Final = (THING_TYPE_WEATHER, THING_TYPE_ENVIRONMENT)

# --- Channels ---
CHANNEL_TEMPERATURE: Final = "temperature"
CHANNEL_HUMIDITY: Final = "humidity"

# Channels per thing type; environment has none yet
THING_CHANNELS: Final = {
    THING_TYPE_WEATHER: (CHANNEL_TEMPERATURE, CHANNEL_HUMIDITY),
    THING_TYPE_ENVIRONMENT: (),
}

# Measurand label used to find each channel's item unless overridden in options
DEFAULT_CHANNEL_LABELS: Final = {
    CHANNEL_TEMPERATURE: "Temperature",
    CHANNEL_HUMIDITY: "Humidity",
}

# openHAB placeholders for "no value"
UNDEFINED_STATES: Final = frozenset({"NULL", "UNDEF"})

# --- Entity Keys ---
KEY_REACHABLE: Final = "reachable"

# --- Services ---
SERVICE_LOOKUP_LINK: Final = "lookup_link"
SERVICE_LIST_LABELS: Final = "list_labels"
ATTR_LABEL: Final = "label"
