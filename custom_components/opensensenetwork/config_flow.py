"""Configuration flow for OpenSense Network integration."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.core import callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    DOMAIN,
    CONF_URL,
    CONF_USERNAME,
    CONF_PASSWORD,
    CONF_THING_TYPE,
    CONF_TIMEOUT,
    CONF_SCAN_INTERVAL,
    CONF_LABEL_FORMAT,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_CHANNEL_LABELS,
    MIN_SCAN_INTERVAL,
    THING_CHANNELS,
    THING_TYPES,
    THING_TYPE_WEATHER,
)
from .core.api_client import ClientConfig, OpenSenseApiClient
from .core.exceptions import MalformedResponse, TransportError, UnexpectedStatus

_LOGGER = logging.getLogger(__name__)


def _mask(value: str) -> str:
    return (value[:2] + "...") if len(value) > 2 else "***"


class OpenSenseConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Config flow for OpenSense Network (Basic auth against the items endpoint)."""

    VERSION = 1

    async def _async_validate(self, data: Dict[str, Any]) -> Optional[str]:
        """Fetch the items once with `data` and return an error key, or None.

        Returns:
            Form error key, or None if the endpoint answered with a valid item array
        """
        config = ClientConfig.from_login(
            data[CONF_URL],
            data[CONF_USERNAME],
            data[CONF_PASSWORD],
            timeout=float(data.get(CONF_TIMEOUT, DEFAULT_TIMEOUT)),
        )
        api = OpenSenseApiClient(async_get_clientsession(self.hass), config)
        _LOGGER.info("Validating %s as %s", config.items_url, _mask(data[CONF_USERNAME]))

        result = await api.fetch_items()
        if result.ok:
            _LOGGER.info(f"Endpoint {config.items_url} returned {len(result.items or ())} items")
            return None

        err = result.error
        if isinstance(err, UnexpectedStatus):
            if err.is_auth_error:
                _LOGGER.warning(f"Auth failed for {config.items_url}: {err}")
                return "invalid_auth"
            _LOGGER.error(f"Unexpected status from {config.items_url}: {err}")
            return "cannot_connect"
        if isinstance(err, TransportError):
            _LOGGER.error(f"Cannot connect to {config.items_url}: {err}")
            return "cannot_connect"
        if isinstance(err, MalformedResponse):
            _LOGGER.error(f"Invalid response from {config.items_url}: {err}")
            return "invalid_response"
        _LOGGER.error(f"Unexpected error validating {config.items_url}: {err}")
        return "unknown"

    async def async_step_user(self, user_input: Optional[Dict[str, Any]] = None) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: Dict[str, str] = {}

        if user_input is not None:
            user_input = dict(user_input)
            user_input[CONF_URL] = user_input[CONF_URL].strip().rstrip("/")

            await self.async_set_unique_id(
                f"{user_input[CONF_URL]}_{user_input[CONF_THING_TYPE]}".lower()
            )
            self._abort_if_unique_id_configured()

            try:
                error = await self._async_validate(user_input)
            except Exception:
                _LOGGER.exception("Unexpected error validating OpenSense Network endpoint")
                error = "unknown"

            if error is None:
                host = urlparse(user_input[CONF_URL]).netloc or user_input[CONF_URL]
                title = f"{user_input[CONF_THING_TYPE].capitalize()} ({host})"
                _LOGGER.info(f"Creating new entry: {title}")
                return self.async_create_entry(title=title, data=user_input)
            errors["base"] = error

        defaults = user_input or {}
        schema = vol.Schema(
            {
                vol.Required(CONF_URL, default=defaults.get(CONF_URL, DEFAULT_BASE_URL)): str,
                vol.Required(CONF_USERNAME, default=defaults.get(CONF_USERNAME, "")): str,
                vol.Required(CONF_PASSWORD): str,
                vol.Required(
                    CONF_THING_TYPE, default=defaults.get(CONF_THING_TYPE, THING_TYPE_WEATHER)
                ): vol.In(THING_TYPES),
                vol.Optional(
                    CONF_TIMEOUT, default=defaults.get(CONF_TIMEOUT, DEFAULT_TIMEOUT)
                ): vol.All(vol.Coerce(int), vol.Range(min=1, max=300)),
            }
        )
        return self.async_show_form(step_id="user", data_schema=schema, errors=errors)

    async def async_step_reauth(self, entry_data: Mapping[str, Any]) -> ConfigFlowResult:
        """Handle reauth flow."""
        _LOGGER.info("Reauth flow started")
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: Optional[Dict[str, Any]] = None
    ) -> ConfigFlowResult:
        """Ask for a new login and validate it."""
        errors: Dict[str, str] = {}
        reauth_entry = self._get_reauth_entry()

        if user_input is not None:
            data = {**reauth_entry.data, **user_input}
            try:
                error = await self._async_validate(data)
            except Exception:
                _LOGGER.exception("Unexpected error during reauth")
                error = "unknown"

            if error is None:
                _LOGGER.info(f"Updating entry {reauth_entry.entry_id} after reauth")
                return self.async_update_reload_and_abort(reauth_entry, data_updates=user_input)
            errors["base"] = error

        schema = vol.Schema(
            {
                vol.Required(CONF_USERNAME, default=reauth_entry.data.get(CONF_USERNAME, "")): str,
                vol.Required(CONF_PASSWORD): str,
            }
        )
        return self.async_show_form(step_id="reauth_confirm", data_schema=schema, errors=errors)

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> OpenSenseOptionsFlow:
        """Return the options flow."""
        return OpenSenseOptionsFlow()


class OpenSenseOptionsFlow(config_entries.OptionsFlow):
    """Options: polling interval and the measurand label of each channel."""

    async def async_step_init(self, user_input: Optional[Dict[str, Any]] = None) -> ConfigFlowResult:
        """Manage the options."""
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options
        thing_type = self.config_entry.data.get(CONF_THING_TYPE, THING_TYPE_WEATHER)
        fields: Dict[Any, Any] = {
            vol.Optional(
                CONF_SCAN_INTERVAL,
                default=options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL),
            ): vol.All(vol.Coerce(int), vol.Range(min=MIN_SCAN_INTERVAL)),
        }
        for channel in THING_CHANNELS.get(thing_type, ()):
            key = CONF_LABEL_FORMAT.format(channel=channel)
            fields[vol.Optional(key, default=options.get(key, DEFAULT_CHANNEL_LABELS[channel]))] = str

        return self.async_show_form(step_id="init", data_schema=vol.Schema(fields))
