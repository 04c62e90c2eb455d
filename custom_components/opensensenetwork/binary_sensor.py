"""Binary sensor platform for OpenSense Network integration."""

from .entities.binary_sensor import async_setup_entry

__all__ = ["async_setup_entry"]
