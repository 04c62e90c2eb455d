"""Data update coordinators for OpenSense Network integration."""

__all__ = [
    "ItemsCoordinator",
    "ItemsSnapshot",
]
