"""Entity implementations for OpenSense Network integration.

This package contains all entity types:
- Channel sensors
- Reachable binary sensor
- Base entity classes
"""

__all__ = [
    "OpenSenseBaseEntity",
    "OpenSenseChannelSensor",
    "OpenSenseReachableSensor",
]
