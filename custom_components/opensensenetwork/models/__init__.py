"""Data models for OpenSense Network integration.

This package contains data models and validation.
"""

__all__ = [
    "Item",
]
