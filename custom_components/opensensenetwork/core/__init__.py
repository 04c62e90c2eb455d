"""Core business logic for OpenSense Network integration.

This package contains the core functionality:
- API client for fetching items over HTTP
- Label lookup over the fetched items
- Channel mapping from items to typed values
- Custom exceptions
"""

__all__ = [
    "OpenSenseApiClient",
    "ClientConfig",
    "FetchResult",
    "ItemLookup",
    "LookupResult",
    "LookupStatus",
    "ChannelUpdate",
    "OpenSenseException",
    "ApiException",
    "TransportError",
    "UnexpectedStatus",
    "MalformedResponse",
    "LookupUnavailable",
]
