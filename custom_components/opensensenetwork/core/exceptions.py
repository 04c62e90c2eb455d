"""Custom exceptions for OpenSense Network integration."""

from typing import Optional


class OpenSenseException(Exception):
    """Base exception for OpenSense Network integration."""

    pass


class ApiException(OpenSenseException):
    """Exception for API-related errors."""

    pass


class TransportError(ApiException):
    """Exception for network failures reaching the REST endpoint."""

    pass


class UnexpectedStatus(ApiException):
    """Exception for any response status other than 200."""

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        self.status = status
        super().__init__(message or f"Unexpected HTTP status {status}")

    @property
    def is_auth_error(self) -> bool:
        """Return True if the endpoint rejected the credential."""
        return self.status in (401, 403)


class MalformedResponse(ApiException):
    """Exception for bodies that are not a valid item array."""

    pass


class LookupUnavailable(OpenSenseException):
    """Exception for a lookup whose underlying fetch failed."""

    def __init__(self, cause: ApiException) -> None:
        self.cause = cause
        super().__init__(f"Lookup unavailable: {cause}")
