"""HTTP API client for OpenSense Network integration."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import logging

import aiohttp
from aiohttp.client import ClientTimeout

from ..const import DEFAULT_HEADERS, DEFAULT_TIMEOUT, URL_ITEMS
from ..models.item import Item
from .exceptions import ApiException, MalformedResponse, TransportError, UnexpectedStatus

_LOGGER = logging.getLogger(__name__)

# Retry configuration for transport failures
API_RETRY_BASE_DELAY = 1.0  # Start with 1 second
API_RETRY_MAX_DELAY = 10.0  # Cap at 10 seconds


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the REST endpoint."""

    base_url: str
    credential: str
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = 1
    items_path: str = URL_ITEMS

    @classmethod
    def from_login(
        cls, base_url: str, username: str, password: str, **kwargs: Any
    ) -> "ClientConfig":
        """Build a config with a Basic credential encoded from a login."""
        # BasicAuth.encode() returns "Basic <b64>", keep only the token
        encoded = aiohttp.BasicAuth(username, password).encode()
        return cls(base_url=base_url, credential=encoded.split(" ", 1)[1], **kwargs)

    @property
    def items_url(self) -> str:
        """Return the absolute URL of the items collection."""
        return f"{self.base_url.rstrip('/')}{self.items_path}"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: either the full item collection or the error."""

    items: Optional[Tuple[Item, ...]] = None
    error: Optional[ApiException] = None

    @property
    def ok(self) -> bool:
        """Return True if the fetch produced a collection."""
        return self.error is None and self.items is not None


class OpenSenseApiClient:
    """HTTP API client for the items REST endpoint."""

    __slots__ = ("_session", "_config")

    def __init__(self, session: aiohttp.ClientSession, config: ClientConfig) -> None:
        """Initialize the API client.

        Args:
            session: aiohttp client session for HTTP requests
            config: Endpoint, credential and timeout settings
        """
        self._session = session
        self._config = config

    @property
    def config(self) -> ClientConfig:
        """Return the client configuration."""
        return self._config

    def _headers(self) -> Dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        headers["Authorization"] = f"Basic {self._config.credential}"
        return headers

    async def _request_json(self, method: str, url: str) -> Any:
        """Make HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute URL

        Returns:
            Decoded JSON body

        Raises:
            TransportError: If the endpoint cannot be reached after all attempts
            UnexpectedStatus: If the response status is not 200
            MalformedResponse: If the body is not JSON
        """
        max_attempts = max(1, self._config.max_attempts)
        timeout = ClientTimeout(total=self._config.timeout)
        delay = API_RETRY_BASE_DELAY
        last_exc: Optional[Exception] = None

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("HTTP %s %s", method, url)

        for attempt in range(max_attempts):
            try:
                async with self._session.request(
                    method, url, headers=self._headers(), timeout=timeout
                ) as response:
                    if _LOGGER.isEnabledFor(logging.DEBUG):
                        _LOGGER.debug("HTTP %s response: %s", url, response.status)

                    if response.status != 200:
                        resp_text = await response.text(errors="replace")
                        _LOGGER.error(
                            f"HTTP error {url}: {response.status} {resp_text[:300]}"
                        )
                        raise UnexpectedStatus(response.status)

                    try:
                        return await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError) as json_err:
                        _LOGGER.error(f"Invalid JSON from {url}: {json_err}")
                        raise MalformedResponse(f"Invalid JSON: {json_err}") from json_err

            except ApiException:
                # Status and body errors are persistent, never retried
                raise
            except (asyncio.TimeoutError, aiohttp.ClientError) as exc:
                last_exc = exc
                error_type = type(exc).__name__
                if attempt < max_attempts - 1:
                    _LOGGER.warning(
                        f"Network error {url} (attempt {attempt + 1}/{max_attempts}): "
                        f"{error_type}: {exc}. Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, API_RETRY_MAX_DELAY)
                else:
                    _LOGGER.error(
                        f"Network error {url} after {max_attempts} attempt(s): {error_type}: {exc}"
                    )

        if isinstance(last_exc, asyncio.TimeoutError):
            raise TransportError(
                f"Request timeout after {max_attempts} attempt(s)"
            ) from last_exc
        raise TransportError(
            f"Request failed after {max_attempts} attempt(s): {last_exc}"
        ) from last_exc

    async def async_get_items(self) -> Tuple[Item, ...]:
        """Fetch and parse the item collection.

        Returns:
            Items in the order the endpoint listed them

        Raises:
            TransportError: If the endpoint cannot be reached
            UnexpectedStatus: If the response status is not 200
            MalformedResponse: If the body is not an array of valid items
        """
        body = await self._request_json("GET", self._config.items_url)
        if not isinstance(body, list):
            raise MalformedResponse(
                f"Expected a JSON array, got {type(body).__name__}"
            )

        # One bad element fails the whole collection
        items = tuple(Item.from_json(element) for element in body)
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Fetched %d items from %s", len(items), self._config.items_url)
        return items

    async def fetch_items(self) -> FetchResult:
        """Fetch the item collection without raising.

        Returns:
            FetchResult holding either every item or the error that stopped the fetch
        """
        try:
            return FetchResult(items=await self.async_get_items())
        except ApiException as exc:
            _LOGGER.warning(f"Fetching items failed ({type(exc).__name__}): {exc}")
            return FetchResult(error=exc)
