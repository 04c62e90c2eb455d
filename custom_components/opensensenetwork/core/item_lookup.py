"""Label lookup over the item collection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional
import logging

from ..models.item import Item
from .api_client import OpenSenseApiClient
from .exceptions import ApiException, LookupUnavailable

_LOGGER = logging.getLogger(__name__)


class LookupStatus(str, Enum):
    """Outcome kinds of a label lookup."""

    MATCH = "match"
    NO_MATCH = "no_match"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class LookupResult:
    """Result of resolving a label to an item."""

    status: LookupStatus
    item: Optional[Item] = None
    error: Optional[ApiException] = None

    @property
    def link(self) -> Optional[str]:
        """Return the matched item's link, which may be empty, or None."""
        return self.item.link if self.item is not None else None

    def raise_for_unavailable(self) -> None:
        """Raise LookupUnavailable if the fetch behind this result failed."""
        if self.status is LookupStatus.UNAVAILABLE and self.error is not None:
            raise LookupUnavailable(self.error)


def match_label(items: Iterable[Item], label: str) -> Optional[Item]:
    """Return the first item whose label equals `label` ignoring case."""
    wanted = label.casefold()
    for item in items:
        if item.label.casefold() == wanted:
            return item
    return None


class ItemLookup:
    """Resolve human labels to items with a fresh fetch per call."""

    __slots__ = ("_client",)

    def __init__(self, client: OpenSenseApiClient) -> None:
        self._client = client

    async def lookup_link(self, label: str) -> LookupResult:
        """Fetch the collection and resolve `label` to the first matching item.

        The link is read from the result's `link` property; a `MATCH` whose
        link is an empty string is still a match.
        """
        result = await self._client.fetch_items()
        if not result.ok:
            _LOGGER.warning(f"Lookup of '{label}' unavailable: {result.error}")
            return LookupResult(LookupStatus.UNAVAILABLE, error=result.error)

        item = match_label(result.items or (), label)
        if item is None:
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("No item labelled %r among %d items", label, len(result.items or ()))
            return LookupResult(LookupStatus.NO_MATCH)
        return LookupResult(LookupStatus.MATCH, item=item)

    async def list_labels(self) -> Optional[List[str]]:
        """Return every item label in fetch order, or None if the fetch failed."""
        result = await self._client.fetch_items()
        if not result.ok:
            _LOGGER.warning(f"Listing labels failed: {result.error}")
            return None
        return [item.label for item in result.items or ()]
