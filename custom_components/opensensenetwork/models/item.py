"""Item model for OpenSense Network integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.exceptions import MalformedResponse

REQUIRED_STRING_FIELDS = ("link", "state", "type", "name", "label")


@dataclass(frozen=True)
class Item:
    """Snapshot of one item as reported by the REST endpoint at fetch time."""

    link: str
    state: str
    editable: bool
    type: str
    name: str
    label: str
    state_description: Optional[Mapping[str, Any]] = field(default=None, hash=False)
    category: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    group_names: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, data: Any) -> "Item":
        """Build an item from one element of the items array.

        Args:
            data: Decoded JSON object

        Returns:
            Parsed item

        Raises:
            MalformedResponse: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise MalformedResponse(f"Item must be an object, got {type(data).__name__}")

        for key in REQUIRED_STRING_FIELDS:
            if key not in data:
                raise MalformedResponse(f"Item missing required field '{key}'")
            if not isinstance(data[key], str):
                raise MalformedResponse(f"Item field '{key}' must be a string")

        if "editable" not in data:
            raise MalformedResponse("Item missing required field 'editable'")
        if not isinstance(data["editable"], bool):
            raise MalformedResponse("Item field 'editable' must be a boolean")

        state_description = data.get("stateDescription")
        if state_description is not None:
            if not isinstance(state_description, dict):
                raise MalformedResponse("Item field 'stateDescription' must be an object")
            state_description = MappingProxyType(dict(state_description))

        category = data.get("category")
        if category is not None and not isinstance(category, str):
            raise MalformedResponse("Item field 'category' must be a string")

        return cls(
            link=data["link"],
            state=data["state"],
            editable=data["editable"],
            type=data["type"],
            name=data["name"],
            label=data["label"],
            state_description=state_description,
            category=category,
            tags=_string_tuple(data, "tags"),
            group_names=_string_tuple(data, "groupNames"),
        )

    def as_dict(self) -> Dict[str, Any]:
        """Return the item in its wire shape."""
        out: Dict[str, Any] = {
            "link": self.link,
            "state": self.state,
            "editable": self.editable,
            "type": self.type,
            "name": self.name,
            "label": self.label,
            "tags": list(self.tags),
            "groupNames": list(self.group_names),
        }
        if self.state_description is not None:
            out["stateDescription"] = dict(self.state_description)
        if self.category is not None:
            out["category"] = self.category
        return out


def _string_tuple(data: Dict[str, Any], key: str) -> Tuple[str, ...]:
    values = data.get(key)
    if values is None:
        return ()
    if not isinstance(values, list):
        raise MalformedResponse(f"Item field '{key}' must be an array")
    if not all(isinstance(v, str) for v in values):
        raise MalformedResponse(f"Item field '{key}' must contain only strings")
    return tuple(values)
