"""
Base models for layout items.

Every item the layout engine handles (bit field, register, register array,
address block) derives from ``LayoutItem``. Items are values: they are frozen,
and every layout operation hands back copies instead of mutating its input.

Architecture Decision:
    Records coming from a partially-edited document are loosely typed and
    may carry keys the engine knows nothing about (UI markers, vendor
    extensions, access modes). ``LayoutBaseModel`` uses ``extra="allow"`` so
    those keys ride along on the model and are written back unchanged by
    ``to_records``.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, Iterable

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from mmlayout.utils import to_number


class ItemKind(str, Enum):
    """Kind of sibling collection an item belongs to."""

    FIELD = "field"
    REGISTER = "register"
    BLOCK = "block"

    @classmethod
    def from_string(cls, value: Any) -> "ItemKind":
        """Parse an item kind from its value or a common alias.

        Raises:
            ValueError: If the value names no known kind.
        """
        if isinstance(value, cls):
            return value
        aliases = {
            "field": cls.FIELD,
            "fields": cls.FIELD,
            "bitfield": cls.FIELD,
            "bit_field": cls.FIELD,
            "register": cls.REGISTER,
            "registers": cls.REGISTER,
            "reg": cls.REGISTER,
            "block": cls.BLOCK,
            "blocks": cls.BLOCK,
            "address_block": cls.BLOCK,
            "addressblock": cls.BLOCK,
            "addressblocks": cls.BLOCK,
        }
        kind = aliases.get(str(value).strip().lower())
        if kind is None:
            raise ValueError(f"Unknown item kind: '{value}'")
        return kind

    @property
    def name_prefix(self) -> str:
        """Prefix used when generating names for new items."""
        return {
            ItemKind.FIELD: "field",
            ItemKind.REGISTER: "reg",
            ItemKind.BLOCK: "block",
        }[self]


class LayoutBaseModel(BaseModel):
    """Base model with shared configuration for all layout records.

    Provides camelCase aliasing, population by either alias or Python name,
    immutability, and pass-through of unknown keys.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
        "extra": "allow",
    }


class LayoutItem(LayoutBaseModel):
    """One item positioned on a one-dimensional offset axis."""

    # Name of the model field that stores the item's low bound.
    position_field: ClassVar[str]

    name: str = Field(default="", description="Item name")

    @property
    def start(self) -> int:
        """Low bound of the item on its axis."""
        return getattr(self, self.position_field)

    def relocated(self, start: int) -> "LayoutItem":
        """Return a copy of the item placed at ``start``."""
        return self.model_copy(update={self.position_field: start})


def sanitize_record(
    data: Dict[str, Any], numeric_keys: Iterable[str], offset_keys: Iterable[str] = ()
) -> Dict[str, Any]:
    """Return a copy of ``data`` with malformed numeric values resolved.

    Keys in ``numeric_keys`` holding something that is not a finite number
    are dropped so the model default applies. Keys in ``offset_keys`` fall
    back to 0 instead. ``name`` is coerced to a string.
    """
    clean = dict(data)
    for key in numeric_keys:
        if key in clean:
            value = to_number(clean[key])
            if value is None or value < 0:
                del clean[key]
            else:
                clean[key] = value
    for key in offset_keys:
        if key in clean:
            value = to_number(clean[key])
            clean[key] = value if value is not None else 0
    name = clean.get("name")
    clean["name"] = "" if name is None else str(name)
    return clean


def collapse_aliases(data: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Keep only the first of several alias keys present in ``data``.

    Records written by different tools may carry the same position twice
    (``offset`` and ``address_offset``); the extra copy would otherwise be
    passed through as a stale unknown key.
    """
    present = [key for key in keys if key in data]
    for key in present[1:]:
        del data[key]
    return data
