"""
Insertion planning for sibling collections.

Realizes "insert after selection" / "insert before selection" for bit fields,
registers and address blocks as one pipeline:

1. empty collection: a single default item at offset 0
2. resolve the anchor (out-of-range anchors mean the last item)
3. place the new item right after / right before the anchor
4. bounds check (bit fields must stay inside the register)
5. overlap check; a crowding predecessor may be shrunk to make room
6. splice the new item next to the anchor
7. repack the disturbed side (suffix forward, prefix backward)
8. normalize order and locate the new item
9. re-check bounds and overlaps of the repacked result

A register array inserted before its anchor takes the anchor's offset
instead, and the anchor and everything after it shift up by the array's
footprint, gaps included.

Every rejection is reported through ``EditResult.error``; nothing raises and
the input collection is never modified.
"""

import logging
from enum import Enum
from typing import Any, Iterable, List, Optional

from mmlayout.model import (
    AddressBlock,
    BitField,
    ItemKind,
    LayoutItem,
    Register,
    RegisterArray,
    coerce_items,
)
from mmlayout.utils import format_bits, next_sequential_name

from .footprint import DEFAULT_REGISTER_BITS, footprint
from .ordering import index_of, normalize
from .overlap import Span, check_overlap, find_overlapping_pair, propose_shrink, span_of
from .repacker import repack_backward, repack_forward
from .result import EditResult

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Side of the anchor the new item goes to."""

    AFTER = "after"
    BEFORE = "before"


_REPACK_ERRORS = {
    ItemKind.FIELD: "Cannot insert: not enough space for repacking",
    ItemKind.REGISTER: "Cannot insert: not enough offset space for repacking",
    ItemKind.BLOCK: "Cannot insert: not enough address space for repacking",
}

ARRAY_PREFIX = "ARRAY_"

_NEGATIVE_START_ERRORS = {
    ItemKind.REGISTER: "Cannot insert before: offset would be negative",
    ItemKind.BLOCK: "Cannot insert before: not enough address space",
}


def default_item(kind: ItemKind, name: str, start: int = 0) -> LayoutItem:
    """Build the item a plain insert creates for ``kind``."""
    if kind is ItemKind.FIELD:
        return BitField.model_validate(
            {
                "name": name,
                "bits": format_bits(start, start),
                "bit_range": [start, start],
                "bit_offset": start,
                "bit_width": 1,
                "access": "read-write",
                "reset_value": 0,
                "description": "",
            }
        )
    if kind is ItemKind.REGISTER:
        return Register.model_validate(
            {"name": name, "offset": start, "access": "read-write", "description": ""}
        )
    return AddressBlock.model_validate(
        {
            "name": name,
            "base_address": start,
            "size": 4,
            "usage": "register",
            "description": "",
            "registers": [
                {"name": "reg0", "offset": 0, "access": "read-write", "description": ""}
            ],
        }
    )


def default_array(name: str, start: int = 0) -> RegisterArray:
    """Build the two-element register array an array insert creates."""
    return RegisterArray.model_validate(
        {
            "name": name,
            "offset": start,
            "count": 2,
            "stride": 4,
            "description": "",
            "registers": [
                {
                    "name": "reg0",
                    "offset": 0,
                    "access": "read-write",
                    "description": "",
                    "fields": [
                        {
                            "name": "data",
                            "bits": "[31:0]",
                            "access": "read-write",
                            "description": "",
                        }
                    ],
                }
            ],
        }
    )


class InsertionPlanner:
    """
    Plans insertion of new siblings into one kind of collection.

    The planner keeps no state between calls: ``kind`` and
    ``register_width`` only select the rules applied to each request.

    Args:
        kind: Kind of the sibling collection.
        register_width: Width in bits of the register owning the fields
            (only used for ``ItemKind.FIELD``).
        array: Insert register arrays instead of plain registers.

    Raises:
        ValueError: If ``array`` is set for a non-register collection.
    """

    def __init__(
        self,
        kind: Any,
        register_width: Optional[int] = DEFAULT_REGISTER_BITS,
        array: bool = False,
    ):
        self.kind = ItemKind.from_string(kind)
        self.register_width = register_width or DEFAULT_REGISTER_BITS
        if array and self.kind is not ItemKind.REGISTER:
            raise ValueError(f"Register arrays cannot be inserted into a {self.kind.value} list")
        self.array = array

    def _new_item(self, name: str, start: int) -> LayoutItem:
        if self.array:
            return default_array(name, start)
        return default_item(self.kind, name, start)

    def _next_name(self, items: List[LayoutItem]) -> str:
        names = (item.name for item in items)
        if self.array:
            return next_sequential_name(names, ARRAY_PREFIX, ignore_case=True)
        return next_sequential_name(names, self.kind.name_prefix)

    @property
    def _is_field(self) -> bool:
        return self.kind is ItemKind.FIELD

    def _describe(self, span: Span) -> str:
        return span.describe(bits=self._is_field)

    def _reject(self, items: List[LayoutItem], error: str) -> EditResult:
        logger.debug("Rejected %s insertion: %s", self.kind.value, error)
        return EditResult.rejected(items, error)

    def insert(self, direction: Any, records: Iterable[Any], anchor_index: int) -> EditResult:
        """Insert a default item next to ``records[anchor_index]``.

        Args:
            direction: ``Direction.AFTER`` / ``Direction.BEFORE`` (or their values).
            records: Sibling collection as records or layout items.
            anchor_index: Index of the selected item; out-of-range means last.

        Returns:
            EditResult with the new collection, or the unchanged one plus
            a diagnostic.
        """
        direction = Direction(direction)
        original = coerce_items(records, self.kind)
        name = self._next_name(original)

        if not original:
            return EditResult(items=[self._new_item(name, 0)], new_index=0)

        anchor_idx = anchor_index if 0 <= anchor_index < len(original) else len(original) - 1
        anchor = original[anchor_idx]
        if self.array and direction is Direction.BEFORE:
            return self._insert_array_before(original, anchor_idx, name)
        width = footprint(self._new_item(name, 0))

        if direction is Direction.AFTER:
            start = anchor.start + footprint(anchor)
        else:
            start = anchor.start - width
        candidate = Span(start, start + width - 1)

        if self._is_field:
            if candidate.lo < 0 or candidate.hi >= self.register_width:
                return self._reject(
                    original,
                    f"Cannot insert {direction.value}: would place field at "
                    f"{self._describe(candidate)}, outside register bounds",
                )
        elif candidate.lo < 0:
            return self._reject(original, _NEGATIVE_START_ERRORS[self.kind])

        working = list(original)
        if self._is_field:
            blocker = check_overlap(candidate, original, exclude=anchor)
            if blocker is not None:
                return self._reject(
                    original,
                    f"Cannot insert: bits {self._describe(candidate)} "
                    f"already occupied by {blocker.name}",
                )
        else:
            error = self._make_room(direction, working, anchor_idx, candidate)
            if error is not None:
                return self._reject(original, error)

        new_item = self._new_item(name, start)
        if direction is Direction.AFTER:
            working.insert(anchor_idx + 1, new_item)
            working = repack_forward(working, anchor_idx + 2)
        else:
            working.insert(anchor_idx, new_item)
            working = repack_backward(working, max(0, anchor_idx - 1))
        working = normalize(working)

        error = self._check_result(working)
        if error is not None:
            return self._reject(original, error)

        new_index = index_of(working, new_item)
        logger.debug(
            "Inserted %s '%s' %s index %d at %s",
            self.kind.value,
            name,
            direction.value,
            anchor_idx,
            self._describe(span_of(working[new_index])),
        )
        return EditResult(items=working, new_index=new_index)

    def _insert_array_before(
        self, original: List[LayoutItem], anchor_idx: int, name: str
    ) -> EditResult:
        """Put a new array at the anchor's offset and shift the tail up."""
        new_item = default_array(name, original[anchor_idx].start)
        shift = footprint(new_item)
        working = original[:anchor_idx] + [new_item]
        working.extend(item.relocated(item.start + shift) for item in original[anchor_idx:])
        working = normalize(working)

        error = self._check_result(working)
        if error is not None:
            return self._reject(original, error)

        new_index = index_of(working, new_item)
        logger.debug(
            "Inserted register array '%s' at %s, shifted %d item(s) by %d",
            name,
            self._describe(span_of(new_item)),
            len(original) - anchor_idx,
            shift,
        )
        return EditResult(items=working, new_index=new_index)

    def _make_room(
        self, direction: Direction, working: List[LayoutItem], anchor_idx: int, candidate: Span
    ) -> Optional[str]:
        """Resolve collisions of a register/block candidate in ``working``.

        Siblings on the side that gets repacked are moved out of the way by
        the repack. Siblings on the other side block the insertion, except the
        immediate predecessor of a before-insertion, which is shrunk when its
        size allows. ``working`` is updated in place with any resized item.
        """
        if direction is Direction.AFTER:
            fixed = working[:anchor_idx]
        else:
            fixed = working[anchor_idx + 1 :]
        blocker = check_overlap(candidate, fixed)
        if blocker is not None:
            return (
                f"Cannot insert {direction.value}: {self._describe(candidate)} "
                f"already occupied by {blocker.name}"
            )

        if direction is Direction.BEFORE and anchor_idx > 0:
            prev = working[anchor_idx - 1]
            resized = propose_shrink(prev, candidate.lo)
            if resized is None:
                return (
                    f"Cannot insert before: insufficient space, previous {self.kind.value} "
                    f"'{prev.name}' would have zero or negative size"
                )
            working[anchor_idx - 1] = resized
        return None

    def _check_result(self, items: List[LayoutItem]) -> Optional[str]:
        """Final guard on the repacked collection."""
        if self._is_field:
            min_lo = min(item.start for item in items)
            max_hi = max(span_of(item).hi for item in items)
            if min_lo < 0 or max_hi >= self.register_width:
                return _REPACK_ERRORS[self.kind]
        elif any(item.start < 0 for item in items):
            return _REPACK_ERRORS[self.kind]
        if find_overlapping_pair(items) is not None:
            return _REPACK_ERRORS[self.kind]
        return None


def insert_field_after(
    fields: Iterable[Any], selected_index: int, register_width: int = DEFAULT_REGISTER_BITS
) -> EditResult:
    """Insert a 1-bit field right above the selected field's MSB."""
    return InsertionPlanner(ItemKind.FIELD, register_width).insert(
        Direction.AFTER, fields, selected_index
    )


def insert_field_before(
    fields: Iterable[Any], selected_index: int, register_width: int = DEFAULT_REGISTER_BITS
) -> EditResult:
    """Insert a 1-bit field right below the selected field's LSB."""
    return InsertionPlanner(ItemKind.FIELD, register_width).insert(
        Direction.BEFORE, fields, selected_index
    )


def insert_register_after(registers: Iterable[Any], selected_index: int) -> EditResult:
    return InsertionPlanner(ItemKind.REGISTER).insert(Direction.AFTER, registers, selected_index)


def insert_register_before(registers: Iterable[Any], selected_index: int) -> EditResult:
    return InsertionPlanner(ItemKind.REGISTER).insert(Direction.BEFORE, registers, selected_index)


def insert_block_after(blocks: Iterable[Any], selected_index: int) -> EditResult:
    return InsertionPlanner(ItemKind.BLOCK).insert(Direction.AFTER, blocks, selected_index)


def insert_block_before(blocks: Iterable[Any], selected_index: int) -> EditResult:
    return InsertionPlanner(ItemKind.BLOCK).insert(Direction.BEFORE, blocks, selected_index)

def insert_register_array_after(registers: Iterable[Any], selected_index: int) -> EditResult:
    """Insert an ``ARRAY_<n>`` register array right after the selected register."""
    return InsertionPlanner(ItemKind.REGISTER, array=True).insert(
        Direction.AFTER, registers, selected_index
    )


def insert_register_array_before(registers: Iterable[Any], selected_index: int) -> EditResult:
    """Insert an ``ARRAY_<n>`` register array at the selected register's offset.

    The selected register and everything after it move up by the array's
    footprint.
    """
    return InsertionPlanner(ItemKind.REGISTER, array=True).insert(
        Direction.BEFORE, registers, selected_index
    )

