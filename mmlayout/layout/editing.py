"""Move, remove, add and resize operations for sibling collections."""

import logging
from enum import Enum
from typing import Any, Iterable, Optional

from mmlayout.model import ItemKind, coerce_items
from mmlayout.utils import next_sequential_name

from .footprint import DEFAULT_REGISTER_BITS
from .insertion import default_item
from .overlap import span_of
from .repacker import repack_forward
from .result import EditResult

logger = logging.getLogger(__name__)


class Edge(str, Enum):
    """Edge of a bit field moved by a keyboard resize."""

    MSB = "msb"
    LSB = "lsb"


def move_item(
    records: Iterable[Any],
    index: int,
    delta: int,
    kind: Any,
    register_width: Optional[int] = None,
) -> EditResult:
    """Swap an item with its neighbour and re-lay-out the whole collection.

    After the swap every item is packed forward from offset 0 in the new
    order, so gaps in the collection are closed.

    Args:
        records: Sibling collection, ordered by offset.
        index: Index of the item to move.
        delta: -1 to move toward lower offsets, +1 toward higher ones.
        kind: Kind of the collection.
        register_width: Register width in bits, checked for bit fields.

    Returns:
        EditResult whose ``new_index`` is the moved item's new position.
    """
    kind = ItemKind.from_string(kind)
    items = coerce_items(records, kind)

    if delta not in (-1, 1):
        return EditResult.rejected(items, f"Cannot move: step must be -1 or 1, got {delta}")
    if not 0 <= index < len(items):
        return EditResult.rejected(items, f"Cannot move: no {kind.value} at index {index}")
    target = index + delta
    if not 0 <= target < len(items):
        edge = "first" if delta < 0 else "last"
        return EditResult.rejected(
            items, f"Cannot move: '{items[index].name}' is already the {edge} {kind.value}"
        )

    result = list(items)
    result[index], result[target] = result[target], result[index]
    result = repack_forward(result, 0)

    if kind is ItemKind.FIELD:
        width = register_width or DEFAULT_REGISTER_BITS
        if max(span_of(item).hi for item in result) >= width:
            return EditResult.rejected(items, "Cannot move: not enough space in register")

    logger.debug("Moved %s '%s' by %d", kind.value, items[index].name, delta)
    return EditResult(items=result, new_index=target)


def remove_item(records: Iterable[Any], index: int, kind: Any) -> EditResult:
    """Remove one item.

    ``new_index`` selects the previous item, or the new first item when the
    first one was removed; -1 once the collection is empty.
    """
    kind = ItemKind.from_string(kind)
    items = coerce_items(records, kind)
    if not 0 <= index < len(items):
        return EditResult.rejected(items, f"Cannot remove: no {kind.value} at index {index}")

    result = items[:index] + items[index + 1 :]
    if index > 0:
        new_index = index - 1
    else:
        new_index = 0 if result else -1
    return EditResult(items=result, new_index=new_index)


def first_free_bit(
    fields: Iterable[Any], register_width: int = DEFAULT_REGISTER_BITS
) -> Optional[int]:
    """Lowest bit not covered by any field, or ``None`` if the register is full."""
    used = set()
    for field in coerce_items(fields, ItemKind.FIELD):
        span = span_of(field)
        used.update(range(max(0, span.lo), span.hi + 1))

    for bit in range(register_width):
        if bit not in used:
            return bit
    return None


def add_field(
    fields: Iterable[Any],
    after_index: int = -1,
    register_width: int = DEFAULT_REGISTER_BITS,
    name: Optional[str] = None,
) -> EditResult:
    """Add a 1-bit field on the lowest free bit of the register.

    The new field is placed in the list right after ``after_index`` (clamped
    to the list), independent of where its bit lands.

    Args:
        fields: Fields of one register.
        after_index: Index of the selected field; -1 adds at the front.
        register_width: Register width in bits.
        name: Field name; defaults to the next free ``field<n>``.
    """
    items = coerce_items(fields, ItemKind.FIELD)
    lsb = first_free_bit(items, register_width)
    if lsb is None:
        return EditResult.rejected(items, "Cannot add field: register is full")

    if name is None:
        name = next_sequential_name((item.name for item in items), ItemKind.FIELD.name_prefix)
    new_field = default_item(ItemKind.FIELD, name, lsb)
    insert_at = max(0, min(len(items), after_index + 1))
    result = items[:insert_at] + [new_field] + items[insert_at:]

    logger.debug("Added field '%s' at bit %d", name, lsb)
    return EditResult(items=result, new_index=insert_at)


def resize_field(
    fields: Iterable[Any],
    index: int,
    edge: Any,
    register_width: int = DEFAULT_REGISTER_BITS,
) -> EditResult:
    """Grow or shrink a field by one bit at ``edge``.

    The edge grows toward the nearest neighbouring field (or the register
    boundary). Once it touches that limit it shrinks instead, never below one
    bit. Other fields are left alone.

    Raises:
        ValueError: If ``edge`` is not an ``Edge`` value.
    """
    edge = Edge(edge)
    items = coerce_items(fields, ItemKind.FIELD)
    if not 0 <= index < len(items):
        return EditResult.rejected(items, f"Cannot resize: no field at index {index}")

    field = items[index]
    lo, hi = span_of(field)
    others = [span_of(item) for i, item in enumerate(items) if i != index]

    new_lo, new_hi = lo, hi
    if edge is Edge.MSB:
        limit = min([register_width - 1] + [s.lo - 1 for s in others if s.lo > hi])
        if hi < limit:
            new_hi = hi + 1
        elif hi > lo:
            new_hi = hi - 1
    else:
        limit = max([0] + [s.hi + 1 for s in others if s.hi < lo])
        if lo > limit:
            new_lo = lo - 1
        elif hi > lo:
            new_lo = lo + 1

    if (new_lo, new_hi) == (lo, hi):
        return EditResult.rejected(
            items, f"Cannot resize: '{field.name}' has no room to grow or shrink"
        )

    result = list(items)
    result[index] = field.with_range(new_lo, new_hi - new_lo + 1)
    logger.debug(
        "Resized field '%s' to [%d:%d] at %s", field.name, new_hi, new_lo, edge.value
    )
    return EditResult(items=result, new_index=index)
