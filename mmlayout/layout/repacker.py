"""
Repacking algorithms for sibling collections.

``repack_forward`` re-lays-out a suffix of a collection with offsets
increasing from an anchor; ``repack_backward`` re-lays-out a prefix with
offsets decreasing toward zero. Both return a new list and never touch the
input collection; untouched items are shared, relocated items are copies.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Union

from mmlayout.model import ItemKind, LayoutItem, coerce_items

from .footprint import footprint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Keep:
    """Leave the item at the offset it already has."""


@dataclass(frozen=True)
class SetTo:
    """Place the item at ``value`` (before clamping to zero)."""

    value: int


Placement = Union[Keep, SetTo]


def repack_forward(items: Sequence[LayoutItem], from_index: int) -> List[LayoutItem]:
    """Pack ``items[from_index:]`` adjacently, offsets increasing.

    The first repacked item starts right after ``items[from_index - 1]``
    (or at 0 when ``from_index`` is 0). Gaps are discarded. An out-of-range
    ``from_index`` returns an unchanged copy.

    Args:
        items: Sibling collection, already resolved into layout items.
        from_index: First index to repack (inclusive).

    Returns:
        New list with the suffix relocated.
    """
    result = list(items)
    if not 0 <= from_index < len(result):
        return result

    if from_index == 0:
        cursor = 0
    else:
        prev = result[from_index - 1]
        cursor = prev.start + footprint(prev)

    logger.debug("Repacking forward from index %d at offset %d", from_index, cursor)
    for i in range(from_index, len(result)):
        result[i] = result[i].relocated(cursor)
        cursor += footprint(result[i])
    return result


def repack_backward(items: Sequence[LayoutItem], from_index: int) -> List[LayoutItem]:
    """Pack ``items[:from_index + 1]`` adjacently, offsets decreasing.

    Each item ends right where its successor begins. When ``from_index`` is
    the last index the anchor item keeps its current offset. Stored offsets
    are clamped at zero, but the unclamped value is what the predecessor is
    placed against, so a clamped run keeps its relative spacing arithmetic.
    """
    result = list(items)
    if not 0 <= from_index < len(result):
        return result

    placement: Placement
    if from_index < len(result) - 1:
        placement = SetTo(result[from_index + 1].start - footprint(result[from_index]))
    else:
        placement = Keep()

    logger.debug("Repacking backward from index %d (%s)", from_index, placement)
    for i in range(from_index, -1, -1):
        item = result[i]
        resolved = item.start if isinstance(placement, Keep) else placement.value
        result[i] = item.relocated(max(0, resolved))
        placement = SetTo(resolved - footprint(result[max(0, i - 1)]))
    return result


def _repack_records(
    records: Iterable[Any], from_index: int, kind: ItemKind, forward: bool
) -> List[LayoutItem]:
    items = coerce_items(records, kind)
    if forward:
        return repack_forward(items, from_index)
    return repack_backward(items, from_index)


def repack_fields_forward(fields: Iterable[Any], from_index: int) -> List[LayoutItem]:
    """Repack bit fields toward the MSB starting at ``from_index``."""
    return _repack_records(fields, from_index, ItemKind.FIELD, forward=True)


def repack_fields_backward(fields: Iterable[Any], from_index: int) -> List[LayoutItem]:
    """Repack bit fields toward the LSB going back from ``from_index``."""
    return _repack_records(fields, from_index, ItemKind.FIELD, forward=False)


def repack_registers_forward(registers: Iterable[Any], from_index: int) -> List[LayoutItem]:
    return _repack_records(registers, from_index, ItemKind.REGISTER, forward=True)


def repack_registers_backward(registers: Iterable[Any], from_index: int) -> List[LayoutItem]:
    return _repack_records(registers, from_index, ItemKind.REGISTER, forward=False)


def repack_blocks_forward(blocks: Iterable[Any], from_index: int) -> List[LayoutItem]:
    return _repack_records(blocks, from_index, ItemKind.BLOCK, forward=True)


def repack_blocks_backward(blocks: Iterable[Any], from_index: int) -> List[LayoutItem]:
    return _repack_records(blocks, from_index, ItemKind.BLOCK, forward=False)
