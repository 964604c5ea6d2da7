"""
Overlap detection between sibling items.

Ranges are inclusive on both ends: a bit field ``[7:4]`` is ``Span(4, 7)`` and
a 0x100-byte block at 0x1000 is ``Span(0x1000, 0x10FF)``. Items with a zero
footprint occupy nothing and never collide.
"""

from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

from mmlayout.model import AddressBlock, LayoutItem, Register, RegisterArray

from .footprint import footprint


class Span(NamedTuple):
    """Inclusive range ``[lo, hi]`` on an offset axis."""

    lo: int
    hi: int

    @property
    def empty(self) -> bool:
        return self.hi < self.lo

    def describe(self, bits: bool = True) -> str:
        """Render as ``[msb:lsb]`` for bits or ``[0xlo:0xhi]`` for bytes."""
        if bits:
            return f"[{self.hi}:{self.lo}]"
        return f"[{hex(self.lo)}:{hex(self.hi)}]"


def span_of(item: LayoutItem) -> Span:
    """Inclusive span covered by ``item``."""
    return Span(item.start, item.start + footprint(item) - 1)


def spans_overlap(a: Span, b: Span) -> bool:
    """Check if two inclusive spans share at least one position."""
    if a.empty or b.empty:
        return False
    return a.lo <= b.hi and a.hi >= b.lo


def check_overlap(
    candidate: Span, items: Iterable[LayoutItem], exclude: Optional[LayoutItem] = None
) -> Optional[LayoutItem]:
    """Return the first item of ``items`` colliding with ``candidate``.

    ``exclude`` is compared by identity, so the anchor of an insertion can be
    skipped even when another sibling has equal values.
    """
    for item in items:
        if item is exclude:
            continue
        if spans_overlap(candidate, span_of(item)):
            return item
    return None


def find_overlapping_pair(
    items: Sequence[LayoutItem],
) -> Optional[Tuple[LayoutItem, LayoutItem]]:
    """Return the first pair of items whose spans overlap, if any."""
    occupied = [(span_of(item), item) for item in items]
    occupied = sorted((entry for entry in occupied if not entry[0].empty), key=lambda e: e[0].lo)
    widest: Optional[Tuple[Span, LayoutItem]] = None
    for span, item in occupied:
        if widest is not None and span.lo <= widest[0].hi:
            return widest[1], item
        if widest is None or span.hi > widest[0].hi:
            widest = (span, item)
    return None


def propose_shrink(item: LayoutItem, new_start: int) -> Optional[LayoutItem]:
    """Shrink ``item`` so that it ends right before ``new_start``.

    Only items sized by an explicit field can shrink: a block without
    registers (``size``) and a plain register (``size`` in bits). Returns the
    item unchanged when it already ends before ``new_start``, and ``None``
    when the required size would be zero or negative or the item cannot
    be resized.
    """
    if span_of(item).hi < new_start:
        return item

    required = new_start - item.start
    if required <= 0:
        return None
    if isinstance(item, AddressBlock) and not item.registers:
        return item.model_copy(update={"size": required})
    if isinstance(item, Register) and not isinstance(item, RegisterArray):
        return item.model_copy(update={"size": required * 8})
    return None
