"""Order normalization for sibling collections."""

from typing import Iterable, List

from mmlayout.model import LayoutItem


def normalize(items: Iterable[LayoutItem]) -> List[LayoutItem]:
    """Sort a collection ascending by low bound.

    ``sorted`` is stable, so items that transiently share an offset keep
    their relative input order.
    """
    return sorted(items, key=lambda item: item.start or 0)


def index_of(items: Iterable[LayoutItem], target: LayoutItem) -> int:
    """Locate ``target`` by identity, falling back to its name. -1 if absent."""
    items = list(items)
    for idx, item in enumerate(items):
        if item is target:
            return idx
    for idx, item in enumerate(items):
        if item.name == target.name:
            return idx
    return -1
