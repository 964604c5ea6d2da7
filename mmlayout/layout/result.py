"""Result type shared by the edit operations of the layout engine."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from mmlayout.model import LayoutItem, to_records


@dataclass
class EditResult:
    """Outcome of an insert/move/remove request.

    On success ``items`` is the new collection and ``new_index`` the position
    of the inserted or moved item. On failure ``items`` is the collection as
    it was before the request, ``new_index`` is -1 and ``error`` holds a
    short message meant for the end user.
    """

    items: List[LayoutItem]
    new_index: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def rejected(cls, items: List[LayoutItem], error: str) -> "EditResult":
        return cls(items=list(items), new_index=-1, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form with items dumped back to plain records."""
        data: Dict[str, Any] = {
            "success": self.ok,
            "items": to_records(self.items),
            "newIndex": self.new_index,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
