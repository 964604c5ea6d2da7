"""
YAML loader for layout collections.

Reads one sibling collection (bit fields, registers or address blocks) from a
YAML document and resolves it into layout items. The document root is either
the list itself or a mapping holding it under the usual key::

    # register.yml
    name: CTRL
    fields:
      - name: enable
        bits: "[0:0]"
      - name: mode
        bitOffset: 4
        bitWidth: 2
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from mmlayout.model import ItemKind, LayoutItem, coerce_item, to_records

from .errors import ParseError

COLLECTION_KEYS: Dict[ItemKind, tuple] = {
    ItemKind.FIELD: ("fields",),
    ItemKind.REGISTER: ("registers",),
    ItemKind.BLOCK: ("addressBlocks", "address_blocks", "blocks"),
}


class YamlCollectionLoader:
    """
    Loader for one sibling collection stored in YAML.

    Handles:
    - bare list documents and mappings holding the list
    - PyYAML syntax errors, reported with line numbers
    - per-record structural errors, reported with the record index
    """

    def __init__(self, kind: Any):
        self.kind = ItemKind.from_string(kind)

    def load_file(self, file_path: Union[str, Path]) -> List[LayoutItem]:
        """
        Load a collection from a YAML file.

        Args:
            file_path: Path to the YAML file

        Returns:
            List of layout items in document order

        Raises:
            ParseError: If the file is missing or cannot be parsed
        """
        file_path = Path(file_path).resolve()
        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()
        return self.load_text(content, file_path)

    def load_text(self, content: str, file_path: Optional[Path] = None) -> List[LayoutItem]:
        """Load a collection from YAML text."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ParseError.from_yaml_error(e, file_path)
        return self._parse_collection(self._extract_records(data, file_path), file_path)

    def _extract_records(self, data: Any, file_path: Optional[Path]) -> List[Any]:
        if data is None:
            return []
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in COLLECTION_KEYS[self.kind]:
                if key in data:
                    records = data[key]
                    if records is None:
                        return []
                    if not isinstance(records, list):
                        raise ParseError(f"'{key}' must be a list", file_path)
                    return records
            expected = " or ".join(f"'{key}'" for key in COLLECTION_KEYS[self.kind])
            raise ParseError(f"Mapping root has no {expected} list", file_path)
        raise ParseError("Root element must be a list or a mapping", file_path)

    def _parse_collection(self, records: List[Any], file_path: Optional[Path]) -> List[LayoutItem]:
        items = []
        for idx, record in enumerate(records):
            if not isinstance(record, dict):
                raise ParseError(
                    f"Error parsing {self.kind.value}[{idx}]: expected a mapping, "
                    f"got {type(record).__name__}",
                    file_path,
                )
            try:
                items.append(coerce_item(record, self.kind))
            except (TypeError, ValueError, ValidationError) as e:
                raise ParseError(f"Error parsing {self.kind.value}[{idx}]: {e}", file_path)
        return items


def load_collection(file_path: Union[str, Path], kind: Any) -> List[LayoutItem]:
    """Load the collection of ``kind`` stored in ``file_path``."""
    return YamlCollectionLoader(kind).load_file(file_path)


def dump_collection(items: List[LayoutItem]) -> str:
    """Serialize a collection back to YAML, keeping record key order."""
    return yaml.safe_dump(to_records(items), sort_keys=False)
