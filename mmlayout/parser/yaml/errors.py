"""Shared parser exceptions for YAML loading."""

from pathlib import Path
from typing import Optional

import yaml


class ParseError(Exception):
    """Error while loading a layout collection from YAML."""

    def __init__(
        self, message: str, file_path: Optional[Path] = None, line: Optional[int] = None
    ):
        self.file_path = file_path
        self.line = line
        super().__init__(self._format_message(message))

    @classmethod
    def from_yaml_error(cls, error: yaml.YAMLError, file_path: Optional[Path] = None) -> "ParseError":
        """Wrap a PyYAML error, keeping its 1-based line number when known."""
        mark = getattr(error, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        return cls(f"YAML syntax error: {error}", file_path, line)

    def _format_message(self, message: str) -> str:
        """Format error message with file and line information."""
        parts = []
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line is not None:
            parts.append(f"Line: {self.line}")
        parts.append(message)
        return " | ".join(parts)
