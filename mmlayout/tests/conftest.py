import os
import sys

import pytest

# Add the project root to sys.path so that mmlayout is importable
# This is needed because of the flat layout structure
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


@pytest.fixture
def make_field():
    """Build a bit-field record from its LSB and width."""

    def _make(name, lsb, width=1, **extra):
        msb = lsb + width - 1
        return {
            "name": name,
            "bits": f"[{msb}:{lsb}]",
            "bit_offset": lsb,
            "bit_width": width,
            "access": "read-write",
            "reset_value": 0,
            "description": "",
            **extra,
        }

    return _make


@pytest.fixture
def make_register():
    def _make(name, offset, **extra):
        return {"name": name, "offset": offset, "access": "read-write", "description": "", **extra}

    return _make


@pytest.fixture
def make_block():
    def _make(name, base, size=4, **extra):
        return {"name": name, "base_address": base, "size": size, "usage": "register", **extra}

    return _make
