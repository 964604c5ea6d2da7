"""
Pydantic models for the items laid out by the mmlayout engine.

Records from the editor document are resolved into these models once, at the
boundary, by ``coerce_item``/``coerce_items``; ``to_records`` converts back.
"""

from .base import ItemKind, LayoutBaseModel, LayoutItem
from .items import (
    AddressBlock,
    BitField,
    Register,
    RegisterArray,
    coerce_item,
    coerce_items,
    coerce_register,
    to_record,
    to_records,
)

__all__ = [
    # Base
    "ItemKind",
    "LayoutBaseModel",
    "LayoutItem",
    # Items
    "BitField",
    "Register",
    "RegisterArray",
    "AddressBlock",
    # Boundary helpers
    "coerce_item",
    "coerce_items",
    "coerce_register",
    "to_record",
    "to_records",
]
