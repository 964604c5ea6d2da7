"""
Layout item definitions.

Tagged variants for the three sibling collections of a memory map:

- ``BitField``: the fields of one register (bit axis).
- ``Register`` / ``RegisterArray``: the registers of one address block (byte axis).
- ``AddressBlock``: the blocks of one memory map (byte axis). A block either
  owns a register list or carries an explicit ``size``/``range``.

Loosely-typed records are resolved into one of these variants exactly once,
by ``coerce_item``; the layout algorithms only ever see models.
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Dict, Iterable, List, Optional

from pydantic import AliasChoices, Field, model_validator

from mmlayout.utils import format_bits, parse_bit_range, parse_size, to_number

from .base import ItemKind, LayoutItem, collapse_aliases, sanitize_record

logger = logging.getLogger(__name__)

ARRAY_MARKER = "__kind"


class BitField(LayoutItem):
    """Bit field within a register, positioned by its LSB."""

    position_field: ClassVar[str] = "bit_offset"

    bit_offset: int = Field(
        default=0,
        validation_alias=AliasChoices("bit_offset", "bitOffset"),
        description="Starting bit position (LSB = 0)",
    )
    bit_width: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("bit_width", "bitWidth", "width"),
        description="Number of bits",
    )
    bits: Optional[str] = Field(default=None, description="Bit range string e.g. [7:0]")

    @model_validator(mode="before")
    @classmethod
    def resolve_record(cls, data: Any) -> Any:
        """Resolve malformed numbers and the ``bits`` shorthand.

        ``bits: "[7:4]"`` fills in ``bit_offset``/``bit_width`` when the
        numeric fields are missing. Unparseable notation is left alone.
        """
        if not isinstance(data, Mapping):
            return data
        data = sanitize_record(
            data,
            numeric_keys=("bit_width", "bitWidth", "width"),
            offset_keys=("bit_offset", "bitOffset"),
        )
        collapse_aliases(data, ("bit_offset", "bitOffset"))
        collapse_aliases(data, ("bit_width", "bitWidth", "width"))

        if data.get("bits") is not None and not isinstance(data["bits"], str):
            data["bits"] = str(data["bits"])

        has_offset = "bit_offset" in data or "bitOffset" in data
        has_width = "bit_width" in data or "bitWidth" in data or "width" in data
        bits_val = data.get("bits")
        if bits_val and not (has_offset and has_width):
            try:
                offset, width = parse_bit_range(str(bits_val))
            except ValueError:
                logger.debug("Ignoring malformed bits notation %r", bits_val)
            else:
                if not has_offset:
                    data["bit_offset"] = offset
                if not has_width:
                    data["bit_width"] = width
        return data

    @property
    def width(self) -> int:
        """Resolved width in bits (1 when undeclared)."""
        return self.bit_width if self.bit_width is not None else 1

    @property
    def msb(self) -> int:
        return self.bit_offset + self.width - 1

    @property
    def bit_range_str(self) -> str:
        """Get bit range as string (e.g. [7:0])."""
        return format_bits(self.msb, self.bit_offset)

    def relocated(self, start: int) -> "BitField":
        return self.with_range(start, self.width)

    def with_range(self, lsb: int, width: int) -> "BitField":
        """Return a copy covering ``width`` bits from ``lsb``.

        ``bits`` and a ``bit_range`` list are rewritten when present so the
        record stays consistent.
        """
        msb = lsb + width - 1
        update: Dict[str, Any] = {"bit_offset": lsb}
        if width != self.width:
            update["bit_width"] = width
        if self.bits is not None:
            update["bits"] = format_bits(msb, lsb)
        if self.model_extra and "bit_range" in self.model_extra:
            update["bit_range"] = [msb, lsb]
        return self.model_copy(update=update)


class Register(LayoutItem):
    """Plain register within an address block."""

    position_field: ClassVar[str] = "offset"

    offset: int = Field(
        default=0,
        validation_alias=AliasChoices("offset", "address_offset", "addressOffset"),
        description="Byte offset from the address block base",
    )
    size: Optional[int] = Field(default=None, description="Register width in bits")

    @model_validator(mode="before")
    @classmethod
    def resolve_record(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = sanitize_record(
            data,
            numeric_keys=("size", "count", "stride"),
            offset_keys=("offset", "address_offset", "addressOffset"),
        )
        return collapse_aliases(data, ("offset", "address_offset", "addressOffset"))

    @property
    def hex_address(self) -> str:
        """Get relative address as hex string."""
        return hex(self.offset)


class RegisterArray(Register):
    """Register-array node: ``count`` copies spaced ``stride`` bytes apart."""

    count: Optional[int] = Field(default=None, description="Array replication count")
    stride: Optional[int] = Field(default=None, description="Array replication stride")


class AddressBlock(LayoutItem):
    """Contiguous address block within a memory map."""

    position_field: ClassVar[str] = "base_address"

    base_address: int = Field(
        default=0,
        validation_alias=AliasChoices("base_address", "baseAddress", "offset"),
        description="Block starting address",
    )
    size: Optional[int] = Field(default=None, description="Explicit block size in bytes")
    range: Optional[int] = Field(
        default=None, description="Block size (bytes or '4K', '1M', etc.)"
    )
    registers: List[Register] = Field(default_factory=list, description="Registers in block")

    @model_validator(mode="before")
    @classmethod
    def resolve_record(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = sanitize_record(
            data, numeric_keys=(), offset_keys=("base_address", "baseAddress", "offset")
        )
        collapse_aliases(data, ("base_address", "baseAddress", "offset"))
        for key in ("size", "range"):
            if key in data:
                value = parse_size(data[key])
                if value is None or value < 0:
                    del data[key]
                else:
                    data[key] = value

        raw_registers = data.get("registers")
        if raw_registers is None or isinstance(raw_registers, (str, bytes, Mapping)):
            data["registers"] = []
        else:
            data["registers"] = [
                coerce_register(reg)
                for reg in raw_registers
                if isinstance(reg, (Mapping, Register))
            ]
        return data

    @property
    def owns_registers(self) -> bool:
        return bool(self.registers)

    @property
    def explicit_size(self) -> Optional[int]:
        """Declared ``size``, falling back to ``range``."""
        return self.size if self.size is not None else self.range


def _is_array_record(record: Mapping) -> bool:
    if record.get(ARRAY_MARKER) == "array":
        return True
    count = to_number(record.get("count"))
    return count is not None and count > 1 and to_number(record.get("stride")) is not None


def coerce_register(record: Any) -> Register:
    """Resolve a register record into ``Register`` or ``RegisterArray``."""
    if isinstance(record, Register):
        return record
    if not isinstance(record, Mapping):
        raise TypeError(f"Register record must be a mapping, got {type(record).__name__}")
    data = {k: v for k, v in record.items() if k != ARRAY_MARKER}
    if _is_array_record(record):
        return RegisterArray.model_validate(data)
    return Register.model_validate(data)


def coerce_item(record: Any, kind: ItemKind) -> LayoutItem:
    """Resolve one record into the tagged variant for ``kind``.

    Raises:
        TypeError: If ``record`` is neither a mapping nor a layout item.
    """
    if isinstance(record, LayoutItem):
        return record
    kind = ItemKind.from_string(kind)
    if kind is ItemKind.REGISTER:
        return coerce_register(record)
    if not isinstance(record, Mapping):
        raise TypeError(f"Layout record must be a mapping, got {type(record).__name__}")
    if kind is ItemKind.FIELD:
        return BitField.model_validate(record)
    return AddressBlock.model_validate(record)


def coerce_items(records: Iterable[Any], kind: ItemKind) -> List[LayoutItem]:
    """Resolve every record of a sibling collection."""
    return [coerce_item(record, kind) for record in records]


def to_record(item: LayoutItem) -> Dict[str, Any]:
    """Dump an item back to a plain record, keeping pass-through keys."""
    record = item.model_dump(exclude_none=True)
    if isinstance(item, RegisterArray):
        record[ARRAY_MARKER] = "array"
    if isinstance(item, AddressBlock):
        if item.registers:
            record["registers"] = [to_record(reg) for reg in item.registers]
        else:
            record.pop("registers", None)
    return record


def to_records(items: Iterable[LayoutItem]) -> List[Dict[str, Any]]:
    """Dump a collection back to plain records."""
    return [to_record(item) for item in items]
