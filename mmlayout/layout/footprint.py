"""Footprint of a layout item in its collection's unit (bits or bytes)."""

from mmlayout.model import AddressBlock, BitField, LayoutItem, Register, RegisterArray

DEFAULT_REGISTER_BITS = 32
DEFAULT_BLOCK_SIZE = 4
DEFAULT_ARRAY_STRIDE = 4
PLAIN_REGISTER_BYTES = 4


def array_footprint(reg: RegisterArray) -> int:
    """Bytes covered by a register array: ``count * stride``."""
    count = reg.count if reg.count is not None else 1
    stride = reg.stride if reg.stride is not None else DEFAULT_ARRAY_STRIDE
    return count * stride


def register_footprint(reg: Register) -> int:
    """Bytes covered by a register or register-array node.

    An array with ``count > 1`` and a ``stride`` covers ``count * stride``;
    anything else covers its declared width in bytes, at least one.
    """
    if isinstance(reg, RegisterArray):
        if reg.count is not None and reg.count > 1 and reg.stride is not None:
            return reg.count * reg.stride
    bits = reg.size if reg.size is not None else DEFAULT_REGISTER_BITS
    return max(1, bits // 8)


def block_footprint(block: AddressBlock) -> int:
    """Bytes covered by an address block.

    A block that owns registers covers the sum of their footprints (plain
    register: 4 bytes, array member: ``count * stride``). Otherwise its
    explicit ``size``/``range`` applies, defaulting to 4.
    """
    if block.registers:
        total = 0
        for reg in block.registers:
            if isinstance(reg, RegisterArray):
                total += array_footprint(reg)
            else:
                total += PLAIN_REGISTER_BYTES
        return total
    size = block.explicit_size
    return size if size is not None else DEFAULT_BLOCK_SIZE


def footprint(item: LayoutItem) -> int:
    """Size of ``item`` on its axis. Never raises for malformed size data.

    Raises:
        TypeError: If ``item`` is not a known layout item.
    """
    if isinstance(item, BitField):
        return item.width
    if isinstance(item, Register):
        return register_footprint(item)
    if isinstance(item, AddressBlock):
        return block_footprint(item)
    raise TypeError(f"No footprint rule for {type(item).__name__}")


def end_of(item: LayoutItem) -> int:
    """Inclusive high bound of ``item``."""
    return item.start + footprint(item) - 1
