"""Shared utility helpers for mmlayout."""

import math
import re
from typing import Any, Iterable, Optional, Tuple


def parse_bit_range(bits_str: str) -> Tuple[int, int]:
    """Parse bit notation like ``[7:4]`` or ``[0]`` into ``(offset, width)``.

    Args:
        bits_str: Bit notation string.

    Returns:
        Tuple of ``(bit_offset, bit_width)``.

    Raises:
        ValueError: If notation is empty or invalid.
    """
    if not bits_str:
        raise ValueError("Empty bit range notation")

    clean = bits_str.strip().strip("[]").strip()

    match_range = re.fullmatch(r"(\d+)\s*:\s*(\d+)", clean)
    if match_range:
        msb = int(match_range.group(1))
        lsb = int(match_range.group(2))
        if msb < lsb:
            raise ValueError(f"Invalid bit range '{bits_str}': MSB must be >= LSB")
        return lsb, msb - lsb + 1

    match_single = re.fullmatch(r"(\d+)", clean)
    if match_single:
        bit = int(match_single.group(1))
        return bit, 1

    raise ValueError(f"Invalid bit range notation: '{bits_str}'")


def format_bits(msb: int, lsb: int) -> str:
    """Format an inclusive bit range as ``[msb:lsb]`` (``[n]`` for one bit)."""
    if msb == lsb:
        return f"[{msb}]"
    return f"[{msb}:{lsb}]"


def to_number(value: Any) -> Optional[int]:
    """Coerce a loosely-typed numeric value to ``int``.

    Accepts ints, integral floats and decimal/hex strings (``"0x10"``).
    Returns ``None`` for anything that is not a finite number, including
    booleans, so callers can apply their own defaults.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return None
        try:
            return int(text, 0)
        except ValueError:
            try:
                parsed = float(text)
            except ValueError:
                return None
            return int(parsed) if math.isfinite(parsed) else None
    return None


def next_sequential_name(
    names: Iterable[Optional[str]], prefix: str, ignore_case: bool = False
) -> str:
    """Return ``<prefix><N+1>`` where N is the highest existing numeric suffix.

    Examples:
        >>> next_sequential_name(["field1", "field7", "ctrl"], "field")
        'field8'
        >>> next_sequential_name([], "reg")
        'reg1'
        >>> next_sequential_name(["array_2"], "ARRAY_", ignore_case=True)
        'ARRAY_3'
    """
    flags = re.IGNORECASE if ignore_case else 0
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$", flags)
    max_n = 0
    for name in names:
        match = pattern.match(str(name or ""))
        if match:
            max_n = max(max_n, int(match.group(1)))
    return f"{prefix}{max_n + 1}"


_SIZE_SUFFIXES = {"K": 1024, "M": 1024 * 1024, "G": 1024 * 1024 * 1024}


def parse_size(value: Any) -> Optional[int]:
    """Coerce a byte size such as ``256``, ``"0x100"`` or ``"4K"`` to ``int``.

    Returns ``None`` when the value cannot be interpreted.
    """
    if isinstance(value, str):
        text = value.strip()
        suffix = text[-1:].upper()
        if suffix in _SIZE_SUFFIXES:
            base = to_number(text[:-1])
            return base * _SIZE_SUFFIXES[suffix] if base is not None else None
    return to_number(value)
