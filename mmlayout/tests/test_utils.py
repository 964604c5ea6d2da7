import pytest
from mmlayout.utils import (
    format_bits,
    next_sequential_name,
    parse_bit_range,
    parse_size,
    to_number,
)


class TestBitRange:
    @pytest.mark.parametrize(
        "notation, expected",
        [
            ("[7:4]", (4, 4)),
            ("[31:0]", (0, 32)),
            ("[0]", (0, 1)),
            ("[5:5]", (5, 1)),
            (" [ 15 : 8 ] ", (8, 8)),
        ],
    )
    def test_parse_bit_range(self, notation, expected):
        assert parse_bit_range(notation) == expected

    @pytest.mark.parametrize("notation", ["", "[a:b]", "[7-4]", "[3:7]"])
    def test_parse_bit_range_invalid(self, notation):
        with pytest.raises(ValueError):
            parse_bit_range(notation)

    def test_format_bits(self):
        assert format_bits(7, 4) == "[7:4]"
        assert format_bits(3, 3) == "[3]"


class TestToNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (16, 16),
            (4.0, 4),
            ("0x10", 16),
            ("32", 32),
            (" 8 ", 8),
            ("1e3", 1000),
        ],
    )
    def test_valid(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize(
        "value", [None, True, "", "abc", float("nan"), float("inf"), [4], {"size": 4}]
    )
    def test_invalid_returns_none(self, value):
        assert to_number(value) is None

    def test_parse_size_suffixes(self):
        assert parse_size("4K") == 4096
        assert parse_size("1M") == 1024 * 1024
        assert parse_size(0x100) == 0x100
        assert parse_size("xK") is None


class TestSequentialName:
    def test_empty(self):
        assert next_sequential_name([], "field") == "field1"

    def test_uses_highest_suffix(self):
        assert next_sequential_name(["field1", "field7", "field3"], "field") == "field8"

    def test_ignores_other_names(self):
        names = ["ctrl", "reg_status", "reg2x", None, "reg0"]
        assert next_sequential_name(names, "reg") == "reg1"

    def test_ignore_case(self):
        names = ["array_2", "ARRAY_1", "Array_x"]
        assert next_sequential_name(names, "ARRAY_") == "ARRAY_2"
        assert next_sequential_name(names, "ARRAY_", ignore_case=True) == "ARRAY_3"
