"""
Tests for spans, overlap detection and predecessor shrinking.
"""

import pytest

from mmlayout.layout import (
    Span,
    check_overlap,
    find_overlapping_pair,
    propose_shrink,
    span_of,
    spans_overlap,
)
from mmlayout.model import ItemKind, coerce_item, coerce_items


class TestSpan:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            (Span(0, 3), Span(3, 5), True),
            (Span(0, 3), Span(4, 5), False),
            (Span(4, 7), Span(0, 10), True),
            (Span(8, 8), Span(8, 8), True),
            (Span(4, 3), Span(0, 10), False),
            (Span(0, 10), Span(5, 4), False),
        ],
    )
    def test_spans_overlap(self, a, b, expected):
        assert spans_overlap(a, b) is expected
        assert spans_overlap(b, a) is expected

    def test_describe(self):
        assert Span(4, 7).describe() == "[7:4]"
        assert Span(0x1000, 0x10FF).describe(bits=False) == "[0x1000:0x10ff]"

    def test_span_of_items(self):
        field = coerce_item({"name": "f", "bits": "[7:4]"}, ItemKind.FIELD)
        block = coerce_item({"name": "b", "base_address": 0x1000, "size": 0x100}, ItemKind.BLOCK)
        assert span_of(field) == Span(4, 7)
        assert span_of(block) == Span(0x1000, 0x10FF)

    def test_zero_sized_item_is_empty(self):
        block = coerce_item({"name": "b", "base_address": 0x10, "size": 0}, ItemKind.BLOCK)
        assert span_of(block).empty


class TestCheckOverlap:
    def test_finds_first_collision(self, make_register):
        regs = coerce_items(
            [make_register("a", 0), make_register("b", 4), make_register("c", 8)],
            ItemKind.REGISTER,
        )
        assert check_overlap(Span(6, 9), regs).name == "b"
        assert check_overlap(Span(12, 15), regs) is None

    def test_exclude_is_by_identity(self, make_register):
        regs = coerce_items([make_register("a", 0), make_register("a", 0)], ItemKind.REGISTER)
        assert check_overlap(Span(0, 3), regs, exclude=regs[0]) is regs[1]
        assert check_overlap(Span(0, 3), regs[:1], exclude=regs[0]) is None


class TestFindOverlappingPair:
    def test_disjoint_collection(self, make_field):
        fields = coerce_items(
            [make_field("a", 0, 4), make_field("b", 4, 4), make_field("c", 10)], ItemKind.FIELD
        )
        assert find_overlapping_pair(fields) is None

    def test_unsorted_collision(self, make_block):
        blocks = coerce_items(
            [make_block("hi", 0x200, 0x10), make_block("big", 0, 0x1000), make_block("x", 0x2000)],
            ItemKind.BLOCK,
        )
        pair = find_overlapping_pair(blocks)
        assert {item.name for item in pair} == {"big", "hi"}

    def test_collision_hidden_behind_short_item(self, make_block):
        blocks = coerce_items(
            [make_block("big", 0, 0x100), make_block("a", 0x10, 4), make_block("b", 0x80, 4)],
            ItemKind.BLOCK,
        )
        assert find_overlapping_pair(blocks) is not None

    def test_empty_items_never_collide(self, make_block):
        blocks = coerce_items(
            [make_block("a", 0, 4), make_block("empty", 0, 0), make_block("b", 4, 4)],
            ItemKind.BLOCK,
        )
        assert find_overlapping_pair(blocks) is None


class TestProposeShrink:
    def test_block_without_registers_shrinks(self, make_block):
        block = coerce_item(make_block("b", 0, 0x100), ItemKind.BLOCK)
        resized = propose_shrink(block, 0xFC)
        assert resized.size == 0xFC
        assert block.size == 0x100

    def test_plain_register_shrinks_in_bits(self, make_register):
        reg = coerce_item(make_register("r", 0, size=64), ItemKind.REGISTER)
        assert propose_shrink(reg, 4).size == 32

    def test_item_already_clear_is_returned(self, make_block):
        block = coerce_item(make_block("b", 0, 4), ItemKind.BLOCK)
        assert propose_shrink(block, 8) is block

    def test_zero_size_is_rejected(self, make_block):
        block = coerce_item(make_block("b", 4, 4), ItemKind.BLOCK)
        assert propose_shrink(block, 4) is None

    def test_block_with_registers_cannot_shrink(self):
        block = coerce_item(
            {"name": "b", "base_address": 0, "registers": [{"name": "r0"}, {"name": "r1"}]},
            ItemKind.BLOCK,
        )
        assert propose_shrink(block, 4) is None

    def test_register_array_cannot_shrink(self):
        reg = coerce_item(
            {"name": "t", "offset": 0, "__kind": "array", "count": 4, "stride": 4},
            ItemKind.REGISTER,
        )
        assert propose_shrink(reg, 8) is None
