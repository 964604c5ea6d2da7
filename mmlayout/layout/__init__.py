"""
Spatial layout engine: footprints, repacking, overlap checks and insertion.

All operations are pure functions over sibling collections; they return new
lists and never mutate their inputs.
"""

from .editing import Edge, add_field, first_free_bit, move_item, remove_item, resize_field
from .footprint import end_of, footprint
from .insertion import (
    Direction,
    InsertionPlanner,
    default_array,
    default_item,
    insert_block_after,
    insert_block_before,
    insert_field_after,
    insert_field_before,
    insert_register_after,
    insert_register_array_after,
    insert_register_array_before,
    insert_register_before,
)
from .ordering import index_of, normalize
from .overlap import (
    Span,
    check_overlap,
    find_overlapping_pair,
    propose_shrink,
    span_of,
    spans_overlap,
)
from .repacker import (
    Keep,
    SetTo,
    repack_backward,
    repack_blocks_backward,
    repack_blocks_forward,
    repack_fields_backward,
    repack_fields_forward,
    repack_forward,
    repack_registers_backward,
    repack_registers_forward,
)
from .result import EditResult

__all__ = [
    # Footprint
    "footprint",
    "end_of",
    # Repacking
    "Keep",
    "SetTo",
    "repack_forward",
    "repack_backward",
    "repack_fields_forward",
    "repack_fields_backward",
    "repack_registers_forward",
    "repack_registers_backward",
    "repack_blocks_forward",
    "repack_blocks_backward",
    # Overlap
    "Span",
    "span_of",
    "spans_overlap",
    "check_overlap",
    "find_overlapping_pair",
    "propose_shrink",
    # Ordering
    "normalize",
    "index_of",
    # Insertion
    "Direction",
    "EditResult",
    "InsertionPlanner",
    "default_item",
    "default_array",
    "insert_field_after",
    "insert_field_before",
    "insert_register_after",
    "insert_register_before",
    "insert_register_array_after",
    "insert_register_array_before",
    "insert_block_after",
    "insert_block_before",
    # Editing
    "move_item",
    "remove_item",
    "first_free_bit",
    "add_field",
    "Edge",
    "resize_field",
]
