"""
mmlayout - command-line front end for the layout engine.

Usage:
    mmlayout repack ctrl.yml --kind field --from 1
    mmlayout insert regs.yml --kind register --anchor 2 --before
    mmlayout insert regs.yml --kind register --anchor 0 --array
    mmlayout move blocks.yml --kind block --index 0 --delta 1 --json

Subcommands:
    repack   Repack a collection forward (or backward) from an index
    insert   Insert a new item after (or before) the selected item
    move     Swap an item with its neighbour
    remove   Remove an item
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mmlayout.layout import (
    Direction,
    EditResult,
    InsertionPlanner,
    move_item,
    remove_item,
    repack_backward,
    repack_forward,
)
from mmlayout.model import ItemKind, LayoutItem, to_records
from mmlayout.parser import ParseError, dump_collection, load_collection

logger = logging.getLogger(__name__)


def emit_items(items: List[LayoutItem], args) -> None:
    """Write a collection as YAML (to --output or stdout) or as JSON."""
    if args.json:
        print(json.dumps({"success": True, "items": to_records(items)}))
        return
    content = dump_collection(items)
    if args.output:
        Path(args.output).write_text(content)
        print(f"✓ Written: {args.output}")
    else:
        print(content, end="")


def emit_result(result: EditResult, args) -> int:
    """Report an edit result; returns the process exit status."""
    if not result.ok:
        if args.json:
            print(json.dumps(result.to_dict()))
        else:
            print(f"Error: {result.error}")
        return 1
    if args.json:
        print(json.dumps(result.to_dict()))
        return 0
    emit_items(result.items, args)
    return 0


def report_failure(error: Exception, args) -> int:
    if args.json:
        print(json.dumps({"success": False, "error": str(error)}))
    else:
        print(f"Error: {error}")
    return 1


def cmd_repack(args) -> int:
    """Repack a collection from an index."""
    try:
        items = load_collection(args.input, args.kind)
    except ParseError as e:
        return report_failure(e, args)
    repack = repack_backward if args.backward else repack_forward
    emit_items(repack(items, args.from_index), args)
    return 0


def cmd_insert(args) -> int:
    """Insert a new item next to the anchor."""
    try:
        planner = InsertionPlanner(
            args.kind, register_width=args.register_width, array=args.array
        )
    except ValueError as e:
        return report_failure(e, args)
    try:
        items = load_collection(args.input, args.kind)
    except ParseError as e:
        return report_failure(e, args)
    direction = Direction.BEFORE if args.before else Direction.AFTER
    return emit_result(planner.insert(direction, items, args.anchor), args)


def cmd_move(args) -> int:
    """Move an item one position toward lower or higher offsets."""
    try:
        items = load_collection(args.input, args.kind)
    except ParseError as e:
        return report_failure(e, args)
    result = move_item(items, args.index, args.delta, args.kind, args.register_width)
    return emit_result(result, args)


def cmd_remove(args) -> int:
    """Remove an item."""
    try:
        items = load_collection(args.input, args.kind)
    except ParseError as e:
        return report_failure(e, args)
    return emit_result(remove_item(items, args.index, args.kind), args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mmlayout", description="Repack and edit memory-map layouts"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub):
        sub.add_argument("input", help="YAML file holding the collection")
        sub.add_argument(
            "--kind",
            required=True,
            choices=[kind.value for kind in ItemKind],
            help="Kind of items in the collection",
        )
        sub.add_argument("--output", "-o", help="Write the resulting YAML here instead of stdout")
        sub.add_argument("--json", action="store_true", help="JSON output")

    repack_parser = subparsers.add_parser("repack", help="Repack offsets from an index")
    add_common(repack_parser)
    repack_parser.add_argument(
        "--from", dest="from_index", type=int, default=0, help="Anchor index (default: 0)"
    )
    repack_parser.add_argument(
        "--backward", action="store_true", help="Repack toward lower offsets"
    )
    repack_parser.set_defaults(func=cmd_repack)

    insert_parser = subparsers.add_parser("insert", help="Insert a new item")
    add_common(insert_parser)
    insert_parser.add_argument(
        "--anchor", type=int, default=-1, help="Selected item index (default: last)"
    )
    insert_parser.add_argument(
        "--before", action="store_true", help="Insert before the anchor instead of after"
    )
    insert_parser.add_argument(
        "--array", action="store_true", help="Insert a register array (registers only)"
    )
    insert_parser.add_argument(
        "--register-width", type=int, default=32, help="Register width in bits (fields only)"
    )
    insert_parser.set_defaults(func=cmd_insert)

    move_parser = subparsers.add_parser("move", help="Swap an item with its neighbour")
    add_common(move_parser)
    move_parser.add_argument("--index", type=int, required=True, help="Item to move")
    move_parser.add_argument("--delta", type=int, choices=[-1, 1], required=True)
    move_parser.add_argument(
        "--register-width", type=int, default=32, help="Register width in bits (fields only)"
    )
    move_parser.set_defaults(func=cmd_move)

    remove_parser = subparsers.add_parser("remove", help="Remove an item")
    add_common(remove_parser)
    remove_parser.add_argument("--index", type=int, required=True, help="Item to remove")
    remove_parser.set_defaults(func=cmd_remove)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug("Running %s on %s (%s)", args.command, args.input, args.kind)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
