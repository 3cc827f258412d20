"""CLI entry point for extrarich.

Usage:
    python -m extrarich apply <document.json> --anchor 0.0:0 [--focus 0.0:5] \
        --key textColor --value red [-o out.json]
    python -m extrarich clear <document.json> --anchor 0.0:0 [--focus ...] \
        --key textColor
    python -m extrarich context <document.json> --at 0.0.0.0.0:0

Points are written as ``<dotted path>:<offset>``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from extrarich.applier import AttributeEngine
from extrarich.config import get_settings
from extrarich.context import resolve_special_context
from extrarich.exceptions import ExtraRichError
from extrarich.paths import parse_path
from extrarich.serde import document_from_dict, document_to_dict, range_to_dict
from extrarich.types import EditResult, ListContext, Point, Range, TableContext


def parse_point(text: str) -> Point:
    """Parse ``0.1.0:3`` into a Point."""
    path_text, sep, offset_text = text.rpartition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected <path>:<offset>, got {text!r}")
    try:
        return Point(parse_path(path_text), int(offset_text))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _load(path_arg: str) -> dict[str, Any]:
    raw: dict[str, Any] = json.loads(Path(path_arg).read_text(encoding="utf-8"))
    return raw


def _write(payload: dict[str, Any], output: str | None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {output}")
    else:
        print(text)


def _selection(args: argparse.Namespace) -> Range:
    anchor: Point = args.anchor
    focus: Point = args.focus or anchor
    return Range(anchor=anchor, focus=focus)


def _result_payload(result: EditResult) -> dict[str, Any]:
    return {
        "changed": result.changed,
        "scope": result.scope.value,
        "selection": range_to_dict(result.selection),
        "document": document_to_dict(result.document),
    }


def cmd_apply(args: argparse.Namespace) -> int:
    """Apply an attribute to a selection."""
    document = document_from_dict(_load(args.document))
    result = AttributeEngine().apply(document, _selection(args), args.key, args.value)
    _write(_result_payload(result), args.output)
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    """Clear an attribute from a selection."""
    document = document_from_dict(_load(args.document))
    result = AttributeEngine().clear(document, _selection(args), args.key)
    _write(_result_payload(result), args.output)
    return 0


def cmd_context(args: argparse.Namespace) -> int:
    """Print the special context of a cursor position."""
    document = document_from_dict(_load(args.document))
    context = resolve_special_context(document, args.at)
    payload: dict[str, Any]
    if isinstance(context, TableContext):
        payload = {
            "kind": "table",
            "level": context.level.value,
            "cellPath": list(context.cell_path),
            "rowPath": (
                list(context.row_path) if context.row_path is not None else None
            ),
            "tablePath": (
                list(context.table_path) if context.table_path is not None else None
            ),
        }
    elif isinstance(context, ListContext):
        payload = {
            "kind": "list",
            "level": context.level.value,
            "listPath": list(context.list_path),
            "listItemPath": list(context.list_item_path),
        }
    else:
        payload = {"kind": "none"}
    _write(payload, None)
    return 0


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("document", help="Path to a rich-text JSON document")
    parser.add_argument(
        "--anchor",
        type=parse_point,
        required=True,
        help="Selection anchor as <path>:<offset>",
    )
    parser.add_argument(
        "--focus",
        type=parse_point,
        default=None,
        help="Selection focus (defaults to the anchor: a collapsed cursor)",
    )
    parser.add_argument("--key", required=True, help="Attribute key, e.g. textColor")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the result JSON here instead of stdout",
    )


def main() -> int:
    """Main entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(
        prog="extrarich",
        description="Apply keyed attributes to rich-text selections",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # apply subcommand
    apply_parser = subparsers.add_parser("apply", help="Apply an attribute")
    _add_selection_args(apply_parser)
    apply_parser.add_argument("--value", required=True, help="Attribute value")
    apply_parser.set_defaults(func=cmd_apply)

    # clear subcommand
    clear_parser = subparsers.add_parser("clear", help="Clear an attribute")
    _add_selection_args(clear_parser)
    clear_parser.set_defaults(func=cmd_clear)

    # context subcommand
    context_parser = subparsers.add_parser(
        "context",
        help="Show the table/list context of a cursor",
    )
    context_parser.add_argument("document", help="Path to a rich-text JSON document")
    context_parser.add_argument(
        "--at",
        type=parse_point,
        required=True,
        help="Cursor position as <path>:<offset>",
    )
    context_parser.set_defaults(func=cmd_context)

    args = parser.parse_args()
    try:
        result: int = args.func(args)
    except (ExtraRichError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
