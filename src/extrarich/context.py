"""Classify a collapsed cursor into a table or list context.

A cursor resting at the very first character of a table or list means
"format the whole structure"; anywhere else in a table it means "format
this row" (first cell of a later row) or "format this cell".
"""

from __future__ import annotations

import logging

from extrarich.navigation import above, check_point, matches_type, start_of
from extrarich.paths import format_path
from extrarich.tracing import EventSink, NullSink
from extrarich.types import (
    LISTS,
    TABLE_CELLS,
    BlockType,
    Document,
    ListContext,
    Point,
    SpecialContext,
    TableContext,
    TableLevel,
)

logger = logging.getLogger(__name__)


def resolve_special_context(
    document: Document, point: Point, *, sink: EventSink | None = None
) -> SpecialContext:
    """Resolve the table or list context of a collapsed cursor.

    Args:
        document: The document.
        point: The cursor position.
        sink: Optional event sink for diagnostics.

    Returns:
        TableContext, ListContext, or None when the cursor is in neither.
    """
    sink = sink or NullSink()
    check_point(document, point)

    context = _table_context(document, point)
    if context is None:
        context = _list_context(document, point)

    if context is None:
        sink.emit("context.resolved", kind="none", point=point.path)
    elif isinstance(context, TableContext):
        sink.emit(
            "context.resolved",
            kind="table",
            level=context.level,
            cell_path=context.cell_path,
            row_path=context.row_path,
            table_path=context.table_path,
        )
    else:
        sink.emit(
            "context.resolved",
            kind="list",
            level=context.level,
            list_path=context.list_path,
            list_item_path=context.list_item_path,
        )
    return context


def _table_context(document: Document, point: Point) -> TableContext | None:
    cell_entry = above(document, point, matches_type(*TABLE_CELLS))
    if cell_entry is None:
        return None
    _, cell_path = cell_entry

    row_entry = above(document, cell_path, matches_type(BlockType.TABLE_ROW))
    if row_entry is None:
        logger.warning(
            "Table cell at %s has no row; using cell scope", format_path(cell_path)
        )
        return TableContext(TableLevel.CELL, cell_path)
    _, row_path = row_entry

    table_entry = above(document, row_path, matches_type(BlockType.TABLE))
    if table_entry is None:
        logger.warning(
            "Table row at %s has no table; using cell scope", format_path(row_path)
        )
        return TableContext(TableLevel.CELL, cell_path)
    _, table_path = table_entry

    is_first_cell = cell_path[-1] == 0
    is_first_row = row_path[-1] == 0

    if is_first_cell and is_first_row:
        return TableContext(TableLevel.TABLE, cell_path, row_path, table_path)
    if is_first_cell:
        return TableContext(TableLevel.ROW, cell_path, row_path)
    return TableContext(TableLevel.CELL, cell_path)


def _list_context(document: Document, point: Point) -> ListContext | None:
    item_entry = above(document, point, matches_type(BlockType.LIST_ITEM))
    if item_entry is None:
        return None
    _, item_path = item_entry

    list_entry = above(document, item_path, matches_type(*LISTS))
    if list_entry is None:
        logger.warning("List item at %s has no list", format_path(item_path))
        return None
    _, list_path = list_entry

    if item_path[-1] != 0:
        return None

    paragraph_entry = above(document, point, matches_type(BlockType.PARAGRAPH))
    if paragraph_entry is None:
        return None
    _, paragraph_path = paragraph_entry
    if point != start_of(document, paragraph_path):
        return None
    return ListContext(list_path=list_path, list_item_path=item_path)
