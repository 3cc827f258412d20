"""Apply or clear a keyed attribute on the selected part of a document.

A collapsed cursor is resolved to the table, row, cell, list, container
or block it addresses; anything else is declined silently. An expanded
selection writes every leaf it covers, splitting the leaves at its two
edges when they are only partly covered. Every write merges into the
existing attribute map, so no other key is ever dropped and no mark is
touched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from extrarich.batch import (
    clone_leaf,
    insert_node,
    merge_data,
    remove_node,
    set_data,
    without_key,
)
from extrarich.config import EngineSettings, get_settings
from extrarich.context import resolve_special_context
from extrarich.navigation import (
    above,
    check_point,
    compare_points,
    element_at,
    is_block,
    leaves,
    leaves_in_range,
    matches_type,
    rebase_range,
    start_of,
    text_offset,
)
from extrarich.normalizer import normalize
from extrarich.paths import common_ancestor
from extrarich.tracing import EventSink, span
from extrarich.types import (
    Attributes,
    Block,
    BlockType,
    Document,
    EditResult,
    Leaf,
    ListContext,
    Path,
    Point,
    Range,
    Scope,
    TableContext,
    TableLevel,
)

logger = logging.getLogger(__name__)

Update = Callable[[Attributes], Attributes]


@dataclass
class _LeafPlan:
    """What to do with one leaf touched by an expanded selection."""

    leaf: Leaf
    path: Path
    start: int
    end: int
    contained: bool


class AttributeEngine:
    """Selection-scoped attribute writes.

    Args:
        settings: Engine settings (defaults to get_settings()).
        sink: Event sink for diagnostics (defaults to the one the
            settings' trace flag selects).
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.sink = sink or self.settings.make_sink()

    def apply(
        self, document: Document, selection: Range | None, key: str, value: str
    ) -> EditResult:
        """Merge {key: value} into the attribute maps the selection addresses."""

        def update(data: Attributes) -> Attributes:
            return merge_data(data, key, value)

        return self._run(document, selection, key, update, "apply")

    def clear(
        self, document: Document, selection: Range | None, key: str
    ) -> EditResult:
        """Remove key from the attribute maps the selection addresses."""

        def update(data: Attributes) -> Attributes:
            return without_key(data, key)

        return self._run(document, selection, key, update, "clear")

    # --- Dispatch ---

    def _run(
        self,
        document: Document,
        selection: Range | None,
        key: str,
        update: Update,
        action: str,
    ) -> EditResult:
        if selection is None:
            self._decline("no selection")
            return EditResult(document, None)

        offsets = (
            text_offset(document, selection.anchor),
            text_offset(document, selection.focus),
        )

        with span(self.sink, f"attribute.{action}", key=key):
            with document.batch() as batch:
                recorded = len(batch.operations)
                if selection.is_collapsed:
                    scope = self._collapsed(document, selection.anchor, update)
                else:
                    scope = self._expanded(document, selection, update)
                changed = len(batch.operations) > recorded

        if changed:
            logger.debug("%s %r landed on %s", action, key, scope.value)
            selection = rebase_range(document, selection, offsets)
        return EditResult(document, selection, scope, changed)

    def _decline(self, reason: str) -> Scope:
        self.sink.emit("attribute.declined", reason=reason)
        return Scope.NONE

    # --- Collapsed selections ---

    def _collapsed(self, document: Document, point: Point, update: Update) -> Scope:
        context = resolve_special_context(document, point, sink=self.sink)

        if isinstance(context, TableContext):
            if context.level is TableLevel.TABLE and context.table_path is not None:
                self._update_element(document, context.table_path, update)
                return Scope.TABLE
            if context.level is TableLevel.ROW and context.row_path is not None:
                self._update_element(document, context.row_path, update)
                return Scope.ROW
            self._update_leaves(document, context.cell_path, update)
            return Scope.CELL

        if isinstance(context, ListContext):
            self._update_element(document, context.list_path, update)
            return Scope.LIST

        return self._block_start(document, point, update)

    def _block_start(self, document: Document, point: Point, update: Update) -> Scope:
        entry = above(document, point, is_block)
        if entry is None:
            return self._decline("no block")
        block, block_path = entry
        assert isinstance(block, Block)
        block_type = block.type

        if block_type not in self.settings.supported_block_types:
            return self._decline(f"unsupported block {block_type.value}")
        if point != start_of(document, block_path):
            return self._decline("cursor not at block start")

        if block_type is BlockType.PARAGRAPH:
            container = above(
                document, block_path, matches_type(*self.settings.container_types)
            )
            if container is not None:
                _, container_path = container
                if block_path == (*container_path, 0):
                    self.sink.emit("attribute.container", path=container_path)
                    self._update_element(document, container_path, update)
                    return Scope.CONTAINER

        self._update_leaves(document, block_path, update)
        return Scope.BLOCK

    def _update_element(self, document: Document, path: Path, update: Update) -> None:
        element = element_at(document, path)
        set_data(document, path, update(element.data))

    def _update_leaves(self, document: Document, path: Path, update: Update) -> None:
        for leaf, leaf_path in list(leaves(document, path)):
            set_data(document, leaf_path, update(leaf.data))
        normalize(document, path, sink=self.sink)

    # --- Expanded selections ---

    def _expanded(self, document: Document, selection: Range, update: Update) -> Scope:
        start, end = selection.edges()
        check_point(document, start)
        check_point(document, end)

        plans = [
            plan
            for leaf, path in leaves_in_range(document, selection)
            if (plan := _plan_leaf(leaf, path, start, end)) is not None
        ]
        if not plans:
            return self._decline("selection covers no text")

        self.sink.emit(
            "attribute.expanded",
            leaves=len(plans),
            case="whole-leaves" if all(p.contained for p in plans) else "split",
        )

        # Last leaf first, so splitting never shifts a path still to be used.
        for plan in reversed(plans):
            if update(plan.leaf.data) == plan.leaf.data:
                continue
            if plan.contained:
                self.sink.emit("leaf.update", path=plan.path)
                set_data(document, plan.path, update(plan.leaf.data))
            else:
                self._split(document, plan, update)

        normalize(
            document,
            common_ancestor(start.path[:-1], end.path[:-1]),
            sink=self.sink,
        )
        return Scope.LEAVES

    def _split(self, document: Document, plan: _LeafPlan, update: Update) -> None:
        leaf = plan.leaf
        before = leaf.text[: plan.start]
        selected = leaf.text[plan.start : plan.end]
        after = leaf.text[plan.end :]
        self.sink.emit(
            "leaf.split",
            path=plan.path,
            before=before,
            selected=selected,
            after=after,
        )

        parts: list[Leaf] = []
        if before:
            parts.append(clone_leaf(leaf, before))
        parts.append(clone_leaf(leaf, selected, update(leaf.data)))
        if after:
            parts.append(clone_leaf(leaf, after))

        parent, index = plan.path[:-1], plan.path[-1]
        remove_node(document, plan.path)
        for i, part in enumerate(parts):
            insert_node(document, part, (*parent, index + i))


def _plan_leaf(leaf: Leaf, path: Path, start: Point, end: Point) -> _LeafPlan | None:
    """Classify a leaf against the selection edges.

    Returns None for leaves the selection only touches at a boundary.
    """
    length = len(leaf.text)
    contained = (
        compare_points(start, Point(path, 0)) <= 0
        and compare_points(end, Point(path, length)) >= 0
    )
    if contained:
        return _LeafPlan(leaf, path, 0, length, contained=True)

    sel_start = start.offset if start.path == path else 0
    sel_end = end.offset if end.path == path else length
    if sel_start >= sel_end:
        return None
    return _LeafPlan(leaf, path, sel_start, sel_end, contained=False)


def apply_attribute(
    document: Document,
    selection: Range | None,
    key: str,
    value: str,
    *,
    settings: EngineSettings | None = None,
    sink: EventSink | None = None,
) -> Document:
    """Apply {key: value} to the selection; returns the same document.

    Declined operations (no selection, cursor not at a recognized start,
    unsupported block) leave the document untouched.

    A split renumbers leaves, so `selection` may no longer address the
    tree afterwards and reusing it can raise InvalidPointError. Callers
    that edit the same text again should use AttributeEngine.apply and
    pass on EditResult.selection.
    """
    engine = AttributeEngine(settings, sink)
    return engine.apply(document, selection, key, value).document


def clear_attribute(
    document: Document,
    selection: Range | None,
    key: str,
    *,
    settings: EngineSettings | None = None,
    sink: EventSink | None = None,
) -> Document:
    """Remove key from the selection, with the same scoping as apply_attribute.

    Like apply_attribute, this returns only the document; use
    AttributeEngine.clear for the rebased selection.
    """
    engine = AttributeEngine(settings, sink)
    return engine.clear(document, selection, key).document
