"""Data types for the extrarich attribute engine.

Defines the document tree variants, addressing primitives and the
classification results used throughout the package.
Almost no logic, just types.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from extrarich.batch import Batch, Operation

Path: TypeAlias = tuple[int, ...]
Attributes: TypeAlias = dict[str, Any]

# --- Enums ---


class BlockType(str, Enum):
    """Block-level node types of the rich-text document."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    OL_LIST = "ordered-list"
    UL_LIST = "unordered-list"
    LIST_ITEM = "list-item"
    HR = "hr"
    QUOTE = "blockquote"
    EMBEDDED_ENTRY = "embedded-entry-block"
    EMBEDDED_ASSET = "embedded-asset-block"
    EMBEDDED_RESOURCE = "embedded-resource-block"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    TABLE_HEADER_CELL = "table-header-cell"


class InlineType(str, Enum):
    """Inline node types (live inside blocks, wrap leaves)."""

    HYPERLINK = "hyperlink"
    ENTRY_HYPERLINK = "entry-hyperlink"
    ASSET_HYPERLINK = "asset-hyperlink"
    RESOURCE_HYPERLINK = "resource-hyperlink"
    EMBEDDED_ENTRY = "embedded-entry-inline"
    EMBEDDED_RESOURCE = "embedded-resource-inline"


class MarkType(str, Enum):
    """Inline marks carried by leaves."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"
    STRIKETHROUGH = "strikethrough"


LISTS = frozenset({BlockType.UL_LIST, BlockType.OL_LIST})
TABLE_CELLS = frozenset({BlockType.TABLE_CELL, BlockType.TABLE_HEADER_CELL})


class TableLevel(Enum):
    """How much of a table a collapsed cursor addresses."""

    TABLE = "table"
    ROW = "row"
    CELL = "cell"


class ListLevel(Enum):
    """How much of a list a collapsed cursor addresses."""

    LIST = "list"


class Scope(Enum):
    """Where an attribute write landed."""

    NONE = "none"
    TABLE = "table"
    ROW = "row"
    CELL = "cell"
    LIST = "list"
    CONTAINER = "container"
    BLOCK = "block"
    LEAVES = "leaves"


# --- Tree nodes ---


@dataclass
class Leaf:
    """A text-bearing terminal node.

    Attributes:
        text: The text content
        marks: Mark names in their original order (compared as a set)
        data: Attribute map (textColor, backgroundColor, ...)
    """

    text: str
    marks: list[str] = field(default_factory=list)
    data: Attributes = field(default_factory=dict)

    def same_formatting(self, other: Leaf) -> bool:
        """True when both leaves carry equal attribute maps and mark sets."""
        return self.data == other.data and set(self.marks) == set(other.marks)


@dataclass
class Block:
    """A block-level element (paragraph, heading, table, list, ...)."""

    type: BlockType
    children: list[Node] = field(default_factory=list)
    data: Attributes = field(default_factory=dict)


@dataclass
class Inline:
    """An inline element (hyperlink, embedded inline entry, ...)."""

    type: InlineType
    children: list[Node] = field(default_factory=list)
    data: Attributes = field(default_factory=dict)


Node: TypeAlias = "Block | Inline | Leaf"
Element: TypeAlias = "Document | Block | Inline"


@dataclass
class Document:
    """Root of the tree.

    Owns the batch state and the observers that are notified once per
    committed batch. Neither takes part in equality or repr.
    """

    children: list[Node] = field(default_factory=list)
    data: Attributes = field(default_factory=dict)
    _batch: Batch | None = field(default=None, repr=False, compare=False)
    _observers: list[Callable[[tuple[Operation, ...]], None]] = field(
        default_factory=list, repr=False, compare=False
    )

    @property
    def type(self) -> BlockType:
        return BlockType.DOCUMENT

    def subscribe(
        self, callback: Callable[[tuple[Operation, ...]], None]
    ) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator[Batch]:
        """Group primitive mutations into one observable transition.

        Nested calls join the outermost batch.
        """
        from extrarich.batch import Batch

        if self._batch is not None:
            yield self._batch
            return

        current = Batch(self)
        self._batch = current
        try:
            yield current
        except BaseException:
            self._batch = None
            current.discard()
            raise
        self._batch = None
        current.commit()


# --- Addressing ---


@dataclass(frozen=True)
class Point:
    """A character position: leaf path plus offset into the leaf's text."""

    path: Path
    offset: int


@dataclass(frozen=True)
class Range:
    """An unordered pair of points bounding a selection."""

    anchor: Point
    focus: Point

    @classmethod
    def collapsed_at(cls, point: Point) -> Range:
        return cls(anchor=point, focus=point)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus

    def edges(self) -> tuple[Point, Point]:
        """Return (start, end) in document order."""
        from extrarich.navigation import compare_points

        if compare_points(self.anchor, self.focus) <= 0:
            return self.anchor, self.focus
        return self.focus, self.anchor


# --- Special contexts ---


@dataclass(frozen=True)
class TableContext:
    """A collapsed cursor inside a table cell.

    row_path is set for ROW and TABLE levels, table_path only for TABLE.
    """

    level: TableLevel
    cell_path: Path
    row_path: Path | None = None
    table_path: Path | None = None


@dataclass(frozen=True)
class ListContext:
    """A collapsed cursor at the start of the first item of a list."""

    list_path: Path
    list_item_path: Path
    level: ListLevel = ListLevel.LIST


SpecialContext: TypeAlias = "TableContext | ListContext | None"


# --- Results ---


@dataclass
class EditResult:
    """Outcome of one engine call.

    Attributes:
        document: The (mutated in place) document
        selection: The caller's selection rebased onto the mutated tree
        scope: Where the write landed (Scope.NONE when declined)
        changed: False when the operation was declined
    """

    document: Document
    selection: Range | None
    scope: Scope = Scope.NONE
    changed: bool = False
