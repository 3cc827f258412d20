"""Primitive tree mutators and the batch that groups them.

The mutators are not atomic: removing a leaf and inserting
its replacements leaves the tree briefly in an intermediate state. A
Batch records every primitive operation and only publishes them to the
document's observers once the outermost batch exits, after checking the
tree's invariants. Nothing is rolled back on failure; pending operations
are simply dropped.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from extrarich.exceptions import InvalidPathError, TreeIntegrityError
from extrarich.navigation import element_at, leaves, node_at
from extrarich.paths import format_path
from extrarich.types import Attributes, Leaf, Node, Path

if TYPE_CHECKING:
    from extrarich.types import Document

logger = logging.getLogger(__name__)


# --- Operations ---


@dataclass(frozen=True)
class SetDataOperation:
    """Replace a node's attribute map."""

    path: Path
    properties: Attributes
    new_properties: Attributes


@dataclass(frozen=True)
class RemoveNodeOperation:
    """Remove the node at path."""

    path: Path
    node: Node


@dataclass(frozen=True)
class InsertNodeOperation:
    """Insert node so that it ends up at path."""

    path: Path
    node: Node


Operation = SetDataOperation | RemoveNodeOperation | InsertNodeOperation


class Batch:
    """Operations recorded while a document's batch is open."""

    def __init__(self, document: Document) -> None:
        self.document = document
        self.operations: list[Operation] = []

    def record(self, operation: Operation) -> None:
        self.operations.append(operation)

    def commit(self) -> None:
        """Check invariants, then notify observers once."""
        if not self.operations:
            return
        self._check_integrity()
        operations = tuple(self.operations)
        logger.debug("Committing batch of %d operations", len(operations))
        for observer in list(self.document._observers):
            observer(operations)

    def discard(self) -> None:
        if self.operations:
            logger.debug("Discarding %d pending operations", len(self.operations))
        self.operations.clear()

    def _check_integrity(self) -> None:
        # Empty leaves may exist while a leaf is being split, but none of
        # the leaves inserted by this batch may survive it empty.
        inserted_empty = {
            id(op.node)
            for op in self.operations
            if isinstance(op, InsertNodeOperation)
            and isinstance(op.node, Leaf)
            and not op.node.text
        }
        if not inserted_empty:
            return
        for leaf, path in leaves(self.document):
            if id(leaf) in inserted_empty:
                raise TreeIntegrityError(
                    f"Empty leaf inserted at {format_path(path)} was never removed"
                )


# --- Primitive mutators ---


def merge_data(data: Attributes, key: str, value: Any) -> Attributes:
    """Copy of data with key set to value."""
    return {**data, key: value}


def without_key(data: Attributes, key: str) -> Attributes:
    """Copy of data with key removed."""
    return {k: v for k, v in data.items() if k != key}


def set_data(document: Document, path: Path, data: Attributes) -> None:
    """Replace the attribute map of the node at path.

    A write that leaves the map unchanged records nothing.
    """
    if not path:
        raise InvalidPathError("Cannot set data on the document root", path)
    node = node_at(document, path)
    if node.data == data:
        return
    with document.batch() as batch:
        old = node.data
        node.data = dict(data)
        batch.record(SetDataOperation(path, old, dict(data)))


def remove_node(document: Document, path: Path) -> Node:
    """Remove and return the node at path."""
    if not path:
        raise InvalidPathError("Cannot remove the document root", path)
    parent = element_at(document, path[:-1])
    index = path[-1]
    if index >= len(parent.children):
        raise InvalidPathError(f"No node at path {path}", path)
    with document.batch() as batch:
        node = parent.children.pop(index)
        batch.record(RemoveNodeOperation(path, node))
    return node


def insert_node(document: Document, node: Node, path: Path) -> None:
    """Insert node so that it is addressed by path afterwards."""
    if not path:
        raise InvalidPathError("Cannot insert at the document root", path)
    parent = element_at(document, path[:-1])
    index = path[-1]
    if index > len(parent.children):
        raise InvalidPathError(f"Cannot insert at {path}", path)
    with document.batch() as batch:
        parent.children.insert(index, node)
        batch.record(InsertNodeOperation(path, node))


def clone_leaf(leaf: Leaf, text: str, data: Attributes | None = None) -> Leaf:
    """New leaf with leaf's marks and the given text and data."""
    return Leaf(
        text=text,
        marks=list(leaf.marks),
        data=copy.deepcopy(leaf.data if data is None else data),
    )
