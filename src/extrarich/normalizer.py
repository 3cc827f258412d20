"""Merge adjacent formatting-equivalent leaves.

After an attribute write two neighbouring leaves can end up with equal
attribute maps and mark sets (e.g. the selected part of a split leaf
next to a leaf that already had the attribute). The normalizer restores
the canonical form by concatenating such pairs.
"""

from __future__ import annotations

from extrarich.batch import clone_leaf, insert_node, remove_node
from extrarich.navigation import element_at, elements
from extrarich.tracing import EventSink, NullSink
from extrarich.types import Document, Leaf, Path


def normalize(
    document: Document, at: Path = (), *, sink: EventSink | None = None
) -> int:
    """Merge formatting-equivalent adjacent leaves under `at`.

    Args:
        document: The document.
        at: Root of the subtree to normalize (whole document by default).
        sink: Optional event sink for diagnostics.

    Returns:
        Number of merges performed.
    """
    sink = sink or NullSink()
    # Deepest elements first: a merge shifts the paths of later siblings
    # only, and those have already been visited.
    targets = [path for _, path in elements(document, at)]
    targets.reverse()
    merged = 0
    with document.batch():
        for path in targets:
            merged += _normalize_children(document, path, sink)
    return merged


def _normalize_children(document: Document, path: Path, sink: EventSink) -> int:
    element = element_at(document, path)
    merged = 0
    # Right to left: removing index i never shifts indices below i.
    i = len(element.children) - 1
    while i > 0:
        current = element.children[i]
        previous = element.children[i - 1]
        if (
            isinstance(current, Leaf)
            and isinstance(previous, Leaf)
            and previous.same_formatting(current)
        ):
            sink.emit(
                "normalize.merge",
                path=(*path, i - 1),
                left=previous.text,
                right=current.text,
            )
            remove_node(document, (*path, i))
            if current.text:
                combined = clone_leaf(previous, previous.text + current.text)
                remove_node(document, (*path, i - 1))
                insert_node(document, combined, (*path, i - 1))
            merged += 1
        i -= 1
    return merged
