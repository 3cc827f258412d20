"""Navigation helpers for finding nodes and points in a document tree."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from extrarich.exceptions import InvalidPathError, InvalidPointError
from extrarich.paths import ancestors, compare_paths
from extrarich.types import (
    Block,
    Document,
    Element,
    Inline,
    Leaf,
    Node,
    Path,
    Point,
    Range,
)

NodeEntry = tuple["Node | Document", Path]
Predicate = Callable[["Node | Document"], bool]


def node_at(document: Document, path: Path) -> Node | Document:
    """Return the node at path.

    Raises:
        InvalidPathError: If the path does not address a node.
    """
    node: Node | Document = document
    for depth, index in enumerate(path):
        if isinstance(node, Leaf):
            raise InvalidPathError(
                f"Cannot descend into a leaf at {path[:depth]}", path
            )
        if index < 0 or index >= len(node.children):
            raise InvalidPathError(f"No node at path {path}", path)
        node = node.children[index]
    return node


def element_at(document: Document, path: Path) -> Element:
    """Return the element (document, block or inline) at path."""
    node = node_at(document, path)
    if isinstance(node, Leaf):
        raise InvalidPathError(f"Expected an element at {path}, found a leaf", path)
    return node


def leaf_at(document: Document, path: Path) -> Leaf:
    """Return the leaf at path."""
    node = node_at(document, path)
    if not isinstance(node, Leaf):
        raise InvalidPathError(f"Expected a leaf at {path}", path)
    return node


def is_block(node: Node | Document) -> bool:
    return isinstance(node, Block)


def matches_type(*types: object) -> Predicate:
    """Predicate matching elements whose type is one of types."""
    wanted = set(types)

    def predicate(node: Node | Document) -> bool:
        return isinstance(node, Block | Inline) and node.type in wanted

    return predicate


def above(
    document: Document, at: Path | Point, predicate: Predicate
) -> NodeEntry | None:
    """Nearest proper ancestor of `at` that satisfies predicate.

    The document root is never returned.

    Args:
        document: The document.
        at: A path or a point (its leaf path is used).
        predicate: Match function applied to each ancestor, nearest first.

    Returns:
        (node, path) of the match, or None.
    """
    path = at.path if isinstance(at, Point) else at
    for ancestor_path in ancestors(path, reverse=True):
        if not ancestor_path:
            break
        node = node_at(document, ancestor_path)
        if predicate(node):
            return node, ancestor_path
    return None


def leaves(document: Document, at: Path = ()) -> Iterator[tuple[Leaf, Path]]:
    """Yield every leaf in the subtree rooted at `at`, in document order."""
    root = node_at(document, at)
    yield from _walk_leaves(root, at)


def _walk_leaves(node: Node | Document, path: Path) -> Iterator[tuple[Leaf, Path]]:
    if isinstance(node, Leaf):
        yield node, path
        return
    for i, child in enumerate(node.children):
        yield from _walk_leaves(child, (*path, i))


def elements(document: Document, at: Path = ()) -> Iterator[tuple[Element, Path]]:
    """Yield every element in the subtree rooted at `at`, parents first."""
    root = node_at(document, at)
    if isinstance(root, Leaf):
        return
    stack: list[tuple[Element, Path]] = [(root, at)]
    while stack:
        element, path = stack.pop()
        yield element, path
        for i in range(len(element.children) - 1, -1, -1):
            child = element.children[i]
            if not isinstance(child, Leaf):
                stack.append((child, (*path, i)))


def start_of(document: Document, path: Path) -> Point:
    """First point inside the node at path."""
    for _leaf, leaf_path in leaves(document, path):
        return Point(leaf_path, 0)
    raise InvalidPathError(f"Node at {path} contains no text", path)


def end_of(document: Document, path: Path) -> Point:
    """Last point inside the node at path."""
    last: tuple[Leaf, Path] | None = None
    for entry in leaves(document, path):
        last = entry
    if last is None:
        raise InvalidPathError(f"Node at {path} contains no text", path)
    leaf, leaf_path = last
    return Point(leaf_path, len(leaf.text))


def compare_points(a: Point, b: Point) -> int:
    """Compare points in document order: path first, then offset."""
    result = compare_paths(a.path, b.path)
    if result != 0:
        return result
    if a.offset < b.offset:
        return -1
    if a.offset > b.offset:
        return 1
    return 0


def check_point(document: Document, point: Point) -> Leaf:
    """Return the leaf under point after validating its offset."""
    leaf = leaf_at(document, point.path)
    if not 0 <= point.offset <= len(leaf.text):
        raise InvalidPointError(
            f"Offset {point.offset} outside leaf text of length "
            f"{len(leaf.text)} at {point.path}"
        )
    return leaf


def leaves_in_range(
    document: Document, selection: Range
) -> list[tuple[Leaf, Path]]:
    """Leaves from the start point's leaf to the end point's leaf inclusive."""
    start, end = selection.edges()
    check_point(document, start)
    check_point(document, end)
    result: list[tuple[Leaf, Path]] = []
    for leaf, path in leaves(document):
        if compare_paths(path, start.path) < 0:
            continue
        if compare_paths(path, end.path) > 0:
            break
        result.append((leaf, path))
    return result


# --- Text offsets ---
#
# Attribute writes conserve the document's text, so a point can be
# carried across a mutation as its offset into the concatenated leaf
# text of the whole document.


def text_offset(document: Document, point: Point) -> int:
    """Offset of point into the concatenated text of all leaves."""
    check_point(document, point)
    total = 0
    for leaf, path in leaves(document):
        if path == point.path:
            return total + point.offset
        total += len(leaf.text)
    raise InvalidPathError(f"No leaf at {point.path}", point.path)


def point_at_offset(document: Document, offset: int, *, forward: bool) -> Point:
    """Point for a text offset.

    On a boundary between two leaves, forward picks the start of the
    later leaf and backward the end of the earlier one.
    """
    total = 0
    candidate: Point | None = None
    for leaf, path in leaves(document):
        length = len(leaf.text)
        if total <= offset <= total + length:
            point = Point(path, offset - total)
            if not forward:
                return point
            if offset < total + length:
                return point
            candidate = point
        elif total > offset:
            break
        total += length
    if candidate is not None:
        return candidate
    raise InvalidPointError(f"Text offset {offset} is outside the document")


def rebase_range(
    document: Document, selection: Range, offsets: tuple[int, int]
) -> Range:
    """Rebuild a range from the text offsets of its anchor and focus."""
    anchor_offset, focus_offset = offsets
    if selection.is_collapsed:
        point = point_at_offset(document, anchor_offset, forward=True)
        return Range.collapsed_at(point)
    anchor_first = compare_points(selection.anchor, selection.focus) <= 0
    anchor = point_at_offset(document, anchor_offset, forward=anchor_first)
    focus = point_at_offset(document, focus_offset, forward=not anchor_first)
    return Range(anchor=anchor, focus=focus)
