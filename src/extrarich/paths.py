"""Path helpers.

A path is a tuple of child indices from the document root. The empty
tuple addresses the document itself.
"""

from __future__ import annotations

from extrarich.types import Path


def ancestors(path: Path, *, reverse: bool = False) -> list[Path]:
    """All proper ancestors of path, root first (or nearest first)."""
    result = [path[:i] for i in range(len(path))]
    if reverse:
        result.reverse()
    return result


def compare_paths(a: Path, b: Path) -> int:
    """Compare two paths in document order.

    Returns -1, 0 or 1. A path and any of its ancestors compare equal,
    since neither comes before the other.
    """
    for x, y in zip(a, b):
        if x < y:
            return -1
        if x > y:
            return 1
    return 0


def common_ancestor(a: Path, b: Path) -> Path:
    """Deepest path that is an ancestor of (or equal to) both paths."""
    common: list[int] = []
    for x, y in zip(a, b):
        if x != y:
            break
        common.append(x)
    return tuple(common)


def format_path(path: Path) -> str:
    """Render a path as dotted indices, e.g. ``0.2.1``."""
    return ".".join(str(i) for i in path)


def parse_path(text: str) -> Path:
    """Parse dotted (or comma separated) indices into a path."""
    text = text.strip()
    if not text:
        return ()
    parts = text.replace(",", ".").split(".")
    try:
        result = tuple(int(part) for part in parts)
    except ValueError as e:
        raise ValueError(f"Invalid path: {text!r}") from e
    if any(i < 0 for i in result):
        raise ValueError(f"Invalid path: {text!r}")
    return result
