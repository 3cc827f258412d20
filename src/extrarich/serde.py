"""Rich-text JSON ⇄ document tree.

Public API:
    document_from_dict(raw) → Document
    document_to_dict(document) → dict
    range_from_dict(raw) → Range | None
    range_to_dict(selection) → dict | None

The JSON shape is the one the editor stores: every node has a
``nodeType`` and a ``data`` map, elements have ``content``, text nodes
have ``value`` and ``marks``. Selections use ``anchor``/``focus`` points
made of a ``path`` and an ``offset``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from extrarich.exceptions import DeserializationError
from extrarich.types import (
    Block,
    BlockType,
    Document,
    Inline,
    InlineType,
    Leaf,
    Node,
    Point,
    Range,
)

TEXT_NODE_TYPE = "text"

_BLOCK_TYPES = {t.value: t for t in BlockType}
_INLINE_TYPES = {t.value: t for t in InlineType}


class MarkModel(BaseModel):
    """A mark on a text node."""

    model_config = ConfigDict(extra="ignore")

    type: str


class NodeModel(BaseModel):
    """Any node of the rich-text JSON tree."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    node_type: str = Field(alias="nodeType")
    data: dict[str, Any] = Field(default_factory=dict)
    content: list[NodeModel] | None = None
    value: str | None = None
    marks: list[MarkModel] | None = None


NodeModel.model_rebuild()


class PointModel(BaseModel):
    """A point of a selection."""

    path: list[int]
    offset: int = Field(ge=0)


class RangeModel(BaseModel):
    """A selection."""

    anchor: PointModel
    focus: PointModel


# --- Documents ---


def document_from_dict(raw: dict[str, Any]) -> Document:
    """Convert rich-text JSON to a Document.

    Raises:
        DeserializationError: If the JSON is malformed or uses an
            unknown node type.
    """
    try:
        model = NodeModel.model_validate(raw)
    except ValidationError as e:
        raise DeserializationError(f"Invalid rich-text document: {e}") from e
    if model.node_type != BlockType.DOCUMENT.value:
        raise DeserializationError(
            f"Root node must be a document, got {model.node_type!r}"
        )
    children = [
        _node_from_model(child, (i,)) for i, child in enumerate(model.content or [])
    ]
    return Document(children=children, data=dict(model.data))


def _node_from_model(model: NodeModel, path: tuple[int, ...]) -> Node:
    if model.node_type == TEXT_NODE_TYPE:
        return Leaf(
            text=model.value or "",
            marks=[m.type for m in model.marks or []],
            data=dict(model.data),
        )

    children = [
        _node_from_model(child, (*path, i))
        for i, child in enumerate(model.content or [])
    ]
    if model.node_type in _BLOCK_TYPES:
        block_type = _BLOCK_TYPES[model.node_type]
        if block_type is BlockType.DOCUMENT:
            raise DeserializationError(f"Nested document node at {list(path)}")
        return Block(type=block_type, children=children, data=dict(model.data))
    if model.node_type in _INLINE_TYPES:
        return Inline(
            type=_INLINE_TYPES[model.node_type],
            children=children,
            data=dict(model.data),
        )
    raise DeserializationError(
        f"Unknown node type {model.node_type!r} at {list(path)}"
    )


def document_to_dict(document: Document) -> dict[str, Any]:
    """Convert a Document back to rich-text JSON."""
    model = NodeModel(
        node_type=BlockType.DOCUMENT.value,
        data=dict(document.data),
        content=[_node_to_model(child) for child in document.children],
    )
    return model.model_dump(by_alias=True, exclude_none=True)


def _node_to_model(node: Node) -> NodeModel:
    if isinstance(node, Leaf):
        return NodeModel(
            node_type=TEXT_NODE_TYPE,
            value=node.text,
            marks=[MarkModel(type=m) for m in node.marks],
            data=dict(node.data),
        )
    return NodeModel(
        node_type=node.type.value,
        data=dict(node.data),
        content=[_node_to_model(child) for child in node.children],
    )


# --- Selections ---


def range_from_dict(raw: dict[str, Any] | None) -> Range | None:
    """Convert a JSON selection to a Range (None stays None)."""
    if raw is None:
        return None
    try:
        model = RangeModel.model_validate(raw)
    except ValidationError as e:
        raise DeserializationError(f"Invalid selection: {e}") from e
    return Range(
        anchor=Point(tuple(model.anchor.path), model.anchor.offset),
        focus=Point(tuple(model.focus.path), model.focus.offset),
    )


def range_to_dict(selection: Range | None) -> dict[str, Any] | None:
    if selection is None:
        return None
    model = RangeModel(
        anchor=_point_model(selection.anchor),
        focus=_point_model(selection.focus),
    )
    return model.model_dump()


def _point_model(point: Point) -> PointModel:
    return PointModel(path=list(point.path), offset=point.offset)
