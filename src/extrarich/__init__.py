"""extrarich - Selection-scoped attribute engine for rich-text documents.

Applies a keyed attribute (text color, background color, ...) to exactly
the part of a block/inline/text tree a selection addresses, splitting
text leaves where needed and merging formatting-equivalent leaves back
together afterwards.
"""

__version__ = "0.1.0"

from extrarich.applier import AttributeEngine, apply_attribute, clear_attribute
from extrarich.batch import (
    InsertNodeOperation,
    Operation,
    RemoveNodeOperation,
    SetDataOperation,
)
from extrarich.block_data import set_list_type, set_paragraph_style
from extrarich.config import EngineSettings, get_settings
from extrarich.context import resolve_special_context
from extrarich.exceptions import (
    DeserializationError,
    ExtraRichError,
    InvalidPathError,
    InvalidPointError,
    TreeIntegrityError,
)
from extrarich.navigation import compare_points, end_of, node_at, start_of
from extrarich.normalizer import normalize
from extrarich.serde import (
    document_from_dict,
    document_to_dict,
    range_from_dict,
    range_to_dict,
)
from extrarich.tracing import EventSink, LoggingSink, NullSink, RecordingSink
from extrarich.types import (
    Block,
    BlockType,
    Document,
    EditResult,
    Inline,
    InlineType,
    Leaf,
    ListContext,
    ListLevel,
    MarkType,
    Point,
    Range,
    Scope,
    TableContext,
    TableLevel,
)

__all__ = [
    "AttributeEngine",
    "Block",
    "BlockType",
    "DeserializationError",
    "Document",
    "EditResult",
    "EngineSettings",
    "EventSink",
    "ExtraRichError",
    "Inline",
    "InlineType",
    "InsertNodeOperation",
    "InvalidPathError",
    "InvalidPointError",
    "Leaf",
    "ListContext",
    "ListLevel",
    "LoggingSink",
    "MarkType",
    "NullSink",
    "Operation",
    "Point",
    "Range",
    "RecordingSink",
    "RemoveNodeOperation",
    "Scope",
    "SetDataOperation",
    "TableContext",
    "TableLevel",
    "TreeIntegrityError",
    "apply_attribute",
    "clear_attribute",
    "compare_points",
    "document_from_dict",
    "document_to_dict",
    "end_of",
    "get_settings",
    "normalize",
    "node_at",
    "range_from_dict",
    "range_to_dict",
    "resolve_special_context",
    "set_list_type",
    "set_paragraph_style",
    "start_of",
]
