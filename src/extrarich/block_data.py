"""Block-level data writes driven by the style and list-type menus.

Unlike attribute writes these never touch leaves: the paragraph style
lives on paragraph blocks and the list type on the bulleted list.
"""

from __future__ import annotations

import logging

from extrarich.batch import merge_data, set_data, without_key
from extrarich.navigation import above, is_block, leaves_in_range, matches_type
from extrarich.types import Block, BlockType, Document, Path, Range

logger = logging.getLogger(__name__)

PARAGRAPH_STYLE_KEY = "paragraphStyle"
LIST_TYPE_KEY = "listType"


def set_paragraph_style(
    document: Document, selection: Range | None, style_key: str | None
) -> int:
    """Set (or with None, remove) the paragraph style of selected paragraphs.

    Args:
        document: The document.
        selection: Current selection; every paragraph it touches is updated.
        style_key: Paragraph style key such as ``p-lg``, or None for the
            normal style.

    Returns:
        Number of paragraphs whose data changed.
    """
    if selection is None:
        return 0

    targets: dict[Path, Block] = {}
    for _leaf, leaf_path in leaves_in_range(document, selection):
        entry = above(document, leaf_path, is_block)
        if entry is None:
            continue
        block, block_path = entry
        if isinstance(block, Block) and block.type is BlockType.PARAGRAPH:
            targets.setdefault(block_path, block)

    changed = 0
    with document.batch():
        for path, paragraph in targets.items():
            if style_key is None:
                data = without_key(paragraph.data, PARAGRAPH_STYLE_KEY)
            else:
                data = merge_data(paragraph.data, PARAGRAPH_STYLE_KEY, style_key)
            if data != paragraph.data:
                set_data(document, path, data)
                changed += 1
    logger.debug("Paragraph style %r set on %d paragraphs", style_key, changed)
    return changed


def set_list_type(document: Document, selection: Range | None, list_type: str) -> bool:
    """Record the list type (bullets, ticks, ...) on the enclosing bulleted list.

    Returns:
        True if a bulleted list encloses the selection's anchor.
    """
    if selection is None:
        return False
    entry = above(document, selection.anchor, matches_type(BlockType.UL_LIST))
    if entry is None:
        return False
    node, path = entry
    set_data(document, path, merge_data(node.data, LIST_TYPE_KEY, list_type))
    return True
