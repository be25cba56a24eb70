"""Bullet and numbering prefixes for list paragraphs."""

from typing import Any, Dict, Optional

from models import ListInfo

INDENT = '  '
ORDERED_MARKER = '1. '
UNORDERED_MARKER = '- '

UNORDERED_GLYPH_TYPES = {'GLYPH_TYPE_UNSPECIFIED', 'NONE', ''}


def get_bullet_prefix(list_info: Optional[ListInfo]) -> str:
    """
    Build the Markdown list prefix for a paragraph.

    Ordered items always use ``1.``; Markdown renderers renumber them.

    Args:
        list_info: List membership, or None for a plain paragraph

    Returns:
        Indentation plus marker, or "" when the paragraph is not in a list
    """
    if list_info is None:
        return ''

    marker = ORDERED_MARKER if list_info.ordered else UNORDERED_MARKER
    return INDENT * max(list_info.nesting_level, 0) + marker


def is_ordered_list(
    bullet: Dict[str, Any],
    lists: Optional[Dict[str, Any]] = None
) -> bool:
    """
    Decide whether a Google Docs bullet belongs to a numbered list.

    Args:
        bullet: The paragraph's ``bullet`` object from the Docs API
        lists: The document's (or tab's) ``lists`` map keyed by list ID

    Returns:
        True when the list level carries a numbering glyph
    """
    hint = (bullet.get('listProperties') or {}).get('type')
    if hint == 'ORDERED':
        return True

    list_definition = (lists or {}).get(bullet.get('listId'), {})
    levels = (list_definition.get('listProperties') or {}).get('nestingLevels') or []
    level_index = bullet.get('nestingLevel', 0) or 0

    if level_index >= len(levels):
        return False

    glyph_type = levels[level_index].get('glyphType')
    return glyph_type is not None and glyph_type not in UNORDERED_GLYPH_TYPES


def list_info_from_bullet(
    bullet: Optional[Dict[str, Any]],
    lists: Optional[Dict[str, Any]] = None
) -> Optional[ListInfo]:
    """Translate a Docs API ``bullet`` object into ListInfo."""
    if not bullet:
        return None

    return ListInfo(
        ordered=is_ordered_list(bullet, lists),
        nesting_level=bullet.get('nestingLevel', 0) or 0
    )


__all__ = ['get_bullet_prefix', 'is_ordered_list', 'list_info_from_bullet']
