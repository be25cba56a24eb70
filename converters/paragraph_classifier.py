"""Heading detection and paragraph-level formatting."""

from typing import Optional

from models import Paragraph
from .list_resolver import get_bullet_prefix
from .run_formatter import format_run

HEADING_STYLE_LEVELS = {
    'HEADING_1': 1,
    'HEADING_2': 2,
    'HEADING_3': 3,
    'HEADING_4': 4,
    'HEADING_5': 5,
    'HEADING_6': 6,
    'TITLE': 1,
    'SUBTITLE': 2
}


def get_heading_level(named_style_type: Optional[str]) -> int:
    """
    Map a Google Docs named paragraph style onto a heading level.

    Args:
        named_style_type: ``paragraphStyle.namedStyleType`` value (may be None)

    Returns:
        1-6 for headings, 0 for body text
    """
    return HEADING_STYLE_LEVELS.get(named_style_type or '', 0)


def format_paragraph(paragraph: Paragraph) -> str:
    """Bullet prefix followed by the Markdown-formatted runs."""
    return get_bullet_prefix(paragraph.list_info) + ''.join(
        format_run(run) for run in paragraph.runs
    )


def paragraph_plain_text(paragraph: Paragraph) -> str:
    return ''.join(run.text for run in paragraph.runs)


__all__ = ['get_heading_level', 'format_paragraph', 'paragraph_plain_text', 'HEADING_STYLE_LEVELS']
