"""Section to Markdown page rendering with whitespace normalization."""

import logging
import re
from typing import List, Sequence

from models import RenderedUnit, Section

logger = logging.getLogger('docs_to_notion.converters.pagerenderer')

EXCESS_NEWLINES_PATTERN = re.compile(r'\n{3,}')
GLUED_SENTENCE_PATTERN = re.compile(r'\.([A-Z])')
HORIZONTAL_WHITESPACE_PATTERN = re.compile(r'[ \t]{2,}')

MAX_HEADING_LEVEL = 6


def normalize_content(content: str) -> str:
    """
    Clean up section content.

    Collapses 3+ newlines to a blank line, separates ``end.Start`` sentence
    pairs glued together by run concatenation, squeezes horizontal
    whitespace and trims the edges. Applying it twice changes nothing.
    """
    content = EXCESS_NEWLINES_PATTERN.sub('\n\n', content)
    content = GLUED_SENTENCE_PATTERN.sub(r'. \1', content)
    content = HORIZONTAL_WHITESPACE_PATTERN.sub(' ', content)
    return content.strip()


def _ensure_single_trailing_newline(text: str) -> str:
    return text.rstrip('\n') + '\n'


def render_section(section: Section) -> RenderedUnit:
    """
    Render a section as a Markdown page.

    Args:
        section: Section to render

    Returns:
        RenderedUnit whose body is the heading, a blank line and the
        normalized content, ending in exactly one newline
    """
    level = min(max(section.level, 1), MAX_HEADING_LEVEL)
    body = '#' * level + ' ' + section.title + '\n\n' + normalize_content(section.content)

    return RenderedUnit(
        title=section.title,
        body=_ensure_single_trailing_newline(body),
        source_document_name=section.source_document_name,
        is_error=section.is_error
    )


def fallback_unit(section: Section) -> RenderedUnit:
    """Minimal unit used when rendering a section fails."""
    body = '# ' + str(section.title) + '\n\n' + str(section.content)
    return RenderedUnit(
        title=str(section.title),
        body=_ensure_single_trailing_newline(body),
        source_document_name=section.source_document_name,
        is_error=section.is_error
    )


def render_sections(sections: Sequence[Section]) -> List[RenderedUnit]:
    """
    Render every section, degrading failures to a minimal unit.

    A failing section is logged and replaced; it never aborts the others.
    """
    units = []

    for section in sections:
        try:
            units.append(render_section(section))
        except Exception as e:
            logger.error(f"Failed to render section '{section.title}': {e}")
            units.append(fallback_unit(section))

    return units


__all__ = ['normalize_content', 'render_section', 'render_sections', 'fallback_unit']
