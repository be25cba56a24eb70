"""Converters package for Google Docs structure to Markdown conversion."""

import logging

from .list_resolver import get_bullet_prefix
from .page_renderer import normalize_content, render_section, render_sections
from .paragraph_classifier import format_paragraph, get_heading_level, paragraph_plain_text
from .run_formatter import apply_text_formatting, format_run
from .section_segmenter import segment_body
from .table_renderer import render_table
from .tree_flattener import flatten_document

logger = logging.getLogger('docs_to_notion.converters')


def convert_document(document, source_document_name=None, logger=None):
    """
    Convenience function to convert a Document into rendered Markdown units.

    This runs the full conversion pipeline:
    1. Tab tree flattening (tabs followed by their child tabs)
    2. Heading-driven segmentation of every tab body into sections
    3. Inline run, list and table rendering inside each section
    4. Page rendering with whitespace normalization

    Args:
        document: Document model (single body or tabbed)
        source_document_name: Optional originating document name stamped on
            every section (used for batch grouping)
        logger: Optional logger instance (uses module logger if not provided)

    Returns:
        list: RenderedUnit objects in section order (empty if no content)

    Example:
        >>> from converters import convert_document
        >>> units = convert_document(document)
        >>> for unit in units:
        ...     print(unit.body)
    """
    if logger is None:
        logger = logging.getLogger('docs_to_notion.converters')

    sections = flatten_document(document, source_document_name)
    logger.debug(f"Document '{document.title}' flattened into {len(sections)} section(s)")

    return render_sections(sections)


__all__ = [
    'convert_document',
    'apply_text_formatting',
    'format_run',
    'get_bullet_prefix',
    'render_table',
    'get_heading_level',
    'format_paragraph',
    'paragraph_plain_text',
    'segment_body',
    'flatten_document',
    'normalize_content',
    'render_section',
    'render_sections'
]
