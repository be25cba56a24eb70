"""Heading-driven segmentation of a sub-document body into sections."""

import logging
from dataclasses import dataclass, replace
from functools import reduce
from typing import List, Optional, Sequence

from models import BlockElement, Paragraph, Section, Table
from .paragraph_classifier import format_paragraph
from .table_renderer import render_table

logger = logging.getLogger('docs_to_notion.converters.segmenter')


@dataclass(frozen=True)
class SegmenterState:
    """
    Accumulator threaded through the fold over a body's elements.

    Attributes:
        sections: Sections already closed by a later heading
        current: Section being filled, if any
        seen_content: Every piece of non-heading content, in traversal order
    """

    sections: tuple = ()
    current: Optional[Section] = None
    seen_content: str = ''

    def close_current(self) -> 'SegmenterState':
        """Emit the current section when it holds non-blank content."""
        if self.current is not None and self.current.has_content():
            return replace(self, sections=self.sections + (self.current,), current=None)
        return replace(self, current=None)


def _append_content(state: SegmenterState, text: str, label: str) -> SegmenterState:
    if state.current is None:
        current = Section(title=label, content=text, level=1, parent_label=label)
    else:
        current = replace(state.current, content=state.current.content + text)

    return replace(state, current=current, seen_content=state.seen_content + text)


def _step(label: str):
    def step(state: SegmenterState, element: BlockElement) -> SegmenterState:
        if isinstance(element, Table):
            return _append_content(state, render_table(element) + '\n\n', label)

        if not isinstance(element, Paragraph):
            logger.debug(f"Skipping unsupported element {type(element).__name__}")
            return state

        text = format_paragraph(element)
        if not text.strip():
            return state

        if element.is_heading:
            closed = state.close_current()
            return replace(closed, current=Section(
                title=text.strip(),
                content='',
                level=element.heading_level,
                parent_label=label
            ))

        return _append_content(state, text + '\n', label)

    return step


def segment_body(elements: Sequence[BlockElement], label: str) -> List[Section]:
    """
    Cut a body into sections at every heading.

    Body content that appears before the first heading opens a default
    section titled after ``label``. Blank paragraphs are skipped, and a
    heading with nothing under it is dropped when the next heading arrives.

    Args:
        elements: Block elements of one sub-document, in order
        label: Human-readable name of the sub-document

    Returns:
        Sections in document order (empty for an empty body)
    """
    final = reduce(_step(label), elements, SegmenterState()).close_current()
    sections = list(final.sections)

    if not sections and final.seen_content.strip():
        logger.debug(f"No sections emitted for '{label}', using fallback section")
        sections = [Section(title=label, content=final.seen_content, level=1, parent_label=label)]

    return sections


__all__ = ['segment_body', 'SegmenterState']
