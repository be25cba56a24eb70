"""Flattening of a document's tab hierarchy into an ordered section list."""

import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from models import Document, Section, SingleBody, SubDocument, Tabbed
from .section_segmenter import segment_body

logger = logging.getLogger('docs_to_notion.converters.flattener')

DEFAULT_DOCUMENT_LABEL = 'Document'
UNTITLED_DOCUMENT_LABEL = 'Untitled document'
FALLBACK_SECTION_TITLE = 'Document Content'

ORDINAL_PLACEHOLDER_PATTERN = re.compile(r'^Tab \d+$')


def ordinal_label(position: int) -> str:
    return f'Tab {position}'


def is_placeholder_title(title: Optional[str]) -> bool:
    """Check whether a title is a generic label rather than a real name."""
    if not title or not title.strip():
        return True
    title = title.strip()
    return (
        title in (DEFAULT_DOCUMENT_LABEL, UNTITLED_DOCUMENT_LABEL)
        or ORDINAL_PLACEHOLDER_PATTERN.match(title) is not None
    )


def collect_sub_documents(
    tabs: Sequence[SubDocument],
    accumulator: Optional[List[SubDocument]] = None
) -> List[SubDocument]:
    """
    Flatten a tab tree depth-first: each tab, then its children, in order.

    Args:
        tabs: Sibling sub-documents
        accumulator: List being extended (a new one when omitted)

    Returns:
        The accumulator holding every sub-document of the tree
    """
    collected = [] if accumulator is None else accumulator
    for tab in tabs:
        collected.append(tab)
        collect_sub_documents(tab.children, collected)
    return collected


def _labelled_bodies(document: Document) -> List[Tuple[str, SubDocument]]:
    layout = document.layout

    if isinstance(layout, SingleBody):
        return [(document.title or DEFAULT_DOCUMENT_LABEL, layout.body)]

    if not isinstance(layout, Tabbed):
        raise TypeError(f"Unsupported document layout: {type(layout).__name__}")

    sub_documents = collect_sub_documents(layout.tabs)
    if len(sub_documents) == 1 and not sub_documents[0].title:
        return [(document.title or DEFAULT_DOCUMENT_LABEL, sub_documents[0])]

    return [
        (sub_document.title or ordinal_label(position), sub_document)
        for position, sub_document in enumerate(sub_documents, start=1)
    ]


def relabel_placeholder(
    sections: List[Section],
    document_title: Optional[str] = None,
    source_document_name: Optional[str] = None
) -> List[Section]:
    """
    Give a lone placeholder-titled section a meaningful name.

    Preference: source document name, then the document title (when it is not
    itself a placeholder), then "Document Content".
    """
    if len(sections) != 1 or not is_placeholder_title(sections[0].title):
        return sections

    if source_document_name and source_document_name.strip():
        title = source_document_name.strip()
    elif not is_placeholder_title(document_title):
        title = document_title.strip()
    else:
        title = FALLBACK_SECTION_TITLE

    logger.debug(f"Relabelling placeholder section '{sections[0].title}' as '{title}'")
    return [replace(sections[0], title=title)]


def flatten_document(document: Document, source_document_name: Optional[str] = None) -> List[Section]:
    """
    Segment every sub-document of a document and concatenate the results.

    Args:
        document: Fetched document (single body or tabbed)
        source_document_name: Name of the originating document, stamped on
            every section when given

    Returns:
        Ordered list of sections; empty when the document has no content
    """
    sections: List[Section] = []

    for label, sub_document in _labelled_bodies(document):
        produced = segment_body(sub_document.elements, label)
        logger.debug(f"Sub-document '{label}' produced {len(produced)} section(s)")
        sections.extend(produced)

    sections = relabel_placeholder(sections, document.title, source_document_name)

    if source_document_name:
        sections = [replace(section, source_document_name=source_document_name) for section in sections]

    return sections


__all__ = [
    'flatten_document',
    'collect_sub_documents',
    'relabel_placeholder',
    'is_placeholder_title',
    'ordinal_label',
    'FALLBACK_SECTION_TITLE'
]
