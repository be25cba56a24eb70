"""API fetcher implementation for retrieving Google Docs through the Docs REST API."""

import logging
from typing import Any, Callable, Dict, List, Optional

from google_docs_client import DOCS_API_BASE, GoogleDocsClient
from converters.list_resolver import list_info_from_bullet
from converters.paragraph_classifier import get_heading_level
from models import (
    AcquiredDocument,
    AcquisitionPath,
    BlockElement,
    Document,
    Paragraph,
    SingleBody,
    SubDocument,
    Table,
    TableCell,
    Tabbed,
    TextRun,
    TextStyle
)
from .base_fetcher import (
    AcquisitionExhaustedError,
    BaseFetcher,
    MalformedResponseError,
    first_success,
    pick_exhausted_error
)


class ApiFetcher(BaseFetcher):
    """Fetches the structured document tree via the Docs API for highest fidelity."""

    def __init__(self, config: Dict[str, Any], client: Optional[GoogleDocsClient] = None, logger=None):
        """
        Initialize API fetcher with configuration.

        Args:
            config: Configuration dictionary with google and advanced settings
            client: Optional pre-built client (built from config when omitted)
            logger: Logger instance (optional)
        """
        super().__init__(config, client or GoogleDocsClient.from_config(config), logger)
        self.logger = logger or logging.getLogger('docs_to_notion.fetcher.api')

    @property
    def strategies(self) -> List[Callable[[str], Document]]:
        return [
            self._fetch_with_tabs_content,
            self._fetch_with_all_fields,
            self._fetch_with_raw_url,
            self._fetch_default
        ]

    def fetch_document(self, document_id: str) -> AcquiredDocument:
        """
        Fetch a document through the request variants, most specific first.

        Args:
            document_id: Google Docs document ID

        Returns:
            AcquiredDocument on the rich path

        Raises:
            FeatureNotProvisionedError: If any variant hit a disabled Google API
            FetcherError: Classified error of the last variant otherwise
        """
        self._log_progress(f"Fetching document {document_id} via Docs API")

        try:
            document = first_success(self.strategies, document_id, self.logger)
        except AcquisitionExhaustedError as e:
            error = pick_exhausted_error(e)
            self.logger.error(f"All Docs API request variants failed for {document_id}: {error}")
            raise error from e

        self._log_progress(f"Fetched document '{document.title}' ({document_id})", 'debug')
        return AcquiredDocument(document=document, path=AcquisitionPath.RICH, document_id=document_id)

    def _fetch_with_tabs_content(self, document_id: str) -> Document:
        return parse_document(self.client.get_document(document_id, {'includeTabsContent': 'true'}))

    def _fetch_with_all_fields(self, document_id: str) -> Document:
        return parse_document(self.client.get_document(document_id, {'fields': '*'}))

    def _fetch_with_raw_url(self, document_id: str) -> Document:
        return parse_document(self.client.request_raw(f'{DOCS_API_BASE}documents/{document_id}?fields=*'))

    def _fetch_default(self, document_id: str) -> Document:
        return parse_document(self.client.get_document(document_id))


def parse_document(data: Any) -> Document:
    """
    Convert a Docs API document resource into a Document model.

    Tabbed responses (``tabs``) become a Tabbed layout with child tabs nested;
    legacy responses with a top-level ``body`` become a SingleBody layout.

    Raises:
        MalformedResponseError: If the resource carries neither tabs nor a body
    """
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")

    title = data.get('title')
    lists = data.get('lists') or {}
    tabs = data.get('tabs')

    if tabs:
        return Document(title=title, layout=Tabbed(tabs=[_parse_tab(tab, lists) for tab in tabs]))

    if isinstance(data.get('body'), dict):
        body = SubDocument(title=None, elements=_parse_content(data['body'].get('content', []), lists))
        return Document(title=title, layout=SingleBody(body=body))

    raise MalformedResponseError("Document response contains neither 'body' nor 'tabs'")


def _parse_tab(tab: Dict[str, Any], inherited_lists: Dict[str, Any]) -> SubDocument:
    properties = tab.get('tabProperties') or {}
    document_tab = tab.get('documentTab') or {}
    body = document_tab.get('body') or tab.get('body') or {}
    lists = document_tab.get('lists') or inherited_lists

    sub_document = SubDocument(
        title=properties.get('title'),
        elements=_parse_content(body.get('content', []), lists)
    )

    for child in tab.get('childTabs') or []:
        sub_document.add_child(_parse_tab(child, inherited_lists))

    return sub_document


def _parse_content(content: List[Dict[str, Any]], lists: Dict[str, Any]) -> List[BlockElement]:
    elements: List[BlockElement] = []

    for structural_element in content:
        if 'paragraph' in structural_element:
            elements.append(_parse_paragraph(structural_element['paragraph'], lists))
        elif 'table' in structural_element:
            elements.append(_parse_table(structural_element['table'], lists))
        # sectionBreak, tableOfContents and friends carry no text

    return elements


def _parse_paragraph(paragraph: Dict[str, Any], lists: Dict[str, Any]) -> Paragraph:
    runs = []
    for element in paragraph.get('elements', []):
        text_run = element.get('textRun')
        if not text_run:
            continue
        runs.append(TextRun(text=text_run.get('content', ''), style=_parse_text_style(text_run.get('textStyle') or {})))

    named_style = (paragraph.get('paragraphStyle') or {}).get('namedStyleType')

    return Paragraph(
        runs=runs,
        heading_level=get_heading_level(named_style),
        list_info=list_info_from_bullet(paragraph.get('bullet'), lists)
    )


def _parse_text_style(style: Dict[str, Any]) -> TextStyle:
    link = style.get('link') or {}
    return TextStyle(
        bold=bool(style.get('bold')),
        italic=bool(style.get('italic')),
        underline=bool(style.get('underline')),
        strikethrough=bool(style.get('strikethrough')),
        link_url=link.get('url') or None
    )


def _parse_table(table: Dict[str, Any], lists: Dict[str, Any]) -> Table:
    rows = []
    for table_row in table.get('tableRows', []):
        cells = []
        for table_cell in table_row.get('tableCells', []):
            paragraphs = [
                _parse_paragraph(item['paragraph'], lists)
                for item in table_cell.get('content', [])
                if 'paragraph' in item
            ]
            cells.append(TableCell(paragraphs=paragraphs))
        rows.append(cells)
    return Table(rows=rows)


__all__ = ['ApiFetcher', 'parse_document']
