"""Export fetcher for documents reachable only through public web exports."""

import logging
from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup

from google_docs_client import DOCS_WEB_BASE, GoogleDocsClient
from models import (
    AcquiredDocument,
    AcquisitionPath,
    Document,
    Paragraph,
    SingleBody,
    SubDocument,
    TextRun
)
from .base_fetcher import (
    AcquisitionExhaustedError,
    BaseFetcher,
    MalformedResponseError,
    PermissionFetchError,
    first_success
)

DEGRADED_DOCUMENT_TITLE = 'Document Content'
MIN_RESPONSE_LENGTH = 100
MIN_CONTENT_LENGTH = 50
STRIPPED_TAGS = ['script', 'style', 'meta', 'link', 'head']

NO_ACCESS_MESSAGE = "Could not access document. Make sure it is published to web or publicly shared."
NO_CONTENT_MESSAGE = (
    "Unable to extract meaningful content. "
    "Ensure the document is publicly accessible or published to web."
)


class ExportFetcher(BaseFetcher):
    """
    Fetches a document's text from its published page or plain-text export.

    No structure survives this path: the result is one untitled body with a
    single paragraph, so it always segments into exactly one section.
    """

    def __init__(self, config: Dict[str, Any], client: Optional[GoogleDocsClient] = None, logger=None):
        """
        Initialize export fetcher.

        Args:
            config: Configuration dictionary
            client: Optional client; an anonymous one is built from config when omitted
            logger: Logger instance (optional)
        """
        super().__init__(config, client or GoogleDocsClient.from_config(config, authenticated=False), logger)
        self.logger = logger or logging.getLogger('docs_to_notion.fetcher.export')

    @property
    def strategies(self) -> List[Callable[[str], str]]:
        return [self._fetch_published_html, self._fetch_plain_text_export]

    def fetch_document(self, document_id: str) -> AcquiredDocument:
        """
        Fetch the document text through the public export URLs.

        Raises:
            PermissionFetchError: If no export URL returned usable content
            MalformedResponseError: If the extracted text is too short to be real content
        """
        self._log_progress(f"Fetching document {document_id} via public export")

        try:
            text = first_success(self.strategies, document_id, self.logger)
        except AcquisitionExhaustedError as e:
            self.logger.error(f"No public export available for {document_id}")
            raise PermissionFetchError(NO_ACCESS_MESSAGE) from e

        text = text.strip()
        if len(text) < MIN_CONTENT_LENGTH:
            raise MalformedResponseError(NO_CONTENT_MESSAGE)

        return AcquiredDocument(
            document=build_degraded_document(text),
            path=AcquisitionPath.DEGRADED,
            document_id=document_id
        )

    def _download(self, url: str) -> str:
        response = self.client.fetch_public(url)

        if not response.ok:
            response.raise_for_status()

        content = response.text
        if not content or len(content) <= MIN_RESPONSE_LENGTH:
            raise MalformedResponseError(f"Response from {url} is too short ({len(content or '')} chars)")

        self.logger.debug(f"Downloaded {len(content)} chars from {url}")
        return content

    def _fetch_published_html(self, document_id: str) -> str:
        return extract_html_text(self._download(f'{DOCS_WEB_BASE}{document_id}/pub'))

    def _fetch_plain_text_export(self, document_id: str) -> str:
        return self._download(f'{DOCS_WEB_BASE}{document_id}/export?format=txt')


def extract_html_text(html: str) -> str:
    """Visible text of a published document page."""
    soup = BeautifulSoup(html, 'lxml')

    for tag in soup.find_all(STRIPPED_TAGS):
        tag.extract()

    root = soup.body or soup
    return root.get_text().strip()


def build_degraded_document(text: str) -> Document:
    """Wrap plain text as a structureless single-body document."""
    paragraph = Paragraph(runs=[TextRun(text=text)])
    return Document(
        title=DEGRADED_DOCUMENT_TITLE,
        layout=SingleBody(body=SubDocument(title=None, elements=[paragraph]))
    )


__all__ = ['ExportFetcher', 'extract_html_text', 'build_degraded_document']
