"""Selection between the rich API path and the degraded export path."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional
from urllib.parse import urlencode

from config_loader import get_nested
from google_docs_client import DRIVE_API_BASE, GoogleDocsClient, build_folder_query
from models import AcquiredDocument, AcquisitionPath, DocumentDescriptor
from .api_fetcher import ApiFetcher
from .base_fetcher import (
    AcquisitionExhaustedError,
    BaseFetcher,
    FetcherError,
    MalformedResponseError,
    PolicyViolationError,
    classify_request_error,
    first_success,
    pick_exhausted_error
)
from .export_fetcher import ExportFetcher

UNTITLED_MEMBER_NAME = 'Untitled Document'


def rich_access_available(config: Dict[str, Any]) -> bool:
    """
    Decide whether the structured Docs API path may be used.

    ``conversion.mode`` 'api' and 'export' force the answer; 'auto' requires a
    configured access token (an unsubstituted ``${VAR}`` does not count).
    """
    mode = get_nested(config, 'conversion.mode', 'auto')
    if mode == 'api':
        return True
    if mode == 'export':
        return False

    token = get_nested(config, 'google.access_token')
    return isinstance(token, str) and bool(token.strip()) and '${' not in token


@dataclass
class BatchEntry:
    """Outcome of acquiring one collection member."""

    descriptor: DocumentDescriptor
    acquired: Optional[AcquiredDocument] = None
    error: Optional[FetcherError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.acquired is not None


class AcquisitionSelector:
    """
    Chooses how documents are acquired and lists collection members.

    The choice is made once, from the configuration handed to the
    constructor; a document is never retried on the other path.
    """

    def __init__(self, config: Dict[str, Any], client: Optional[GoogleDocsClient] = None, logger=None):
        """
        Initialize the selector.

        Args:
            config: Configuration dictionary (google, conversion, advanced sections)
            client: Optional transport client shared by every fetcher
            logger: Logger instance (optional)
        """
        self.config = config
        self.logger = logger or logging.getLogger('docs_to_notion.fetcher.selector')
        self.has_rich_access = rich_access_available(config)
        self.client = client or GoogleDocsClient.from_config(config, authenticated=self.has_rich_access)
        self.fetcher = self._create_fetcher()

        self.logger.info(f"Acquisition path: {self.path.value} ({type(self.fetcher).__name__})")

    @property
    def path(self) -> AcquisitionPath:
        return AcquisitionPath.RICH if self.has_rich_access else AcquisitionPath.DEGRADED

    def _create_fetcher(self) -> BaseFetcher:
        if self.has_rich_access:
            return ApiFetcher(self.config, client=self.client)
        return ExportFetcher(self.config, client=self.client)

    def acquire_document(self, document_id: str) -> AcquiredDocument:
        """
        Acquire one document on the selected path.

        Raises:
            FetcherError: Classified acquisition failure (never retried on the other path)
        """
        try:
            return self.fetcher.fetch_document(document_id)
        except FetcherError:
            raise
        except Exception as e:
            raise classify_request_error(e) from e

    def list_collection(self, folder_id: str) -> List[DocumentDescriptor]:
        """
        List the Google Docs of a Drive folder, ordered by name.

        Tries the client's paginated listing helper, then a hand-built Drive
        request.

        Raises:
            PolicyViolationError: Without rich access (checked before any request)
            FeatureNotProvisionedError: If the Drive API is not enabled
            FetcherError: Classified error of the last listing attempt
        """
        self._require_rich_access('List a folder')

        strategies: List[Callable[[str], List[Dict[str, Any]]]] = [
            self._list_with_drive_helper,
            self._list_with_raw_request
        ]

        try:
            files = first_success(strategies, folder_id, self.logger)
        except AcquisitionExhaustedError as e:
            error = pick_exhausted_error(e)
            self.logger.error(f"Could not list folder {folder_id}: {error}")
            raise error from e

        descriptors = [
            DocumentDescriptor(id=item['id'], name=item.get('name') or UNTITLED_MEMBER_NAME)
            for item in files
        ]
        self.logger.info(f"Folder {folder_id} holds {len(descriptors)} document(s)")
        return descriptors

    def iter_collection(self, descriptors: Iterable[DocumentDescriptor]) -> Iterator[BatchEntry]:
        """
        Acquire collection members one after another.

        A member failure is captured in its BatchEntry and never stops the
        remaining members.

        Raises:
            PolicyViolationError: Without rich access, immediately on call
        """
        self._require_rich_access('Batch conversion')
        return self._iter_members(list(descriptors))

    def _iter_members(self, descriptors: List[DocumentDescriptor]) -> Iterator[BatchEntry]:
        for index, descriptor in enumerate(descriptors, start=1):
            self.logger.debug(f"Acquiring member {index}/{len(descriptors)}: {descriptor.name}")
            try:
                acquired = self.acquire_document(descriptor.id)
            except FetcherError as e:
                self.logger.warning(f"Failed to acquire '{descriptor.name}' ({descriptor.id}): {e}")
                yield BatchEntry(descriptor=descriptor, error=e)
                continue

            yield BatchEntry(descriptor=descriptor, acquired=acquired)

    def _require_rich_access(self, operation: str) -> None:
        if not self.has_rich_access:
            raise PolicyViolationError(
                f"{operation} requires Google Docs API access. "
                f"Provide google.access_token (or --access-token) and use mode 'auto' or 'api'."
            )

    def _list_with_drive_helper(self, folder_id: str) -> List[Dict[str, Any]]:
        return self.client.list_folder_documents(folder_id)

    def _list_with_raw_request(self, folder_id: str) -> List[Dict[str, Any]]:
        query = urlencode({
            'q': build_folder_query(folder_id),
            'fields': 'files(id,name)',
            'orderBy': 'name',
            'pageSize': 1000
        })
        data = self.client.request_raw(f'{DRIVE_API_BASE}files?{query}')

        if not isinstance(data, dict) or not isinstance(data.get('files'), list):
            raise MalformedResponseError("Drive listing response has no 'files' list")
        return data['files']


__all__ = ['AcquisitionSelector', 'BatchEntry', 'rich_access_available']
