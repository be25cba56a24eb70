"""Google Docs / Drive REST client with retry logic and error handling."""

import json
import logging
import os
import re
import time
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger('docs_to_notion.client')

if os.getenv('USE_SYSTEM_CA') in ('1', 'true', 'True', 'TRUE'):
    import truststore
    truststore.inject_into_ssl()
    logger.info("Using system CA certificate store")

DOCS_API_BASE = 'https://docs.googleapis.com/v1/'
DRIVE_API_BASE = 'https://www.googleapis.com/drive/v3/'
DOCS_WEB_BASE = 'https://docs.google.com/document/d/'

GOOGLE_DOC_MIME_TYPE = 'application/vnd.google-apps.document'

GOOGLE_DOCS_URL_PATTERN = re.compile(r'^https://docs\.google\.com/document/d/[a-zA-Z0-9-_]+')
DOCUMENT_ID_PATTERN = re.compile(r'/document/d/([a-zA-Z0-9-_]+)')
FOLDER_ID_PATTERN = re.compile(r'/folders/([a-zA-Z0-9-_]+)')


def is_google_docs_url(url: str) -> bool:
    """Check that a URL looks like a Google Docs share link."""
    return bool(url) and GOOGLE_DOCS_URL_PATTERN.match(url) is not None


def extract_document_id(url: str) -> str:
    """
    Extract the document ID from a Google Docs URL.

    Raises:
        ValueError: If the URL carries no document ID
    """
    match = DOCUMENT_ID_PATTERN.search(url or '')
    if not match:
        raise ValueError('Invalid Google Docs URL format')
    return match.group(1)


def extract_folder_id(url: str) -> str:
    """
    Extract a Drive folder ID from a folder URL (``/folders/<id>`` or ``?id=<id>``).

    Raises:
        ValueError: If the URL carries no folder ID
    """
    match = FOLDER_ID_PATTERN.search(url or '')
    if match:
        return match.group(1)

    ids = parse_qs(urlparse(url or '').query).get('id')
    if ids and re.fullmatch(r'[a-zA-Z0-9-_]+', ids[0]):
        return ids[0]

    raise ValueError('Invalid Google Drive folder URL format')


class GoogleDocsClient:
    """Google Docs/Drive REST client with bearer authentication, retries and rate limiting."""

    RETRY_STATUSES = (429, 500, 502, 503, 504)
    RETRY_METHODS = ("HEAD", "GET", "OPTIONS")

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_key: Optional[str] = None,
        verify_ssl: bool = True,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        rate_limit: float = 0.0
    ):
        """
        Initialize the client.

        Args:
            access_token: OAuth bearer token (None for anonymous access to public exports)
            api_key: Optional API key sent as the ``key`` query parameter on API calls
            verify_ssl: Verify TLS certificates
            timeout: Per-request timeout in seconds
            max_retries: Retries for 429/5xx answers on idempotent requests
            retry_backoff_factor: urllib3 backoff factor between retries
            rate_limit: Minimum interval between two requests in seconds (0 disables)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.rate_limit = rate_limit
        self.last_request_time = 0.0
        self.session = self._build_session(access_token, verify_ssl, max_retries, retry_backoff_factor)

        logger.info(
            f"Google Docs client ready ({'bearer token' if access_token else 'anonymous'}, "
            f"timeout={timeout}s, retries={max_retries}, rate_limit={rate_limit}s)"
        )

    @classmethod
    def _build_session(
        cls,
        access_token: Optional[str],
        verify_ssl: bool,
        max_retries: int,
        backoff_factor: float
    ) -> requests.Session:
        session = requests.Session()

        if access_token:
            session.headers['Authorization'] = f'Bearer {access_token}'

        session.verify = verify_ssl
        if not verify_ssl:
            logger.warning("TLS certificate verification is disabled")
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        adapter = HTTPAdapter(max_retries=Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=list(cls.RETRY_STATUSES),
            allowed_methods=list(cls.RETRY_METHODS),
            raise_on_status=False
        ))
        for scheme in ("http://", "https://"):
            session.mount(scheme, adapter)

        return session

    @property
    def is_authenticated(self) -> bool:
        return 'Authorization' in self.session.headers

    def _wait_for_rate_limit(self) -> None:
        if self.rate_limit <= 0:
            return

        remaining = self.rate_limit - (time.time() - self.last_request_time)
        if remaining > 0:
            logger.debug(f"Rate limit: waiting {remaining:.2f}s")
            time.sleep(remaining)

    def _make_request(
        self,
        method: str,
        url: str,
        expected_status: Optional[int] = 200,
        **kwargs
    ) -> requests.Response:
        """
        Send a request through the retrying session and log its outcome.

        Args:
            method: HTTP method
            url: Absolute URL
            expected_status: Status treated as success (None accepts any answer)
            **kwargs: Passed to ``requests.Session.request``

        Returns:
            The response

        Raises:
            requests.exceptions.HTTPError: Status differs from ``expected_status``
            requests.exceptions.RequestException: Timeouts and connection failures
        """
        self._wait_for_rate_limit()
        started = time.time()

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed after {time.time() - started:.1f}s: {e}")
            raise
        finally:
            self.last_request_time = time.time()

        logger.debug(f"{method} {url} -> {response.status_code} ({time.time() - started:.3f}s)")

        if expected_status is None or response.status_code == expected_status:
            return response

        self._log_error_body(method, url, response)
        response.raise_for_status()
        # 1xx/3xx answers are not raised by raise_for_status
        raise requests.exceptions.HTTPError(
            f"Unexpected status {response.status_code} for {url}", response=response
        )

    @staticmethod
    def _log_error_body(method: str, url: str, response: requests.Response) -> None:
        logger.error(f"HTTP {response.status_code}: {method} {url}")
        try:
            logger.debug(f"Error details: {json.dumps(response.json(), indent=2)}")
        except ValueError:
            logger.debug(f"Error response: {response.text[:500]}")

    def _api_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        merged = dict(params or {})
        if self.api_key:
            merged.setdefault('key', self.api_key)
        return merged

    def get_document(self, document_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Fetch a document from the Docs API.

        Args:
            document_id: Google Docs document ID
            params: Query parameters (e.g. ``{'includeTabsContent': 'true'}``)

        Returns:
            Decoded JSON document resource

        Raises:
            requests.exceptions.RequestException: For API errors
            ValueError: If the response body is not JSON
        """
        response = self._make_request(
            'GET',
            f'{DOCS_API_BASE}documents/{document_id}',
            params=self._api_params(params)
        )
        return response.json()

    def request_raw(self, url: str) -> Dict[str, Any]:
        """
        GET a fully built API URL and decode its JSON body.

        The URL is sent as given; only the API key is appended when configured.
        """
        if self.api_key and 'key=' not in url:
            separator = '&' if '?' in url else '?'
            url = f'{url}{separator}key={self.api_key}'

        response = self._make_request('GET', url)
        return response.json()

    def fetch_public(self, url: str) -> requests.Response:
        """Fetch a public (published or exported) document URL without expecting JSON."""
        return self._make_request('GET', url, expected_status=None)

    def list_folder_documents(self, folder_id: str, page_size: int = 100) -> List[Dict[str, Any]]:
        """
        List the Google Docs inside a Drive folder, ordered by name.

        Args:
            folder_id: Drive folder ID
            page_size: Number of files per page

        Returns:
            List of ``{'id': ..., 'name': ...}`` dictionaries
        """
        files = []
        page_token = None

        while True:
            params = {
                'q': build_folder_query(folder_id),
                'fields': 'nextPageToken, files(id, name)',
                'orderBy': 'name',
                'pageSize': page_size
            }
            if page_token:
                params['pageToken'] = page_token

            response = self._make_request(
                'GET',
                f'{DRIVE_API_BASE}files',
                params=self._api_params(params)
            )
            data = response.json()

            files.extend(data.get('files', []))

            page_token = data.get('nextPageToken')
            if not page_token:
                break

            logger.debug(f"Listed {len(files)} documents so far...")

        logger.info(f"Listed {len(files)} documents in folder {folder_id}")
        return files

    @classmethod
    def from_config(cls, config: Dict[str, Any], authenticated: bool = True) -> 'GoogleDocsClient':
        """
        Initialize client from configuration dictionary.

        Args:
            config: Configuration dictionary with google and advanced settings
            authenticated: Attach the configured access token

        Returns:
            GoogleDocsClient instance
        """
        google_config = config.get('google', {})
        advanced_config = config.get('advanced', {})

        return cls(
            access_token=google_config.get('access_token') if authenticated else None,
            api_key=google_config.get('api_key'),
            verify_ssl=google_config.get('verify_ssl', True),
            timeout=advanced_config.get('request_timeout', 30),
            max_retries=advanced_config.get('max_retries', 3),
            retry_backoff_factor=advanced_config.get('retry_backoff_factor', 2.0),
            rate_limit=advanced_config.get('rate_limit', 0.0)
        )


def build_folder_query(folder_id: str) -> str:
    """Drive search query selecting the non-trashed Google Docs in a folder."""
    return f"'{folder_id}' in parents and mimeType='{GOOGLE_DOC_MIME_TYPE}' and trashed=false"


__all__ = [
    'GoogleDocsClient',
    'is_google_docs_url',
    'extract_document_id',
    'extract_folder_id',
    'build_folder_query',
    'DOCS_API_BASE',
    'DRIVE_API_BASE',
    'DOCS_WEB_BASE',
    'GOOGLE_DOC_MIME_TYPE'
]
