"""Abstract base fetcher interface, failure taxonomy and the strategy combinator."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import requests

from models import AcquiredDocument

T = TypeVar('T')
R = TypeVar('R')

FEATURE_DISABLED_REASONS = {'accessNotConfigured', 'SERVICE_DISABLED'}
FEATURE_DISABLED_MESSAGES = ('has not been used in project', 'is disabled')


class FetcherError(Exception):
    """Base exception for acquisition failures."""
    pass


class TransientFetchError(FetcherError):
    """Network hiccup, timeout, rate limit or server error."""
    pass


class PermissionFetchError(FetcherError):
    """Document missing, private or the credential was rejected."""
    pass


class FeatureNotProvisionedError(FetcherError):
    """A required Google API is not enabled for the caller's project."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.remediation = remediation or (
            "Enable the Google Docs API and the Google Drive API for your Google Cloud "
            "project (APIs & Services > Library), wait a few minutes, then retry."
        )


class MalformedResponseError(FetcherError):
    """The remote answered with something that is not a usable document."""
    pass


class PolicyViolationError(FetcherError):
    """The caller asked for an operation its capabilities do not allow."""
    pass


class AcquisitionExhaustedError(FetcherError):
    """Every strategy in a fallback chain failed."""

    def __init__(self, message: str, errors: List[Exception]):
        super().__init__(message)
        self.errors = errors


def first_success(
    strategies: Sequence[Callable[[T], R]],
    argument: T,
    logger: Optional[logging.Logger] = None
) -> R:
    """
    Try each strategy in order and return the first result.

    Args:
        strategies: Callables sharing the ``(argument) -> result`` contract
        argument: Value handed to every strategy
        logger: Optional logger for per-strategy failures

    Returns:
        Result of the first strategy that did not raise

    Raises:
        AcquisitionExhaustedError: If every strategy raised (errors kept in order)
    """
    log = logger or logging.getLogger('docs_to_notion.fetcher')
    errors: List[Exception] = []

    for index, strategy in enumerate(strategies, start=1):
        name = getattr(strategy, '__name__', repr(strategy))
        try:
            log.debug(f"Strategy {index}/{len(strategies)}: {name}")
            return strategy(argument)
        except Exception as e:
            log.info(f"Strategy {index}/{len(strategies)} ({name}) failed: {e}")
            errors.append(e)

    raise AcquisitionExhaustedError(
        f"All {len(strategies)} strategies failed", errors
    )


def pick_exhausted_error(exhausted: AcquisitionExhaustedError) -> FetcherError:
    """
    Choose the error to surface for a failed fallback chain.

    A feature-not-provisioned failure wins over everything else; otherwise the
    last strategy's error is reported.
    """
    classified = [classify_request_error(e) for e in exhausted.errors]

    for error in classified:
        if isinstance(error, FeatureNotProvisionedError):
            return error

    if classified:
        return classified[-1]
    return exhausted


def is_feature_not_provisioned(response: Optional[requests.Response]) -> bool:
    """Recognize Google's "API not enabled for this project" error payload."""
    if response is None or response.status_code != 403:
        return False

    try:
        payload = response.json()
    except ValueError:
        return False

    error = payload.get('error', {}) if isinstance(payload, dict) else {}
    if not isinstance(error, dict):
        return False

    reasons = {item.get('reason') for item in error.get('errors', []) if isinstance(item, dict)}
    reasons.update(
        detail.get('reason') for detail in error.get('details', []) if isinstance(detail, dict)
    )
    if reasons & FEATURE_DISABLED_REASONS:
        return True

    message = str(error.get('message', ''))
    return any(fragment in message for fragment in FEATURE_DISABLED_MESSAGES)


def classify_request_error(error: Exception) -> FetcherError:
    """
    Map a raw exception onto the acquisition failure taxonomy.

    Args:
        error: Exception raised by a client call or a response parser

    Returns:
        A FetcherError subclass instance (the input itself if already classified)
    """
    if isinstance(error, FetcherError):
        return error

    if isinstance(error, requests.exceptions.HTTPError):
        response = error.response
        status_code = response.status_code if response is not None else None

        if is_feature_not_provisioned(response):
            return FeatureNotProvisionedError(f"Google API not enabled: {error}")
        if status_code in (401, 403, 404):
            return PermissionFetchError(f"Access denied or not found (HTTP {status_code}): {error}")
        if status_code == 429 or (status_code is not None and status_code >= 500):
            return TransientFetchError(f"Temporary server error (HTTP {status_code}): {error}")
        return FetcherError(f"HTTP error {status_code}: {error}")

    if isinstance(error, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)):
        return TransientFetchError(f"Network error: {error}")

    if isinstance(error, requests.exceptions.InvalidJSONError):
        return MalformedResponseError(f"Response is not valid JSON: {error}")

    if isinstance(error, requests.exceptions.RequestException):
        return FetcherError(f"Request failed: {error}")

    if isinstance(error, (ValueError, KeyError, TypeError, AttributeError)):
        return MalformedResponseError(f"Malformed response: {error}")

    return FetcherError(str(error))


class BaseFetcher(ABC):
    """Abstract base class for document fetchers."""

    def __init__(self, config: Dict[str, Any], client: Any = None, logger=None):
        """
        Initialize base fetcher with configuration, client and logger.

        Args:
            config: Configuration dictionary
            client: Transport client (GoogleDocsClient or a compatible fake)
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.config = config
        self.client = client
        self.logger = logger or logging.getLogger('docs_to_notion.fetcher')

    @abstractmethod
    def fetch_document(self, document_id: str) -> AcquiredDocument:
        """
        Fetch one document and return it as a Document model.

        Args:
            document_id: Google Docs document ID

        Returns:
            AcquiredDocument tagged with the acquisition path

        Raises:
            FetcherError: Classified acquisition failure
        """
        pass

    @property
    @abstractmethod
    def strategies(self) -> List[Callable[[str], Any]]:
        """Ordered fetch strategies, most faithful first."""
        pass

    def _log_progress(self, message: str, level: str = 'info') -> None:
        """
        Log progress message at specified level.

        Args:
            message: Message to log
            level: Log level (debug, info, warning, error)
        """
        log_method = getattr(self.logger, level, self.logger.info)
        log_method(message)
