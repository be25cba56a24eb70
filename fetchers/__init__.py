"""Fetchers package for acquiring Google Docs via the Docs API or public exports."""

from .base_fetcher import (
    AcquisitionExhaustedError,
    BaseFetcher,
    FeatureNotProvisionedError,
    FetcherError,
    MalformedResponseError,
    PermissionFetchError,
    PolicyViolationError,
    TransientFetchError,
    classify_request_error,
    first_success
)
from .api_fetcher import ApiFetcher
from .export_fetcher import ExportFetcher
from .acquisition_selector import AcquisitionSelector, BatchEntry, rich_access_available

__all__ = [
    'BaseFetcher',
    'FetcherError',
    'TransientFetchError',
    'PermissionFetchError',
    'FeatureNotProvisionedError',
    'MalformedResponseError',
    'PolicyViolationError',
    'AcquisitionExhaustedError',
    'classify_request_error',
    'first_success',
    'ApiFetcher',
    'ExportFetcher',
    'AcquisitionSelector',
    'BatchEntry',
    'rich_access_available'
]
