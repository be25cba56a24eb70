"""Logging setup for the converter: colored console output, optional log file, batch progress."""

import copy
import logging
import logging.handlers
import time
from typing import Any, Dict, List, Optional, Tuple

import colorlog

LOGGER_NAME = 'docs_to_notion'

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

VALID_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

SENSITIVE_KEYS = ('token', 'api_key', 'secret', 'password')
REDACTED = '***REDACTED***'

# (dotted config key, label) pairs shown by log_config, in display order
CONFIG_SUMMARY_FIELDS: List[Tuple[str, str]] = [
    ('conversion.mode', 'Mode'),
    ('conversion.document_url', 'Document'),
    ('conversion.folder_url', 'Folder'),
    ('google.access_token', 'Access token'),
    ('google.api_key', 'API key'),
    ('google.verify_ssl', 'Verify SSL'),
    ('export.output_directory', 'Output directory'),
    ('export.create_archive', 'Zip archive'),
    ('export.include_footer', 'Footer'),
    ('advanced.request_timeout', 'Request timeout (s)'),
    ('advanced.max_retries', 'Max retries'),
    ('advanced.rate_limit', 'Rate limit (s)'),
]


def resolve_level(verbosity: int = 0, level: Optional[str] = None) -> int:
    """
    Pick the effective log level.

    An explicit level name wins; otherwise -v maps to INFO and -vv to DEBUG.

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    if level:
        name = level.upper()
        if name not in VALID_LEVELS:
            raise ValueError(f"Invalid log level '{level}'. Must be one of: {list(VALID_LEVELS)}")
        return getattr(logging, name)

    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``docs_to_notion`` logger.

    Calling it again replaces the handlers, so the CLI can set up console
    logging first and re-run it once the config file names a log file.

    Args:
        verbosity: Count of -v flags (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Optional path of a rotating log file
        log_format: Optional record format
        date_format: Optional timestamp format
        level: Optional level name overriding ``verbosity``

    Returns:
        The configured package logger
    """
    log_level = resolve_level(verbosity, level)
    log_format = log_format or DEFAULT_LOG_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    # Third-party loggers (requests, urllib3) stay at WARNING on the root
    logging.basicConfig(level=logging.WARNING, format=log_format, datefmt=date_format)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(log_level)
    console.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors=LOG_COLORS
    ))
    logger.addHandler(console)

    if not log_file:
        logger.debug(f"Logging to console at {logging.getLevelName(log_level)}")
        return logger

    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8'
        )
    except OSError as e:
        logger.warning(f"Cannot open log file {log_file}: {e}")
        return logger

    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
    logger.addHandler(file_handler)
    logger.info(f"Logging to {log_file} at {logging.getLevelName(log_level)}")

    return logger


def format_elapsed(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, seconds = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {seconds}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {seconds}s"


class ProgressTracker:
    """
    Context manager counting processed documents during a batch.

    Failures are remembered by name and listed in the closing summary, which
    is logged at WARNING when anything failed and at ERROR when everything did.
    """

    LOG_EVERY = 10

    def __init__(self, total_items: int, item_type: str = "documents"):
        self.total_items = total_items
        self.item_type = item_type
        self.processed_items = 0
        self.successful_items = 0
        self.failed_names: List[str] = []
        self.start_time: Optional[float] = None
        self.logger = logging.getLogger(f'{LOGGER_NAME}.progress')

    @property
    def failed_items(self) -> int:
        return len(self.failed_names)

    def __enter__(self) -> 'ProgressTracker':
        self.start_time = time.time()
        self.logger.info(f"Processing {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return

        elapsed = format_elapsed(time.time() - self.start_time)

        if self.failed_items and self.failed_items == self.total_items:
            log = self.logger.error
        elif self.failed_items:
            log = self.logger.warning
        else:
            log = self.logger.info

        log(
            f"{self.item_type.capitalize()}: {self.successful_items}/{self.total_items} succeeded, "
            f"{self.failed_items} failed, {self.processed_items} processed in {elapsed}"
        )
        if self.failed_names:
            log(f"Failed {self.item_type}: {', '.join(self.failed_names)}")

    def increment(self, success: bool = True, name: Optional[str] = None) -> None:
        """
        Record one processed item.

        Args:
            success: Whether the item converted
            name: Item name, remembered when it failed
        """
        self.processed_items += 1

        if success:
            self.successful_items += 1
        else:
            self.failed_names.append(name or f'#{self.processed_items}')

        if not success or self.processed_items % self.LOG_EVERY == 0:
            self.logger.info(
                f"{self.processed_items}/{self.total_items} {self.item_type} processed"
                + ("" if success else f" ({name or 'item'} failed)")
            )


def log_section(title: str) -> None:
    """Log a banner separating pipeline phases."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.info("=" * 60)
    logger.info(f"  {title.upper()}")
    logger.info("=" * 60)


def log_config(config: Dict[str, Any]) -> None:
    """Log the effective configuration with credentials masked."""
    logger = logging.getLogger(LOGGER_NAME)
    sanitized = _sanitize_config(config)

    log_section("Configuration")
    for dotted_key, label in CONFIG_SUMMARY_FIELDS:
        value: Any = sanitized
        for key in dotted_key.split('.'):
            value = value.get(key) if isinstance(value, dict) else None
        logger.info(f"{label}: {'Not set' if value is None else value}")


def _is_sensitive(key: str) -> bool:
    return any(fragment in key.lower() for fragment in SENSITIVE_KEYS)


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of the configuration with credential values replaced by a marker.

    Keys containing token, api_key, secret or password are masked at any
    depth; unset (None) credentials stay None so they still read as not set.
    """
    def mask(data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: REDACTED if _is_sensitive(str(key)) and isinstance(value, str) else mask(value)
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [mask(item) for item in data]
        return data

    return mask(copy.deepcopy(config))


__all__ = [
    'LOGGER_NAME',
    'setup_logging',
    'resolve_level',
    'ProgressTracker',
    'log_section',
    'log_config'
]
