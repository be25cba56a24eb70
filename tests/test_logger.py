"""Tests for logging setup, config masking and batch progress tracking."""

import logging

import pytest

from logger import LOGGER_NAME, ProgressTracker, _sanitize_config, resolve_level, setup_logging


class TestResolveLevel:
    def test_verbosity_levels(self):
        assert resolve_level(0) == logging.WARNING
        assert resolve_level(1) == logging.INFO
        assert resolve_level(3) == logging.DEBUG

    def test_explicit_level_wins(self):
        assert resolve_level(2, 'error') == logging.ERROR

    def test_unknown_level(self):
        with pytest.raises(ValueError, match='Invalid log level'):
            resolve_level(0, 'LOUD')


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / 'run.log'

    setup_logging(verbosity=1)
    logger = setup_logging(verbosity=1, log_file=str(log_file))
    logger.info('hello file')
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 2
    assert 'hello file' in log_file.read_text(encoding='utf-8')

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_sanitize_config_masks_credentials_only():
    config = {
        'google': {'access_token': 'secret-token', 'api_key': None, 'verify_ssl': True},
        'conversion': {'document_url': 'https://docs.google.com/document/d/x'}
    }

    sanitized = _sanitize_config(config)

    assert sanitized['google']['access_token'] == '***REDACTED***'
    assert sanitized['google']['api_key'] is None
    assert sanitized['google']['verify_ssl'] is True
    assert sanitized['conversion'] == config['conversion']
    assert config['google']['access_token'] == 'secret-token'


def test_progress_tracker_counts_and_names_failures(caplog, monkeypatch):
    monkeypatch.setattr(logging.getLogger(LOGGER_NAME), 'propagate', True)
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        with ProgressTracker(total_items=3) as tracker:
            tracker.increment(success=True, name='Alpha')
            tracker.increment(success=False, name='Beta')
            tracker.increment(success=True, name='Gamma')

    assert tracker.successful_items == 2
    assert tracker.failed_items == 1
    assert tracker.failed_names == ['Beta']
    assert 'Failed documents: Beta' in caplog.text
