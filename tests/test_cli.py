"""Tests for the command-line entry point."""

import logging
import sys

import pytest

import convert
from fetchers import FeatureNotProvisionedError, PermissionFetchError
from logger import LOGGER_NAME
from models import ConversionResult, OutputFile, Section

DOC_URL = 'https://docs.google.com/document/d/doc1/edit'


class FakeOrchestrator:
    """Replaces ConversionOrchestrator; behaviour set per test through class attributes."""

    error = None
    written = []

    def __init__(self, config, logger=None):
        self.config = config

    def _result(self):
        if self.error is not None:
            raise self.error
        return ConversionResult(
            files=[OutputFile('setup.md', '# Setup\n')],
            units=[],
            sections=[Section(title='Setup', content='x', level=2)],
            report={'summary': {'mode': 'single', 'acquisition_path': 'rich'}}
        )

    def convert_document(self, document):
        return self._result()

    def convert_collection(self, folder):
        return self._result()

    def write_output(self, result):
        FakeOrchestrator.written.append(result)
        return [self.config['export']['output_directory'] + '/notion-workspace-1.zip']


@pytest.fixture
def cli(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(convert, 'ConversionOrchestrator', FakeOrchestrator)
    FakeOrchestrator.error = None
    FakeOrchestrator.written = []

    def run(*argv):
        monkeypatch.setattr(sys, 'argv', ['docs-to-notion', *argv])
        return convert.main()

    yield run

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)


def test_missing_source_is_a_usage_error(cli, capsys):
    assert cli() == 2
    assert '--doc-url or --folder-url' in capsys.readouterr().err


def test_doc_and_folder_are_mutually_exclusive(cli):
    with pytest.raises(SystemExit):
        cli('--doc-url', DOC_URL, '--folder-url', 'https://drive.google.com/drive/folders/f1')


def test_folder_without_token_is_rejected(cli, capsys):
    assert cli('--folder-url', 'https://drive.google.com/drive/folders/f1') == 2
    assert 'google.access_token' in capsys.readouterr().err


def test_missing_config_file(cli):
    assert cli('--doc-url', DOC_URL, '--config', 'absent.yaml') == 2


def test_dry_run_prints_outline_without_writing(cli, capsys):
    assert cli('--doc-url', DOC_URL, '--dry-run') == 0

    out = capsys.readouterr().out
    assert 'CONVERSION PREVIEW (DRY RUN)' in out
    assert '  - Setup' in out
    assert 'setup.md' in out
    assert FakeOrchestrator.written == []


def test_conversion_writes_workspace(cli, capsys):
    assert cli('--doc-url', DOC_URL, '--output-dir', 'out') == 0

    assert len(FakeOrchestrator.written) == 1
    assert 'Workspace written to out/notion-workspace-1.zip' in capsys.readouterr().out


def test_acquisition_failure_exit_code(cli, capsys):
    FakeOrchestrator.error = PermissionFetchError('Document not found')

    assert cli('--doc-url', DOC_URL) == 1
    assert 'Document not found' in capsys.readouterr().err


def test_disabled_api_prints_remediation(cli, capsys):
    FakeOrchestrator.error = FeatureNotProvisionedError('Docs API disabled')

    assert cli('--doc-url', DOC_URL) == 1
    assert 'Enable the Google Docs API' in capsys.readouterr().err
