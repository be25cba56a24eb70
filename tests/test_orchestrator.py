"""Tests for the conversion orchestrator: single documents, batches and output."""

import json
import zipfile
from datetime import date

import pytest
import requests

from fetchers import AcquisitionSelector, PermissionFetchError, PolicyViolationError
from models import DocumentDescriptor
from orchestrator import ConversionOrchestrator, ConversionReport, NoContentError
from orchestrator.conversion_orchestrator import error_section

CONVERTED_ON = date(2024, 3, 4)


def http_error(status_code, payload=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload or {}).encode('utf-8')
    return requests.exceptions.HTTPError(f'{status_code} Error', response=response)


def paragraph(text, style='NORMAL_TEXT'):
    return {'paragraph': {
        'elements': [{'textRun': {'content': text}}],
        'paragraphStyle': {'namedStyleType': style}
    }}


def body_document(title, *content):
    return {'title': title, 'body': {'content': list(content)}}


class FakeGoogleClient:
    """In-memory stand-in for GoogleDocsClient."""

    def __init__(self, documents=None, folder=None, public=None):
        self.documents = documents or {}
        self.folder = folder or []
        self.public = public or {}

    def get_document(self, document_id, params=None):
        if document_id not in self.documents:
            raise http_error(404)
        return self.documents[document_id]

    def request_raw(self, url):
        return self.get_document(url.split('documents/')[1].split('?')[0])

    def list_folder_documents(self, folder_id):
        return self.folder

    def fetch_public(self, url):
        response = requests.Response()
        text = self.public.get(url)
        response.status_code = 200 if text is not None else 404
        response._content = (text or '').encode('utf-8')
        response.encoding = 'utf-8'
        return response


def make_config(token='token', **export):
    return {
        'google': {'access_token': token},
        'conversion': {'mode': 'auto'},
        'export': export
    }


def orchestrator_for(client, token='token', **export):
    config = make_config(token, **export)
    selector = AcquisitionSelector(config, client=client)
    return ConversionOrchestrator(config, selector=selector, converted_on=CONVERTED_ON)


class TestConvertDocument:
    def test_sections_become_files(self):
        client = FakeGoogleClient(documents={'doc1': body_document(
            'Guide',
            paragraph('Welcome\n'),
            paragraph('Setup\n', 'HEADING_1'),
            paragraph('Install it.\n'),
            paragraph('Usage\n', 'HEADING_2'),
            paragraph('Run it.\n')
        )})
        orchestrator = orchestrator_for(client)

        result = orchestrator.convert_document('https://docs.google.com/document/d/doc1/edit')

        assert [f.name for f in result.files] == ['guide.md', 'setup.md', 'usage.md']
        assert result.files[2].content == (
            '## Usage\n\nRun it.\n'
            '\n\n---\n\n*Converted from Google Docs to Notion on 2024-03-04*'
        )
        assert result.report['summary']['mode'] == 'single'
        assert result.report['summary']['acquisition_path'] == 'rich'
        assert result.report['collisions'] == {}

    def test_degraded_path_yields_single_file(self):
        text = 'Published notes that are long enough to count as real document content here.'
        html = f'<html><head><title>x</title></head><body><p>{text}</p></body></html>' + ' ' * 40
        client = FakeGoogleClient(public={'https://docs.google.com/document/d/doc9/pub': html})
        orchestrator = orchestrator_for(client, token=None)

        result = orchestrator.convert_document('doc9')

        assert [f.name for f in result.files] == ['document-content.md']
        assert result.files[0].content.startswith(f'# Document Content\n\n{text}\n')
        assert result.report['summary']['acquisition_path'] == 'degraded'

    def test_empty_document_raises_no_content(self):
        client = FakeGoogleClient(documents={'doc1': body_document('Empty', paragraph('\n'))})

        with pytest.raises(NoContentError):
            orchestrator_for(client).convert_document('doc1')

    def test_acquisition_errors_propagate(self):
        with pytest.raises(PermissionFetchError):
            orchestrator_for(FakeGoogleClient()).convert_document('missing')

    def test_collisions_are_reported(self):
        client = FakeGoogleClient(documents={'doc1': body_document(
            'Doc',
            paragraph('Setup\n', 'HEADING_1'),
            paragraph('one\n'),
            paragraph('setup\n', 'HEADING_1'),
            paragraph('two\n')
        )})

        result = orchestrator_for(client).convert_document('doc1')

        assert len(result.files) == 2
        assert result.report['collisions'] == {'setup.md': 2}


class TestConvertCollection:
    def test_failed_member_becomes_error_file(self):
        client = FakeGoogleClient(
            documents={
                'a': body_document('Alpha', paragraph('Alpha body\n')),
                'c': body_document('Gamma', paragraph('Gamma body\n'))
            },
            folder=[
                {'id': 'a', 'name': 'Alpha'},
                {'id': 'b', 'name': 'Beta'},
                {'id': 'c', 'name': 'Gamma'}
            ]
        )
        orchestrator = orchestrator_for(client)

        result = orchestrator.convert_collection('https://drive.google.com/drive/folders/folder1')

        assert [f.name for f in result.files] == [
            'alpha--alpha.md',
            'beta--error-beta.md',
            'gamma--gamma.md'
        ]
        error_file = result.files[1]
        assert error_file.content.startswith('# Error: Beta\n\n')
        assert 'Converted from Google Docs document "Beta"' in error_file.content

        summary = result.report['summary']
        assert summary['mode'] == 'batch'
        assert summary['documents_succeeded'] == 2
        assert summary['documents_failed'] == 1
        assert result.report['errors'][0]['document'] == 'Beta'
        assert result.report['errors'][0]['error_type'] == 'PermissionFetchError'

    def test_empty_member_contributes_nothing(self):
        client = FakeGoogleClient(
            documents={
                'a': body_document('Alpha', paragraph('Alpha body\n')),
                'e': body_document('Blank', paragraph('\n'))
            },
            folder=[{'id': 'a', 'name': 'Alpha'}, {'id': 'e', 'name': 'Blank'}]
        )

        result = orchestrator_for(client).convert_collection('folder1')

        assert [f.name for f in result.files] == ['alpha--alpha.md']
        assert result.report['summary']['documents_empty'] == 1

    def test_every_member_failing_raises_no_content(self):
        client = FakeGoogleClient(folder=[{'id': 'x', 'name': 'X'}, {'id': 'y', 'name': 'Y'}])

        with pytest.raises(NoContentError):
            orchestrator_for(client).convert_collection('folder1')

    def test_empty_folder_raises_no_content(self):
        with pytest.raises(NoContentError):
            orchestrator_for(FakeGoogleClient()).convert_collection('folder1')

    def test_batch_requires_rich_access(self):
        with pytest.raises(PolicyViolationError):
            orchestrator_for(FakeGoogleClient(), token=None).convert_collection('folder1')


class TestWriteOutput:
    def result(self):
        client = FakeGoogleClient(documents={'doc1': body_document(
            'Notes', paragraph('Intro\n', 'HEADING_1'), paragraph('Hello\n')
        )})
        return orchestrator_for(client)

    def test_loose_files(self, tmp_path):
        orchestrator = self.result()
        result = orchestrator.convert_document('doc1')

        paths = orchestrator.write_output(result, output_dir=str(tmp_path), create_archive=False)

        assert [p.name for p in paths] == ['intro.md']
        assert (tmp_path / 'intro.md').read_text(encoding='utf-8').startswith('# Intro\n\nHello\n')

    def test_archive(self, tmp_path):
        orchestrator = self.result()
        result = orchestrator.convert_document('doc1')

        paths = orchestrator.write_output(result, output_dir=str(tmp_path), create_archive=True)

        assert len(paths) == 1
        assert paths[0].name.startswith('notion-workspace-')
        with zipfile.ZipFile(paths[0]) as archive:
            assert archive.namelist() == ['intro.md']


class TestHelpers:
    def test_error_section_includes_remediation(self):
        class ProvisioningError(Exception):
            remediation = 'Enable the API.'

        section = error_section(DocumentDescriptor(id='b', name='Beta'), ProvisioningError('disabled'))

        assert section.title == 'Error: Beta'
        assert section.is_error
        assert section.source_document_name == 'Beta'
        assert 'disabled' in section.content
        assert section.content.rstrip().endswith('Enable the API.')

    def test_console_report_lists_errors_and_collisions(self):
        report = ConversionReport().generate_report(
            {'documents_total': 2, 'documents_succeeded': 1, 'documents_failed': 1,
             'errors': [{'document': 'Beta', 'error': 'not found'}]},
            1.5, 'batch', 'rich', {'setup.md': 2}
        )

        text = ConversionReport().format_console_report(report)

        assert 'Beta: not found' in text
        assert 'setup.md x2' in text
        assert report['summary']['success_rate'] == 0.5
