"""Tests for file naming, grouping and workspace packaging."""

import zipfile
from datetime import date

from exporters import (
    WorkspaceExporter,
    ZipArchiver,
    create_batch_markdown_files,
    create_markdown_files,
    find_name_collisions,
    slugify_title
)
from models import OutputFile, RenderedUnit

CONVERTED_ON = date(2024, 1, 2)
FOOTER = '\n\n---\n\n*Converted from Google Docs to Notion on 2024-01-02*'


class TestSlugifyTitle:
    def test_punctuation_removed_and_spaces_hyphenated(self):
        assert slugify_title('Hello, World!') == 'hello-world'

    def test_whitespace_runs_collapse(self):
        assert slugify_title('  Spaced   Out  ') == 'spaced-out'

    def test_hyphens_are_kept(self):
        assert slugify_title('Set-up Guide') == 'set-up-guide'

    def test_non_ascii_letters_dropped(self):
        assert slugify_title('Café Menu') == 'caf-menu'

    def test_nothing_left_becomes_untitled(self):
        assert slugify_title('!!!') == 'untitled'


class TestCreateMarkdownFiles:
    def test_one_file_per_unit_with_footer(self):
        units = [
            RenderedUnit(title='Setup', body='# Setup\n\nStep one\n'),
            RenderedUnit(title='Next Steps', body='## Next Steps\n\nMore\n')
        ]

        files = create_markdown_files(units, converted_on=CONVERTED_ON)

        assert files == [
            OutputFile(name='setup.md', content='# Setup\n\nStep one\n' + FOOTER),
            OutputFile(name='next-steps.md', content='## Next Steps\n\nMore\n' + FOOTER)
        ]

    def test_blank_titles_are_dropped(self):
        units = [RenderedUnit(title='  ', body='# \n'), RenderedUnit(title='Kept', body='# Kept\n')]

        files = create_markdown_files(units, converted_on=CONVERTED_ON)

        assert [f.name for f in files] == ['kept.md']

    def test_footer_can_be_disabled(self):
        files = create_markdown_files([RenderedUnit(title='A', body='# A\n')], include_footer=False)

        assert files[0].content == '# A\n'


class TestCreateBatchMarkdownFiles:
    def test_grouped_by_document_in_first_seen_order(self):
        units = [
            RenderedUnit(title='Intro', body='# Intro\n', source_document_name='Doc A'),
            RenderedUnit(title='Intro', body='# Intro\n', source_document_name='Doc B'),
            RenderedUnit(title='Usage', body='# Usage\n', source_document_name='Doc A'),
            RenderedUnit(title='Loose', body='# Loose\n')
        ]

        files = create_batch_markdown_files(units, converted_on=CONVERTED_ON)

        assert [f.name for f in files] == [
            'doc-a--intro.md',
            'doc-a--usage.md',
            'doc-b--intro.md',
            'untitled-document--loose.md'
        ]

    def test_footer_names_source_document(self):
        units = [RenderedUnit(title='Intro', body='# Intro\n', source_document_name='Doc A')]

        files = create_batch_markdown_files(units, converted_on=CONVERTED_ON)

        assert files[0].content == (
            '# Intro\n\n\n---\n\n*Converted from Google Docs document "Doc A" to Notion on 2024-01-02*'
        )


class TestCollisions:
    def test_collisions_reported_not_deduplicated(self):
        units = [
            RenderedUnit(title='Setup', body='# Setup\n\none\n'),
            RenderedUnit(title='Set-up!', body='# Set-up!\n\ntwo\n'),
            RenderedUnit(title='setup', body='# setup\n\nthree\n')
        ]

        files = create_markdown_files(units, converted_on=CONVERTED_ON)

        assert len(files) == 3
        assert find_name_collisions(files) == {'setup.md': 2}

    def test_no_collisions(self):
        assert find_name_collisions([OutputFile('a.md', ''), OutputFile('b.md', '')]) == {}


class TestWriters:
    def test_workspace_exporter_writes_loose_files(self, tmp_path):
        exporter = WorkspaceExporter({}, output_dir=str(tmp_path / 'out'))

        paths = exporter.write_files([OutputFile('a.md', '# A\n'), OutputFile('b.md', '# B\n')])

        assert [p.name for p in paths] == ['a.md', 'b.md']
        assert (tmp_path / 'out' / 'b.md').read_text(encoding='utf-8') == '# B\n'
        assert exporter.stats['files_written'] == 2

    def test_zip_archiver_writes_ordered_entries(self, tmp_path):
        archiver = ZipArchiver({'export': {'output_directory': str(tmp_path)}})
        files = [OutputFile('z.md', '# Z\n'), OutputFile('a.md', '# Ä\n')]

        archive_path = archiver.write(files, timestamp_ms=1700000000000)

        assert archive_path.name == 'notion-workspace-1700000000000.zip'
        with zipfile.ZipFile(archive_path) as archive:
            assert archive.namelist() == ['z.md', 'a.md']
            assert archive.read('a.md').decode('utf-8') == '# Ä\n'
            assert archive.getinfo('z.md').compress_type == zipfile.ZIP_DEFLATED

    def test_archive_name_uses_epoch_milliseconds(self):
        assert ZipArchiver.archive_name(42) == 'notion-workspace-42.zip'
