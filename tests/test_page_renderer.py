"""Tests for section rendering and whitespace normalization."""

import unittest
from unittest.mock import patch

from converters import convert_document
from converters.page_renderer import normalize_content, render_section, render_sections
from models import (
    Document,
    Paragraph,
    RenderedUnit,
    Section,
    SingleBody,
    SubDocument,
    Table,
    TableCell,
    TextRun
)


class TestNormalizeContent(unittest.TestCase):
    def test_collapses_excess_newlines(self):
        self.assertEqual(normalize_content('a\n\n\n\nb'), 'a\n\nb')

    def test_separates_glued_sentences(self):
        self.assertEqual(normalize_content('First sentence.Second one'), 'First sentence. Second one')

    def test_leaves_lowercase_and_numbers_alone(self):
        self.assertEqual(normalize_content('see e.g. x and 3.14 or example.com'), 'see e.g. x and 3.14 or example.com')

    def test_squeezes_horizontal_whitespace(self):
        self.assertEqual(normalize_content('a   b\t\tc'), 'a b c')

    def test_trims_edges(self):
        self.assertEqual(normalize_content('\n\n  text  \n\n'), 'text')

    def test_idempotent(self):
        samples = [
            'Intro.Next   line\n\n\n\nMore\t\ttext.',
            '  | A | B |\n| --- | --- |\n\n\n',
            'a.B.C   d\n \n\n\ne',
            ''
        ]
        for sample in samples:
            once = normalize_content(sample)
            self.assertEqual(normalize_content(once), once)


class TestRenderSection(unittest.TestCase):
    def test_heading_line_and_single_trailing_newline(self):
        unit = render_section(Section(title='Setup', content='Step one\n', level=1))
        self.assertEqual(unit.body, '# Setup\n\nStep one\n')
        self.assertEqual(unit.title, 'Setup')

    def test_level_is_capped_at_six(self):
        unit = render_section(Section(title='Deep', content='x', level=9))
        self.assertTrue(unit.body.startswith('###### Deep\n\n'))

    def test_empty_content(self):
        self.assertEqual(render_section(Section(title='Empty', content='')).body, '# Empty\n')

    def test_source_document_name_and_error_flag_carried(self):
        section = Section(title='Error: Doc', content='boom', source_document_name='Doc', is_error=True)
        unit = render_section(section)
        self.assertEqual(unit.source_document_name, 'Doc')
        self.assertTrue(unit.is_error)

    def test_rendering_twice_is_identical(self):
        section = Section(title='Twice', content='Some.Text   here\n\n\n', level=2)
        self.assertEqual(render_section(section), render_section(section))


class TestRenderSections(unittest.TestCase):
    def test_failure_degrades_to_minimal_unit(self):
        sections = [
            Section(title='Broken', content='raw  content'),
            Section(title='Fine', content='body')
        ]

        with patch('converters.page_renderer.normalize_content', side_effect=[RuntimeError('boom'), 'body']):
            units = render_sections(sections)

        self.assertEqual(units, [
            RenderedUnit(title='Broken', body='# Broken\n\nraw  content\n'),
            RenderedUnit(title='Fine', body='# Fine\n\nbody\n')
        ])


class TestConvertDocument(unittest.TestCase):
    def test_table_only_document_renders_trimmed_table(self):
        def cell(text):
            return TableCell(paragraphs=[Paragraph(runs=[TextRun(text)])])

        table = Table(rows=[[cell('A'), cell('B')], [cell('1'), cell('2')]])
        document = Document(title='Metrics', layout=SingleBody(body=SubDocument(elements=[table])))

        units = convert_document(document)

        self.assertEqual(len(units), 1)
        self.assertEqual(units[0].body, '# Metrics\n\n| A | B |\n| --- | --- |\n| 1 | 2 |\n')


if __name__ == '__main__':
    unittest.main()
