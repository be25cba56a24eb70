"""Tests for heading-driven section segmentation."""

from converters.section_segmenter import segment_body
from converters.table_renderer import render_table
from models import Paragraph, Section, Table, TableCell, TextRun, TextStyle


def para(text, level=0):
    return Paragraph(runs=[TextRun(text)], heading_level=level)


def table_2x2():
    def cell(text):
        return TableCell(paragraphs=[para(text)])
    return Table(rows=[[cell('A'), cell('B')], [cell('1'), cell('2')]])


class TestSegmentBody:
    """Segmentation of a single sub-document body."""

    def test_leading_body_text_opens_default_section(self):
        elements = [
            para('Intro text'),
            para('Setup', 1),
            para('Step one'),
            para('Details', 2),
            para('More info')
        ]

        sections = segment_body(elements, 'Guide')

        assert sections == [
            Section(title='Guide', content='Intro text\n', level=1, parent_label='Guide'),
            Section(title='Setup', content='Step one\n', level=1, parent_label='Guide'),
            Section(title='Details', content='More info\n', level=2, parent_label='Guide')
        ]

    def test_empty_body_yields_nothing(self):
        assert segment_body([], 'Guide') == []

    def test_single_table_body(self):
        table = table_2x2()
        sections = segment_body([table], 'Guide')

        assert len(sections) == 1
        assert sections[0].title == 'Guide'
        assert sections[0].level == 1
        assert sections[0].content == render_table(table) + '\n\n'

    def test_no_headings_gives_one_section_with_all_text_in_order(self):
        texts = ['First', 'Second', 'Third', 'Fourth']
        sections = segment_body([para(t) for t in texts], 'Notes')

        assert len(sections) == 1
        assert sections[0].content == 'First\nSecond\nThird\nFourth\n'

    def test_n_headings_give_n_sections(self):
        elements = []
        for index in range(1, 5):
            elements.append(para(f'Heading {index}', (index % 3) + 1))
            elements.append(para(f'Body {index}a'))
            elements.append(para(f'Body {index}b'))

        sections = segment_body(elements, 'Doc')

        assert [s.title for s in sections] == ['Heading 1', 'Heading 2', 'Heading 3', 'Heading 4']
        assert [s.level for s in sections] == [2, 3, 1, 2]
        assert sections[-1].content == 'Body 4a\nBody 4b\n'

    def test_blank_paragraphs_are_skipped(self):
        elements = [para('   \n'), para('Title', 1), para('\n'), para('Text'), para('')]
        sections = segment_body(elements, 'Doc')

        assert sections == [Section(title='Title', content='Text\n', level=1, parent_label='Doc')]

    def test_heading_without_content_is_dropped(self):
        elements = [para('Empty', 1), para('Full', 2), para('Body')]
        sections = segment_body(elements, 'Doc')

        assert [s.title for s in sections] == ['Full']

    def test_only_headings_yield_nothing(self):
        assert segment_body([para('One', 1), para('Two', 2)], 'Doc') == []

    def test_table_after_heading_is_appended(self):
        table = table_2x2()
        sections = segment_body([para('Data', 3), para('Intro'), table], 'Doc')

        assert len(sections) == 1
        assert sections[0].content == 'Intro\n' + render_table(table) + '\n\n'
        assert sections[0].level == 3

    def test_heading_title_is_formatted_and_trimmed(self):
        heading = Paragraph(runs=[TextRun('  Bold heading\n', TextStyle(bold=True))], heading_level=1)
        sections = segment_body([heading, para('Body')], 'Doc')

        assert sections[0].title == '**Bold heading**'

    def test_segmentation_does_not_mutate_input(self):
        elements = [para('Intro'), para('Head', 1), para('Body')]
        snapshot = [e.to_dict() for e in elements]

        first = segment_body(elements, 'Doc')
        second = segment_body(elements, 'Doc')

        assert first == second
        assert [e.to_dict() for e in elements] == snapshot
