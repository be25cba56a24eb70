"""Pipe-table rendering for document tables."""

from models import Table, TableCell
from .paragraph_classifier import paragraph_plain_text


def cell_text(cell: TableCell) -> str:
    """
    Plain text of a cell, paragraphs joined by single spaces and trimmed.

    Line breaks inside the cell are folded into spaces so the cell stays on
    its table row.
    """
    lines = (
        line.strip()
        for paragraph in cell.paragraphs
        for line in paragraph_plain_text(paragraph).splitlines()
    )
    return ' '.join(line for line in lines if line)


def escape_cell(text: str) -> str:
    return text.replace('|', '\\|')


def render_table(table: Table) -> str:
    """
    Render a table as a Markdown pipe table.

    The first row is treated as the header. Cell formatting is dropped and
    literal pipes are escaped.

    Args:
        table: Table to render

    Returns:
        Newline-terminated table lines, or "" for a table with no rows
    """
    if not table.rows:
        return ''

    lines = []
    for index, row in enumerate(table.rows):
        lines.append('| ' + ' | '.join(escape_cell(cell_text(cell)) for cell in row) + ' |')
        if index == 0:
            lines.append('| ' + ' | '.join('---' for _ in row) + ' |')

    return '\n'.join(lines) + '\n'


__all__ = ['render_table', 'cell_text', 'escape_cell']
