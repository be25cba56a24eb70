"""Inline Markdown formatting for text runs."""

import logging
import re

from models import TextRun, TextStyle

logger = logging.getLogger('docs_to_notion.converters.runformatter')

EDGE_WHITESPACE_PATTERN = re.compile(r'^(\s*)(.*?)(\s*)$', re.DOTALL)


def apply_text_formatting(text: str, style: TextStyle) -> str:
    """
    Wrap text in Markdown/HTML markers according to its style.

    Markers are applied in a fixed order: bold, italic, underline,
    strikethrough, then the link as the outermost wrapper. Surrounding
    whitespace stays outside the markers so emphasis never opens or closes on
    a space (``"** x**"`` is not bold in most renderers).

    Args:
        text: Raw run text
        style: Style flags of the run

    Returns:
        Formatted text ("" for empty input)
    """
    if not text:
        return ''

    match = EDGE_WHITESPACE_PATTERN.match(text)
    leading, core, trailing = match.group(1), match.group(2), match.group(3)

    if not core:
        return text

    if style.bold:
        core = f'**{core}**'
    if style.italic:
        core = f'*{core}*'
    if style.underline:
        core = f'<u>{core}</u>'
    if style.strikethrough:
        core = f'~~{core}~~'
    if style.link_url:
        core = f'[{core}]({style.link_url})'

    return f'{leading}{core}{trailing}'


def format_run(run: TextRun) -> str:
    return apply_text_formatting(run.text, run.style)


__all__ = ['apply_text_formatting', 'format_run']
