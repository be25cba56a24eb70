"""File naming, grouping and writing of the Notion-ready Markdown workspace."""

import logging
import re
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from models import OutputFile, RenderedUnit

DEFAULT_SOURCE_DOCUMENT_NAME = 'Untitled Document'
UNTITLED_SLUG = 'untitled'

SLUG_DISALLOWED_PATTERN = re.compile(r'[^a-zA-Z0-9\s-]')
SLUG_WHITESPACE_PATTERN = re.compile(r'\s+')


def slugify_title(title: str) -> str:
    """
    Convert a title to a file-name slug.

    Characters other than letters, digits, whitespace and hyphens are
    dropped, whitespace runs become single hyphens and the result is
    lower-cased.

    Args:
        title: Section or document title

    Returns:
        Slug ("untitled" if nothing survives)
    """
    slug = SLUG_DISALLOWED_PATTERN.sub('', (title or '').strip())
    slug = SLUG_WHITESPACE_PATTERN.sub('-', slug).lower()
    return slug or UNTITLED_SLUG


def _format_date(converted_on: Optional[date]) -> str:
    return (converted_on or date.today()).isoformat()


def conversion_footer(converted_on: Optional[date] = None, source_document_name: Optional[str] = None) -> str:
    """Provenance footer appended to every file."""
    when = _format_date(converted_on)
    if source_document_name:
        return f'\n\n---\n\n*Converted from Google Docs document "{source_document_name}" to Notion on {when}*'
    return f'\n\n---\n\n*Converted from Google Docs to Notion on {when}*'


def create_markdown_files(
    units: Sequence[RenderedUnit],
    converted_on: Optional[date] = None,
    include_footer: bool = True
) -> List[OutputFile]:
    """
    Build one file per rendered unit for a single-document conversion.

    Units without a usable title are dropped.

    Args:
        units: Rendered units in section order
        converted_on: Date stamped in the footer (today when omitted)
        include_footer: Append the provenance footer

    Returns:
        Output files named ``<title-slug>.md``
    """
    files = []

    for unit in units:
        if not unit.title or not unit.title.strip():
            continue

        content = unit.body + (conversion_footer(converted_on) if include_footer else '')
        files.append(OutputFile(name=f'{slugify_title(unit.title)}.md', content=content))

    return files


def group_by_source_document(units: Sequence[RenderedUnit]) -> Dict[str, List[RenderedUnit]]:
    """Group units by originating document, keeping first-seen order."""
    groups: Dict[str, List[RenderedUnit]] = {}
    for unit in units:
        groups.setdefault(unit.source_document_name or DEFAULT_SOURCE_DOCUMENT_NAME, []).append(unit)
    return groups


def create_batch_markdown_files(
    units: Sequence[RenderedUnit],
    converted_on: Optional[date] = None,
    include_footer: bool = True
) -> List[OutputFile]:
    """
    Build files for a multi-document conversion.

    Files are named ``<document-slug>--<title-slug>.md`` and ordered by
    document (first-seen) and then by section. The footer names the source
    document.
    """
    files = []

    for document_name, group in group_by_source_document(units).items():
        prefix = slugify_title(document_name)
        footer = conversion_footer(converted_on, document_name) if include_footer else ''

        for unit in group:
            if not unit.title or not unit.title.strip():
                continue
            files.append(OutputFile(
                name=f'{prefix}--{slugify_title(unit.title)}.md',
                content=unit.body + footer
            ))

    return files


def find_name_collisions(files: Sequence[OutputFile]) -> Dict[str, int]:
    """
    Report file names that occur more than once.

    Returns:
        Mapping of colliding name to occurrence count (empty if none)
    """
    counts = Counter(f.name for f in files)
    return {name: count for name, count in counts.items() if count > 1}


class WorkspaceExporter:
    """Writes output files as loose Markdown files into the output directory."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None, output_dir: Optional[str] = None):
        """
        Initialize the workspace exporter.

        Args:
            config: Configuration dictionary with export settings
            logger: Logger instance
            output_dir: Optional output directory override (takes precedence over config)
        """
        self.config = config
        self.logger = logger or logging.getLogger('docs_to_notion.exporters.workspace')

        export_config = config.get('export', {})
        self.output_directory = Path(output_dir) if output_dir else Path(
            export_config.get('output_directory', './notion-export')
        )

        self.stats = {
            'files_written': 0,
            'bytes_written': 0
        }

    def write_files(self, files: Sequence[OutputFile]) -> List[Path]:
        """
        Write every file into the output directory.

        Colliding names are logged; the later file overwrites the earlier one.

        Returns:
            Paths written, in order
        """
        for name, count in find_name_collisions(files).items():
            self.logger.warning(f"File name '{name}' produced {count} times; later files overwrite earlier ones")

        self.output_directory.mkdir(parents=True, exist_ok=True)
        written = []

        for output_file in files:
            path = self.output_directory / output_file.name
            with open(path, 'w', encoding='utf-8') as f:
                f.write(output_file.content)

            self.stats['files_written'] += 1
            self.stats['bytes_written'] += len(output_file.content.encode('utf-8'))
            self.logger.debug(f"Wrote {path}")
            written.append(path)

        self.logger.info(f"Wrote {len(written)} markdown file(s) to {self.output_directory}")
        return written


__all__ = [
    'slugify_title',
    'conversion_footer',
    'create_markdown_files',
    'create_batch_markdown_files',
    'group_by_source_document',
    'find_name_collisions',
    'WorkspaceExporter',
    'DEFAULT_SOURCE_DOCUMENT_NAME'
]
