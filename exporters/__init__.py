"""Workspace export package for the Google Docs to Notion conversion pipeline.

This package turns rendered Markdown units into the files of a Notion import
workspace and packages them.

Package Structure:
- workspace_exporter: File naming (slugs), per-document grouping, provenance
  footers, collision reporting and loose-file writing
- archive_writer: Zip bundle of the ordered output files

Configuration Referenced:
- export.output_directory: Directory receiving the files or the archive
- export.include_footer: Append the provenance footer to every file
- export.create_archive: Write a zip archive instead of loose files
"""

from .workspace_exporter import (
    WorkspaceExporter,
    create_batch_markdown_files,
    create_markdown_files,
    find_name_collisions,
    slugify_title
)
from .archive_writer import ZipArchiver

__all__ = [
    'WorkspaceExporter',
    'ZipArchiver',
    'create_markdown_files',
    'create_batch_markdown_files',
    'find_name_collisions',
    'slugify_title'
]
