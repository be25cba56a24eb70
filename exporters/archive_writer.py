"""Zip packaging of the Markdown workspace."""

import logging
import time
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from models import OutputFile
from .workspace_exporter import find_name_collisions

COMPRESSION_LEVEL = 6


class ZipArchiver:
    """Bundles output files into ``notion-workspace-<epoch-ms>.zip``."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None, output_dir: Optional[str] = None):
        self.config = config
        self.logger = logger or logging.getLogger('docs_to_notion.exporters.archive')

        export_config = config.get('export', {})
        self.output_directory = Path(output_dir) if output_dir else Path(
            export_config.get('output_directory', './notion-export')
        )

    @staticmethod
    def archive_name(timestamp_ms: Optional[int] = None) -> str:
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f'notion-workspace-{timestamp_ms}.zip'

    def write(self, files: Sequence[OutputFile], timestamp_ms: Optional[int] = None) -> Path:
        """
        Write the files, in order, into a new zip archive.

        Colliding names are reported before writing; both entries are kept.

        Args:
            files: Ordered output files
            timestamp_ms: Epoch milliseconds used in the archive name (now when omitted)

        Returns:
            Path of the written archive
        """
        collisions = find_name_collisions(files)
        for name, count in collisions.items():
            self.logger.warning(f"Archive entry '{name}' appears {count} times")

        self.output_directory.mkdir(parents=True, exist_ok=True)
        archive_path = self.output_directory / self.archive_name(timestamp_ms)

        with zipfile.ZipFile(
            archive_path,
            'w',
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=COMPRESSION_LEVEL
        ) as archive:
            for output_file in files:
                self.logger.debug(f"Adding {output_file.name} ({len(output_file.content)} chars)")
                archive.writestr(output_file.name, output_file.content)

        self.logger.info(f"Wrote {len(files)} file(s) to {archive_path}")
        return archive_path


__all__ = ['ZipArchiver']
