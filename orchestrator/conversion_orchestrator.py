"""
Conversion orchestrator for coordinating the complete conversion pipeline.

This module sequences the conversion phases: Acquire → Flatten/Segment →
Render → Name/Group → Report, for a single document or a whole Drive folder.
"""

import logging
import time
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from config_loader import get_nested
from converters import flatten_document, render_sections
from exporters import (
    WorkspaceExporter,
    ZipArchiver,
    create_batch_markdown_files,
    create_markdown_files,
    find_name_collisions
)
from fetchers import AcquisitionSelector, FeatureNotProvisionedError
from google_docs_client import extract_document_id, extract_folder_id
from logger import ProgressTracker, log_section
from models import ConversionResult, DocumentDescriptor, Section
from orchestrator.conversion_report import ConversionReport

logger = logging.getLogger('docs_to_notion.orchestrator')

NO_CONTENT_MESSAGE = "No content sections found in the document"


class NoContentError(Exception):
    """A conversion produced no content sections at all."""
    pass


def error_section(descriptor: DocumentDescriptor, error: Exception) -> Section:
    """Synthetic section standing in for a batch member that failed."""
    content = f'Failed to convert the document "{descriptor.name}" ({descriptor.id}).\n\n{error}\n'
    remediation = getattr(error, 'remediation', None)
    if remediation:
        content += f'\n{remediation}\n'

    return Section(
        title=f'Error: {descriptor.name}',
        content=content,
        level=1,
        parent_label=descriptor.name,
        source_document_name=descriptor.name,
        is_error=True
    )


def _resolve_id(value: str, extractor) -> str:
    if '/' in value or '?' in value:
        return extractor(value)
    return value


class ConversionOrchestrator:
    """Central coordinator sequencing Acquire → Segment → Render → Name → Report."""

    def __init__(
        self,
        config: Dict[str, Any],
        selector: Optional[AcquisitionSelector] = None,
        logger: Optional[logging.Logger] = None,
        converted_on: Optional[date] = None
    ):
        """
        Initialize conversion orchestrator.

        Args:
            config: Configuration dictionary
            selector: Optional acquisition selector (built from config when omitted)
            logger: Optional logger instance
            converted_on: Date stamped into file footers (today when omitted)
        """
        self.config = config
        self.logger = logger or logging.getLogger('docs_to_notion.orchestrator')
        self.selector = selector or AcquisitionSelector(config)
        self.converted_on = converted_on
        self.include_footer = get_nested(config, 'export.include_footer', True)
        self.report_generator = ConversionReport(self.logger)

        self.logger.info(
            f"ConversionOrchestrator initialized (rich access: {self.selector.has_rich_access})"
        )

    def convert_document(self, document: str) -> ConversionResult:
        """
        Convert one Google Doc into Markdown files.

        Args:
            document: Google Docs URL or bare document ID

        Returns:
            ConversionResult with files, rendered units, sections and report

        Raises:
            ValueError: If the URL carries no document ID
            FetcherError: If acquisition failed (propagated unchanged)
            NoContentError: If the document yielded no sections
        """
        start_time = time.time()
        document_id = _resolve_id(document, extract_document_id)

        log_section("Acquisition")
        acquired = self.selector.acquire_document(document_id)
        self.logger.info(
            f"Acquired '{acquired.document.title}' via {acquired.path.value} path"
        )

        log_section("Conversion")
        sections = flatten_document(acquired.document)
        if not sections:
            raise NoContentError(NO_CONTENT_MESSAGE)

        units = render_sections(sections)
        files = create_markdown_files(units, self.converted_on, self.include_footer)
        collisions = self._report_collisions(files)

        stats = {
            'documents_total': 1,
            'documents_succeeded': 1,
            'sections': len(sections),
            'files': len(files)
        }
        report = self.report_generator.generate_report(
            stats, time.time() - start_time, 'single', acquired.path.value, collisions
        )

        self.logger.info(f"Converted {len(sections)} section(s) into {len(files)} file(s)")
        return ConversionResult(files=files, units=units, sections=sections, report=report)

    def convert_collection(self, folder: str) -> ConversionResult:
        """
        Convert every Google Doc of a Drive folder.

        Members are processed one after another. A failing member becomes an
        error section and never aborts the batch.
        A member that converts to no sections is counted as empty and adds
        no file.

        Args:
            folder: Drive folder URL or bare folder ID

        Returns:
            ConversionResult grouping files by source document

        Raises:
            PolicyViolationError: Without rich access, before any request
            FetcherError: If the folder could not be listed
            NoContentError: If no member yielded any content
        """
        start_time = time.time()
        folder_id = _resolve_id(folder, extract_folder_id)

        log_section("Listing")
        descriptors = self.selector.list_collection(folder_id)
        if not descriptors:
            raise NoContentError(f"No Google Docs found in folder {folder_id}")

        log_section("Batch Conversion")
        stats: Dict[str, Any] = {
            'documents_total': len(descriptors),
            'documents_succeeded': 0,
            'documents_failed': 0,
            'documents_empty': 0,
            'errors': []
        }
        sections: List[Section] = []

        entries = self.selector.iter_collection(descriptors)
        with ProgressTracker(total_items=len(descriptors), item_type='documents') as tracker:
            for entry in tqdm(entries, total=len(descriptors), desc='Converting documents', unit='doc'):
                descriptor = entry.descriptor
                error = entry.error
                produced: List[Section] = []

                if error is None:
                    try:
                        produced = flatten_document(entry.acquired.document, descriptor.name)
                    except Exception as e:
                        self.logger.error(f"Failed to convert '{descriptor.name}': {e}", exc_info=True)
                        error = e

                if error is not None:
                    self._record_failure(stats, descriptor, error)
                    sections.append(error_section(descriptor, error))
                    tracker.increment(success=False, name=descriptor.name)
                    continue

                if not produced:
                    self.logger.warning(f"Document '{descriptor.name}' has no content; skipping")
                    stats['documents_empty'] += 1
                else:
                    stats['documents_succeeded'] += 1
                    sections.extend(produced)
                tracker.increment(success=True, name=descriptor.name)

        if stats['documents_succeeded'] == 0:
            raise NoContentError(
                f"{NO_CONTENT_MESSAGE} (0 of {len(descriptors)} documents produced content)"
            )

        units = render_sections(sections)
        files = create_batch_markdown_files(units, self.converted_on, self.include_footer)
        collisions = self._report_collisions(files)

        stats['sections'] = len(sections)
        stats['files'] = len(files)
        report = self.report_generator.generate_report(
            stats, time.time() - start_time, 'batch', self.selector.path.value, collisions
        )

        self.logger.info(
            f"Batch complete: {stats['documents_succeeded']} converted, "
            f"{stats['documents_failed']} failed, {stats['documents_empty']} empty"
        )
        return ConversionResult(files=files, units=units, sections=sections, report=report)

    def write_output(
        self,
        result: ConversionResult,
        output_dir: Optional[str] = None,
        create_archive: Optional[bool] = None
    ) -> List[Path]:
        """
        Write the result's files as a zip archive or as loose Markdown files.

        Args:
            result: Conversion result
            output_dir: Optional output directory override
            create_archive: Override for export.create_archive

        Returns:
            Paths written (the archive alone, or every Markdown file)
        """
        if create_archive is None:
            create_archive = get_nested(self.config, 'export.create_archive', True)

        log_section("Export")
        if create_archive:
            return [ZipArchiver(self.config, self.logger, output_dir).write(result.files)]
        return WorkspaceExporter(self.config, self.logger, output_dir).write_files(result.files)

    def _record_failure(self, stats: Dict[str, Any], descriptor: DocumentDescriptor, error: Exception) -> None:
        stats['documents_failed'] += 1
        stats['errors'].append({
            'document': descriptor.name,
            'document_id': descriptor.id,
            'error_type': type(error).__name__,
            'error': str(error),
            'feature_not_provisioned': isinstance(error, FeatureNotProvisionedError)
        })

    def _report_collisions(self, files) -> Dict[str, int]:
        collisions = find_name_collisions(files)
        for name, count in collisions.items():
            self.logger.warning(f"Output file name '{name}' is produced {count} times")
        return collisions


__all__ = ['ConversionOrchestrator', 'NoContentError', 'error_section']
