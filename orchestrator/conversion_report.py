"""
Conversion report generator for aggregating run statistics and formatting reports.

This module builds the report dictionary attached to every ConversionResult
and formats it for console display or JSON export.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger('docs_to_notion.orchestrator.report')


class ConversionReport:
    """Generates conversion reports from per-run statistics."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize conversion report generator.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger('docs_to_notion.orchestrator.report')

    def generate_report(
        self,
        stats: Dict[str, Any],
        duration: float,
        mode: str,
        acquisition_path: str,
        collisions: Optional[Dict[str, int]] = None
    ) -> Dict[str, Any]:
        """
        Generate a conversion report.

        Args:
            stats: Counters collected by the orchestrator (documents_*, sections, files, errors)
            duration: Run duration in seconds
            mode: 'single' or 'batch'
            acquisition_path: 'rich' or 'degraded'
            collisions: Colliding output file names with their counts

        Returns:
            Report dictionary with summary, errors and collisions
        """
        documents_total = stats.get('documents_total', 0)
        documents_succeeded = stats.get('documents_succeeded', 0)

        summary = {
            'mode': mode,
            'acquisition_path': acquisition_path,
            'documents_total': documents_total,
            'documents_succeeded': documents_succeeded,
            'documents_failed': stats.get('documents_failed', 0),
            'documents_empty': stats.get('documents_empty', 0),
            'sections': stats.get('sections', 0),
            'files': stats.get('files', 0),
            'duration_seconds': round(duration, 3),
            'duration_formatted': self._format_duration(duration),
            'success_rate': (documents_succeeded / documents_total) if documents_total else 0.0,
            'generated_at': datetime.now().isoformat(timespec='seconds')
        }

        return {
            'summary': summary,
            'errors': list(stats.get('errors', [])),
            'collisions': dict(collisions or {})
        }

    def _format_duration(self, seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes = int(seconds // 60)
        return f"{minutes}m {int(seconds % 60)}s"

    def format_console_report(self, report: Dict[str, Any]) -> str:
        """
        Format report for console display.

        Args:
            report: Conversion report dictionary

        Returns:
            Formatted console string
        """
        lines: List[str] = []

        lines.append("=" * 60)
        lines.append("CONVERSION REPORT")
        lines.append("=" * 60)
        lines.append("")

        summary = report.get('summary', {})
        lines.append("Summary:")
        lines.append(f"  Mode:        {summary.get('mode', 'unknown')} ({summary.get('acquisition_path', 'unknown')} path)")
        lines.append(f"  Documents:   {summary.get('documents_succeeded', 0)}/{summary.get('documents_total', 0)} converted")
        if summary.get('documents_failed'):
            lines.append(f"  Failed:      {summary['documents_failed']}")
        if summary.get('documents_empty'):
            lines.append(f"  Empty:       {summary['documents_empty']}")
        lines.append(f"  Sections:    {summary.get('sections', 0)}")
        lines.append(f"  Files:       {summary.get('files', 0)}")
        lines.append(f"  Duration:    {summary.get('duration_formatted', '0s')}")

        errors = report.get('errors', [])
        if errors:
            lines.append("")
            lines.append("Errors:")
            lines.append("-" * 60)
            for error in errors:
                lines.append(f"  {error.get('document', 'unknown')}: {error.get('error', '')}")

        collisions = report.get('collisions', {})
        if collisions:
            lines.append("")
            lines.append("File name collisions (not deduplicated):")
            lines.append("-" * 60)
            for name, count in collisions.items():
                lines.append(f"  {name} x{count}")

        lines.append("=" * 60)
        return "\n".join(lines)

    def export_json_report(self, report: Dict[str, Any], filepath: str) -> None:
        """
        Export report as JSON file.

        Args:
            report: Conversion report dictionary
            filepath: Output file path
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        self.logger.info(f"Report exported to {filepath}")


__all__ = ['ConversionReport']
