"""
Orchestration package for coordinating conversion pipeline phases.

This package provides the orchestration layer that sequences all conversion
phases: Acquire → Segment → Render → Name → Report, for single documents and
Drive folders.
"""

from .conversion_orchestrator import ConversionOrchestrator, NoContentError
from .conversion_report import ConversionReport

__all__ = [
    'ConversionOrchestrator',
    'ConversionReport',
    'NoContentError'
]
