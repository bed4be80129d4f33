"""Bulk episode generation."""

from __future__ import annotations

from .orchestrator import BulkGenerationOrchestrator
from .report import BulkBatchReport, ErrorCategory

__all__ = ["BulkBatchReport", "BulkGenerationOrchestrator", "ErrorCategory"]
