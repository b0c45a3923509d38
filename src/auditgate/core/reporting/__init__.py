"""Audit report aggregation and rendering.

Provides:
- ReportAggregator: Classifies advisories and builds an AuditReport
- ReportGenerator: Renders an AuditReport as text
"""

from .aggregator import AuditReport, ClassificationBuckets, ReportAggregator
from .generator import ReportGenerator

__all__ = [
    "AuditReport",
    "ClassificationBuckets",
    "ReportAggregator",
    "ReportGenerator",
]
