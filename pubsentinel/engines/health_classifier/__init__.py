"""Health classifier engine — classify declared dependencies against registry metadata."""

from pubsentinel.engines.health_classifier.classifier import build_records, classify
from pubsentinel.engines.health_classifier.models import (
    UNAVAILABLE,
    DependencyHealthRecord,
    RemoteMetadata,
    Report,
    ReportStatus,
)
from pubsentinel.engines.health_classifier.runner import HealthReportRunner
from pubsentinel.engines.health_classifier.service import HealthReportService
from pubsentinel.engines.health_classifier.version import is_outdated

__all__ = [
    "UNAVAILABLE",
    "DependencyHealthRecord",
    "HealthReportRunner",
    "HealthReportService",
    "RemoteMetadata",
    "Report",
    "ReportStatus",
    "build_records",
    "classify",
    "is_outdated",
]
