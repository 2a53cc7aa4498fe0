"""Data models."""

from .common import DEFAULT_MIME_TYPE, Category, CategoryResult, FileRecord
from .scan import ProgressEvent, ProgressStatus, ScanFailure, ScanJob, ScanStatus, ScanSummary
from .system import SourceAvailability, SystemInfo

__all__ = [
    "DEFAULT_MIME_TYPE",
    "Category",
    "CategoryResult",
    "FileRecord",
    "ProgressEvent",
    "ProgressStatus",
    "ScanFailure",
    "ScanJob",
    "ScanStatus",
    "ScanSummary",
    "SourceAvailability",
    "SystemInfo",
]
