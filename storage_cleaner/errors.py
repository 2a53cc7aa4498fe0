"""Scan error taxonomy."""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models.scan import ScanSummary


class SourceUnavailable(Exception):
    """A metadata collection or directory cannot be read."""


class ScanErrorKind(str, Enum):
    SOURCE_UNAVAILABLE = "source_unavailable"
    SCAN_FAILED = "scan_failed"
    SCAN_IN_PROGRESS = "scan_in_progress"


class ScanError(Exception):
    """Fatal scan failure. Carries whatever was accumulated before it."""

    def __init__(
        self,
        kind: ScanErrorKind,
        message: str,
        partial: Optional["ScanSummary"] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.partial = partial
