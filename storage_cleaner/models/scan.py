"""Scan-related models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union
from pydantic import BaseModel, Field, computed_field
import uuid

from .common import Category, CategoryResult


class ScanStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ProgressStatus(str, Enum):
    SCANNING = "scanning"
    COMPLETE = "complete"


class ScanSummary(BaseModel):
    categories: dict[Category, CategoryResult] = Field(default_factory=dict)
    cancelled: bool = False

    @computed_field
    @property
    def total_files(self) -> int:
        return sum(r.count for r in self.categories.values())

    @computed_field
    @property
    def total_size(self) -> int:
        return sum(r.total_size for r in self.categories.values())


class ProgressEvent(BaseModel):
    category: Union[Category, Literal["all"]]
    progress: float  # cumulative percent
    files_scanned: int = 0
    total_size: int = 0
    status: ProgressStatus
    files_in_category: Optional[int] = None
    size_in_category: Optional[int] = None


class ScanFailure(BaseModel):
    kind: str
    message: str


class ScanJob(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    status: ScanStatus = ScanStatus.PENDING
    progress: Optional[ProgressEvent] = None
    summary: Optional[ScanSummary] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    completed_at: Optional[datetime] = None
    error: Optional[ScanFailure] = None
