"""Core shared models."""

from enum import Enum
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_MIME_TYPE = "application/octet-stream"


class Category(str, Enum):
    """The ten cleanup categories, in scan order."""

    JUNK = "junk"
    CACHE = "cache"
    IMAGES = "images"
    VIDEOS = "videos"
    AUDIO = "audio"
    DOCUMENTS = "documents"
    DOWNLOADS = "downloads"
    LARGE = "large"
    DUPLICATES = "duplicates"
    TEMPORARY = "temporary"


class FileRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None  # absent for files found by directory traversal
    name: str
    size: int = Field(ge=0)
    path: str
    modified_at: int = 0  # ms since epoch
    mime_type: str = DEFAULT_MIME_TYPE
    category: Category


class CategoryResult(BaseModel):
    """Records of one category (or one batch of it) with their totals."""

    model_config = ConfigDict(frozen=True)

    records: list[FileRecord] = Field(default_factory=list)
    count: int = 0
    total_size: int = 0

    @model_validator(mode="after")
    def _check_totals(self) -> "CategoryResult":
        if self.count != len(self.records):
            raise ValueError(f"count {self.count} != {len(self.records)} records")
        size = sum(r.size for r in self.records)
        if self.total_size != size:
            raise ValueError(f"total_size {self.total_size} != {size}")
        return self

    @classmethod
    def from_records(cls, records: Iterable[FileRecord]) -> "CategoryResult":
        records = list(records)
        return cls(
            records=records,
            count=len(records),
            total_size=sum(r.size for r in records),
        )

    @classmethod
    def combine(cls, parts: Iterable["CategoryResult"]) -> "CategoryResult":
        records: list[FileRecord] = []
        for part in parts:
            records.extend(part.records)
        return cls.from_records(records)
