"""System information models."""

from typing import Optional
from pydantic import BaseModel, Field


class SourceAvailability(BaseModel):
    source_id: str
    name: str
    available: bool = False
    detail: str = ""
    count: Optional[int] = None  # e.g. rows in a collection, files in a cache dir


class SystemInfo(BaseModel):
    index_path: str = ""
    indexed_files: int = 0
    sources: list[SourceAvailability] = Field(default_factory=list)
