"""Abstract category scanner interface."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..config import Settings
from ..models.common import Category, CategoryResult
from ..models.system import SourceAvailability
from ..services.batching import BatchSink, process_rows
from ..services.cancellation import CancellationToken
from ..services.directory_walker import walk_directory
from ..sources.base import DEFAULT_PROJECTION, Collection, MetadataSource


class Selection(BaseModel):
    """A metadata-source filter: collection plus SQL-style predicate."""

    model_config = ConfigDict(frozen=True)

    collection: Collection
    where: Optional[str] = None
    args: tuple[Any, ...] = ()


class DirectorySelection(BaseModel):
    """Filesystem roots to walk for sources the index does not cover."""

    model_config = ConfigDict(frozen=True)

    roots: tuple[Path, ...] = ()


@dataclass
class ScanContext:
    source: MetadataSource
    token: CancellationToken
    settings: Settings
    on_batch: Optional[BatchSink] = None


class BaseCategoryScanner(ABC):
    """All category scanners implement this interface."""

    category: Category
    name: str = ""
    description: str = ""
    weight: float = 0.0  # share of overall progress, percent

    @abstractmethod
    def selection(self, settings: Settings) -> Union[Selection, DirectorySelection]:
        """The rule that picks this category's candidate files."""
        ...

    async def scan(self, context: ScanContext) -> CategoryResult:
        selection = self.selection(context.settings)
        if isinstance(selection, DirectorySelection):
            return await self.walk(selection, context)
        return await self.query(selection, context)

    async def query(self, selection: Selection, context: ScanContext) -> CategoryResult:
        rows = await asyncio.to_thread(
            context.source.query,
            selection.collection,
            DEFAULT_PROJECTION,
            selection.where,
            selection.args,
        )
        return await process_rows(
            rows,
            self.category,
            context.token,
            context.on_batch,
            context.settings.batch_size,
        )

    async def walk(self, selection: DirectorySelection, context: ScanContext) -> CategoryResult:
        parts = []
        for root in selection.roots:
            if context.token.cancelled:
                break
            parts.append(await walk_directory(
                root,
                self.category,
                context.token,
                context.on_batch,
                context.settings.batch_size,
                context.settings.max_walk_depth,
            ))
        return CategoryResult.combine(parts)

    def check_availability(self, source: MetadataSource, settings: Settings) -> SourceAvailability:
        selection = self.selection(settings)
        if isinstance(selection, DirectorySelection):
            existing = [r for r in selection.roots if r.is_dir()]
            return SourceAvailability(
                source_id=self.category.value,
                name=self.name,
                available=bool(existing),
                detail=", ".join(str(r) for r in existing) or "No directories found",
            )
        available = source.has_collection(selection.collection)
        return SourceAvailability(
            source_id=self.category.value,
            name=self.name,
            available=available,
            detail=f"Collection: {selection.collection.value}",
        )


def name_like_any(column: str, patterns: list[str]) -> tuple[str, tuple[str, ...]]:
    """Build ``column LIKE ? OR column LIKE ? ...`` with its arguments."""
    where = " OR ".join(f"{column} LIKE ?" for _ in patterns)
    return where, tuple(patterns)
