"""Recursive directory traversal for files the metadata index does not cover."""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..errors import SourceUnavailable
from ..models.common import Category, CategoryResult, FileRecord
from ..utils.mime import guess_mime_type
from .batching import BATCH_SIZE, BatchSink, emit_batch
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

MAX_DEPTH = 32


@dataclass
class DirectoryEntry:
    name: str
    path: str
    is_directory: bool
    is_symlink: bool
    size: int
    last_modified: int  # ms since epoch


def list_entries(directory: Path) -> list[DirectoryEntry]:
    """List ``directory`` sorted by name. Raises ``SourceUnavailable``."""
    entries: list[DirectoryEntry] = []
    try:
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    is_symlink = entry.is_symlink()
                    is_dir = entry.is_dir(follow_symlinks=False)
                    stat = entry.stat(follow_symlinks=False)
                except OSError as e:
                    logger.warning("Cannot stat %s: %s", entry.path, e)
                    continue
                entries.append(DirectoryEntry(
                    name=entry.name,
                    path=os.path.abspath(entry.path),
                    is_directory=is_dir,
                    is_symlink=is_symlink,
                    size=0 if is_dir else stat.st_size,
                    last_modified=int(stat.st_mtime * 1000),
                ))
    except FileNotFoundError as e:
        raise SourceUnavailable(f"Directory not found: {directory}") from e
    except PermissionError as e:
        raise SourceUnavailable(f"Permission denied: {directory}") from e
    except OSError as e:
        raise SourceUnavailable(f"Cannot list {directory}: {e}") from e
    return sorted(entries, key=lambda e: e.name)


def entry_to_record(entry: DirectoryEntry, category: Category) -> FileRecord:
    return FileRecord(
        name=entry.name,
        size=entry.size,
        path=entry.path,
        modified_at=entry.last_modified,
        mime_type=guess_mime_type(entry.name),
        category=category,
    )


async def walk_directory(
    root: Union[str, Path],
    category: Category,
    token: CancellationToken,
    on_batch: Optional[BatchSink] = None,
    batch_size: int = BATCH_SIZE,
    max_depth: int = MAX_DEPTH,
) -> CategoryResult:
    """Depth-first walk of ``root`` emitting batched file records.

    Subdirectories are walked as they are met, and every directory flushes
    its own batches, so batches never mix files from different levels.
    Symlinks are skipped and recursion stops at ``max_depth``. Unreadable
    directories contribute nothing.
    """
    flushed: list[CategoryResult] = []

    async def flush(records: list[FileRecord]) -> None:
        batch = CategoryResult.from_records(records)
        flushed.append(batch)
        await emit_batch(on_batch, batch)

    async def walk(directory: Path, depth: int) -> None:
        if token.cancelled:
            return
        try:
            entries = await asyncio.to_thread(list_entries, directory)
        except SourceUnavailable as e:
            logger.warning("[%s] %s", category.value, e)
            return

        current: list[FileRecord] = []
        for entry in entries:
            if token.cancelled:
                return
            if entry.is_symlink:
                continue
            if entry.is_directory:
                if depth >= max_depth:
                    logger.warning("[%s] max depth %d reached at %s", category.value, max_depth, entry.path)
                    continue
                await walk(Path(entry.path), depth + 1)
                continue
            if entry.size <= 0:
                continue
            current.append(entry_to_record(entry, category))
            if len(current) >= batch_size:
                await flush(current)
                current = []
                await asyncio.sleep(0)

        if current and token.active:
            await flush(current)

    await walk(Path(root), 0)
    return CategoryResult.combine(flushed)
