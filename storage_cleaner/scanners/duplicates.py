"""Duplicate candidates: files sharing both name and byte size.

Name+size equality is a cheap heuristic and has false positives (two
unrelated files can share both). Enabling ``verify_duplicate_content``
splits each group by SHA-256 of the content, which keeps the result shape
but only reports byte-identical files.
"""

import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Iterable, Optional

from ..config import Settings
from ..models.common import Category, CategoryResult, FileRecord
from ..services.batching import emit_batch, process_rows
from ..sources.base import DEFAULT_PROJECTION, SIZE, Collection
from .base import BaseCategoryScanner, ScanContext, Selection
from .registry import register_scanner

logger = logging.getLogger(__name__)


def duplicate_key(record: FileRecord) -> str:
    return f"{record.name}:{record.size}"


def group_by_name_and_size(records: Iterable[FileRecord]) -> dict[str, list[FileRecord]]:
    groups: dict[str, list[FileRecord]] = {}
    for record in records:
        groups.setdefault(duplicate_key(record), []).append(record)
    return groups


def find_duplicates(records: Iterable[FileRecord]) -> list[FileRecord]:
    """Every member of every name+size group with two or more members."""
    duplicates: list[FileRecord] = []
    for group in group_by_name_and_size(records).values():
        if len(group) > 1:
            duplicates.extend(group)
    return duplicates


def _sha256(path: Path) -> Optional[str]:
    h = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            while True:
                chunk = f.read(65536)
                if not chunk:
                    break
                h.update(chunk)
    except OSError as e:
        logger.warning("Cannot hash %s: %s", path, e)
        return None
    return h.hexdigest()


def split_by_content(group: list[FileRecord]) -> list[list[FileRecord]]:
    """Split a name+size group into sub-groups of identical content."""
    by_digest: dict[str, list[FileRecord]] = {}
    for record in group:
        digest = _sha256(Path(record.path))
        if digest is not None:
            by_digest.setdefault(digest, []).append(record)
    return list(by_digest.values())


class DuplicateScanner(BaseCategoryScanner):
    category = Category.DUPLICATES
    name = "Duplicates"
    description = "Files with the same name and size (10 KiB and up)"
    weight = 10.0

    def selection(self, settings: Settings) -> Selection:
        return Selection(
            collection=Collection.FILES,
            where=f"{SIZE} > ?",
            args=(settings.duplicate_min_size,),
        )

    async def scan(self, context: ScanContext) -> CategoryResult:
        selection = self.selection(context.settings)
        rows = await asyncio.to_thread(
            context.source.query,
            selection.collection,
            DEFAULT_PROJECTION,
            selection.where,
            selection.args,
        )
        # Pass 1: collect candidates; batches are not reported until grouped.
        candidates = await process_rows(
            rows, self.category, context.token, None, context.settings.batch_size,
        )
        if context.token.cancelled:
            return CategoryResult()

        groups = [
            g for g in group_by_name_and_size(candidates.records).values() if len(g) > 1
        ]
        if context.settings.verify_duplicate_content:
            verified = []
            for group in groups:
                if context.token.cancelled:
                    return CategoryResult()
                subgroups = await asyncio.to_thread(split_by_content, group)
                verified.extend(s for s in subgroups if len(s) > 1)
            logger.debug("Content check kept %d of %d groups", len(verified), len(groups))
            groups = verified

        # Pass 2: emit every member of each remaining group.
        flushed: list[CategoryResult] = []
        current: list[FileRecord] = []
        batch_size = context.settings.batch_size
        for group in groups:
            for record in group:
                current.append(record)
                if len(current) >= batch_size:
                    batch = CategoryResult.from_records(current)
                    current = []
                    flushed.append(batch)
                    await emit_batch(context.on_batch, batch)
                    await asyncio.sleep(0)
        if current:
            batch = CategoryResult.from_records(current)
            flushed.append(batch)
            await emit_batch(context.on_batch, batch)
        return CategoryResult.combine(flushed)


register_scanner(DuplicateScanner())
