"""Batched conversion of metadata rows into file records."""

import asyncio
import itertools
import logging
import time
from typing import Any, Awaitable, Callable, Iterable, Iterator, Optional, Union

from ..models.common import DEFAULT_MIME_TYPE, Category, CategoryResult, FileRecord
from ..sources.base import DATE_MODIFIED, DISPLAY_NAME, ID, MIME_TYPE, PATH, SIZE, Row
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

BATCH_SIZE = 300

BatchSink = Callable[[CategoryResult], Union[None, Awaitable[None]]]


def row_to_record(row: Row, category: Category) -> FileRecord:
    """Convert one metadata row, substituting defaults for missing fields."""
    raw_id = row.get(ID)
    modified = row.get(DATE_MODIFIED)
    return FileRecord(
        id=int(raw_id) if raw_id is not None else None,
        name=row.get(DISPLAY_NAME) or "",
        size=max(int(row.get(SIZE) or 0), 0),
        path=row.get(PATH) or "",
        modified_at=int(modified) * 1000 if modified is not None else int(time.time() * 1000),
        mime_type=row.get(MIME_TYPE) or DEFAULT_MIME_TYPE,
        category=category,
    )


def is_reportable(record: FileRecord) -> bool:
    return record.size > 0 and record.path != ""


async def emit_batch(sink: Optional[BatchSink], batch: CategoryResult) -> None:
    if sink is None:
        return
    result = sink(batch)
    if asyncio.iscoroutine(result):
        await result


async def _next_page(rows: Iterator[Any], size: int) -> list:
    return await asyncio.to_thread(lambda: list(itertools.islice(rows, size)))


async def process_rows(
    rows: Iterable[Row],
    category: Category,
    token: CancellationToken,
    on_batch: Optional[BatchSink] = None,
    batch_size: int = BATCH_SIZE,
) -> CategoryResult:
    """Consume ``rows`` into batches of ``batch_size`` records.

    Every full batch is handed to ``on_batch`` and followed by a yield to the
    event loop; the trailing partial batch is flushed at the end. The token is
    checked before each row. Once cancelled, no further rows are read and
    nothing more is flushed, but batches already flushed stay in the result.
    Rows are pulled from the (blocking) iterator a page at a time on a worker
    thread.
    """
    rows = iter(rows)
    flushed: list[CategoryResult] = []
    current: list[FileRecord] = []
    skipped = 0

    while True:
        page = await _next_page(rows, batch_size)
        if not page:
            break
        for row in page:
            if token.cancelled:
                logger.debug("[%s] cancelled after %d batches", category.value, len(flushed))
                return CategoryResult.combine(flushed)

            record = row_to_record(row, category)
            if not is_reportable(record):
                skipped += 1
                continue

            current.append(record)
            if len(current) >= batch_size:
                batch = CategoryResult.from_records(current)
                current = []
                flushed.append(batch)
                await emit_batch(on_batch, batch)
                await asyncio.sleep(0)

    if current and token.active:
        batch = CategoryResult.from_records(current)
        flushed.append(batch)
        await emit_batch(on_batch, batch)

    if skipped:
        logger.debug("[%s] skipped %d empty or pathless rows", category.value, skipped)
    return CategoryResult.combine(flushed)
