"""Category-by-category scan orchestration with weighted progress."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from ..config import Settings, settings as default_settings
from ..errors import ScanError, ScanErrorKind, SourceUnavailable
from ..models.common import Category, CategoryResult
from ..models.scan import ProgressEvent, ProgressStatus, ScanSummary
from ..scanners import BaseCategoryScanner, ScanContext, get_all_scanners, missing_categories
from ..sources.base import MetadataSource
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]

_LAST_CATEGORY = list(Category)[-1]


class FileScanner:
    """Runs the ten category scans in order against one metadata source.

    One instance serves one scan at a time. ``cancel()`` may be called from
    any thread or task; it is observed at category, batch and file
    boundaries. A cancel issued while idle stops the next scan before its
    first category. The cancellation flag is re-armed when a scan ends.
    """

    def __init__(
        self,
        source: MetadataSource,
        settings: Optional[Settings] = None,
        scanners: Optional[dict[Category, BaseCategoryScanner]] = None,
    ):
        self.source = source
        self.settings = settings or default_settings
        self.scanners = scanners if scanners is not None else get_all_scanners()
        missing = missing_categories(self.scanners)
        if missing:
            raise ValueError(f"No scanner registered for: {', '.join(c.value for c in missing)}")
        self._token = CancellationToken()
        self._running = False

    @property
    def is_scanning(self) -> bool:
        return self._running

    def cancel(self) -> None:
        if self._token.active:
            logger.info("Scan cancellation requested")
        self._token.cancel()

    async def scan(self) -> ScanSummary:
        """Scan every category and return the summary, without progress events."""
        return await self._run(None)

    async def scan_with_progress(self, on_progress: ProgressCallback) -> ScanSummary:
        """Scan every category, reporting a ``scanning`` and a ``complete``
        event per category and a final ``all`` event at 100%."""
        return await self._run(on_progress)

    async def _run(self, on_progress: Optional[ProgressCallback]) -> ScanSummary:
        if self._running:
            raise ScanError(ScanErrorKind.SCAN_IN_PROGRESS, "A scan is already running")
        self._running = True
        try:
            return await self._scan_categories(on_progress)
        finally:
            self._running = False
            self._token.reset()

    async def _scan_categories(self, on_progress: Optional[ProgressCallback]) -> ScanSummary:
        context = ScanContext(source=self.source, token=self._token, settings=self.settings)
        results: dict[Category, CategoryResult] = {}
        files_scanned = 0
        total_size = 0
        percent = 0.0

        for category in Category:
            scanner = self.scanners[category]
            if self._token.cancelled:
                logger.info("Scan cancelled before %s", category.value)
                return ScanSummary(categories=results, cancelled=True)

            if on_progress:
                await self._emit(on_progress, ProgressEvent(
                    category=category,
                    progress=percent,
                    files_scanned=files_scanned,
                    total_size=total_size,
                    status=ProgressStatus.SCANNING,
                ))

            logger.debug("[%s] Starting scan...", scanner.name)
            try:
                result = await scanner.scan(context)
            except SourceUnavailable as e:
                logger.error("[%s] Source unavailable: %s", scanner.name, e)
                raise ScanError(
                    ScanErrorKind.SOURCE_UNAVAILABLE, str(e), ScanSummary(categories=results),
                ) from e
            except Exception as e:
                logger.exception("[%s] Scan failed", scanner.name)
                raise ScanError(
                    ScanErrorKind.SCAN_FAILED,
                    str(e) or type(e).__name__,
                    ScanSummary(categories=results),
                ) from e

            if self._token.cancelled:
                logger.info("Scan cancelled during %s", category.value)
                return ScanSummary(categories=results, cancelled=True)

            results[category] = result
            files_scanned += result.count
            total_size += result.total_size
            percent += scanner.weight
            logger.info(
                "[%s] Done: %d files, %d bytes", scanner.name, result.count, result.total_size,
            )

            if on_progress:
                await self._emit(on_progress, ProgressEvent(
                    category=category,
                    progress=percent,
                    files_scanned=files_scanned,
                    total_size=total_size,
                    status=ProgressStatus.COMPLETE,
                    files_in_category=result.count,
                    size_in_category=result.total_size,
                ))
                if self.settings.pacing_delay > 0 and category is not _LAST_CATEGORY:
                    await asyncio.sleep(self.settings.pacing_delay)

        if on_progress:
            await self._emit(on_progress, ProgressEvent(
                category="all",
                progress=100.0,
                files_scanned=files_scanned,
                total_size=total_size,
                status=ProgressStatus.COMPLETE,
            ))
        logger.info("Scan complete: %d files, %d bytes", files_scanned, total_size)
        return ScanSummary(categories=results)

    async def _emit(self, on_progress: ProgressCallback, event: ProgressEvent) -> None:
        try:
            result = on_progress(event)
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            logger.exception("Progress callback failed for %s", event.category)
