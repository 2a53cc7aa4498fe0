"""Scan job lifecycle and progress fan-out for the application bridge."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config import Settings, settings as default_settings
from ..errors import ScanError, ScanErrorKind
from ..models.common import Category, FileRecord
from ..models.scan import ProgressEvent, ScanFailure, ScanJob, ScanStatus, ScanSummary
from ..sources.base import MetadataSource
from ..sources.sqlite_index import SQLiteMetadataSource
from .file_scanner import FileScanner

logger = logging.getLogger(__name__)


class ScanManager:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._source: Optional[MetadataSource] = None
        self._scanner: Optional[FileScanner] = None
        self._job: Optional[ScanJob] = None
        self._task: Optional[asyncio.Task] = None
        self._progress_listeners: list[Callable] = []
        self._cancel_requested = False

    def configure(self, source: MetadataSource, settings: Optional[Settings] = None) -> None:
        """Use ``source`` for all further scans."""
        if settings is not None:
            self.settings = settings
        self._source = source
        self._scanner = FileScanner(source, self.settings)
        self._job = None

    @property
    def source(self) -> MetadataSource:
        if self._source is None:
            self.configure(SQLiteMetadataSource(self.settings.index_path))
        return self._source

    @property
    def scanner(self) -> FileScanner:
        if self._scanner is None:
            self.configure(self.source)
        return self._scanner

    def get_job(self) -> Optional[ScanJob]:
        return self._job

    def get_results(self, category: Category) -> list[FileRecord]:
        if self._job is None or self._job.summary is None:
            return []
        result = self._job.summary.categories.get(category)
        return result.records if result else []

    def add_progress_listener(self, callback: Callable) -> None:
        if callback not in self._progress_listeners:
            self._progress_listeners.append(callback)

    def remove_progress_listener(self, callback: Callable) -> None:
        if callback in self._progress_listeners:
            self._progress_listeners.remove(callback)

    async def run_scan(self) -> ScanSummary:
        """Plain scan without a job; raises ``ScanError``."""
        return await self.scanner.scan()

    async def start_scan(self) -> ScanJob:
        if self.scanner.is_scanning or (self._task is not None and not self._task.done()):
            raise ScanError(ScanErrorKind.SCAN_IN_PROGRESS, "A scan is already running")
        job = ScanJob()
        self._job = job
        self._cancel_requested = False
        self._task = asyncio.create_task(self._run_scan(job))
        return job

    def cancel_scan(self) -> bool:
        """Request cancellation. Returns whether a scan was running.

        A job whose task exists but whose scanner has not started yet is
        cancelled once it starts. A finished job is left alone.
        """
        if self.scanner.is_scanning:
            self.scanner.cancel()
            return True
        job = self._job
        if job is not None and job.summary is None and job.status in (
            ScanStatus.PENDING, ScanStatus.RUNNING,
        ):
            logger.info("Cancel requested before scan %s started", job.id)
            self._cancel_requested = True
            return True
        return False

    async def reindex(self) -> int:
        source = self.source
        if not isinstance(source, SQLiteMetadataSource):
            raise ScanError(ScanErrorKind.SOURCE_UNAVAILABLE, "Source does not support indexing")
        if self.scanner.is_scanning:
            raise ScanError(ScanErrorKind.SCAN_IN_PROGRESS, "Cannot reindex while scanning")
        return await asyncio.to_thread(
            source.rebuild, self.settings.storage_roots, self.settings.downloads_dirs,
        )

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _run_scan(self, job: ScanJob) -> None:
        job.status = ScanStatus.RUNNING
        await self._notify_progress(job)

        async def progress_cb(event: ProgressEvent) -> None:
            job.progress = event
            await self._notify_progress(job)

        if self._cancel_requested:
            self._cancel_requested = False
            self.scanner.cancel()
        try:
            summary = await self.scanner.scan_with_progress(progress_cb)
            job.summary = summary
            job.status = ScanStatus.CANCELLED if summary.cancelled else ScanStatus.COMPLETED
        except ScanError as e:
            job.status = ScanStatus.FAILED
            job.error = ScanFailure(kind=e.kind.value, message=e.message)
            job.summary = e.partial
        job.completed_at = datetime.now(tz=timezone.utc)
        await self._notify_progress(job)

    async def _notify_progress(self, job: ScanJob) -> None:
        for cb in list(self._progress_listeners):
            try:
                await cb(job)
            except Exception:
                logger.exception("Progress listener failed; removing it")
                self.remove_progress_listener(cb)


# Singleton
scan_manager = ScanManager()
