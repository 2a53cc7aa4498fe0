"""Tests for the scan orchestrator."""

import asyncio

import pytest

from storage_cleaner.errors import ScanError, ScanErrorKind, SourceUnavailable
from storage_cleaner.models.common import Category, CategoryResult
from storage_cleaner.models.scan import ProgressStatus
from storage_cleaner.scanners import BaseCategoryScanner, Selection, get_all_scanners
from storage_cleaner.services.file_scanner import FileScanner
from storage_cleaner.sources import Collection

MiB = 1024 * 1024


class BrokenScanner(BaseCategoryScanner):
    category = Category.AUDIO
    name = "Broken"
    weight = 10.0

    def __init__(self, exc: Exception):
        self.exc = exc

    def selection(self, settings):
        return Selection(collection=Collection.AUDIO)

    async def scan(self, context):
        raise self.exc


@pytest.fixture
def populated(index, make_row):
    index.insert_rows([
        make_row("a.tmp", 100),
        make_row("song.mp3", 4000, mime_type="audio/mpeg"),
        make_row("pic.jpg", 2000, mime_type="image/jpeg", path="/x/pic.jpg"),
        make_row("pic.jpg", 2000, mime_type="image/jpeg", path="/y/pic.jpg"),
        make_row("report.pdf", 60 * MiB, path="/home/u/Downloads/report.pdf"),
        make_row("movie.mp4", 0, mime_type="video/mp4"),
    ])
    return index


class TestScan:
    @pytest.mark.asyncio
    async def test_summary_has_every_category(self, populated, settings):
        summary = await FileScanner(populated, settings).scan()

        assert list(summary.categories) == list(Category)
        assert not summary.cancelled
        assert summary.categories[Category.JUNK].count == 1
        assert summary.categories[Category.IMAGES].count == 2
        assert summary.categories[Category.VIDEOS].count == 0
        assert summary.categories[Category.DOWNLOADS].count == 1
        assert summary.categories[Category.LARGE].count == 1

    @pytest.mark.asyncio
    async def test_totals_are_consistent(self, populated, settings):
        summary = await FileScanner(populated, settings).scan()

        assert summary.total_files == sum(r.count for r in summary.categories.values())
        assert summary.total_size == sum(r.total_size for r in summary.categories.values())
        for category, result in summary.categories.items():
            assert result.count == len(result.records)
            for record in result.records:
                assert record.size > 0
                assert record.path
                assert record.category is category

    @pytest.mark.asyncio
    async def test_a_file_may_appear_in_several_categories(self, populated, settings):
        summary = await FileScanner(populated, settings).scan()

        paths = lambda c: {r.path for r in summary.categories[c].records}
        assert "/home/u/Downloads/report.pdf" in paths(Category.DOCUMENTS)
        assert "/home/u/Downloads/report.pdf" in paths(Category.LARGE)
        assert "/home/u/Downloads/report.pdf" in paths(Category.DOWNLOADS)

    @pytest.mark.asyncio
    async def test_repeated_scans_match(self, populated, settings):
        scanner = FileScanner(populated, settings)
        first = await scanner.scan()
        second = await scanner.scan()

        assert first.total_files == second.total_files
        assert first.total_size == second.total_size
        assert first.categories == second.categories

    @pytest.mark.asyncio
    async def test_empty_source(self, index, settings):
        summary = await FileScanner(index, settings).scan()

        assert summary.total_files == 0
        assert all(r == CategoryResult() for r in summary.categories.values())

    def test_missing_scanner_rejected(self, index, settings):
        scanners = get_all_scanners()
        del scanners[Category.TEMPORARY]
        with pytest.raises(ValueError, match="temporary"):
            FileScanner(index, settings, scanners)


class TestProgress:
    @pytest.mark.asyncio
    async def test_two_events_per_category_then_all(self, populated, settings):
        events = []
        await FileScanner(populated, settings).scan_with_progress(events.append)

        assert len(events) == 2 * len(Category) + 1
        for i, category in enumerate(Category):
            scanning, complete = events[2 * i], events[2 * i + 1]
            assert scanning.category is category
            assert scanning.status is ProgressStatus.SCANNING
            assert complete.category is category
            assert complete.status is ProgressStatus.COMPLETE
            assert complete.files_in_category is not None

        final = events[-1]
        assert final.category == "all"
        assert final.progress == 100.0
        assert final.status is ProgressStatus.COMPLETE

    @pytest.mark.asyncio
    async def test_progress_is_monotonic_and_weighted(self, populated, settings):
        events = []
        await FileScanner(populated, settings).scan_with_progress(events.append)

        progress = [e.progress for e in events]
        assert progress == sorted(progress)
        assert all(0 <= p <= 100 for p in progress)
        # junk (15) then cache (15)
        assert events[1].progress == 15
        assert events[3].progress == 30

    @pytest.mark.asyncio
    async def test_final_totals_match_summary(self, populated, settings):
        events = []
        summary = await FileScanner(populated, settings).scan_with_progress(events.append)

        assert events[-1].files_scanned == summary.total_files
        assert events[-1].total_size == summary.total_size

    @pytest.mark.asyncio
    async def test_async_callback(self, populated, settings):
        seen = []

        async def on_progress(event):
            seen.append(event.category)

        await FileScanner(populated, settings).scan_with_progress(on_progress)
        assert seen[-1] == "all"

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_abort(self, populated, settings):
        def on_progress(event):
            raise RuntimeError("listener gone")

        summary = await FileScanner(populated, settings).scan_with_progress(on_progress)
        assert len(summary.categories) == len(Category)


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_before_start(self, populated, settings):
        scanner = FileScanner(populated, settings)
        scanner.cancel()
        events = []

        summary = await scanner.scan_with_progress(events.append)

        assert summary.cancelled
        assert summary.categories == {}
        assert summary.total_files == 0
        assert events == []

    @pytest.mark.asyncio
    async def test_cancel_mid_scan(self, populated, settings):
        scanner = FileScanner(populated, settings)
        events = []

        def on_progress(event):
            events.append(event)
            if event.category is Category.IMAGES and event.status is ProgressStatus.COMPLETE:
                scanner.cancel()

        summary = await scanner.scan_with_progress(on_progress)

        assert summary.cancelled
        assert list(summary.categories) == [Category.JUNK, Category.CACHE, Category.IMAGES]
        assert all(e.category != "all" for e in events)
        assert events[-1].category is Category.IMAGES

    @pytest.mark.asyncio
    async def test_scanner_is_reusable_after_cancel(self, populated, settings):
        scanner = FileScanner(populated, settings)
        scanner.cancel()
        assert (await scanner.scan()).cancelled

        summary = await scanner.scan()
        assert not summary.cancelled
        assert len(summary.categories) == len(Category)


class TestErrors:
    @pytest.mark.asyncio
    async def test_scanner_failure_carries_partial_summary(self, populated, settings):
        scanners = {**get_all_scanners(), Category.AUDIO: BrokenScanner(RuntimeError("boom"))}
        scanner = FileScanner(populated, settings, scanners)

        with pytest.raises(ScanError) as excinfo:
            await scanner.scan()

        err = excinfo.value
        assert err.kind is ScanErrorKind.SCAN_FAILED
        assert err.message == "boom"
        assert list(err.partial.categories) == [Category.JUNK, Category.CACHE, Category.IMAGES, Category.VIDEOS]
        assert not scanner.is_scanning

    @pytest.mark.asyncio
    async def test_source_unavailable(self, populated, settings):
        scanners = {**get_all_scanners(), Category.AUDIO: BrokenScanner(SourceUnavailable("no audio"))}

        with pytest.raises(ScanError) as excinfo:
            await FileScanner(populated, settings, scanners).scan()

        assert excinfo.value.kind is ScanErrorKind.SOURCE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_concurrent_scan_rejected(self, populated, settings):
        scanner = FileScanner(populated, settings)
        started = asyncio.Event()
        release = asyncio.Event()

        async def on_progress(event):
            started.set()
            await release.wait()

        task = asyncio.create_task(scanner.scan_with_progress(on_progress))
        await started.wait()
        assert scanner.is_scanning

        with pytest.raises(ScanError) as excinfo:
            await scanner.scan()
        assert excinfo.value.kind is ScanErrorKind.SCAN_IN_PROGRESS

        release.set()
        summary = await task
        assert not summary.cancelled


class TestPacing:
    @pytest.mark.asyncio
    async def test_delay_only_between_categories(self, populated, settings, monkeypatch):
        real_sleep = asyncio.sleep
        delays = []

        async def recording_sleep(delay, *args, **kwargs):
            if delay > 0:
                delays.append(delay)
            await real_sleep(0)

        monkeypatch.setattr(asyncio, "sleep", recording_sleep)
        settings.pacing_delay = 0.25

        await FileScanner(populated, settings).scan_with_progress(lambda e: None)

        assert delays == [0.25] * (len(Category) - 1)

    @pytest.mark.asyncio
    async def test_plain_scan_has_no_delay(self, populated, settings, monkeypatch):
        real_sleep = asyncio.sleep
        delays = []

        async def recording_sleep(delay, *args, **kwargs):
            if delay > 0:
                delays.append(delay)
            await real_sleep(0)

        monkeypatch.setattr(asyncio, "sleep", recording_sleep)
        settings.pacing_delay = 0.25

        await FileScanner(populated, settings).scan()
        assert delays == []
