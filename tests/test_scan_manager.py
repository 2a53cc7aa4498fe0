"""Tests for the scan job manager."""

import pytest

from storage_cleaner.errors import ScanError, ScanErrorKind
from storage_cleaner.models.common import Category
from storage_cleaner.models.scan import ProgressStatus, ScanJob, ScanStatus
from storage_cleaner.services.scan_manager import ScanManager


@pytest.fixture
def manager(index, settings, make_row):
    index.insert_rows([
        make_row("a.tmp", 100),
        make_row("pic.jpg", 2000, mime_type="image/jpeg"),
    ])
    m = ScanManager(settings)
    m.configure(index, settings)
    return m


class TestJobs:
    @pytest.mark.asyncio
    async def test_job_completes(self, manager: ScanManager):
        job = await manager.start_scan()
        await manager.wait()

        assert job.status is ScanStatus.COMPLETED
        assert job.completed_at is not None
        assert job.progress.category == "all"
        assert [r.name for r in manager.get_results(Category.IMAGES)] == ["pic.jpg"]

    @pytest.mark.asyncio
    async def test_second_start_while_running(self, manager: ScanManager):
        await manager.start_scan()
        with pytest.raises(ScanError) as excinfo:
            await manager.start_scan()
        assert excinfo.value.kind is ScanErrorKind.SCAN_IN_PROGRESS
        await manager.wait()

    @pytest.mark.asyncio
    async def test_listeners_see_each_transition(self, manager: ScanManager):
        statuses = []

        async def listener(job: ScanJob):
            statuses.append(job.status)

        manager.add_progress_listener(listener)
        manager.add_progress_listener(listener)
        await manager.start_scan()
        await manager.wait()

        assert statuses[0] is ScanStatus.RUNNING
        assert statuses[-1] is ScanStatus.COMPLETED
        # running, two events per category, the final event, completed
        assert len(statuses) == 1 + 2 * len(Category) + 1 + 1

    @pytest.mark.asyncio
    async def test_failing_listener_is_removed(self, manager: ScanManager):
        calls = []

        async def listener(job: ScanJob):
            calls.append(job.status)
            raise RuntimeError("socket closed")

        manager.add_progress_listener(listener)
        job = await manager.start_scan()
        await manager.wait()

        assert calls == [ScanStatus.RUNNING]
        assert job.status is ScanStatus.COMPLETED


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_when_idle_is_a_no_op(self, manager: ScanManager):
        assert manager.cancel_scan() is False

        job = await manager.start_scan()
        await manager.wait()
        assert job.status is ScanStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_cancel_after_finish_does_not_touch_next_job(self, manager: ScanManager):
        returned = []

        async def cancel_on_finish(job: ScanJob):
            if job.status is ScanStatus.COMPLETED:
                returned.append(manager.cancel_scan())

        manager.add_progress_listener(cancel_on_finish)
        first = await manager.start_scan()
        await manager.wait()
        manager.remove_progress_listener(cancel_on_finish)

        second = await manager.start_scan()
        await manager.wait()

        assert returned == [False]
        assert first.status is ScanStatus.COMPLETED
        assert second.status is ScanStatus.COMPLETED
        assert len(second.summary.categories) == len(Category)

    @pytest.mark.asyncio
    async def test_cancel_before_scanner_starts(self, manager: ScanManager):
        job = await manager.start_scan()
        assert job.status is ScanStatus.PENDING

        assert manager.cancel_scan() is True
        await manager.wait()

        assert job.status is ScanStatus.CANCELLED
        assert job.summary.categories == {}

        follow_up = await manager.start_scan()
        await manager.wait()
        assert follow_up.status is ScanStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_cancel_mid_scan(self, manager: ScanManager):
        async def cancel_after_junk(job: ScanJob):
            event = job.progress
            if job.status is not ScanStatus.RUNNING or event is None:
                return
            if event.category is Category.JUNK and event.status is ProgressStatus.COMPLETE:
                assert manager.cancel_scan() is True

        manager.add_progress_listener(cancel_after_junk)
        job = await manager.start_scan()
        await manager.wait()

        assert job.status is ScanStatus.CANCELLED
        assert list(job.summary.categories) == [Category.JUNK]
