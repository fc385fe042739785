"""Tests for the AI background worker."""

import asyncio

import pytest

from backend.ai.generator import GenerationError
from backend.jobs import AIWorker, CVSection, JobStatus
from tests.conftest import SUBMISSIONS


async def wait_for(predicate, timeout: float = 2.0):
    """Yield to the event loop until predicate() is true."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


class TestProcessNext:
    """Test a single worker tick."""

    @pytest.mark.asyncio
    async def test_no_pending_jobs_is_noop(self, worker, generator, submission_lookup):
        await worker.process_next()

        generator.assert_not_awaited()
        submission_lookup.assert_not_awaited()
        assert not worker.is_processing

    @pytest.mark.asyncio
    async def test_completes_job_with_generated_text(self, worker, queue, generator):
        """Enqueue, check position, run one tick, check the result."""
        job = queue.enqueue("S1", CVSection.RESUMEN)

        snapshot = queue.status_snapshot(job.id)
        assert snapshot["job"]["status"] == "pending"
        assert snapshot["queue"]["position"] == 1

        await worker.process_next()

        assert job.status == JobStatus.COMPLETED
        assert job.result == "Summary text"
        assert job.error is None
        assert job.processed_at is not None
        generator.assert_awaited_once_with(SUBMISSIONS["S1"], CVSection.RESUMEN)

    @pytest.mark.asyncio
    async def test_serves_jobs_in_fifo_order(self, worker, queue, generator):
        j1 = queue.enqueue("S1")
        j2 = queue.enqueue("S2")
        assert queue.get_queue_position(j1.id) == 1
        assert queue.get_queue_position(j2.id) == 2

        await worker.process_next()

        assert j1.status == JobStatus.COMPLETED
        assert j2.status == JobStatus.PENDING
        assert queue.get_queue_position(j2.id) == 1

        await worker.process_next()

        assert j2.status == JobStatus.COMPLETED
        served = [call.args[0]["id"] for call in generator.await_args_list]
        assert served == ["S1", "S2"]

    @pytest.mark.asyncio
    async def test_missing_submission_fails_job(self, worker, queue, generator):
        job = queue.enqueue("ghost")

        await worker.process_next()

        assert job.status == JobStatus.FAILED
        assert "not found" in job.error.lower()
        assert job.result is None
        generator.assert_not_awaited()
        assert not worker.is_processing

    @pytest.mark.asyncio
    async def test_generation_error_fails_job_and_loop_survives(self, worker, queue, generator):
        generator.side_effect = GenerationError("Groq API error: 500", status_code=500)
        failed = queue.enqueue("S1")

        await worker.process_next()

        assert failed.status == JobStatus.FAILED
        assert failed.result is None
        assert failed.error == "Groq API error: 500"
        assert not worker.is_processing

        generator.side_effect = None
        generator.return_value = "Second try"
        later = queue.enqueue("S2")

        await worker.process_next()

        assert later.status == JobStatus.COMPLETED
        assert later.result == "Second try"
        assert failed.status == JobStatus.FAILED

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_recorded(self, worker, queue, submission_lookup):
        submission_lookup.side_effect = ConnectionError("database unreachable")
        job = queue.enqueue("S1")

        await worker.process_next()

        assert job.status == JobStatus.FAILED
        assert job.error == "database unreachable"
        assert not worker.is_processing
        assert worker.current_job is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("output", [None, ""])
    async def test_empty_generation_fails_job(self, worker, queue, generator, output):
        """Test a generator returning no text fails the job rather than completing it."""
        generator.return_value = output
        job = queue.enqueue("S1")

        await worker.process_next()

        assert job.status == JobStatus.FAILED
        assert job.result is None
        assert job.error == "No content generated"
        assert not worker.is_processing

    @pytest.mark.asyncio
    async def test_at_most_one_job_in_flight(self, queue, submission_lookup):
        """Test a tick arriving while a job is in flight does not claim another."""
        release = asyncio.Event()

        async def slow_generator(submission, section):
            await release.wait()
            return f"CV for {submission['id']}"

        worker = AIWorker(
            queue,
            submission_lookup=submission_lookup,
            generator=slow_generator,
            cleanup_interval_minutes=0
        )
        j1 = queue.enqueue("S1")
        j2 = queue.enqueue("S2")

        first_tick = asyncio.create_task(worker.process_next())
        await wait_for(lambda: worker.is_processing)

        await worker.process_next()
        await worker.process_next()

        processing = [j for j in queue.get_all_jobs() if j.status == JobStatus.PROCESSING]
        assert processing == [j1]
        assert worker.current_job == j1.id
        assert j2.status == JobStatus.PENDING

        release.set()
        await first_tick

        assert j1.status == JobStatus.COMPLETED
        assert not worker.is_processing

        await worker.process_next()
        assert j2.status == JobStatus.COMPLETED


class TestLifecycle:
    """Test scheduler start/stop."""

    @pytest.mark.asyncio
    async def test_start_runs_first_tick_immediately(self, worker, queue):
        job = queue.enqueue("S1")

        worker.start()
        try:
            assert worker.is_running
            await wait_for(lambda: job.status == JobStatus.COMPLETED)
        finally:
            worker.stop()

        assert not worker.is_running

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, worker):
        worker.start()
        try:
            scheduler = worker.scheduler
            worker.start()
            assert worker.scheduler is scheduler
            assert len(scheduler.get_jobs()) == 1
        finally:
            worker.stop()

    @pytest.mark.asyncio
    async def test_start_schedules_cleanup_when_enabled(self, queue, submission_lookup, generator):
        worker = AIWorker(
            queue,
            submission_lookup=submission_lookup,
            generator=generator,
            cleanup_interval_minutes=30
        )
        worker.start()
        try:
            job_ids = {job.id for job in worker.scheduler.get_jobs()}
            assert job_ids == {"ai_worker", "ai_queue_cleanup"}
        finally:
            worker.stop()

    def test_stop_when_not_running(self, worker):
        worker.stop()
        assert not worker.is_running

    def test_cleanup_jobs_uses_retention(self, queue, submission_lookup, generator):
        from datetime import timedelta
        from backend.jobs.models import utc_now

        worker = AIWorker(
            queue,
            submission_lookup=submission_lookup,
            generator=generator,
            retention=timedelta(hours=2)
        )
        job = queue.enqueue("S1")
        queue.mark_processing(job.id)
        queue.mark_completed(job.id, "ok")
        job.processed_at = utc_now() - timedelta(hours=3)

        assert worker.cleanup_jobs() == 1
        assert queue.get_all_jobs() == []


class TestDefaults:
    """Test default collaborators are wired."""

    def test_default_collaborators(self, queue):
        from backend.ai.generator import generate_cv_content
        from backend.database.submissions import get_submission_by_id

        worker = AIWorker(queue)

        assert worker.generator is generate_cv_content
        assert worker.submission_lookup is get_submission_by_id
        assert worker.interval == 60
