"""
Background worker for AI generation jobs.
Claims one pending job per tick and writes the outcome back to the queue.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from backend.config import config
from backend.jobs.models import CVSection
from backend.jobs.queue import AIJobQueue
from backend.utils.logging import worker_logger as logger

SubmissionLookup = Callable[[str], Awaitable[Optional[Mapping[str, Any]]]]
ContentGenerator = Callable[[Mapping[str, Any], CVSection], Awaitable[str]]

WORKER_JOB_ID = "ai_worker"
CLEANUP_JOB_ID = "ai_queue_cleanup"


class AIWorker:
    """
    Background worker that processes AI generation jobs.

    Runs on a fixed interval sized for the LLM provider's rate limits and
    never has more than one job in flight.
    """

    def __init__(
        self,
        queue: AIJobQueue,
        submission_lookup: Optional[SubmissionLookup] = None,
        generator: Optional[ContentGenerator] = None,
        interval_seconds: Optional[int] = None,
        cleanup_interval_minutes: Optional[int] = None,
        retention: Optional[timedelta] = None
    ):
        if submission_lookup is None:
            from backend.database.submissions import get_submission_by_id
            submission_lookup = get_submission_by_id
        if generator is None:
            # Import here to avoid circular imports
            from backend.ai.generator import generate_cv_content
            generator = generate_cv_content

        self.queue = queue
        self.submission_lookup = submission_lookup
        self.generator = generator
        self.interval = interval_seconds or config.AI_WORKER_INTERVAL_SECONDS
        self.cleanup_interval = (
            config.AI_QUEUE_CLEANUP_INTERVAL_MINUTES
            if cleanup_interval_minutes is None else cleanup_interval_minutes
        )
        self.retention = retention or timedelta(hours=config.AI_JOB_RETENTION_HOURS)

        self.scheduler: AsyncIOScheduler | None = None

        self._is_processing = False  # Prevent concurrent job processing
        self._current_job_id: str | None = None

    async def process_next(self):
        """
        Process the oldest pending job, if any.
        Called by the scheduler every interval; never raises.
        """
        if self._is_processing:
            logger.info(f"Still busy with job {self._current_job_id}, skipping tick")
            return

        pending = self.queue.get_pending_jobs()
        if not pending:
            logger.debug("No pending jobs")
            return

        job = pending[0]
        self._is_processing = True
        self._current_job_id = job.id

        logger.info(f"Processing job {job.id} ({len(pending)} in queue)")

        try:
            self.queue.mark_processing(job.id)

            submission = await self.submission_lookup(job.submission_id)
            if submission is None:
                logger.error(f"Job {job.id} failed: submission {job.submission_id} not found")
                self.queue.mark_failed(job.id, "Submission not found")
                return

            result = await self.generator(submission, job.section)
            if not isinstance(result, str) or not result:
                logger.error(f"Job {job.id} failed: generator returned no content")
                self.queue.mark_failed(job.id, "No content generated")
                return

            logger.info(f"Job {job.id} completed", chars=len(result))
            self.queue.mark_completed(job.id, result)

        except Exception as e:
            logger.error(f"Job {job.id} failed: {e}", error_type=type(e).__name__)
            self.queue.mark_failed(job.id, e)
        finally:
            self._is_processing = False
            self._current_job_id = None

    def cleanup_jobs(self) -> int:
        return self.queue.cleanup(self.retention)

    def start(self):
        """Start the background worker; the first tick runs immediately"""
        if self.is_running:
            logger.info("Worker already running")
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.process_next,
            trigger=IntervalTrigger(seconds=self.interval),
            id=WORKER_JOB_ID,
            name="Process AI generation jobs",
            replace_existing=True,
            max_instances=1,  # Prevent overlapping runs
            next_run_time=datetime.now(timezone.utc)
        )

        if self.cleanup_interval > 0:
            self.scheduler.add_job(
                self.cleanup_jobs,
                trigger=IntervalTrigger(minutes=self.cleanup_interval),
                id=CLEANUP_JOB_ID,
                name="Evict finished AI jobs",
                replace_existing=True,
                max_instances=1
            )

        self.scheduler.start()
        logger.info(f"Worker started (processing interval: {self.interval}s)")

    def stop(self):
        """Stop the background worker"""
        if not self.is_running:
            return
        self.scheduler.shutdown(wait=False)
        self.scheduler = None
        logger.info("Worker stopped")

    @property
    def is_running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    @property
    def is_processing(self) -> bool:
        """Check if worker is currently processing a job"""
        return self._is_processing

    @property
    def current_job(self) -> str | None:
        """Get the ID of the currently processing job"""
        return self._current_job_id
