"""
AI job queue manager.
In-memory registry of CV generation jobs; the only place job state changes.
"""

import math
from datetime import timedelta
from typing import Any, Dict, List, Optional

from backend.jobs.models import AIJob, CVSection, JobStatus, resolve_section, utc_now
from backend.utils.logging import queue_logger as logger


class AIJobQueue:
    """
    In-memory FIFO queue of AI generation jobs.

    All operations are synchronous and never suspend, so request handlers
    can read positions without waiting on the worker. Jobs live for the
    process lifetime only.

    Usage:
        queue = AIJobQueue()
        job = queue.enqueue(submission_id, CVSection.RESUMEN)
        position = queue.get_queue_position(job.id)
    """

    def __init__(self):
        self._jobs: List[AIJob] = []

    def enqueue(
        self,
        submission_id: str,
        section: CVSection | str = CVSection.ALL
    ) -> AIJob:
        """
        Queue a new generation job.

        Never raises. The submission is not looked up here; a missing
        submission fails the job when the worker picks it up. Unknown
        section values are stored as CVSection.ALL.
        """
        job = AIJob(submission_id=submission_id, section=resolve_section(section))
        self._jobs.append(job)
        logger.info(
            f"Job enqueued: {job.id} for submission {submission_id}",
            section=job.section.value
        )
        return job

    def get_job(self, job_id: str) -> Optional[AIJob]:
        return next((job for job in self._jobs if job.id == job_id), None)

    def get_all_jobs(self) -> List[AIJob]:
        return list(self._jobs)

    def get_pending_jobs(self) -> List[AIJob]:
        """Pending jobs in enqueue order (head is served next)"""
        return [job for job in self._jobs if job.status == JobStatus.PENDING]

    def get_queue_position(self, job_id: str) -> Optional[int]:
        """1-based rank among pending jobs, or None if the job is not pending"""
        for index, job in enumerate(self.get_pending_jobs()):
            if job.id == job_id:
                return index + 1
        return None

    # =========================================================================
    # State transitions (called by the worker only)
    # =========================================================================

    def _transition(self, job_id: str, status: JobStatus, **updates) -> Optional[AIJob]:
        job = self.get_job(job_id)
        if job is None:
            logger.warning(f"Transition to {status.value} for unknown job {job_id}")
            return None

        if job.is_terminal:
            logger.warning(
                f"Job {job_id} is already {job.status.value}, ignoring transition to {status.value}"
            )
            return job

        job.status = status
        job.processed_at = utc_now()
        for name, value in updates.items():
            setattr(job, name, value)

        logger.info(f"Job updated: {job_id} - Status: {job.status.value}")
        return job

    def mark_processing(self, job_id: str) -> Optional[AIJob]:
        job = self.get_job(job_id)
        if job is not None and job.status != JobStatus.PENDING:
            logger.warning(
                f"Job {job_id} is {job.status.value}, only pending jobs can be claimed"
            )
            return job
        return self._transition(job_id, JobStatus.PROCESSING)

    def mark_completed(self, job_id: str, result: str) -> Optional[AIJob]:
        """Store the generated text; an empty result fails the job instead."""
        if not isinstance(result, str) or not result:
            logger.warning(f"Job {job_id} produced no content, marking it failed")
            return self.mark_failed(job_id, "No content generated")
        return self._transition(job_id, JobStatus.COMPLETED, result=result)

    def mark_failed(self, job_id: str, error: BaseException | str) -> Optional[AIJob]:
        if isinstance(error, str):
            message = error
        else:
            message = str(error) or type(error).__name__
        return self._transition(job_id, JobStatus.FAILED, error=message)

    # =========================================================================
    # Maintenance and reporting
    # =========================================================================

    def cleanup(self, max_age: timedelta = timedelta(hours=24)) -> int:
        """
        Evict completed/failed jobs processed more than ``max_age`` ago.

        Pending and processing jobs are kept regardless of age.

        Returns:
            Number of jobs removed
        """
        now = utc_now()
        before = len(self._jobs)

        self._jobs = [
            job for job in self._jobs
            if not job.is_terminal
            or job.processed_at is None
            or now - job.processed_at <= max_age
        ]

        removed = before - len(self._jobs)
        if removed > 0:
            logger.info(f"Cleaned up {removed} old jobs")
        return removed

    def stats(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in JobStatus}
        for job in self._jobs:
            counts[job.status.value] += 1
        return {"total": len(self._jobs), **counts}

    def status_snapshot(
        self,
        job_id: str,
        minutes_per_job: float = 1.0
    ) -> Optional[Dict[str, Any]]:
        """
        Status payload for polling clients.

        Returns:
            Dict with the job fields and its queue position, or None if unknown
        """
        job = self.get_job(job_id)
        if job is None:
            return None

        position = self.get_queue_position(job_id)
        return {
            "job": {
                "id": job.id,
                "status": job.status.value,
                "result": job.result,
                "error": job.error,
                "created_at": job.created_at.isoformat(),
                "processed_at": job.processed_at.isoformat() if job.processed_at else None,
            },
            "queue": {
                "position": position,
                "pending_count": len(self.get_pending_jobs()),
                "estimated_wait_minutes": math.ceil(position * minutes_per_job) if position else 0,
            },
        }
