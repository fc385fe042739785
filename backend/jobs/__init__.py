"""
AI generation job queue for CV submissions.

Components:
- AIJob / JobStatus / CVSection: job records
- AIJobQueue: in-memory FIFO queue, the only mutator of job state
- AIWorker: scheduled worker that processes one job per tick

Usage:
    # At startup - one shared queue for routes and worker
    from backend.jobs import AIJobQueue, AIWorker
    queue = AIJobQueue()
    worker = AIWorker(queue)
    worker.start()

    # In an admin endpoint - queue a job
    job = queue.enqueue(submission_id, "resumen")

    # Poll status
    snapshot = queue.status_snapshot(job.id)
"""

from backend.jobs.models import AIJob, JobStatus, CVSection
from backend.jobs.queue import AIJobQueue
from backend.jobs.worker import AIWorker

__all__ = [
    # Models
    "AIJob",
    "JobStatus",
    "CVSection",

    # Queue
    "AIJobQueue",

    # Worker
    "AIWorker",
]
