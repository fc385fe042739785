"""
Admin Back-office API Routes

Provides endpoints for the admin back-office to:
- Queue AI content generation for a CV submission
- Poll the status and queue position of an AI job
- Inspect and clean the AI queue
- Read recent logs
"""

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from backend.config import config
from backend.jobs.models import CVSection
from backend.jobs.queue import AIJobQueue
from backend.jobs.worker import SubmissionLookup
from backend.security import require_admin
from backend.utils.logging import LogLevel, get_log_buffer, get_logger

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[require_admin])
logger = get_logger("admin")


class GenerateAIRequest(BaseModel):
    section: CVSection = CVSection.ALL


class GenerateAIResponse(BaseModel):
    success: bool
    job_id: str
    status: str
    message: str


def get_ai_queue(request: Request) -> AIJobQueue:
    """The process-wide queue created at startup."""
    return request.app.state.ai_queue


def get_submission_lookup(request: Request) -> SubmissionLookup:
    return request.app.state.submission_lookup


# ===== AI Generation =====

@router.post("/cv-submissions/{submission_id}/generate-ai", response_model=GenerateAIResponse)
async def generate_ai(
    submission_id: str,
    body: Optional[GenerateAIRequest] = None,
    queue: AIJobQueue = Depends(get_ai_queue),
    submission_lookup: SubmissionLookup = Depends(get_submission_lookup)
):
    """
    Queue AI content generation for a CV submission.

    The job is processed by the background worker; poll
    /ai-queue/status/{job_id} for the result.
    """
    section = body.section if body else CVSection.ALL

    try:
        submission = await submission_lookup(submission_id)
    except Exception as e:
        logger.error(f"Failed to fetch submission {submission_id}: {e}", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch submission")

    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")

    if not config.groq_configured:
        raise HTTPException(status_code=500, detail="Groq API is not configured")

    job = queue.enqueue(submission_id, section)

    return GenerateAIResponse(
        success=True,
        job_id=job.id,
        status=job.status.value,
        message="Request queued. Processing will start shortly."
    )


# ===== AI Queue =====

@router.get("/ai-queue/status/{job_id}")
async def get_ai_job_status(job_id: str, queue: AIJobQueue = Depends(get_ai_queue)):
    """Get the status of an AI job and its position in the queue."""
    snapshot = queue.status_snapshot(job_id, minutes_per_job=config.AI_WAIT_MINUTES_PER_JOB)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Job not found")

    return {"success": True, **snapshot}


@router.get("/ai-queue")
async def get_ai_queue_contents(queue: AIJobQueue = Depends(get_ai_queue)):
    """Get the entire queue (for debugging/monitoring)."""
    return {
        "success": True,
        "queue": [job.to_dict() for job in queue.get_all_jobs()],
        "stats": queue.stats()
    }


@router.post("/ai-queue/cleanup")
async def cleanup_ai_queue(
    max_age_hours: Optional[float] = Query(None, gt=0, description="Override the retention window"),
    queue: AIJobQueue = Depends(get_ai_queue)
):
    """Evict completed/failed jobs older than the retention window."""
    hours = max_age_hours or config.AI_JOB_RETENTION_HOURS
    removed = queue.cleanup(timedelta(hours=hours))
    logger.info(f"Queue cleanup requested by admin, removed {removed} jobs")
    return {"success": True, "removed": removed}


# ===== Logs =====

@router.get("/logs")
async def get_logs(
    limit: int = Query(100, ge=1, le=500),
    level: Optional[str] = Query(None, description="Filter by level (debug, info, warning, error, critical)"),
    source: Optional[str] = Query(None, description="Filter by source (ai_queue, ai_worker, ai_service, ...)")
):
    """Get recent log entries from the in-memory buffer."""
    log_buffer = get_log_buffer()

    level_filter = None
    if level:
        try:
            level_filter = LogLevel(level.lower())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid log level: {level}")

    return {
        "logs": log_buffer.get_recent(limit=limit, level=level_filter, source=source),
        "stats": log_buffer.get_stats()
    }
