"""
FastAPI application for the CV Studio back-office API.

This module sets up the FastAPI app with the admin routes and wires the
shared AI job queue to both the routes and the background worker.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import config
from backend.jobs import AIJobQueue, AIWorker
from backend.jobs.worker import ContentGenerator, SubmissionLookup
from backend.routes.admin import router as admin_router
from backend.utils.logging import api_logger as logger, configure_logging


def create_app(
    queue: Optional[AIJobQueue] = None,
    submission_lookup: Optional[SubmissionLookup] = None,
    generator: Optional[ContentGenerator] = None,
    start_worker: Optional[bool] = None
) -> FastAPI:
    """
    Build the API application.

    One queue instance is shared by the admin routes and the worker for the
    lifetime of the process. Collaborators can be injected for tests.
    """
    if queue is None:
        queue = AIJobQueue()
    if submission_lookup is None:
        from backend.database.submissions import get_submission_by_id
        submission_lookup = get_submission_by_id
    if start_worker is None:
        start_worker = config.ENABLE_AI_WORKER

    worker = AIWorker(queue, submission_lookup=submission_lookup, generator=generator)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "CV Studio API starting",
            environment=config.ENVIRONMENT,
            groq_configured=config.groq_configured,
            supabase_configured=config.supabase_configured
        )
        if not config.groq_configured:
            logger.warning("GROQ_API_KEY is missing; AI generation requests will be rejected")
        if config.DEV_MODE and not config.admin_keys_list:
            logger.warning("DEV MODE: admin authentication BYPASSED (no admin keys configured)")

        if start_worker:
            worker.start()
        else:
            logger.info("AI worker disabled (ENABLE_AI_WORKER=false)")

        yield

        worker.stop()
        logger.info("CV Studio API shut down")

    app = FastAPI(
        title="CV Studio API",
        description="Back-office API for AI-assisted CV writing",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.ai_queue = queue
    app.state.ai_worker = worker
    app.state.submission_lookup = submission_lookup

    app.include_router(admin_router)

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "worker": {
                "running": worker.is_running,
                "processing": worker.is_processing,
                "current_job": worker.current_job,
            },
            "queue": queue.stats(),
        }

    return app


configure_logging(config.LOG_LEVEL)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower()
    )
