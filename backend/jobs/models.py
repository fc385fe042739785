"""
Job records for the AI generation queue.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from backend.utils.logging import get_logger

logger = get_logger("ai_jobs")


class JobStatus(str, Enum):
    """Status values for AI generation jobs"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class CVSection(str, Enum):
    """Portion of the CV the model is asked to write"""
    RESUMEN = "resumen"
    EXPERIENCIA = "experiencia"
    EDUCACION = "educacion"
    HABILIDADES = "habilidades"
    ALL = "all"


def resolve_section(section: CVSection | str) -> CVSection:
    """
    Map a section value to CVSection.

    Unknown values fall back to the full CV, with a warning.
    """
    if isinstance(section, CVSection):
        return section
    try:
        return CVSection(section)
    except ValueError:
        logger.warning(f"Unknown CV section {section!r}, generating full CV instead")
        return CVSection.ALL


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AIJob:
    submission_id: str
    section: CVSection = CVSection.ALL
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: JobStatus = JobStatus.PENDING
    result: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    processed_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "submission_id": self.submission_id,
            "section": self.section.value,
            "status": self.status.value,
            "result": self.result,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "processed_at": self.processed_at.isoformat() if self.processed_at else None,
        }
