"""Pytest configuration for CV Studio backend tests."""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest

from backend.jobs import AIJobQueue, AIWorker


SUBMISSIONS: Dict[str, Dict[str, Any]] = {
    "S1": {
        "id": "S1",
        "full_name": "Lucía Fernández",
        "email": "lucia@example.com",
        "phone": "+54 11 5555-0101",
        "city": "Rosario",
        "linkedin": "linkedin.com/in/luciaf",
        "experience": [{"puesto": "Ingeniera en Sistemas", "empresa": "Acme", "periodo": "2019-2024"}],
        "education": [{"titulo": "Ingeniería en Sistemas", "institucion": "UTN"}],
        "hard_skills": ["Python", "SQL"],
        "soft_skills": ["Liderazgo"],
        "languages": [{"idioma": "Inglés", "nivel": "C1"}],
    },
    "S2": {
        "id": "S2",
        "full_name": "Martín Gómez",
        "email": "martin@example.com",
        "phone": "+54 11 5555-0202",
        "experience": [{"puesto": "Gerente Comercial", "empresa": "Globex"}],
        "education": [],
        "hard_skills": [],
        "soft_skills": ["Negociación"],
    },
}


async def fake_submission_lookup(submission_id: str) -> Optional[Dict[str, Any]]:
    return SUBMISSIONS.get(submission_id)


@pytest.fixture
def queue():
    """Fresh in-memory queue per test."""
    return AIJobQueue()


@pytest.fixture
def submission_lookup():
    return AsyncMock(side_effect=fake_submission_lookup)


@pytest.fixture
def generator():
    """Stub content generator returning a fixed text."""
    return AsyncMock(return_value="Summary text")


@pytest.fixture
def worker(queue, submission_lookup, generator):
    return AIWorker(
        queue,
        submission_lookup=submission_lookup,
        generator=generator,
        interval_seconds=60,
        cleanup_interval_minutes=0
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
