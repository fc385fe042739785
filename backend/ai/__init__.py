"""AI content generation for CV submissions."""

from backend.ai.generator import GenerationError, generate_cv_content, retry_with_backoff
from backend.ai.prompts import build_prompt

__all__ = [
    "GenerationError",
    "generate_cv_content",
    "retry_with_backoff",
    "build_prompt",
]
