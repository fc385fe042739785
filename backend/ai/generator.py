"""
CV content generation via the Groq chat completions API.

Builds a section prompt from a CV submission, calls the LLM and returns the
generated text. Rate-limit and availability errors (429/503) are retried
with exponential backoff; anything else fails immediately.
"""

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

import httpx

from backend.ai.prompts import build_prompt
from backend.config import config
from backend.jobs.models import CVSection, resolve_section
from backend.utils.logging import ai_logger as logger

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 503})


class GenerationError(Exception):
    """Raised when the LLM could not produce content for a submission."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code in RETRYABLE_STATUS_CODES


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: Optional[int] = None,
    initial_delay: Optional[float] = None
) -> T:
    """
    Await ``fn()``, retrying retryable GenerationErrors.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        max_retries: Retries after the first attempt (default AI_MAX_RETRIES)
        initial_delay: Seconds before the first retry, doubled each time
            (default AI_RETRY_INITIAL_DELAY_SECONDS)
    """
    if max_retries is None:
        max_retries = config.AI_MAX_RETRIES
    if initial_delay is None:
        initial_delay = config.AI_RETRY_INITIAL_DELAY_SECONDS

    retries = 0
    while True:
        try:
            return await fn()
        except GenerationError as e:
            if not e.retryable or retries >= max_retries:
                raise
            retries += 1
            delay = initial_delay * 2 ** (retries - 1)
            logger.warning(
                f"Groq API returned {e.status_code}. Retrying in {delay:.1f}s "
                f"(attempt {retries}/{max_retries})"
            )
            await asyncio.sleep(delay)


async def call_groq_api(
    client: httpx.AsyncClient,
    prompt: str,
    api_key: str
) -> dict:
    """POST a single-message chat completion and return the decoded body."""
    try:
        response = await client.post(
            config.GROQ_API_URL,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            json={
                "model": config.GROQ_MODEL,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": config.GROQ_TEMPERATURE,
                "max_tokens": config.GROQ_MAX_TOKENS,
            },
        )
    except httpx.HTTPError as e:
        raise GenerationError(f"Groq API request failed: {e}") from e

    if response.is_error:
        if response.status_code not in RETRYABLE_STATUS_CODES:
            logger.error(
                f"Groq API error {response.status_code}",
                body=response.text[:500]
            )
        raise GenerationError(
            f"Groq API error: {response.status_code}",
            status_code=response.status_code
        )

    try:
        return response.json()
    except ValueError as e:
        raise GenerationError("Groq API returned an invalid JSON body") from e


async def generate_cv_content(
    submission: Mapping[str, Any],
    section: CVSection | str = CVSection.ALL,
    *,
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None
) -> str:
    """
    Generate CV text for one section of a submission.

    Args:
        submission: CV intake record (full_name, experience, education, ...)
        section: Section to write; unknown values generate the full CV
        api_key: Groq key (default GROQ_API_KEY)
        client: Optional shared HTTP client

    Returns:
        Generated text

    Raises:
        GenerationError: missing key, non-retryable upstream error,
            exhausted retries or an empty completion
    """
    api_key = api_key or config.GROQ_API_KEY
    if not api_key:
        raise GenerationError("Groq API key is not configured")

    prompt = build_prompt(submission, resolve_section(section))

    if client is None:
        async with httpx.AsyncClient(timeout=config.GROQ_TIMEOUT_SECONDS) as own_client:
            data = await retry_with_backoff(lambda: call_groq_api(own_client, prompt, api_key))
    else:
        data = await retry_with_backoff(lambda: call_groq_api(client, prompt, api_key))

    try:
        generated_text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        generated_text = None

    if not generated_text:
        raise GenerationError("No content received from Groq")

    return generated_text
