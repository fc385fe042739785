"""
Application configuration management using Pydantic Settings.

This module provides a type-safe, centralized configuration system
that loads from environment variables with sensible defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All settings can be overridden via .env file or environment variables.
    Settings are validated at startup using Pydantic.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===== Groq (LLM provider) =====
    GROQ_API_KEY: str | None = Field(
        default=None,
        description="Groq API key used for CV content generation"
    )

    GROQ_API_URL: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        description="OpenAI-compatible chat completions endpoint"
    )

    GROQ_MODEL: str = Field(
        default="llama-3.3-70b-versatile",
        description="Model used for CV content generation"
    )

    GROQ_TEMPERATURE: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="LLM temperature for creativity control"
    )

    GROQ_MAX_TOKENS: int = Field(
        default=2048,
        ge=64,
        le=8192,
        description="Maximum tokens per generated CV section"
    )

    GROQ_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        ge=1.0,
        description="HTTP timeout for a single Groq request"
    )

    # ===== Retry policy =====
    AI_MAX_RETRIES: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries on HTTP 429/503 before a generation fails"
    )

    AI_RETRY_INITIAL_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0.0,
        description="First backoff delay, doubled on every retry"
    )

    # ===== AI worker / queue =====
    ENABLE_AI_WORKER: bool = Field(
        default=True,
        description="Start the background AI worker with the API process"
    )

    AI_WORKER_INTERVAL_SECONDS: int = Field(
        default=60,
        ge=1,
        le=3600,
        description="Seconds between worker ticks (one job per tick, sized for Groq rate limits)"
    )

    AI_WAIT_MINUTES_PER_JOB: float = Field(
        default=1.0,
        ge=0.0,
        description="Minutes assumed per queued job when estimating wait time"
    )

    AI_JOB_RETENTION_HOURS: float = Field(
        default=24.0,
        gt=0.0,
        description="Completed/failed jobs older than this are evicted by cleanup"
    )

    AI_QUEUE_CLEANUP_INTERVAL_MINUTES: int = Field(
        default=60,
        ge=0,
        description="How often the worker evicts old finished jobs (0 disables)"
    )

    @field_validator('ENABLE_AI_WORKER', 'DEV_MODE', mode='before')
    @classmethod
    def parse_bool_string(cls, v):
        """Parse boolean from string values (platform env vars are strings)."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "on")
        return False

    # ===== Supabase (submission storage) =====
    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service role key (server-side reads of CV submissions)"
    )

    SUBMISSIONS_TABLE: str = Field(
        default="cv_submissions",
        description="Table holding CV intake form submissions"
    )

    # ===== Application Settings =====
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment mode: development or production"
    )

    DEV_MODE: bool = Field(
        default=True,
        description="Bypass admin authentication when no admin keys are configured"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="API server host"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1024,
        le=65535,
        description="API server port"
    )

    # ===== Security Settings =====
    ADMIN_API_KEYS: str | None = Field(
        default=None,
        description="Comma-separated admin API keys. If empty and DEV_MODE=True, auth is bypassed."
    )

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for all (dev only)."
    )

    @property
    def admin_keys_list(self) -> list[str]:
        """Get list of valid admin API keys."""
        if not self.ADMIN_API_KEYS:
            return []
        return [k.strip() for k in self.ADMIN_API_KEYS.split(",") if k.strip()]

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def auth_required(self) -> bool:
        """Check if authentication is required (False in dev mode with no keys)."""
        return bool(self.admin_keys_list) or not self.DEV_MODE

    # ===== Computed Properties =====

    @property
    def groq_configured(self) -> bool:
        return bool(self.GROQ_API_KEY)

    @property
    def supabase_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return (
            self.SUPABASE_URL is not None
            and self.SUPABASE_SERVICE_KEY is not None
        )


# Global configuration instance
# Import this in other modules: from backend.config import config
config = AppConfig()
