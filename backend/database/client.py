"""
Supabase access for the CV Studio backend.

The backend only reads CV submissions, always with the service-role key.
"""

from functools import lru_cache
from typing import List

from supabase import create_client, Client

from backend.config import config
from backend.utils.logging import db_logger as logger

REQUIRED_SETTINGS = ("SUPABASE_URL", "SUPABASE_SERVICE_KEY")


class SupabaseClientError(Exception):
    """Raised when Supabase client cannot be initialized."""


def missing_settings() -> List[str]:
    return [name for name in REQUIRED_SETTINGS if not getattr(config, name)]


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """
    Shared service-role client, created on first use.

    Bypasses Row Level Security; never hand it to request-scoped user code.
    """
    missing = missing_settings()
    if missing:
        raise SupabaseClientError(
            f"Supabase is not configured (missing {', '.join(missing)})"
        )

    logger.info("Creating Supabase admin client", url=config.SUPABASE_URL)
    return create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)
