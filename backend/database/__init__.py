"""
CV Studio Database Layer

This module provides the Supabase client and the CV submission lookup used
by the AI queue.
"""

from .client import get_supabase_admin_client, SupabaseClientError
from .submissions import SubmissionService, get_submission_by_id

__all__ = [
    "get_supabase_admin_client",
    "SupabaseClientError",
    "SubmissionService",
    "get_submission_by_id",
]
