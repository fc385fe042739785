"""
CV Submission Service

Read access to CV intake form submissions. Submissions are written by the
public intake form; this backend only looks them up by id.
"""

import asyncio
from typing import Optional, Dict, Any

from supabase import Client

from backend.config import config
from .client import get_supabase_admin_client


class SubmissionService:
    """
    Service class for CV submission lookups.
    """

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None):
        self._client = client
        self.table = table or config.SUBMISSIONS_TABLE

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_admin_client()
        return self._client

    async def get_by_id(self, submission_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a submission by ID.

        Returns:
            Submission row (full_name, email, phone, city, linkedin,
            experience, education, hard_skills, soft_skills, languages),
            or None if not found
        """
        # supabase-py is synchronous; keep the request off the event loop
        result = await asyncio.to_thread(self._select_by_id, submission_id)
        return result.data[0] if result.data else None

    def _select_by_id(self, submission_id: str):
        return (
            self.client.table(self.table)
            .select("*")
            .eq("id", submission_id)
            .limit(1)
            .execute()
        )


async def get_submission_by_id(submission_id: str) -> Optional[Dict[str, Any]]:
    """Look up a submission with the shared admin client."""
    return await SubmissionService().get_by_id(submission_id)
