"""Tests for the Supabase submission lookup."""

import threading
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from backend.config import config
from backend.database.client import SupabaseClientError, get_supabase_admin_client
from backend.database.submissions import SubmissionService
from tests.conftest import SUBMISSIONS


def fake_client(rows, seen_threads=None):
    """MagicMock Supabase client whose select chain returns ``rows``."""
    client = MagicMock()

    def execute():
        if seen_threads is not None:
            seen_threads.append(threading.get_ident())
        return SimpleNamespace(data=rows)

    client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.side_effect = execute
    return client


class TestSubmissionService:
    """Test submission reads."""

    @pytest.mark.asyncio
    async def test_get_by_id_returns_first_row(self):
        client = fake_client([SUBMISSIONS["S1"]])

        row = await SubmissionService(client=client, table="cv_submissions").get_by_id("S1")

        assert row == SUBMISSIONS["S1"]
        client.table.assert_called_once_with("cv_submissions")
        client.table.return_value.select.return_value.eq.assert_called_once_with("id", "S1")

    @pytest.mark.asyncio
    async def test_get_by_id_missing_returns_none(self):
        service = SubmissionService(client=fake_client([]))
        assert await service.get_by_id("ghost") is None

    @pytest.mark.asyncio
    async def test_query_runs_off_the_event_loop_thread(self):
        threads = []
        service = SubmissionService(client=fake_client([SUBMISSIONS["S2"]], threads))

        await service.get_by_id("S2")

        assert len(threads) == 1
        assert threads[0] != threading.get_ident()

    def test_default_table_comes_from_config(self):
        assert SubmissionService(client=MagicMock()).table == config.SUBMISSIONS_TABLE


class TestAdminClient:
    """Test admin client configuration checks."""

    def test_missing_settings_raise(self):
        get_supabase_admin_client.cache_clear()
        try:
            with patch.object(config, "SUPABASE_URL", None), \
                    patch.object(config, "SUPABASE_SERVICE_KEY", None):
                with pytest.raises(SupabaseClientError, match="SUPABASE_URL, SUPABASE_SERVICE_KEY"):
                    get_supabase_admin_client()
        finally:
            get_supabase_admin_client.cache_clear()
