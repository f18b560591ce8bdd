"""
Tests for the Supabase (PostgREST) store.
"""

import pytest
from datetime import date
from unittest.mock import patch

from judicial_analytics.stores.supabase import SupabaseStore, _in_filter
from judicial_analytics.utils.exceptions import (
    CacheReadError,
    CacheWriteError,
    UpstreamReadError,
)


@pytest.fixture
def supabase_store():
    return SupabaseStore("https://db.invalid", "service-key", max_retries=0)


class TestSupabaseStore:
    """Tests for SupabaseStore class."""

    def test_auth_headers(self, supabase_store):
        """Test service key headers."""
        assert supabase_store.session.headers["apikey"] == "service-key"
        assert supabase_store.session.headers["Authorization"] == "Bearer service-key"
        assert supabase_store.base_url == "https://db.invalid/rest/v1"

    def test_in_filter(self):
        """Test PostgREST in-list encoding."""
        assert _in_filter(["a", "b"]) == 'in.("a","b")'

    def test_get_judge(self, supabase_store, json_response):
        """Test judge lookup by id."""
        response = json_response([{"id": "j-1", "name": "Hon. A", "jurisdiction": "CA"}])

        with patch.object(supabase_store.session, "request", return_value=response) as request:
            judge = supabase_store.get_judge("j-1")

        assert judge.name == "Hon. A"
        assert request.call_args.kwargs["url"] == "https://db.invalid/rest/v1/judges"
        assert request.call_args.kwargs["params"]["id"] == "eq.j-1"

    def test_get_judge_missing(self, supabase_store, json_response):
        """Test that an empty result means no judge."""
        with patch.object(supabase_store.session, "request", return_value=json_response([])):
            assert supabase_store.get_judge("j-1") is None

    def test_get_judge_failure(self, supabase_store, json_response):
        """Test that lookup failures raise UpstreamReadError."""
        with patch.object(
            supabase_store.session, "request", return_value=json_response(status_code=401)
        ):
            with pytest.raises(UpstreamReadError):
                supabase_store.get_judge("j-1")

    def test_list_cases(self, supabase_store, json_response):
        """Test case listing filters and ordering."""
        response = json_response([{"id": "c-1", "judge_id": "j-1", "case_type": "Civil"}])

        with patch.object(supabase_store.session, "request", return_value=response) as request:
            cases = supabase_store.list_cases("j-1", date(2020, 1, 1), 1000)

        params = request.call_args.kwargs["params"]
        assert params["judge_id"] == "eq.j-1"
        assert params["filing_date"] == "gte.2020-01-01"
        assert params["order"] == "filing_date.desc"
        assert params["limit"] == 1000
        assert cases[0].case_type == "Civil"

    def test_list_opinions(self, supabase_store, json_response):
        """Test opinion listing by case ids."""
        response = json_response([{"case_id": "c-1", "opinion_type": "lead", "plain_text": "x"}])

        with patch.object(supabase_store.session, "request", return_value=response) as request:
            opinions = supabase_store.list_opinions(["c-1", "c-2"])

        assert request.call_args.kwargs["params"]["case_id"] == 'in.("c-1","c-2")'
        assert opinions[0].is_lead

    def test_list_opinions_empty(self, supabase_store):
        """Test that no request is made for an empty id list."""
        with patch.object(supabase_store.session, "request") as request:
            assert supabase_store.list_opinions([]) == []
        request.assert_not_called()

    def test_get_cached_analytics(self, supabase_store, json_response):
        """Test reading the analytics table."""
        response = json_response(
            [{"analytics": {"confidence_civil": 70}, "created_at": "2025-01-01T00:00:00+00:00"}]
        )
        with patch.object(supabase_store.session, "request", return_value=response):
            entry = supabase_store.get_cached_analytics("j-1")

        assert entry.has_schema_marker
        assert entry.created_at == "2025-01-01T00:00:00+00:00"

    def test_get_cached_analytics_failure(self, supabase_store, json_response):
        """Test that table read failures raise CacheReadError."""
        with patch.object(
            supabase_store.session, "request", return_value=json_response(status_code=500)
        ):
            with pytest.raises(CacheReadError):
                supabase_store.get_cached_analytics("j-1")

    def test_upsert_cached_analytics(self, supabase_store, json_response):
        """Test upsert on the judge_id conflict target."""
        with patch.object(
            supabase_store.session, "request", return_value=json_response(status_code=201)
        ) as request:
            supabase_store.upsert_cached_analytics("j-1", {"a": 1}, "2025-01-01T00:00:00+00:00")

        kwargs = request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["params"] == {"on_conflict": "judge_id"}
        assert kwargs["json"]["judge_id"] == "j-1"
        assert "merge-duplicates" in kwargs["headers"]["Prefer"]

    def test_delete_cached_analytics(self, supabase_store, json_response):
        """Test deletion of the analytics row."""
        with patch.object(
            supabase_store.session, "request", return_value=json_response(status_code=204)
        ) as request:
            supabase_store.delete_cached_analytics("j-1")

        assert request.call_args.kwargs["method"] == "DELETE"
        assert request.call_args.kwargs["params"] == {"judge_id": "eq.j-1"}

    def test_update_judge_analytics_column_failure(self, supabase_store, json_response):
        """Test that column write failures raise CacheWriteError."""
        with patch.object(
            supabase_store.session, "request", return_value=json_response(status_code=400)
        ):
            with pytest.raises(CacheWriteError):
                supabase_store.update_judge_analytics_column("j-1", {"a": 1}, "2025-01-01")
