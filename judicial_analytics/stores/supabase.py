"""
Relational store backed by a Supabase (PostgREST) database.

Tables used:
    judges                  judge records, plus the ``case_analytics`` fallback column
    cases                   case rows produced by the ingestion pipeline
    opinions                opinion bodies keyed by ``case_id``
    judge_analytics_cache   dedicated analytics cache, unique on ``judge_id``
"""

from datetime import date
from typing import Any, Dict, List, Optional

from .base import PersistentStore
from ..utils.base import BaseClient
from ..utils.data_models import AnalyticsCacheEntry, Case, Judge, Opinion
from ..utils.exceptions import (
    CacheReadError,
    CacheWriteError,
    ClientError,
    UpstreamReadError,
)

OPINION_COLUMNS = "case_id,opinion_type,plain_text,opinion_text,html_text"


def _in_filter(values: List[str]) -> str:
    quoted = ",".join('"{}"'.format(v.replace('"', '\\"')) for v in values)
    return f"in.({quoted})"


class SupabaseStore(BaseClient, PersistentStore):
    """
    PostgREST client for judge, case, opinion and analytics cache data.

    Example:
        >>> store = SupabaseStore("https://xyz.supabase.co", "service-role-key")
        >>> judge = store.get_judge("8f14e45f")
    """

    cache_table = "judge_analytics_cache"

    def __init__(self, url: str, key: str, timeout: int = 15, max_retries: int = 2):
        self._url = url.rstrip("/")
        self._key = key
        super().__init__(timeout=timeout, max_retries=max_retries)

    @property
    def base_url(self) -> str:
        return f"{self._url}/rest/v1"

    def _auth_headers(self) -> Dict[str, str]:
        return {"apikey": self._key, "Authorization": f"Bearer {self._key}"}

    def _select(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = self._make_request(f"{self.base_url}/{table}", params=params)
        rows = self._parse_json(response)
        return rows if isinstance(rows, list) else []

    # Case data

    def get_judge(self, judge_id: str) -> Optional[Judge]:
        try:
            rows = self._select("judges", {"id": f"eq.{judge_id}", "select": "*"})
        except ClientError as e:
            raise UpstreamReadError(f"Judge lookup failed: {e}", judge_id) from e
        return Judge.from_row(rows[0]) if rows else None

    def list_judges(self, jurisdiction: str, limit: int) -> List[Judge]:
        try:
            rows = self._select(
                "judges",
                {
                    "jurisdiction": f"eq.{jurisdiction}",
                    "select": "id,name,jurisdiction,court_name,total_cases",
                    "order": "total_cases.desc",
                    "limit": limit,
                },
            )
        except ClientError as e:
            raise UpstreamReadError(f"Judge listing failed: {e}") from e
        return [Judge.from_row(row) for row in rows if row.get("id")]

    def list_cases(self, judge_id: str, since: date, limit: int) -> List[Case]:
        try:
            rows = self._select(
                "cases",
                {
                    "judge_id": f"eq.{judge_id}",
                    "filing_date": f"gte.{since.isoformat()}",
                    "select": "*",
                    "order": "filing_date.desc",
                    "limit": limit,
                },
            )
        except ClientError as e:
            raise UpstreamReadError(f"Case listing failed: {e}", judge_id) from e
        return [Case.from_row(row) for row in rows]

    def list_opinions(self, case_ids: List[str]) -> List[Opinion]:
        if not case_ids:
            return []
        try:
            rows = self._select(
                "opinions",
                {"case_id": _in_filter(case_ids), "select": OPINION_COLUMNS},
            )
        except ClientError as e:
            raise UpstreamReadError(f"Opinion listing failed: {e}") from e
        return [Opinion.from_row(row) for row in rows]

    # Analytics cache

    def get_cached_analytics(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        try:
            rows = self._select(
                self.cache_table,
                {"judge_id": f"eq.{judge_id}", "select": "analytics,created_at"},
            )
        except ClientError as e:
            raise CacheReadError(f"Analytics cache read failed: {e}", judge_id) from e

        if not rows or not isinstance(rows[0].get("analytics"), dict):
            return None
        return AnalyticsCacheEntry(
            judge_id=judge_id,
            analytics=rows[0]["analytics"],
            created_at=rows[0].get("created_at"),
        )

    def upsert_cached_analytics(
        self, judge_id: str, analytics: Dict[str, Any], created_at: str
    ) -> None:
        try:
            self._make_request(
                f"{self.base_url}/{self.cache_table}",
                method="POST",
                params={"on_conflict": "judge_id"},
                json_body={
                    "judge_id": judge_id,
                    "analytics": analytics,
                    "created_at": created_at,
                    "updated_at": created_at,
                },
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
        except ClientError as e:
            raise CacheWriteError(f"Analytics cache upsert failed: {e}", judge_id) from e

    def delete_cached_analytics(self, judge_id: str) -> None:
        try:
            self._make_request(
                f"{self.base_url}/{self.cache_table}",
                method="DELETE",
                params={"judge_id": f"eq.{judge_id}"},
            )
        except ClientError as e:
            raise CacheWriteError(f"Analytics cache delete failed: {e}", judge_id) from e

    def get_judge_analytics_column(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        try:
            rows = self._select(
                "judges",
                {"id": f"eq.{judge_id}", "select": "case_analytics,updated_at"},
            )
        except ClientError as e:
            raise CacheReadError(f"Judge analytics read failed: {e}", judge_id) from e

        if not rows or not isinstance(rows[0].get("case_analytics"), dict):
            return None
        return AnalyticsCacheEntry(
            judge_id=judge_id,
            analytics=rows[0]["case_analytics"],
            created_at=rows[0].get("updated_at"),
        )

    def update_judge_analytics_column(
        self, judge_id: str, analytics: Dict[str, Any], updated_at: str
    ) -> None:
        try:
            self._make_request(
                f"{self.base_url}/judges",
                method="PATCH",
                params={"id": f"eq.{judge_id}"},
                json_body={"case_analytics": analytics, "updated_at": updated_at},
                headers={"Prefer": "return=minimal"},
            )
        except ClientError as e:
            raise CacheWriteError(f"Judge analytics update failed: {e}", judge_id) from e
