"""
In-process stores, used when no remote backend is configured.
"""

import copy
import json
import time
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from .base import CacheStore, PersistentStore
from ..utils.data_models import AnalyticsCacheEntry, Case, Judge, Opinion
from ..utils.helpers import validate_date


class MemoryCacheStore(CacheStore):
    """Dictionary-backed cache store with per-key expiry."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._items: Dict[str, Tuple[str, float]] = {}

    def get_json(self, key: str) -> Optional[Any]:
        item = self._items.get(key)
        if item is None:
            return None
        raw, expires_at = item
        if self._clock() >= expires_at:
            del self._items[key]
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._items[key] = (json.dumps(value), self._clock() + ttl_seconds)


class MemoryStore(PersistentStore):
    """
    Dictionary-backed persistent store.

    Rows are kept in the same shapes the relational tables use, so
    ``add_case`` and ``add_opinion`` accept plain dicts.
    """

    def __init__(self):
        self.judges: Dict[str, Dict[str, Any]] = {}
        self.cases: List[Dict[str, Any]] = []
        self.opinions: List[Dict[str, Any]] = []
        self.analytics_cache: Dict[str, Dict[str, Any]] = {}

    def add_judge(self, row: Dict[str, Any]) -> None:
        self.judges[str(row["id"])] = dict(row)

    def add_case(self, row: Dict[str, Any]) -> None:
        self.cases.append(dict(row))

    def add_opinion(self, row: Dict[str, Any]) -> None:
        self.opinions.append(dict(row))

    def get_judge(self, judge_id: str) -> Optional[Judge]:
        row = self.judges.get(judge_id)
        return Judge.from_row(row) if row else None

    def list_judges(self, jurisdiction: str, limit: int) -> List[Judge]:
        rows = [r for r in self.judges.values() if r.get("jurisdiction") == jurisdiction]
        rows.sort(key=lambda r: r.get("total_cases") or 0, reverse=True)
        return [Judge.from_row(r) for r in rows[:limit]]

    def list_cases(self, judge_id: str, since: date, limit: int) -> List[Case]:
        rows = []
        for row in self.cases:
            if row.get("judge_id") != judge_id or not row.get("filing_date"):
                continue
            try:
                filed = validate_date(row["filing_date"])
            except ValueError:
                # A date column never holds these, so the window filter skips them
                continue
            if filed.date() >= since:
                rows.append((filed, row))
        rows.sort(key=lambda item: item[0].replace(tzinfo=None), reverse=True)
        return [Case.from_row(row) for _, row in rows[:limit]]

    def list_opinions(self, case_ids: List[str]) -> List[Opinion]:
        wanted = set(case_ids)
        return [Opinion.from_row(r) for r in self.opinions if r.get("case_id") in wanted]

    def get_cached_analytics(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        row = self.analytics_cache.get(judge_id)
        if not row:
            return None
        return AnalyticsCacheEntry(
            judge_id=judge_id,
            analytics=copy.deepcopy(row["analytics"]),
            created_at=row["created_at"],
        )

    def upsert_cached_analytics(
        self, judge_id: str, analytics: Dict[str, Any], created_at: str
    ) -> None:
        self.analytics_cache[judge_id] = {
            "analytics": copy.deepcopy(analytics),
            "created_at": created_at,
        }

    def delete_cached_analytics(self, judge_id: str) -> None:
        self.analytics_cache.pop(judge_id, None)

    def get_judge_analytics_column(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        row = self.judges.get(judge_id) or {}
        if not isinstance(row.get("case_analytics"), dict):
            return None
        return AnalyticsCacheEntry(
            judge_id=judge_id,
            analytics=copy.deepcopy(row["case_analytics"]),
            created_at=row.get("updated_at"),
        )

    def update_judge_analytics_column(
        self, judge_id: str, analytics: Dict[str, Any], updated_at: str
    ) -> None:
        if judge_id in self.judges:
            self.judges[judge_id]["case_analytics"] = copy.deepcopy(analytics)
            self.judges[judge_id]["updated_at"] = updated_at
