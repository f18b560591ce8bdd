"""
Storage interfaces consumed by the analytics engine.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from ..utils.data_models import AnalyticsCacheEntry, Case, Judge, Opinion


class CacheStore(ABC):
    """Key-value store holding JSON blobs with a time-to-live (the fast tier)."""

    @abstractmethod
    def get_json(self, key: str) -> Optional[Any]:
        """
        Fetch a JSON value.

        Returns:
            Decoded value, or None when the key is absent or expired

        Raises:
            CacheReadError: If the store cannot be reached
        """
        pass

    @abstractmethod
    def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a JSON value that expires after ``ttl_seconds``.

        Raises:
            CacheWriteError: If the store rejects the write
        """
        pass


class PersistentStore(ABC):
    """
    Relational store holding judges, cases, opinions and cached analytics.

    Read methods raise :class:`UpstreamReadError` (case data) or
    :class:`CacheReadError` (cached analytics) on failure; write methods raise
    :class:`CacheWriteError`.
    """

    @abstractmethod
    def get_judge(self, judge_id: str) -> Optional[Judge]:
        pass

    @abstractmethod
    def list_judges(self, jurisdiction: str, limit: int) -> List[Judge]:
        """Judges of a jurisdiction, busiest (by total_cases) first."""
        pass

    @abstractmethod
    def list_cases(self, judge_id: str, since: date, limit: int) -> List[Case]:
        """Cases filed on or after ``since``, newest filing first."""
        pass

    @abstractmethod
    def list_opinions(self, case_ids: List[str]) -> List[Opinion]:
        pass

    @abstractmethod
    def get_cached_analytics(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        """Row of the dedicated analytics cache table."""
        pass

    @abstractmethod
    def upsert_cached_analytics(
        self, judge_id: str, analytics: Dict[str, Any], created_at: str
    ) -> None:
        pass

    @abstractmethod
    def delete_cached_analytics(self, judge_id: str) -> None:
        pass

    @abstractmethod
    def get_judge_analytics_column(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        """Analytics stored on the judge record itself."""
        pass

    @abstractmethod
    def update_judge_analytics_column(
        self, judge_id: str, analytics: Dict[str, Any], updated_at: str
    ) -> None:
        pass
