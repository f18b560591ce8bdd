"""
Two-tier analytics cache.

Tiers are consulted in order and the first fresh entry wins:

1. fast tier (Redis), 24 hours, any schema;
2. dedicated ``judge_analytics_cache`` table, 7 days, current schema only;
3. the judge record's ``case_analytics`` column, same rule as (2), consulted
   and written only when the dedicated table cannot be reached.

Reads degrade to the next tier on failure. Writes are best-effort: failures
are logged and never raised.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..stores.base import CacheStore, PersistentStore
from ..utils.data_models import AnalyticsCacheEntry, CaseAnalytics
from ..utils.exceptions import CacheReadError, CacheWriteError
from ..utils.helpers import is_fresh, setup_logger, to_iso, utc_now

FAST_TIER_HOURS = 24
DURABLE_TIER_HOURS = 7 * 24

SOURCE_FAST = "redis_cache"
SOURCE_DURABLE = "cached"


def fast_cache_key(judge_id: str) -> str:
    return f"judge:analytics:{judge_id}"


class CacheTier(ABC):
    """
    One cache layer.

    Attributes:
        source: Label reported to callers on a hit
        max_age_hours: Entries at least this old are misses
        requires_marker: Whether entries must carry the current schema marker
        fallback_only: Whether the tier is used only when the previous tier failed
    """

    source = SOURCE_DURABLE
    max_age_hours = DURABLE_TIER_HOURS
    requires_marker = True
    fallback_only = False

    @abstractmethod
    def read(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        """Raises CacheReadError when the tier cannot be reached."""
        pass

    @abstractmethod
    def write(self, judge_id: str, analytics: CaseAnalytics, created_at: str) -> None:
        """Raises CacheWriteError when the tier rejects the write."""
        pass

    def accepts(self, entry: Optional[AnalyticsCacheEntry]) -> bool:
        if entry is None or not is_fresh(entry.created_at, self.max_age_hours):
            return False
        return entry.has_schema_marker or not self.requires_marker

    @property
    def name(self) -> str:
        return self.__class__.__name__


class FastCacheTier(CacheTier):
    source = SOURCE_FAST
    max_age_hours = FAST_TIER_HOURS
    requires_marker = False

    def __init__(self, store: CacheStore, ttl_seconds: int = FAST_TIER_HOURS * 3600):
        self.store = store
        self.ttl_seconds = ttl_seconds

    def read(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        payload = self.store.get_json(fast_cache_key(judge_id))
        if not isinstance(payload, dict) or not isinstance(payload.get("analytics"), dict):
            return None
        return AnalyticsCacheEntry(
            judge_id=judge_id,
            analytics=payload["analytics"],
            created_at=payload.get("created_at"),
        )

    def write(self, judge_id: str, analytics: CaseAnalytics, created_at: str) -> None:
        entry = AnalyticsCacheEntry(judge_id, analytics.to_dict(), created_at)
        self.store.set_json(fast_cache_key(judge_id), entry.to_dict(), self.ttl_seconds)


class AnalyticsTableTier(CacheTier):
    def __init__(self, store: PersistentStore):
        self.store = store

    def read(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        return self.store.get_cached_analytics(judge_id)

    def write(self, judge_id: str, analytics: CaseAnalytics, created_at: str) -> None:
        self.store.upsert_cached_analytics(judge_id, analytics.to_dict(), created_at)


class JudgeRecordTier(CacheTier):
    fallback_only = True

    def __init__(self, store: PersistentStore):
        self.store = store

    def read(self, judge_id: str) -> Optional[AnalyticsCacheEntry]:
        return self.store.get_judge_analytics_column(judge_id)

    def write(self, judge_id: str, analytics: CaseAnalytics, created_at: str) -> None:
        self.store.update_judge_analytics_column(judge_id, analytics.to_dict(), created_at)


class CacheCoordinator:
    """
    Read-through / write-through over an ordered list of cache tiers.

    There is no locking: concurrent misses for one judge may both recompute,
    and the later write wins.
    """

    def __init__(self, tiers: List[CacheTier], persistent: Optional[PersistentStore] = None):
        self.tiers = list(tiers)
        self.persistent = persistent
        self.logger = setup_logger(self.__class__.__name__)

    @classmethod
    def default(cls, cache: CacheStore, persistent: PersistentStore) -> "CacheCoordinator":
        return cls(
            [FastCacheTier(cache), AnalyticsTableTier(persistent), JudgeRecordTier(persistent)],
            persistent=persistent,
        )

    def get(self, judge_id: str) -> Optional[Tuple[CaseAnalytics, str]]:
        """
        Look up cached analytics.

        Returns:
            (analytics, source) for the first acceptable entry, or None on a miss
        """
        previous_failed = False
        for tier in self.tiers:
            if tier.fallback_only and not previous_failed:
                continue

            try:
                entry = tier.read(judge_id)
            except CacheReadError as e:
                self.logger.warning(f"{tier.name} unavailable for judge {judge_id}: {e}")
                previous_failed = True
                continue

            previous_failed = False
            if not tier.accepts(entry):
                if entry is not None:
                    self.logger.info(
                        f"{tier.name} entry for judge {judge_id} is stale or old format"
                    )
                continue

            try:
                analytics = entry.to_analytics()
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Discarding malformed {tier.name} entry: {e}")
                continue

            self.logger.info(f"Using cached analytics for judge {judge_id} ({tier.source})")
            return analytics, tier.source

        return None

    def put(self, judge_id: str, analytics: CaseAnalytics) -> None:
        """Write analytics to every tier; failures are logged, never raised."""
        created_at = to_iso(utc_now())
        previous_failed = False
        for tier in self.tiers:
            if tier.fallback_only and not previous_failed:
                continue

            try:
                tier.write(judge_id, analytics, created_at)
            except CacheWriteError as e:
                self.logger.error(f"Failed to cache analytics in {tier.name}: {e}")
                previous_failed = True
                continue

            previous_failed = False
            self.logger.debug(f"Cached analytics for judge {judge_id} in {tier.name}")

    def invalidate(self, judge_id: str) -> None:
        """
        Drop the dedicated table row for a judge.

        The fast tier is left to expire on its own, so a fresh fast-tier entry
        can still be served after invalidation.
        """
        if self.persistent is None:
            return
        try:
            self.persistent.delete_cached_analytics(judge_id)
        except CacheWriteError as e:
            self.logger.error(f"Failed to invalidate analytics for judge {judge_id}: {e}")
