"""
Top-level analytics orchestration.

Per request: rate limit -> cache check -> judge lookup -> load and enrich
cases -> statistical analysis -> optional AI enhancement -> cache write.
Empty corpora produce Legacy analytics and analyzer failures produce
Conservative analytics, so callers always get a complete result unless the
judge is unknown or the caller is throttled.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .blending import AIEnhancementBlender
from .cache import CacheCoordinator
from .corpus import CaseCorpusLoader
from .fallbacks import generate_conservative_analytics, generate_legacy_analytics
from .rate_limit import TokenBucketRateLimiter
from .statistics import StatisticalPatternAnalyzer
from ..providers.gemini import GeminiProvider
from ..providers.openai import OpenAIProvider
from ..stores.base import PersistentStore
from ..stores.memory import MemoryCacheStore, MemoryStore
from ..stores.redis_cache import RedisCacheStore
from ..stores.supabase import SupabaseStore
from ..utils.config import EngineConfig
from ..utils.data_models import AnalysisWindow, AnalyticsResult, CaseAnalytics, Case, Judge
from ..utils.exceptions import (
    AnalyticsError,
    EstimatorError,
    JudgeNotFoundError,
    RateLimitExceeded,
    UpstreamReadError,
)
from ..utils.helpers import setup_logger

SOURCE_CASE_ANALYSIS = "case_analysis"
SOURCE_PROFILE_ESTIMATION = "profile_estimation"


@dataclass
class WarmReport:
    """Outcome of a cache warming run."""

    jurisdiction: str
    limit: int
    warmed: int = 0
    regenerated: int = 0
    failed: List[Tuple[str, str]] = field(default_factory=list)


class AnalyticsOrchestrator:
    """
    Serves judge analytics through the cache, generating them on a miss.

    Example:
        >>> orchestrator = build_orchestrator(EngineConfig.from_env())
        >>> result = orchestrator.get_analytics("8f14e45f", caller="203.0.113.7")
        >>> result.source
        'case_analysis'
    """

    def __init__(
        self,
        store: PersistentStore,
        cache: CacheCoordinator,
        loader: CaseCorpusLoader,
        analyzer: Optional[StatisticalPatternAnalyzer] = None,
        blender: Optional[AIEnhancementBlender] = None,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        lookback_years: int = 5,
        home_jurisdictions: Iterable[str] = ("ca", "california"),
    ):
        self.store = store
        self.cache = cache
        self.loader = loader
        self.analyzer = analyzer or StatisticalPatternAnalyzer()
        self.blender = blender
        self.rate_limiter = rate_limiter
        self.lookback_years = max(1, lookback_years)
        self.home_jurisdictions = tuple(home_jurisdictions)
        self.logger = setup_logger(self.__class__.__name__)

    def get_analytics(
        self, judge_id: str, caller: str = "anonymous", force_refresh: bool = False
    ) -> AnalyticsResult:
        """
        Return analytics for a judge.

        Args:
            judge_id: Judge identifier
            caller: Caller identity (e.g. client IP) used for rate limiting
            force_refresh: Drop the durable cache row before the cache check

        Returns:
            AnalyticsResult with the analytics and where they came from

        Raises:
            RateLimitExceeded: If the caller exhausted its budget for this judge
            JudgeNotFoundError: If the judge does not exist
        """
        remaining = None
        if self.rate_limiter is not None:
            decision = self.rate_limiter.limit(f"{caller}:{judge_id}")
            if not decision.allowed:
                raise RateLimitExceeded(
                    "Rate limit exceeded", retry_after=decision.retry_after, judge_id=judge_id
                )
            remaining = decision.remaining

        if force_refresh:
            self.invalidate(judge_id)

        hit = self.cache.get(judge_id)
        if hit is not None:
            analytics, source = hit
            return AnalyticsResult(
                analytics=analytics,
                cached=True,
                source=source,
                rate_limit_remaining=remaining,
            )

        judge = self._get_judge(judge_id)
        self.logger.info(f"Regenerating analytics for judge {judge_id}")

        window = AnalysisWindow.from_lookback(self.lookback_years)
        cases = self.loader.load(judge_id, window)
        analytics = self.generate(judge, cases, window)

        self.cache.put(judge_id, analytics)

        return AnalyticsResult(
            analytics=analytics,
            cached=False,
            source=SOURCE_CASE_ANALYSIS if cases else SOURCE_PROFILE_ESTIMATION,
            document_count=len(cases),
            rate_limit_remaining=remaining,
        )

    def refresh(self, judge_id: str, caller: str = "anonymous") -> AnalyticsResult:
        """Forced-refresh entry point: invalidate, then serve as usual."""
        return self.get_analytics(judge_id, caller=caller, force_refresh=True)

    def invalidate(self, judge_id: str) -> None:
        """Delete the durable cache row; the fast tier is left to expire."""
        self.cache.invalidate(judge_id)

    def generate(self, judge: Judge, cases: List[Case], window: AnalysisWindow) -> CaseAnalytics:
        """
        Produce analytics from loaded cases, falling back as needed.

        Args:
            judge: Judge under analysis
            cases: Enriched cases (may be empty)
            window: Analysis window

        Returns:
            Statistical (possibly AI-blended), Legacy or Conservative analytics
        """
        if not cases:
            return generate_legacy_analytics(judge, window, self.home_jurisdictions)

        try:
            analytics = self.analyzer.analyze(judge, cases, window)
        except EstimatorError as e:
            self.logger.error(
                f"Analytics generation failed for {judge.name} ({len(cases)} cases): {str(e)}"
            )
            return generate_conservative_analytics(judge, len(cases), window)

        if self.blender is None:
            return analytics

        return self.blender.enhance(judge, cases, analytics, window)

    def warm(self, jurisdiction: str = "CA", limit: int = 50, force: bool = False) -> WarmReport:
        """
        Precompute analytics for the busiest judges of a jurisdiction.

        Args:
            jurisdiction: Jurisdiction to warm
            limit: Number of judges (clamped to 1-200)
            force: Invalidate each judge's durable cache row first

        Returns:
            WarmReport with counts and per-judge failures
        """
        limit = max(1, min(200, int(limit)))
        report = WarmReport(jurisdiction=jurisdiction, limit=limit)

        for judge in self.store.list_judges(jurisdiction, limit):
            try:
                result = self.get_analytics(judge.id, caller="warm", force_refresh=force)
            except AnalyticsError as e:
                report.failed.append((judge.id, str(e)))
                continue

            report.warmed += 1
            if not result.cached:
                report.regenerated += 1

        self.logger.info(
            f"Warmed {report.warmed} judges in {jurisdiction} "
            f"({report.regenerated} regenerated, {len(report.failed)} failed)"
        )
        return report

    def _get_judge(self, judge_id: str) -> Judge:
        try:
            judge = self.store.get_judge(judge_id)
        except UpstreamReadError as e:
            self.logger.error(f"Judge lookup failed for {judge_id}: {e}")
            judge = None

        if judge is None:
            raise JudgeNotFoundError("Judge not found", judge_id=judge_id)
        return judge


def build_orchestrator(config: Optional[EngineConfig] = None) -> AnalyticsOrchestrator:
    """
    Wire an orchestrator from configuration.

    Remote stores are used when their credentials are present, in-process
    stores otherwise. AI enhancement is enabled when a provider key is set;
    with both keys Gemini is primary and OpenAI secondary.
    """
    config = config or EngineConfig.from_env()

    if config.has_supabase:
        store = SupabaseStore(config.supabase_url, config.supabase_key)
    else:
        store = MemoryStore()

    if config.has_redis:
        cache_store = RedisCacheStore(config.redis_url, config.redis_token)
    else:
        cache_store = MemoryCacheStore()

    providers = []
    if config.google_api_key:
        providers.append(GeminiProvider(config.google_api_key, timeout=config.ai_timeout))
    if config.openai_api_key:
        providers.append(OpenAIProvider(config.openai_api_key, timeout=config.ai_timeout))

    blender = None
    if providers:
        blender = AIEnhancementBlender(
            providers[0], providers[1] if len(providers) > 1 else None
        )

    return AnalyticsOrchestrator(
        store=store,
        cache=CacheCoordinator.default(cache_store, store),
        loader=CaseCorpusLoader(store, case_limit=config.case_limit),
        blender=blender,
        rate_limiter=TokenBucketRateLimiter(
            config.rate_limit_tokens, config.rate_limit_window
        ),
        lookback_years=config.lookback_years,
        home_jurisdictions=config.home_jurisdictions,
    )
