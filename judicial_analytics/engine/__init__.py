"""
Analytics generation engine.
"""

from .blending import AIEnhancementBlender, blend_value
from .cache import (
    AnalyticsTableTier,
    CacheCoordinator,
    CacheTier,
    FastCacheTier,
    JudgeRecordTier,
)
from .corpus import CaseCorpusLoader
from .fallbacks import generate_conservative_analytics, generate_legacy_analytics
from .orchestrator import AnalyticsOrchestrator, WarmReport, build_orchestrator
from .rate_limit import TokenBucketRateLimiter
from .statistics import StatisticalPatternAnalyzer

__all__ = [
    "AIEnhancementBlender",
    "AnalyticsOrchestrator",
    "AnalyticsTableTier",
    "CacheCoordinator",
    "CacheTier",
    "CaseCorpusLoader",
    "FastCacheTier",
    "JudgeRecordTier",
    "StatisticalPatternAnalyzer",
    "TokenBucketRateLimiter",
    "WarmReport",
    "blend_value",
    "build_orchestrator",
    "generate_conservative_analytics",
    "generate_legacy_analytics",
]
