"""
Judicial Analytics - behavioral analytics for judges, derived from their
case history with optional AI refinement and multi-tier caching.

License: MIT
"""

__version__ = "1.0.0"
__author__ = "Judicial Analytics Contributors"
__description__ = "Behavioral analytics for judges from case history"

from .engine import (
    AIEnhancementBlender,
    AnalyticsOrchestrator,
    CacheCoordinator,
    CaseCorpusLoader,
    StatisticalPatternAnalyzer,
    TokenBucketRateLimiter,
    WarmReport,
    build_orchestrator,
)

from .utils import (
    AnalysisWindow,
    AnalyticsResult,
    CaseAnalytics,
    EngineConfig,
    AnalyticsError,
    JudgeNotFoundError,
    RateLimitExceeded,
    setup_logger,
)

__all__ = [
    # Engine
    "AIEnhancementBlender",
    "AnalyticsOrchestrator",
    "CacheCoordinator",
    "CaseCorpusLoader",
    "StatisticalPatternAnalyzer",
    "TokenBucketRateLimiter",
    "WarmReport",
    "build_orchestrator",
    # Utilities
    "AnalysisWindow",
    "AnalyticsResult",
    "CaseAnalytics",
    "EngineConfig",
    "AnalyticsError",
    "JudgeNotFoundError",
    "RateLimitExceeded",
    "setup_logger",
]
