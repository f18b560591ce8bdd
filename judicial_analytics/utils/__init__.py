"""
Utilities for the judicial analytics engine.
"""

from .base import BaseClient
from .config import EngineConfig
from .exceptions import (
    AnalyticsError,
    JudgeNotFoundError,
    RateLimitExceeded,
    UpstreamReadError,
    EstimatorError,
    EnhancementError,
    CacheReadError,
    CacheWriteError,
    ClientError,
    NetworkError,
    AuthenticationError,
    ParsingError,
)
from .data_models import (
    AnalysisWindow,
    AnalyticsCacheEntry,
    AnalyticsEstimate,
    AnalyticsResult,
    Case,
    CaseAnalytics,
    Judge,
    Opinion,
)
from .helpers import validate_date, sanitize_text, strip_markup, setup_logger

__all__ = [
    "BaseClient",
    "EngineConfig",
    "AnalyticsError",
    "JudgeNotFoundError",
    "RateLimitExceeded",
    "UpstreamReadError",
    "EstimatorError",
    "EnhancementError",
    "CacheReadError",
    "CacheWriteError",
    "ClientError",
    "NetworkError",
    "AuthenticationError",
    "ParsingError",
    "AnalysisWindow",
    "AnalyticsCacheEntry",
    "AnalyticsEstimate",
    "AnalyticsResult",
    "Case",
    "CaseAnalytics",
    "Judge",
    "Opinion",
    "validate_date",
    "sanitize_text",
    "strip_markup",
    "setup_logger",
]
