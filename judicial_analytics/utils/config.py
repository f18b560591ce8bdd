"""
Environment-driven configuration for the judicial analytics engine.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class EngineConfig:
    """
    Settings for one engine deployment.

    Attributes:
        lookback_years: Years of filings to analyze (floor 1)
        case_limit: Maximum cases loaded per judge (floor 200)
        ai_timeout: Seconds allowed for one model provider call (floor 1)
        rate_limit_tokens: Requests allowed per caller and judge per window (floor 1)
        rate_limit_window: Rate limit window in seconds (floor 1)
        home_jurisdictions: Markers identifying the platform's home jurisdiction
    """

    lookback_years: int = 5
    case_limit: int = 1000
    ai_timeout: int = 30
    rate_limit_tokens: int = 20
    rate_limit_window: int = 60
    home_jurisdictions: Tuple[str, ...] = ("ca", "california")

    redis_url: Optional[str] = None
    redis_token: Optional[str] = None
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    google_api_key: Optional[str] = field(default=None, repr=False)
    openai_api_key: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        self.lookback_years = max(1, self.lookback_years)
        self.case_limit = max(200, self.case_limit)
        self.ai_timeout = max(1, self.ai_timeout)
        self.rate_limit_tokens = max(1, self.rate_limit_tokens)
        self.rate_limit_window = max(1, self.rate_limit_window)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a configuration from environment variables."""
        env = os.environ if env is None else env

        markers = env.get("JUDGE_ANALYTICS_HOME_JURISDICTIONS", "ca,california")
        home = tuple(m.strip().lower() for m in markers.split(",") if m.strip())

        return cls(
            lookback_years=_int_env(env, "JUDGE_ANALYTICS_LOOKBACK_YEARS", 5),
            case_limit=_int_env(env, "JUDGE_ANALYTICS_CASE_LIMIT", 1000),
            ai_timeout=_int_env(env, "JUDGE_ANALYTICS_AI_TIMEOUT", 30),
            rate_limit_tokens=_int_env(env, "JUDGE_ANALYTICS_RATE_LIMIT", 20),
            rate_limit_window=_int_env(env, "JUDGE_ANALYTICS_RATE_WINDOW", 60),
            home_jurisdictions=home,
            redis_url=env.get("UPSTASH_REDIS_REST_URL") or None,
            redis_token=env.get("UPSTASH_REDIS_REST_TOKEN") or None,
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_SERVICE_ROLE_KEY") or None,
            google_api_key=env.get("GOOGLE_AI_API_KEY") or None,
            openai_api_key=env.get("OPENAI_API_KEY") or None,
        )

    @property
    def has_redis(self) -> bool:
        return bool(self.redis_url and self.redis_token)

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)
