"""
Tests for environment-driven configuration.
"""

from judicial_analytics.utils.config import EngineConfig


class TestEngineConfig:
    """Tests for EngineConfig class."""

    def test_defaults(self):
        """Test defaults with an empty environment."""
        config = EngineConfig.from_env({})

        assert config.lookback_years == 5
        assert config.case_limit == 1000
        assert config.ai_timeout == 30
        assert config.rate_limit_tokens == 20
        assert config.rate_limit_window == 60
        assert config.home_jurisdictions == ("ca", "california")
        assert not config.has_redis
        assert not config.has_supabase

    def test_reads_environment(self):
        """Test that variables override defaults."""
        config = EngineConfig.from_env(
            {
                "JUDGE_ANALYTICS_LOOKBACK_YEARS": "3",
                "JUDGE_ANALYTICS_CASE_LIMIT": "500",
                "JUDGE_ANALYTICS_HOME_JURISDICTIONS": "NY, New York",
                "UPSTASH_REDIS_REST_URL": "https://redis.invalid",
                "UPSTASH_REDIS_REST_TOKEN": "token",
                "SUPABASE_URL": "https://db.invalid",
                "SUPABASE_SERVICE_ROLE_KEY": "key",
                "GOOGLE_AI_API_KEY": "g-key",
            }
        )

        assert config.lookback_years == 3
        assert config.case_limit == 500
        assert config.home_jurisdictions == ("ny", "new york")
        assert config.has_redis
        assert config.has_supabase
        assert config.google_api_key == "g-key"
        assert config.openai_api_key is None

    def test_floors(self):
        """Test lookback and case limit floors."""
        config = EngineConfig.from_env(
            {"JUDGE_ANALYTICS_LOOKBACK_YEARS": "0", "JUDGE_ANALYTICS_CASE_LIMIT": "50"}
        )
        assert config.lookback_years == 1
        assert config.case_limit == 200

    def test_rate_limit_and_timeout_floors(self):
        """Test that zero or negative limits are raised to one."""
        config = EngineConfig.from_env(
            {
                "JUDGE_ANALYTICS_RATE_LIMIT": "0",
                "JUDGE_ANALYTICS_RATE_WINDOW": "-5",
                "JUDGE_ANALYTICS_AI_TIMEOUT": "0",
            }
        )
        assert config.rate_limit_tokens == 1
        assert config.rate_limit_window == 1
        assert config.ai_timeout == 1

    def test_invalid_integers_fall_back_to_defaults(self):
        """Test that malformed numbers are ignored."""
        config = EngineConfig.from_env({"JUDGE_ANALYTICS_AI_TIMEOUT": "soon"})
        assert config.ai_timeout == 30

    def test_redis_requires_url_and_token(self):
        """Test that a partial Redis configuration is not used."""
        config = EngineConfig.from_env({"UPSTASH_REDIS_REST_URL": "https://redis.invalid"})
        assert not config.has_redis

    def test_api_keys_hidden_from_repr(self):
        """Test that provider keys are not printed."""
        config = EngineConfig(google_api_key="secret-key")
        assert "secret-key" not in repr(config)
