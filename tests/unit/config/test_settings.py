# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from resumelens.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_cache(self):
        s = Settings(_env_file=None)
        assert s.cache_enabled is True
        assert s.cache_backend == "memory"
        assert s.cache_capacity == 256
        assert s.cache_ttl_seconds == 3600.0

    def test_default_deadlines(self):
        s = Settings(_env_file=None)
        assert s.analyzer_deadline_seconds == 5.0
        assert s.pipeline_deadline_seconds == 10.0
        assert s.analyzer_max_workers == 3

    def test_default_weights(self):
        s = Settings(_env_file=None)
        assert s.weights == {"structure": 0.3, "ats": 0.4, "content": 0.3}

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_level == "INFO"
        assert s.log_format == "json"
        assert s.log_file is None


class TestSettingsValidation:
    def test_weights_must_sum_to_one(self):
        with pytest.raises(ConfigurationError, match="sum to 1.0"):
            Settings(_env_file=None, weight_ats=0.5)

    def test_negative_weight(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, weight_ats=-0.4, weight_structure=0.7, weight_content=0.7)

    def test_capacity(self):
        with pytest.raises(ConfigurationError, match="CACHE_CAPACITY"):
            Settings(_env_file=None, cache_capacity=0)

    def test_ttl(self):
        with pytest.raises(ConfigurationError, match="CACHE_TTL_SECONDS"):
            Settings(_env_file=None, cache_ttl_seconds=0)

    def test_redis_requires_url(self):
        with pytest.raises(ConfigurationError, match="CACHE_REDIS_URL"):
            Settings(_env_file=None, cache_backend="redis")

    def test_deadlines(self):
        with pytest.raises(ConfigurationError, match="deadlines"):
            Settings(_env_file=None, analyzer_deadline_seconds=0)

    def test_workers(self):
        with pytest.raises(ConfigurationError, match="ANALYZER_MAX_WORKERS"):
            Settings(_env_file=None, analyzer_max_workers=0)

    def test_threshold_range(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, section_confidence_threshold=1.5)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cache_backend="sqlite")

    def test_collects_all_errors(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, cache_capacity=0, analyzer_max_workers=0)
        assert "CACHE_CAPACITY" in str(exc_info.value)
        assert "ANALYZER_MAX_WORKERS" in str(exc_info.value)


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RESUMELENS_CACHE_CAPACITY", "12")
        monkeypatch.setenv("RESUMELENS_LOG_FORMAT", "text")
        s = Settings(_env_file=None)
        assert s.cache_capacity == 12
        assert s.log_format == "text"

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("RESUMELENS_CACHE_BACKEND=none\nRESUMELENS_ANALYZER_MAX_WORKERS=6\n")
        s = Settings(_env_file=env)
        assert s.cache_backend == "none"
        assert s.analyzer_max_workers == 6


class TestLoadSettings:
    def test_overrides(self):
        s = load_settings(_env_file=None, cache_capacity=5)
        assert s.cache_capacity == 5
