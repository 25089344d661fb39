# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache, deadline, scoring and logging settings.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_WEIGHT_TOLERANCE = 1e-6


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RESUMELENS_",
        extra="ignore",
    )

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "redis", "none"] = "memory"
    cache_capacity: int = 256
    cache_ttl_seconds: float = 3600.0
    cache_redis_url: str = ""

    # === Deadlines / concurrency ===
    analyzer_deadline_seconds: float = 5.0
    pipeline_deadline_seconds: float = 10.0
    analyzer_max_workers: int = 3

    # === Scoring weights (sum to 1) ===
    weight_structure: float = 0.3
    weight_ats: float = 0.4
    weight_content: float = 0.3

    # === Suggestions / analyzers ===
    max_suggestions_per_bucket: int = 10
    section_confidence_threshold: float = 0.5

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("weight_structure", "weight_ats", "weight_content")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        if v < 0 or math.isnan(v):
            raise ValueError("weights must be >= 0")
        return v

    @field_validator("section_confidence_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("section_confidence_threshold must be within [0, 1]")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        total = self.weight_structure + self.weight_ats + self.weight_content
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            errors.append(f"scoring weights must sum to 1.0 (got {total:.6f})")

        if self.cache_capacity < 1:
            errors.append("CACHE_CAPACITY must be >= 1")

        if self.cache_ttl_seconds <= 0:
            errors.append("CACHE_TTL_SECONDS must be > 0")

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")

        if self.analyzer_deadline_seconds <= 0 or self.pipeline_deadline_seconds <= 0:
            errors.append("deadlines must be > 0")

        if self.analyzer_max_workers < 1:
            errors.append("ANALYZER_MAX_WORKERS must be >= 1")

        if self.max_suggestions_per_bucket < 1:
            errors.append("MAX_SUGGESTIONS_PER_BUCKET must be >= 1")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def weights(self) -> dict[str, float]:
        """Aggregation weight per analyzer kind."""
        return {
            "structure": self.weight_structure,
            "ats": self.weight_ats,
            "content": self.weight_content,
        }


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
