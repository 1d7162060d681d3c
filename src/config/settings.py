# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Model backend ===
    llm_provider: str = "ollama"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "deepseek-r1:14b"

    # Request defaults (caller overrides win)
    llm_temperature: float = 0.3
    llm_max_tokens: int = 4000
    llm_repeat_penalty: float = 1.1
    llm_response_format: Literal["json", "text"] = "json"

    # Retry / timeout. Local inference is slow, hence the generous timeout.
    llm_timeout_s: float = 500.0
    llm_max_retries: int = 2
    llm_retry_base_delay_s: float = 1.0
    llm_probe_timeout_s: float = 10.0

    # === Task tuning ===
    analysis_strict_temperature: float = 0.1
    complaint_temperature: float = 0.6
    complaint_max_tokens: int = 6000

    # === Analysis cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "json"] = "memory"
    cache_root: Path = Path("~/.jurisdraft/cache")
    cache_max_entries: int = 512
    cache_ttl_s: float = 86_400.0

    # === Record store ===
    store_path: Path = Path("db.json")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("llm_max_retries", "cache_max_entries")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.llm_timeout_s <= 0:
            errors.append("LLM_TIMEOUT_S must be > 0")

        if self.llm_retry_base_delay_s < 0:
            errors.append("LLM_RETRY_BASE_DELAY_S must be >= 0")

        if self.cache_ttl_s < 0:
            errors.append("CACHE_TTL_S must be >= 0 (0 disables expiry)")

        for name in ("llm_temperature", "analysis_strict_temperature", "complaint_temperature"):
            value = getattr(self, name)
            if not 0.0 <= value <= 2.0:
                errors.append(f"{name.upper()} must be within [0, 2]")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


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
