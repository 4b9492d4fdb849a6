"""Pydantic-based runtime settings for the ContextAds engine.

Loads from environment variables (with optional .env file).
Invalid values fail fast when the settings are first built.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class RuntimeSettings(BaseSettings):
    """All configuration for the engine runtime, validated at startup."""

    model_config = {"env_prefix": "", "env_file": ".env", "env_file_encoding": "utf-8"}

    # --- Ad network ---
    ad_network_url: str = Field(
        default="https://vivos-ad-network.vercel.app/api/ads",
        description="Ad network endpoint queried with keywords",
    )
    publisher_key: str = Field(
        default="",
        description="Default publisher key sent to the ad network",
    )
    ad_request_timeout_seconds: float = Field(default=10.0, gt=0, description="Ad network request timeout")
    beacon_timeout_seconds: float = Field(default=5.0, gt=0, description="Impression beacon timeout")

    # --- Cache ---
    cache_max_entries: int = Field(default=50, ge=1, description="Maximum cached query selections")
    cache_ttl_seconds: float = Field(default=1800.0, gt=0, description="Lifetime of a cached selection")
    recently_shown_size: int = Field(default=10, ge=1, description="Size of the recently-shown window")
    cache_sweep_interval_seconds: float = Field(default=600.0, gt=0, description="Expired-entry sweep interval")

    # --- Display gate ---
    ad_frequency: int = Field(default=3, ge=1, description="Show an ad every N chat turns")
    commercial_intent_threshold: float = Field(
        default=0.3, ge=0, le=1, description="Intent score above which the cadence is bypassed"
    )
    conversation_window: int = Field(default=5, ge=1, le=16, description="Turns considered for keywords")

    # --- Limits ---
    max_candidates: int = Field(default=8, ge=1, le=100, description="Candidates considered per fetch")
    top_ads: int = Field(default=5, ge=1, le=20, description="Ranked ads returned to the caller")
    click_log_max: int = Field(default=1000, ge=1, description="Click events kept in memory")

    # --- Auth / ops ---
    require_engine_key: bool = Field(default=False, description="If True, the engine requires MCP_ENGINE_KEY env")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root log level for the engine and CLI"
    )

    @field_validator("ad_network_url")
    @classmethod
    def _http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"ad_network_url must be an http(s) URL, got {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return the singleton RuntimeSettings (cached after first call)."""
    return RuntimeSettings()
