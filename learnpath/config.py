"""
Configuration settings for the learnpath engine.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with LEARNPATH_ (e.g. LEARNPATH_LOG_LEVEL=DEBUG).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from learnpath.adaptive.priority import PriorityConfig
from learnpath.core.mastery import MasteryConfig
from learnpath.core.xp import XPConfig
from learnpath.delivery.scheduler import ReviewIntervalConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Mastery
    # ========================================
    mastery_base_increase: float = Field(
        default=0.1,
        gt=0,
        description="Mastery gained per correct easy answer",
    )
    mastery_base_decrease: float = Field(
        default=0.05,
        gt=0,
        description="Mastery lost per incorrect easy answer",
    )

    # ========================================
    # XP
    # ========================================
    xp_speed_bonus_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Answers faster than this earn the speed bonus",
    )
    mastery_bonus_threshold: float = Field(
        default=0.8,
        ge=0,
        le=1,
        description="Mastery above this earns the XP mastery bonus",
    )

    # ========================================
    # Priority / Scheduling
    # ========================================
    default_topic_weight: float = Field(
        default=1.0,
        ge=0,
        description="Certification weight for topics without an override",
    )
    priority_time_cap: float = Field(
        default=2.0,
        gt=0,
        description="Cap on the time-since-practice priority factor",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_mastery_config(self) -> MasteryConfig:
        return MasteryConfig(
            base_increase=self.mastery_base_increase,
            base_decrease=self.mastery_base_decrease,
        )

    def get_xp_config(self) -> XPConfig:
        return XPConfig(
            mastery_bonus_threshold=self.mastery_bonus_threshold,
            speed_bonus_seconds=self.xp_speed_bonus_seconds,
        )

    def get_priority_config(self) -> PriorityConfig:
        return PriorityConfig(
            time_cap=self.priority_time_cap,
            default_weight=self.default_topic_weight,
        )

    def get_review_config(self) -> ReviewIntervalConfig:
        return ReviewIntervalConfig()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
