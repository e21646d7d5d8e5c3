"""
Experience Point (XP) rewards and level progression.

Reward per correct answer:
    base by difficulty (easy 10, medium 15, hard 25)
    + floor(base × 0.5) when mastery after the update is above 0.8
    + floor(base × 0.2) when answered in under 30 seconds

Levels: 100 XP for level 1, then one level per additional 100 XP.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from learnpath.core.models import AttemptEvent, Difficulty


@dataclass
class XPConfig:
    """Configuration for XP rewards."""

    base_xp: dict[Difficulty, int] = field(
        default_factory=lambda: {
            Difficulty.EASY: 10,
            Difficulty.MEDIUM: 15,
            Difficulty.HARD: 25,
        }
    )
    default_base_xp: int = 10
    mastery_bonus_threshold: float = 0.8
    mastery_bonus_ratio: float = 0.5
    speed_bonus_seconds: float = 30.0
    speed_bonus_ratio: float = 0.2


class XPRewarder:
    """Computes XP for answered questions."""

    def __init__(self, config: XPConfig | None = None):
        self.config = config or XPConfig()

    def base_xp(self, difficulty: Difficulty | str | None) -> int:
        return self.config.base_xp.get(Difficulty.parse(difficulty), self.config.default_base_xp)

    def is_fast(self, response_time_seconds: float | None) -> bool:
        """
        Check if a response qualifies for the speed bonus.

        Missing, zero, negative and NaN times never qualify.
        """
        if response_time_seconds is None:
            return False
        try:
            seconds = float(response_time_seconds)
        except (TypeError, ValueError):
            return False
        return 0 < seconds < self.config.speed_bonus_seconds

    def reward(self, event: AttemptEvent, mastery_after_update: float) -> int:
        """
        Calculate XP earned for one attempt.

        Args:
            event: The answered question
            mastery_after_update: Topic mastery after applying this event

        Returns:
            XP earned (0 for incorrect answers, never negative)
        """
        if not event.is_correct:
            return 0

        base = self.base_xp(event.difficulty)

        mastery_bonus = 0
        if mastery_after_update > self.config.mastery_bonus_threshold:
            mastery_bonus = math.floor(base * self.config.mastery_bonus_ratio)

        speed_bonus = 0
        if self.is_fast(event.response_time_seconds):
            speed_bonus = math.floor(base * self.config.speed_bonus_ratio)

        return max(base + mastery_bonus + speed_bonus, 0)


# ============================================================================
# Level progression
# ============================================================================


@dataclass(frozen=True)
class LevelProgress:
    """Where a learner stands within their current level."""

    total_xp: int
    level: int
    level_xp: int
    xp_for_next_level: int

    @property
    def xp_to_next_level(self) -> int:
        return max(self.xp_for_next_level - self.level_xp, 0)

    @property
    def progress_percentage(self) -> float:
        if self.xp_for_next_level <= 0:
            return 0.0
        return min(self.level_xp / self.xp_for_next_level * 100, 100.0)


def calculate_level(total_xp: int) -> int:
    """
    Level for a running XP total.

    Level 1: 0-99 XP, level 2: 100-199 XP, level 3: 200-299 XP, ...
    """
    if total_xp < 100:
        return 1
    return (total_xp - 100) // 100 + 2


def xp_for_next_level(current_level: int) -> int:
    if current_level <= 1:
        return 100
    return current_level * 100


def current_level_xp(total_xp: int, current_level: int) -> int:
    """XP accumulated since reaching the current level."""
    if current_level <= 1:
        return max(total_xp, 0)
    return total_xp - (current_level - 1) * 100


def level_progress(total_xp: int) -> LevelProgress:
    total_xp = max(int(total_xp), 0)
    level = calculate_level(total_xp)
    return LevelProgress(
        total_xp=total_xp,
        level=level,
        level_xp=current_level_xp(total_xp, level),
        xp_for_next_level=xp_for_next_level(level),
    )
