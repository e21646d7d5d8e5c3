"""
Core Domain Models.

Canonical value types shared by every engine component:
- Difficulty: Question difficulty with a lenient parser
- MasteryLevel: Display band for a 0-1 mastery score
- MasteryRecord: Per-topic mastery state (owned by the Mastery Store)
- AttemptEvent: One answered question
- Topic / TopicWithMastery: Catalog entries, optionally joined with mastery

All records are frozen. Engine operations return new values via
dataclasses.replace and never mutate their inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from loguru import logger


class Difficulty(str, Enum):
    """Question difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str | Difficulty | None) -> Difficulty:
        """Parse a difficulty, falling back to EASY for unknown values."""
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug(f"Unknown difficulty {value!r}, using 'easy'")
            return cls.EASY


class MasteryLevel(str, Enum):
    """
    Mastery band for displaying a 0-1 score.

    Bands are evaluated low to high; the first upper bound the score is
    below wins.
    """

    BEGINNER = "beginner"  # < 20%
    LEARNING = "learning"  # 20-39%
    DEVELOPING = "developing"  # 40-59%
    PROFICIENT = "proficient"  # 60-79%
    ADVANCED = "advanced"  # 80-94%
    EXPERT = "expert"  # 95-100%

    @classmethod
    def from_score(cls, score: float) -> MasteryLevel:
        """
        Convert a 0-1 mastery score to a band.

        Args:
            score: Mastery score (clamped to 0-1)

        Returns:
            Corresponding MasteryLevel
        """
        score = clamp_unit(score)
        if score < 0.2:
            return cls.BEGINNER
        elif score < 0.4:
            return cls.LEARNING
        elif score < 0.6:
            return cls.DEVELOPING
        elif score < 0.8:
            return cls.PROFICIENT
        elif score < 0.95:
            return cls.ADVANCED
        else:
            return cls.EXPERT

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.title()

    @property
    def description(self) -> str:
        return {
            MasteryLevel.BEGINNER: "Just getting started with this topic",
            MasteryLevel.LEARNING: "Building understanding of key concepts",
            MasteryLevel.DEVELOPING: "Good grasp of fundamentals",
            MasteryLevel.PROFICIENT: "Strong understanding and application",
            MasteryLevel.ADVANCED: "Excellent mastery of the topic",
            MasteryLevel.EXPERT: "Complete mastery achieved",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            MasteryLevel.BEGINNER: "red",
            MasteryLevel.LEARNING: "dark_orange",
            MasteryLevel.DEVELOPING: "yellow",
            MasteryLevel.PROFICIENT: "blue",
            MasteryLevel.ADVANCED: "green",
            MasteryLevel.EXPERT: "purple",
        }[self]


@dataclass(frozen=True)
class MasteryRecord:
    """
    Mastery state for one learner on one topic.

    The Mastery Store owns persistence; the engine only ever receives a copy
    and hands back a new one.
    """

    topic_id: str
    mastery_level: float = 0.0
    total_attempts: int = 0
    correct_attempts: int = 0
    consecutive_correct: int = 0
    last_practiced_at: datetime | None = None

    @classmethod
    def fresh(cls, topic_id: str) -> MasteryRecord:
        """Zero state for a topic the learner has never practiced."""
        return cls(topic_id=topic_id)

    @property
    def accuracy(self) -> float:
        """Correct answer ratio (0 when unpracticed)."""
        if self.total_attempts <= 0:
            return 0.0
        return self.correct_attempts / self.total_attempts

    @property
    def level(self) -> MasteryLevel:
        return MasteryLevel.from_score(self.mastery_level)


@dataclass(frozen=True)
class AttemptEvent:
    """A single answered question, built by the caller from a submission."""

    topic_id: str
    is_correct: bool
    difficulty: Difficulty = Difficulty.EASY
    response_time_seconds: float | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class Topic:
    """Catalog entry: opaque key and label."""

    id: str
    name: str


@dataclass(frozen=True)
class TopicWithMastery:
    """Topic joined with the learner's mastery (0.0 when no record exists)."""

    id: str
    name: str
    mastery_level: float = 0.0


# ============================================================================
# Normalization helpers
# ============================================================================

# Default assumption for topics that were never practiced
NEVER_PRACTICED_DAYS = 30.0


def clamp_unit(value: float) -> float:
    """Clamp a value into [0, 1]. NaN is treated as 0."""
    if value is None or math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, float(value)))


def ensure_aware(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def calculate_days_since(last_practiced: datetime | None, now: datetime | None = None) -> float:
    """
    Calculate fractional days elapsed since a practice timestamp.

    Args:
        last_practiced: Timestamp of last practice (naive or aware)
        now: Current time (defaults to UTC now)

    Returns:
        Days elapsed as float
    """
    if last_practiced is None:
        return NEVER_PRACTICED_DAYS

    if now is None:
        now = datetime.now(UTC)

    delta = ensure_aware(now) - ensure_aware(last_practiced)
    return delta.total_seconds() / 86400.0
