"""
Spaced Repetition Scheduler.

Decides whether a topic is due for review from its mastery and the time
since it was last practiced. Review intervals widen as mastery grows:

    mastery < 0.3        due after 1 day
    0.3 <= mastery < 0.7 due after 3 days
    0.7 <= mastery < 0.9 due after 7 days
    mastery >= 0.9       due after 14 days

A topic is due only once the interval has strictly elapsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger

from learnpath.core.models import calculate_days_since, clamp_unit, ensure_aware


@dataclass
class ReviewIntervalConfig:
    """Mastery bands as (upper_bound, interval_days), evaluated low to high."""

    bands: list[tuple[float, float]] = field(
        default_factory=lambda: [
            (0.3, 1.0),
            (0.7, 3.0),
            (0.9, 7.0),
        ]
    )
    top_interval_days: float = 14.0


class SpacedRepetitionScheduler:
    """Review-due decisions for mastery records."""

    def __init__(self, config: ReviewIntervalConfig | None = None):
        """
        Initialize scheduler.

        Args:
            config: Custom mastery bands (uses defaults if None)
        """
        self.config = config or ReviewIntervalConfig()

    def review_interval_days(self, mastery_level: float) -> float:
        """Days that may pass before a topic at this mastery is due."""
        mastery = clamp_unit(mastery_level)
        for upper_bound, interval in self.config.bands:
            if mastery < upper_bound:
                return interval
        return self.config.top_interval_days

    def is_due(
        self,
        mastery_level: float,
        last_practiced_at: datetime | None,
        total_attempts: int = 0,
        now: datetime | None = None,
    ) -> bool:
        """
        Check if a topic needs review.

        Args:
            mastery_level: Current mastery (0-1)
            last_practiced_at: Last practice time (None if never practiced)
            total_attempts: Accepted for parity with the priority ranker; unused
            now: Current time (defaults to UTC now)

        Returns:
            True once more than the band's interval has elapsed
        """
        days_since = calculate_days_since(last_practiced_at, now)
        interval = self.review_interval_days(mastery_level)
        due = days_since > interval

        logger.debug(
            f"Review check: mastery={mastery_level:.2f}, "
            f"days_since={days_since:.2f}, interval={interval}d, due={due}"
        )
        return due

    def next_review_at(
        self,
        mastery_level: float,
        last_practiced_at: datetime | None,
    ) -> datetime | None:
        """
        When the review interval for this mastery runs out.

        The topic becomes due immediately after this instant. Returns None for
        topics that were never practiced.
        """
        if last_practiced_at is None:
            return None
        interval = self.review_interval_days(mastery_level)
        return ensure_aware(last_practiced_at) + timedelta(days=interval)
