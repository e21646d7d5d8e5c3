"""
Topic Priority Ranking.

Scores how urgently a topic should be studied:

    priority = mastery_factor × time_factor × attempt_factor × weight

    mastery_factor = 1 - mastery
    time_factor    = min(days_since_practice / 7, 2.0)
    attempt_factor = 1.5 if never attempted else max(0.5, 1 - attempts / 20)

Scores are ordinal: higher means study sooner. They are used for sorting,
not displayed as percentages.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from learnpath.core.models import MasteryRecord, calculate_days_since, clamp_unit


@dataclass
class PriorityConfig:
    """Configuration for priority scoring."""

    time_horizon_days: float = 7.0
    time_cap: float = 2.0
    new_topic_factor: float = 1.5
    attempts_to_floor: int = 20
    attempt_floor: float = 0.5
    default_weight: float = 1.0


@dataclass(frozen=True)
class RankedTopic:
    """A mastery record with its priority score."""

    record: MasteryRecord
    priority: float
    rank: int

    @property
    def topic_id(self) -> str:
        return self.record.topic_id


class PriorityRanker:
    """Multi-factor study priority for topics."""

    def __init__(self, config: PriorityConfig | None = None):
        self.config = config or PriorityConfig()

    def attempt_factor(self, total_attempts: int) -> float:
        """Fewer attempts means higher priority; untouched topics get a boost."""
        attempts = max(int(total_attempts), 0)
        if attempts == 0:
            return self.config.new_topic_factor
        return max(
            self.config.attempt_floor,
            1.0 - attempts / self.config.attempts_to_floor,
        )

    def time_factor(self, days_since: float) -> float:
        return min(max(days_since, 0.0) / self.config.time_horizon_days, self.config.time_cap)

    @staticmethod
    def normalize_weight(weight: float) -> float:
        """Negative, NaN and infinite weights count as 0."""
        if not math.isfinite(weight):
            return 0.0
        return max(weight, 0.0)

    def score(
        self,
        mastery_level: float,
        last_practiced_at: datetime | None,
        total_attempts: int,
        weight: float | None = None,
        now: datetime | None = None,
    ) -> float:
        """
        Calculate topic priority.

        Args:
            mastery_level: Current mastery (clamped to 0-1)
            last_practiced_at: Last practice time (None if never practiced)
            total_attempts: Attempts made on the topic
            weight: Certification weight (default from config); negative and
                non-finite weights count as 0
            now: Current time (defaults to UTC now)

        Returns:
            Priority score >= 0
        """
        if weight is None:
            weight = self.config.default_weight

        mastery_factor = 1.0 - clamp_unit(mastery_level)
        time_factor = self.time_factor(calculate_days_since(last_practiced_at, now))
        attempt_factor = self.attempt_factor(total_attempts)

        return mastery_factor * time_factor * attempt_factor * self.normalize_weight(weight)

    def score_record(
        self,
        record: MasteryRecord,
        weight: float | None = None,
        now: datetime | None = None,
    ) -> float:
        return self.score(
            record.mastery_level,
            record.last_practiced_at,
            record.total_attempts,
            weight,
            now,
        )

    def rank(
        self,
        records: Iterable[MasteryRecord],
        weights: Mapping[str, float] | None = None,
        now: datetime | None = None,
    ) -> list[RankedTopic]:
        """
        Rank records by priority, most urgent first.

        Ties keep the order the records were given in.

        Args:
            records: Mastery records to rank
            weights: Optional topic_id -> weight overrides
            now: Current time (defaults to UTC now)

        Returns:
            RankedTopic list with 1-based ranks
        """
        weights = weights or {}
        scored = [
            (self.score_record(record, weights.get(record.topic_id), now), index, record)
            for index, record in enumerate(records)
        ]
        scored.sort(key=lambda item: (-item[0], item[1]))

        return [
            RankedTopic(record=record, priority=priority, rank=position)
            for position, (priority, _, record) in enumerate(scored, start=1)
        ]
