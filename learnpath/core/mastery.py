"""
Core Mastery Module.

Folds answered questions into a per-topic mastery estimate.

Design:
- MasteryConfig: Tunable constants (defaults are the production values)
- calculate_new_mastery_level: Pure formula for one answer
- MasteryUpdater: Applies AttemptEvents to MasteryRecords, one at a time

Formula (correct answer):
    base      = 0.1 × difficulty_multiplier
    streak    = min(consecutive_correct × 0.02, 0.1)
    diminish  = 0.5 if mastery > 0.8 else 1.0
    new       = min(mastery + (base + streak) × diminish, 1.0)

Formula (incorrect answer):
    decrease  = 0.05 × difficulty_multiplier
    retention = 0.7 if mastery > 0.7 else 1.0
    new       = max(mastery - decrease × retention, 0.0)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from loguru import logger

from learnpath.core.models import AttemptEvent, Difficulty, MasteryRecord, clamp_unit

if TYPE_CHECKING:
    from learnpath.core.xp import XPRewarder


@dataclass
class MasteryConfig:
    """Configuration for mastery updates."""

    base_increase: float = 0.1
    base_decrease: float = 0.05
    streak_step: float = 0.02
    streak_cap: float = 0.1
    diminishing_threshold: float = 0.8
    diminishing_factor: float = 0.5
    retention_threshold: float = 0.7
    retention_factor: float = 0.7
    difficulty_multipliers: dict[Difficulty, float] = field(
        default_factory=lambda: {
            Difficulty.EASY: 1.0,
            Difficulty.MEDIUM: 1.2,
            Difficulty.HARD: 1.5,
        }
    )

    def multiplier(self, difficulty: Difficulty | str | None) -> float:
        """Difficulty multiplier (1.0 for unknown difficulties)."""
        return self.difficulty_multipliers.get(Difficulty.parse(difficulty), 1.0)


DEFAULT_CONFIG = MasteryConfig()


def calculate_new_mastery_level(
    current_mastery: float,
    is_correct: bool,
    difficulty: Difficulty | str = Difficulty.EASY,
    consecutive_correct: int = 0,
    config: MasteryConfig = DEFAULT_CONFIG,
) -> float:
    """
    Calculate the mastery level after one answer.

    Args:
        current_mastery: Mastery before the answer (clamped to 0-1)
        is_correct: Whether the answer was correct
        difficulty: Question difficulty
        consecutive_correct: Streak length including this answer
        config: Formula constants

    Returns:
        New mastery between 0 and 1
    """
    current_mastery = clamp_unit(current_mastery)
    multiplier = config.multiplier(difficulty)

    if is_correct:
        base_increase = config.base_increase * multiplier
        streak_bonus = min(max(consecutive_correct, 0) * config.streak_step, config.streak_cap)
        diminishing = (
            config.diminishing_factor
            if current_mastery > config.diminishing_threshold
            else 1.0
        )
        return min(current_mastery + (base_increase + streak_bonus) * diminishing, 1.0)

    decrease = config.base_decrease * multiplier
    # Established knowledge decays more slowly
    retention = (
        config.retention_factor
        if current_mastery > config.retention_threshold
        else 1.0
    )
    return max(current_mastery - decrease * retention, 0.0)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of applying one attempt."""

    event: AttemptEvent
    previous_mastery: float
    record: MasteryRecord
    xp_earned: int = 0

    @property
    def mastery_delta(self) -> float:
        return self.record.mastery_level - self.previous_mastery


class MasteryUpdater:
    """
    Applies answered questions to mastery records.

    Stateless apart from its config; safe to share between callers. Streak
    tracking lives on the record (consecutive_correct), never here.
    """

    def __init__(self, config: MasteryConfig | None = None):
        """
        Initialize updater.

        Args:
            config: Formula constants (uses defaults if None)
        """
        self.config = config or MasteryConfig()

    def update(self, current: MasteryRecord | None, event: AttemptEvent) -> MasteryRecord:
        """
        Compute the next mastery record for one attempt.

        Args:
            current: Stored record, or None for a topic never practiced
            event: The answered question

        Returns:
            New MasteryRecord (current is left untouched)
        """
        if current is None:
            current = MasteryRecord.fresh(event.topic_id)

        previous = clamp_unit(current.mastery_level)
        consecutive = max(current.consecutive_correct, 0) + 1 if event.is_correct else 0

        new_mastery = calculate_new_mastery_level(
            previous,
            event.is_correct,
            event.difficulty,
            consecutive,
            self.config,
        )

        total = max(current.total_attempts, 0) + 1
        correct = min(max(current.correct_attempts, 0), total - 1)
        if event.is_correct:
            correct += 1

        logger.debug(
            f"Mastery {event.topic_id}: {previous:.3f} -> {new_mastery:.3f} "
            f"(correct={event.is_correct}, difficulty={Difficulty.parse(event.difficulty).value}, "
            f"streak={consecutive})"
        )

        return replace(
            current,
            mastery_level=new_mastery,
            total_attempts=total,
            correct_attempts=correct,
            consecutive_correct=consecutive,
            last_practiced_at=event.occurred_at,
        )

    def apply_attempts(
        self,
        current: MasteryRecord | None,
        events: Iterable[AttemptEvent],
        rewarder: XPRewarder | None = None,
    ) -> list[AttemptOutcome]:
        """
        Fold a batch of attempts through update() in the given order.

        Each event sees the record produced by the previous one, so streaks
        and the diminishing/retention factors accumulate correctly.

        Args:
            current: Starting record (None for a fresh topic)
            events: Attempts in chronological order
            rewarder: Optional XPRewarder to score each attempt

        Returns:
            One AttemptOutcome per event; the last one holds the final record
        """
        outcomes: list[AttemptOutcome] = []
        record = current

        for event in events:
            previous = clamp_unit(record.mastery_level) if record else 0.0
            record = self.update(record, event)
            xp = rewarder.reward(event, record.mastery_level) if rewarder else 0
            outcomes.append(
                AttemptOutcome(
                    event=event,
                    previous_mastery=previous,
                    record=record,
                    xp_earned=xp,
                )
            )

        return outcomes
