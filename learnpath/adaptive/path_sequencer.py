"""
Adaptive Learning Path Builder.

Orders a certification's topics for study, weakest mastery first:
- Join the catalog with the learner's mastery records (missing -> 0.0)
- Stable sort by mastery ascending (ties keep catalog order)
- Annotate each entry with review-due status and priority for display
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from learnpath.adaptive.priority import PriorityRanker
from learnpath.core.models import (
    MasteryLevel,
    MasteryRecord,
    Topic,
    TopicWithMastery,
    clamp_unit,
)
from learnpath.delivery.scheduler import SpacedRepetitionScheduler


@dataclass(frozen=True)
class PathEntry:
    """One step of a learning path, annotated for display and ranking."""

    topic: TopicWithMastery
    position: int
    is_due: bool
    priority: float
    total_attempts: int = 0
    last_practiced_at: datetime | None = None

    @property
    def topic_id(self) -> str:
        return self.topic.id

    @property
    def mastery_level(self) -> float:
        return self.topic.mastery_level

    @property
    def level(self) -> MasteryLevel:
        return MasteryLevel.from_score(self.topic.mastery_level)


def first_occurrence_index(records: Iterable[MasteryRecord]) -> dict[str, MasteryRecord]:
    """
    Index records by topic_id, keeping the first record seen for each topic.

    Later duplicates are ignored.
    """
    index: dict[str, MasteryRecord] = {}
    for record in records:
        if record.topic_id not in index:
            index[record.topic_id] = record
    return index


class AdaptivePathBuilder:
    """
    Build weakest-first learning paths.

    Pure: the same topics and records always produce the same path.
    """

    def __init__(
        self,
        scheduler: SpacedRepetitionScheduler | None = None,
        ranker: PriorityRanker | None = None,
    ):
        self._scheduler = scheduler or SpacedRepetitionScheduler()
        self._ranker = ranker or PriorityRanker()

    def build_path(
        self,
        topics: Sequence[Topic],
        mastery_records: Iterable[MasteryRecord],
    ) -> list[TopicWithMastery]:
        """
        Join topics with mastery and order them lowest mastery first.

        Args:
            topics: Catalog topics in catalog order
            mastery_records: Learner's records (duplicates: first one wins)

        Returns:
            Every topic exactly once, sorted by mastery ascending
        """
        index = first_occurrence_index(mastery_records)

        joined = [
            TopicWithMastery(
                id=topic.id,
                name=topic.name,
                mastery_level=clamp_unit(index[topic.id].mastery_level) if topic.id in index else 0.0,
            )
            for topic in topics
        ]

        # sorted() is stable: equal mastery keeps catalog order
        return sorted(joined, key=lambda t: t.mastery_level)

    def annotate(
        self,
        path: Sequence[TopicWithMastery],
        mastery_records: Iterable[MasteryRecord],
        now: datetime | None = None,
        weights: Mapping[str, float] | None = None,
    ) -> list[PathEntry]:
        """
        Attach review-due status and priority to each path step.

        Topics without a record are scored as never practiced.

        Args:
            path: Output of build_path
            mastery_records: Records used to build the path
            now: Current time (defaults to UTC now)
            weights: Optional topic_id -> certification weight

        Returns:
            PathEntry list in path order
        """
        index = first_occurrence_index(mastery_records)
        weights = weights or {}
        entries = []

        for position, topic in enumerate(path, start=1):
            record = index.get(topic.id) or MasteryRecord.fresh(topic.id)
            entries.append(
                PathEntry(
                    topic=topic,
                    position=position,
                    is_due=self._scheduler.is_due(
                        topic.mastery_level,
                        record.last_practiced_at,
                        record.total_attempts,
                        now,
                    ),
                    priority=self._ranker.score(
                        topic.mastery_level,
                        record.last_practiced_at,
                        record.total_attempts,
                        weights.get(topic.id),
                        now,
                    ),
                    total_attempts=record.total_attempts,
                    last_practiced_at=record.last_practiced_at,
                )
            )

        due_count = sum(1 for e in entries if e.is_due)
        logger.debug(f"Annotated path: {len(entries)} topics, {due_count} due")
        return entries

    def build_annotated_path(
        self,
        topics: Sequence[Topic],
        mastery_records: Sequence[MasteryRecord],
        now: datetime | None = None,
        weights: Mapping[str, float] | None = None,
    ) -> list[PathEntry]:
        """build_path followed by annotate."""
        path = self.build_path(topics, mastery_records)
        return self.annotate(path, mastery_records, now, weights)


def certification_mastery(records: Iterable[MasteryRecord]) -> float:
    """Average mastery across a certification's records (0.0 when empty)."""
    levels = [clamp_unit(r.mastery_level) for r in first_occurrence_index(records).values()]
    if not levels:
        return 0.0
    return sum(levels) / len(levels)
