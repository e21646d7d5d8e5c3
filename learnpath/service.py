"""
Learning Service.

The request-handling layer around the pure engine:
- Submit a batch of answers for one topic (fold, reward, persist, log)
- Keep each learner's running XP total and detect level-ups
- Build the annotated learning path for a certification
- Report the status of a single topic

Persistence goes through the MasteryStore, ContentCatalog, AttemptLog and
XPLedger collaborators; the engine components themselves never touch them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from learnpath.adaptive.path_sequencer import AdaptivePathBuilder, PathEntry, certification_mastery
from learnpath.adaptive.priority import PriorityRanker
from learnpath.config import Settings, get_settings
from learnpath.core.errors import StoreConflictError, UnknownTopicError
from learnpath.core.mastery import AttemptOutcome, MasteryUpdater
from learnpath.core.models import AttemptEvent, MasteryLevel, MasteryRecord, ensure_aware
from learnpath.core.xp import LevelProgress, XPRewarder, calculate_level, level_progress
from learnpath.delivery.scheduler import SpacedRepetitionScheduler
from learnpath.store.memory import InMemoryXPLedger
from learnpath.store.protocols import AttemptLog, ContentCatalog, MasteryStore, XPLedger


@dataclass
class SubmissionResult:
    """Outcome of a batch of answers on one topic."""

    user_id: str
    topic_id: str
    record: MasteryRecord
    xp_earned: int
    outcomes: list[AttemptOutcome] = field(default_factory=list)
    is_due: bool = False
    priority: float = 0.0
    total_xp: int = 0
    old_level: int = 1
    new_level: int = 1

    @property
    def level(self) -> MasteryLevel:
        return self.record.level

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


@dataclass
class TopicStatus:
    """Current standing on a single topic."""

    topic_id: str
    record: MasteryRecord
    is_due: bool
    priority: float
    next_review_at: datetime | None

    @property
    def level(self) -> MasteryLevel:
        return self.record.level


@dataclass
class CertificationPath:
    """Annotated learning path for a certification."""

    certification_id: str
    entries: list[PathEntry]
    certification_mastery: float

    @property
    def due_count(self) -> int:
        return sum(1 for e in self.entries if e.is_due)


class LearningService:
    """
    High-level service for learner actions.

    Coordinates between the stores and the scoring engine.
    """

    MAX_WRITE_ATTEMPTS = 3

    def __init__(
        self,
        store: MasteryStore,
        catalog: ContentCatalog,
        attempt_log: AttemptLog | None = None,
        settings: Settings | None = None,
        xp_ledger: XPLedger | None = None,
    ):
        """
        Initialize learning service.

        Args:
            store: Mastery persistence
            catalog: Topic catalog
            attempt_log: Optional write-only attempt log
            settings: Engine settings (cached environment settings if None)
            xp_ledger: XP totals (a fresh in-memory ledger if None)
        """
        settings = settings or get_settings()
        self.store = store
        self.catalog = catalog
        self.attempt_log = attempt_log
        self.xp_ledger = xp_ledger if xp_ledger is not None else InMemoryXPLedger()
        self.updater = MasteryUpdater(settings.get_mastery_config())
        self.rewarder = XPRewarder(settings.get_xp_config())
        self.scheduler = SpacedRepetitionScheduler(settings.get_review_config())
        self.ranker = PriorityRanker(settings.get_priority_config())
        self.path_builder = AdaptivePathBuilder(self.scheduler, self.ranker)

    def submit_attempts(
        self,
        user_id: str,
        topic_id: str,
        events: Sequence[AttemptEvent],
        now: datetime | None = None,
        certification_id: str | None = None,
    ) -> SubmissionResult:
        """
        Apply a batch of answers to a learner's topic mastery.

        Events are sorted by occurred_at (stable for equal timestamps) and
        folded one at a time. The write uses compare-and-set and is retried
        from a fresh read if another submission got there first.

        Args:
            user_id: Learner identifier
            topic_id: Topic the answers belong to
            events: Answers for this topic
            now: Time used for the due/priority annotation
            certification_id: If given, the topic must belong to it

        Returns:
            SubmissionResult with the persisted record, XP earned and the
            learner's new XP total and level

        Raises:
            UnknownTopicError: If the topic is not in certification_id
            ValueError: If an event belongs to a different topic
            StoreConflictError: If every write attempt lost a race
        """
        if certification_id is not None:
            self.require_topic(certification_id, topic_id)

        mismatched = [e.topic_id for e in events if e.topic_id != topic_id]
        if mismatched:
            raise ValueError(f"Events for topics {sorted(set(mismatched))} submitted to {topic_id}")

        ordered = sorted(events, key=lambda e: ensure_aware(e.occurred_at))

        for attempt in range(1, self.MAX_WRITE_ATTEMPTS + 1):
            current = self.store.get(user_id, topic_id)
            outcomes = self.updater.apply_attempts(current, ordered, self.rewarder)
            record = outcomes[-1].record if outcomes else (current or MasteryRecord.fresh(topic_id))

            if not outcomes or self.store.compare_and_set(user_id, topic_id, current, record):
                break
            logger.warning(
                f"Concurrent update on user={user_id} topic={topic_id}, "
                f"retrying ({attempt}/{self.MAX_WRITE_ATTEMPTS})"
            )
        else:
            raise StoreConflictError(user_id, topic_id, self.MAX_WRITE_ATTEMPTS)

        if self.attempt_log is not None:
            for outcome in outcomes:
                self.attempt_log.append(user_id, outcome.event, outcome.xp_earned)

        xp_total = sum(o.xp_earned for o in outcomes)
        if xp_total > 0:
            total_xp = self.xp_ledger.add(user_id, xp_total)
        else:
            total_xp = self.xp_ledger.total(user_id)
        old_level = calculate_level(total_xp - xp_total)
        new_level = calculate_level(total_xp)

        logger.info(
            f"Recorded {len(outcomes)} attempts for user={user_id} topic={topic_id}: "
            f"mastery={record.mastery_level:.3f}, xp=+{xp_total} (total {total_xp})"
        )
        if new_level > old_level:
            logger.info(f"User {user_id} leveled up: {old_level} -> {new_level}")

        return SubmissionResult(
            user_id=user_id,
            topic_id=topic_id,
            record=record,
            xp_earned=xp_total,
            outcomes=outcomes,
            is_due=self.scheduler.is_due(
                record.mastery_level, record.last_practiced_at, record.total_attempts, now
            ),
            priority=self.ranker.score_record(record, now=now),
            total_xp=total_xp,
            old_level=old_level,
            new_level=new_level,
        )

    def xp_progress(self, user_id: str) -> LevelProgress:
        """Level progress for a learner's running XP total."""
        return level_progress(self.xp_ledger.total(user_id))

    def topic_status(
        self,
        user_id: str,
        topic_id: str,
        now: datetime | None = None,
    ) -> TopicStatus:
        """
        Get a learner's standing on one topic.

        A topic with no record is reported as a fresh, due topic.
        """
        record = self.store.get(user_id, topic_id) or MasteryRecord.fresh(topic_id)
        return TopicStatus(
            topic_id=topic_id,
            record=record,
            is_due=self.scheduler.is_due(
                record.mastery_level, record.last_practiced_at, record.total_attempts, now
            ),
            priority=self.ranker.score_record(record, now=now),
            next_review_at=self.scheduler.next_review_at(
                record.mastery_level, record.last_practiced_at
            ),
        )

    def learning_path(
        self,
        user_id: str,
        certification_id: str,
        now: datetime | None = None,
        weights: Mapping[str, float] | None = None,
    ) -> CertificationPath:
        """
        Build the annotated, weakest-first path for a certification.

        Args:
            user_id: Learner identifier
            certification_id: Certification whose topics form the path
            now: Current time (defaults to UTC now)
            weights: Optional topic_id -> certification weight

        Returns:
            CertificationPath covering every catalog topic
        """
        topics = self.catalog.list_topics(certification_id)
        records = self.store.list_by_certification(user_id, certification_id)
        entries = self.path_builder.build_annotated_path(topics, records, now, weights)

        logger.debug(
            f"Path for user={user_id} certification={certification_id}: "
            f"{len(entries)} topics, {len(records)} with mastery"
        )

        return CertificationPath(
            certification_id=certification_id,
            entries=entries,
            certification_mastery=certification_mastery(records),
        )

    def require_topic(self, certification_id: str, topic_id: str) -> None:
        """Raise UnknownTopicError if the catalog does not list the topic."""
        if not any(t.id == topic_id for t in self.catalog.list_topics(certification_id)):
            raise UnknownTopicError(topic_id, certification_id)
