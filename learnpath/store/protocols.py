"""
Collaborator interfaces.

The engine never does I/O. The calling layer supplies these:
- MasteryStore: per-(user, topic) mastery records
- ContentCatalog: ordered topics per certification
- AttemptLog: append-only record of answered questions
- XPLedger: running XP total per learner

A store must make load -> update -> persist atomic per (user_id, topic_id);
compare_and_set is the hook LearningService uses for that.
"""

from __future__ import annotations

from typing import Protocol

from learnpath.core.models import AttemptEvent, MasteryRecord, Topic


class MasteryStore(Protocol):
    """Interface for mastery persistence."""

    def get(self, user_id: str, topic_id: str) -> MasteryRecord | None:
        """Load a record, or None if the learner never practiced the topic."""
        ...

    def upsert(self, user_id: str, topic_id: str, record: MasteryRecord) -> bool:
        """Insert or replace a record (last write wins). Returns success."""
        ...

    def compare_and_set(
        self,
        user_id: str,
        topic_id: str,
        expected: MasteryRecord | None,
        record: MasteryRecord,
    ) -> bool:
        """Replace a record only if it still equals expected."""
        ...

    def list_by_certification(self, user_id: str, certification_id: str) -> list[MasteryRecord]:
        """All of a learner's records for topics in a certification."""
        ...


class ContentCatalog(Protocol):
    """Interface for the topic catalog."""

    def list_topics(self, certification_id: str) -> list[Topic]:
        """Topics of a certification in catalog order."""
        ...


class AttemptLog(Protocol):
    """Interface for the write-only attempt log."""

    def append(self, user_id: str, event: AttemptEvent, xp_earned: int) -> None:
        ...


class XPLedger(Protocol):
    """Interface for per-learner XP totals."""

    def add(self, user_id: str, amount: int) -> int:
        """Add XP atomically and return the learner's new total."""
        ...

    def total(self, user_id: str) -> int:
        """Current XP total (0 for a learner with none)."""
        ...
