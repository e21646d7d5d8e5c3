"""
In-Memory Collaborators.

Reference implementations of the store protocols, used by the CLI and tests:
- InMemoryContentCatalog: certification -> ordered topics
- InMemoryMasteryStore: (user_id, topic_id) -> MasteryRecord, striped locks
- InMemoryAttemptLog: append-only list of attempts
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger

from learnpath.core.models import AttemptEvent, MasteryRecord, Topic


class InMemoryContentCatalog:
    """Topic catalog backed by a dict."""

    def __init__(self, certifications: dict[str, Iterable[Topic]] | None = None):
        self._topics: dict[str, list[Topic]] = {
            cert_id: list(topics) for cert_id, topics in (certifications or {}).items()
        }

    def add_certification(self, certification_id: str, topics: Iterable[Topic]) -> None:
        self._topics[certification_id] = list(topics)

    def list_topics(self, certification_id: str) -> list[Topic]:
        return list(self._topics.get(certification_id, []))

    def certification_of(self, topic_id: str) -> str | None:
        """First certification listing this topic."""
        for cert_id, topics in self._topics.items():
            if any(t.id == topic_id for t in topics):
                return cert_id
        return None


class InMemoryMasteryStore:
    """
    Mastery store backed by a dict.

    Writes to the same (user_id, topic_id) are serialized by one of a fixed
    pool of striped locks.
    """

    LOCK_STRIPES = 64

    def __init__(self, catalog: InMemoryContentCatalog | None = None, lock_stripes: int | None = None):
        self._catalog = catalog or InMemoryContentCatalog()
        self._records: dict[tuple[str, str], MasteryRecord] = {}
        self._locks = [threading.Lock() for _ in range(max(lock_stripes or self.LOCK_STRIPES, 1))]

    def _lock_for(self, key: tuple[str, str]) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def get(self, user_id: str, topic_id: str) -> MasteryRecord | None:
        return self._records.get((user_id, topic_id))

    def upsert(self, user_id: str, topic_id: str, record: MasteryRecord) -> bool:
        key = (user_id, topic_id)
        with self._lock_for(key):
            self._records[key] = record
        return True

    def compare_and_set(
        self,
        user_id: str,
        topic_id: str,
        expected: MasteryRecord | None,
        record: MasteryRecord,
    ) -> bool:
        key = (user_id, topic_id)
        with self._lock_for(key):
            if self._records.get(key) != expected:
                logger.debug(f"compare_and_set mismatch for {key}")
                return False
            self._records[key] = record
        return True

    def list_by_certification(self, user_id: str, certification_id: str) -> list[MasteryRecord]:
        records = []
        for topic in self._catalog.list_topics(certification_id):
            record = self._records.get((user_id, topic.id))
            if record is not None:
                records.append(record)
        return records


@dataclass(frozen=True)
class LoggedAttempt:
    user_id: str
    event: AttemptEvent
    xp_earned: int
    logged_at: datetime


class InMemoryAttemptLog:
    """Append-only attempt log."""

    def __init__(self):
        self._entries: list[LoggedAttempt] = []
        self._lock = threading.Lock()

    def append(self, user_id: str, event: AttemptEvent, xp_earned: int) -> None:
        with self._lock:
            self._entries.append(
                LoggedAttempt(
                    user_id=user_id,
                    event=event,
                    xp_earned=xp_earned,
                    logged_at=datetime.now(UTC),
                )
            )

    def entries(self, user_id: str | None = None) -> list[LoggedAttempt]:
        if user_id is None:
            return list(self._entries)
        return [e for e in self._entries if e.user_id == user_id]

    def __len__(self) -> int:
        return len(self._entries)


class InMemoryXPLedger:
    """Running XP totals per learner."""

    def __init__(self, totals: dict[str, int] | None = None):
        self._totals: dict[str, int] = dict(totals or {})
        self._lock = threading.Lock()

    def add(self, user_id: str, amount: int) -> int:
        with self._lock:
            total = self._totals.get(user_id, 0) + max(int(amount), 0)
            self._totals[user_id] = total
        return total

    def total(self, user_id: str) -> int:
        return self._totals.get(user_id, 0)
