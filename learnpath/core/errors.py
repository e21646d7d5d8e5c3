"""
Exceptions raised outside the pure engine.

The scoring components never raise for bad numeric input; these cover the
service layer that talks to the Mastery Store and Content Catalog.
"""


class LearnpathError(Exception):
    """Base class for learnpath errors."""
    pass


class UnknownTopicError(LearnpathError):
    """Raised when a topic is not listed by the content catalog."""

    def __init__(self, topic_id: str, certification_id: str | None = None):
        self.topic_id = topic_id
        self.certification_id = certification_id
        scope = f" in certification {certification_id}" if certification_id else ""
        super().__init__(f"Unknown topic {topic_id}{scope}")


class StoreConflictError(LearnpathError):
    """Raised when a mastery record keeps changing underneath an update."""

    def __init__(self, user_id: str, topic_id: str, attempts: int):
        self.user_id = user_id
        self.topic_id = topic_id
        self.attempts = attempts
        super().__init__(
            f"Mastery record for user {user_id} topic {topic_id} "
            f"changed concurrently ({attempts} attempts)"
        )


class StreakFreezeError(LearnpathError):
    """Raised when a streak freeze is requested but not allowed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
