"""
Boundary Schemas.

Pydantic models for raw submission and path-request payloads (JSON files
given to the CLI, or bodies handed over by a web layer). Required fields
are validated here so the engine only ever sees well-formed values;
out-of-range numbers are left for the engine to clamp.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from learnpath.core.models import AttemptEvent, Difficulty, MasteryRecord, Topic


class TopicPayload(BaseModel):
    """A catalog topic."""

    id: str = Field(..., min_length=1, description="Topic identifier")
    name: str = Field("", description="Topic display name")

    def to_topic(self) -> Topic:
        return Topic(id=self.id, name=self.name or self.id)


class MasteryRecordPayload(BaseModel):
    """A stored mastery record."""

    topic_id: str = Field(..., min_length=1, description="Topic identifier")
    mastery_level: float = Field(0.0, description="Mastery 0-1 (clamped by the engine)")
    total_attempts: int = Field(0, ge=0)
    correct_attempts: int = Field(0, ge=0)
    consecutive_correct: int = Field(0, ge=0)
    last_practiced_at: datetime | None = Field(None, description="Last practice time")

    @model_validator(mode="after")
    def check_attempt_counts(self) -> MasteryRecordPayload:
        if self.correct_attempts > self.total_attempts:
            raise ValueError("correct_attempts cannot exceed total_attempts")
        return self

    def to_record(self) -> MasteryRecord:
        return MasteryRecord(
            topic_id=self.topic_id,
            mastery_level=self.mastery_level,
            total_attempts=self.total_attempts,
            correct_attempts=self.correct_attempts,
            consecutive_correct=self.consecutive_correct,
            last_practiced_at=self.last_practiced_at,
        )

    @classmethod
    def from_record(cls, record: MasteryRecord) -> MasteryRecordPayload:
        return cls(
            topic_id=record.topic_id,
            mastery_level=record.mastery_level,
            total_attempts=record.total_attempts,
            correct_attempts=record.correct_attempts,
            consecutive_correct=record.consecutive_correct,
            last_practiced_at=record.last_practiced_at,
        )


class AttemptPayload(BaseModel):
    """One answered question."""

    is_correct: bool = Field(..., description="Whether the answer was correct")
    difficulty: str = Field("easy", description="easy, medium or hard (unknown -> easy)")
    response_time_seconds: float | None = Field(None, description="Time taken to answer")
    occurred_at: datetime | None = Field(None, description="Answer time (defaults to now)")
    question_id: str | None = Field(None, description="Question identifier, for the attempt log")

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value: object) -> str:
        return Difficulty.parse(value).value

    def to_event(self, topic_id: str) -> AttemptEvent:
        return AttemptEvent(
            topic_id=topic_id,
            is_correct=self.is_correct,
            difficulty=Difficulty(self.difficulty),
            response_time_seconds=self.response_time_seconds,
            occurred_at=self.occurred_at or datetime.now(UTC),
        )


class SubmissionRequest(BaseModel):
    """A batch of answers for one topic."""

    user_id: str = Field("local", min_length=1)
    topic_id: str = Field(..., min_length=1)
    record: MasteryRecordPayload | None = Field(None, description="Stored record, if any")
    total_xp: int = Field(0, ge=0, description="Learner's XP total before these answers")
    attempts: list[AttemptPayload] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_record_topic(self) -> SubmissionRequest:
        if self.record is not None and self.record.topic_id != self.topic_id:
            raise ValueError(
                f"record.topic_id {self.record.topic_id!r} does not match topic_id {self.topic_id!r}"
            )
        return self

    def to_events(self) -> list[AttemptEvent]:
        return [a.to_event(self.topic_id) for a in self.attempts]


class PathRequest(BaseModel):
    """Catalog and mastery records for building a learning path."""

    user_id: str = Field("local", min_length=1)
    certification_id: str = Field("default", min_length=1)
    topics: list[TopicPayload] = Field(default_factory=list)
    mastery: list[MasteryRecordPayload] = Field(default_factory=list)
    weights: dict[str, float] = Field(default_factory=dict)
    now: datetime | None = Field(None, description="Evaluation time (defaults to now)")

    def to_topics(self) -> list[Topic]:
        return [t.to_topic() for t in self.topics]

    def to_records(self) -> list[MasteryRecord]:
        return [m.to_record() for m in self.mastery]
