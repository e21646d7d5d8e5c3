"""
Boundary payload models (pydantic).
"""

from learnpath.api.schemas import (
    AttemptPayload,
    MasteryRecordPayload,
    PathRequest,
    SubmissionRequest,
    TopicPayload,
)

__all__ = [
    "AttemptPayload",
    "MasteryRecordPayload",
    "PathRequest",
    "SubmissionRequest",
    "TopicPayload",
]
