"""
learnpath - adaptive learning scoring engine.

Turns answered questions into mastery, XP and review schedules, and orders
a certification's topics into a weakest-first learning path.
"""

__version__ = "0.3.0"

from learnpath.service import CertificationPath, LearningService, SubmissionResult, TopicStatus

__all__ = [
    "CertificationPath",
    "LearningService",
    "SubmissionResult",
    "TopicStatus",
    "__version__",
]
