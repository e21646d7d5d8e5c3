"""
Core Module - Shared domain models and the per-answer scoring engine.

Components:
- models: Canonical value types (MasteryRecord, AttemptEvent, Topic, ...)
- mastery: Mastery updates (MasteryUpdater, calculate_new_mastery_level)
- xp: XP rewards and level progression (XPRewarder, level_progress)
- errors: Exceptions raised by the service layer

Design Principle:
Everything in core is pure. Scheduling lives in learnpath.delivery and
ranking/path building in learnpath.adaptive; both import from here.
"""

from learnpath.core.errors import (
    LearnpathError,
    StoreConflictError,
    StreakFreezeError,
    UnknownTopicError,
)
from learnpath.core.mastery import (
    AttemptOutcome,
    MasteryConfig,
    MasteryUpdater,
    calculate_new_mastery_level,
)
from learnpath.core.models import (
    AttemptEvent,
    Difficulty,
    MasteryLevel,
    MasteryRecord,
    Topic,
    TopicWithMastery,
)
from learnpath.core.xp import LevelProgress, XPConfig, XPRewarder, level_progress

__all__ = [
    # Models
    "AttemptEvent",
    "Difficulty",
    "MasteryLevel",
    "MasteryRecord",
    "Topic",
    "TopicWithMastery",
    # Mastery
    "AttemptOutcome",
    "MasteryConfig",
    "MasteryUpdater",
    "calculate_new_mastery_level",
    # XP
    "LevelProgress",
    "XPConfig",
    "XPRewarder",
    "level_progress",
    # Errors
    "LearnpathError",
    "StoreConflictError",
    "StreakFreezeError",
    "UnknownTopicError",
]
