"""
Delivery: review timing for practiced topics.

- scheduler: Mastery-banded spaced repetition (SpacedRepetitionScheduler)
"""

from learnpath.delivery.scheduler import ReviewIntervalConfig, SpacedRepetitionScheduler

__all__ = [
    "ReviewIntervalConfig",
    "SpacedRepetitionScheduler",
]
