"""
Adaptive Learning Module.

Decides what a learner should study next:
- priority: Multi-factor urgency score per topic (PriorityRanker)
- path_sequencer: Weakest-first learning path over the catalog (AdaptivePathBuilder)
"""

from learnpath.adaptive.path_sequencer import (
    AdaptivePathBuilder,
    PathEntry,
    certification_mastery,
    first_occurrence_index,
)
from learnpath.adaptive.priority import PriorityConfig, PriorityRanker, RankedTopic

__all__ = [
    # Path
    "AdaptivePathBuilder",
    "PathEntry",
    "certification_mastery",
    "first_occurrence_index",
    # Priority
    "PriorityConfig",
    "PriorityRanker",
    "RankedTopic",
]
