"""
Gamification: daily streaks, streak freezes and streak milestones.

XP rewards live in learnpath.core.xp next to the mastery engine.
"""

from learnpath.gamification.streaks import (
    MILESTONES,
    ActivityRecord,
    DailyActivity,
    FreezeEligibility,
    Milestone,
    NextMilestone,
    RewardType,
    StreakState,
    StreakStatus,
    StreakStatusDescription,
    StreakUpdate,
    SubscriptionTier,
    calculate_streak,
    can_use_streak_freeze,
    daily_activity_summary,
    describe_streak,
    milestone_reward,
    next_milestone,
    qualifies_for_daily_activity,
    use_streak_freeze,
)

__all__ = [
    "MILESTONES",
    "ActivityRecord",
    "DailyActivity",
    "FreezeEligibility",
    "Milestone",
    "NextMilestone",
    "RewardType",
    "StreakState",
    "StreakStatus",
    "StreakStatusDescription",
    "StreakUpdate",
    "SubscriptionTier",
    "calculate_streak",
    "can_use_streak_freeze",
    "daily_activity_summary",
    "describe_streak",
    "milestone_reward",
    "next_milestone",
    "qualifies_for_daily_activity",
    "use_streak_freeze",
]
