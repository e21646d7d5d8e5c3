"""
Daily Study Streaks.

Tracks consecutive days of qualifying activity:
- Activity today after activity yesterday extends the streak
- A second activity on the same day maintains it
- A gap of more than one day resets it (to 1 if the learner is active today)

Milestones award XP, badges or streak freezes at fixed streak lengths. A
freeze covers a missed day: it is only available on a streak of at least a
week, at most once a week, and free learners get fewer than pro learners.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from enum import Enum

from loguru import logger

from learnpath.core.errors import StreakFreezeError
from learnpath.core.models import ensure_aware

# Minimum daily activity to count toward a streak (any one is enough)
MIN_QUESTIONS = 5
MIN_XP = 20
MIN_TIME_MINUTES = 5
MIN_LESSONS = 1

# Streak freezes
MIN_DAYS_BETWEEN_FREEZES = 7
MIN_STREAK_FOR_FREEZE = 7


class RewardType(str, Enum):
    XP = "xp"
    BADGE = "badge"
    FREEZE = "freeze"


class SubscriptionTier(str, Enum):
    FREE = "free"
    PRO = "pro"


MAX_FREEZES = {SubscriptionTier.FREE: 2, SubscriptionTier.PRO: 5}


@dataclass(frozen=True)
class Milestone:
    streak: int
    reward_type: RewardType
    amount: int
    name: str
    reward_preview: str


MILESTONES: tuple[Milestone, ...] = (
    Milestone(7, RewardType.XP, 100, "Week Warrior", "100 XP bonus"),
    Milestone(14, RewardType.FREEZE, 1, "Two Week Champion", "Free streak freeze"),
    Milestone(30, RewardType.XP, 500, "Monthly Master", "500 XP bonus"),
    Milestone(50, RewardType.BADGE, 1, "Dedication Expert", "Special badge"),
    Milestone(100, RewardType.XP, 1000, "Century Achiever", "1000 XP bonus"),
    Milestone(365, RewardType.BADGE, 1, "Year Long Learner", "Legendary badge"),
)


@dataclass(frozen=True)
class StreakState:
    """Persisted streak counters for a learner."""

    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: date | None = None
    streak_freeze_count: int = 0
    last_streak_freeze_date: date | None = None


@dataclass(frozen=True)
class StreakUpdate:
    """Result of a streak evaluation."""

    state: StreakState
    maintained: bool = False
    broken: bool = False
    extended: bool = False


@dataclass(frozen=True)
class NextMilestone:
    next_milestone: int
    days_to_milestone: int
    milestone_name: str
    reward_preview: str


def calculate_streak(
    state: StreakState,
    activity_date: date | None,
    today: date | None = None,
) -> StreakUpdate:
    """
    Evaluate a learner's streak for today.

    Args:
        state: Current streak counters
        activity_date: Date of today's qualifying activity, or None if none yet
        today: Evaluation date (defaults to date.today())

    Returns:
        StreakUpdate with the new state and what happened
    """
    today = today or date.today()
    yesterday = today - timedelta(days=1)
    previous = state.last_activity_date

    current = state.current_streak
    last_activity = previous
    maintained = broken = extended = False

    if activity_date is None:
        # Nothing yet today: the streak survives until the day is over
        if previous is not None and previous not in (today, yesterday) and current > 0:
            broken = True
            current = 0
    elif activity_date == today:
        last_activity = today
        if previous == yesterday:
            current += 1
            extended = True
        elif previous == today:
            maintained = True
        else:
            if previous is not None and current > 0:
                broken = True
            current = 1
            extended = True

    longest = max(state.longest_streak, current)

    if broken:
        logger.debug(f"Streak broken (last activity {previous})")

    return StreakUpdate(
        state=replace(
            state,
            current_streak=current,
            longest_streak=longest,
            last_activity_date=last_activity,
        ),
        maintained=maintained,
        broken=broken,
        extended=extended,
    )


def qualifies_for_daily_activity(
    questions_answered: int,
    lessons_completed: int,
    xp_earned: int,
    time_spent_minutes: float,
) -> bool:
    """Check whether a day's activity counts toward the streak."""
    return (
        questions_answered >= MIN_QUESTIONS
        or xp_earned >= MIN_XP
        or time_spent_minutes >= MIN_TIME_MINUTES
        or lessons_completed >= MIN_LESSONS
    )


def milestone_reward(streak: int) -> Milestone | None:
    """The milestone reached at exactly this streak length, if any."""
    for milestone in MILESTONES:
        if milestone.streak == streak:
            return milestone
    return None


def next_milestone(current_streak: int) -> NextMilestone:
    """
    The next milestone ahead of the current streak.

    Past the last fixed milestone, every hundredth day is a milestone worth
    ten XP per day.
    """
    for milestone in MILESTONES:
        if milestone.streak > current_streak:
            return NextMilestone(
                next_milestone=milestone.streak,
                days_to_milestone=milestone.streak - current_streak,
                milestone_name=milestone.name,
                reward_preview=milestone.reward_preview,
            )

    next_century = (current_streak // 100 + 1) * 100
    return NextMilestone(
        next_milestone=next_century,
        days_to_milestone=next_century - current_streak,
        milestone_name=f"{next_century} Day Legend",
        reward_preview=f"{next_century * 10} XP bonus",
    )


# ============================================================================
# Streak freezes
# ============================================================================


@dataclass(frozen=True)
class FreezeEligibility:
    can_use: bool
    freezes_remaining: int
    days_since_last_freeze: int
    reason: str | None = None


def can_use_streak_freeze(
    state: StreakState,
    tier: SubscriptionTier | str = SubscriptionTier.FREE,
    today: date | None = None,
) -> FreezeEligibility:
    """
    Check whether a learner may spend a streak freeze today.

    Args:
        state: Current streak counters
        tier: Subscription tier (unknown tiers get the free allowance)
        today: Evaluation date (defaults to date.today())

    Returns:
        FreezeEligibility with the reason when a freeze is refused
    """
    today = today or date.today()
    try:
        tier = SubscriptionTier(tier)
    except ValueError:
        tier = SubscriptionTier.FREE

    remaining = max(0, MAX_FREEZES[tier] - max(state.streak_freeze_count, 0))

    if state.current_streak < MIN_STREAK_FOR_FREEZE:
        return FreezeEligibility(
            can_use=False,
            freezes_remaining=remaining,
            days_since_last_freeze=0,
            reason=f"Need at least {MIN_STREAK_FOR_FREEZE} day streak to use freeze",
        )

    if remaining <= 0:
        return FreezeEligibility(
            can_use=False,
            freezes_remaining=0,
            days_since_last_freeze=0,
            reason="No streak freezes remaining",
        )

    days_since = 0
    if state.last_streak_freeze_date is not None:
        days_since = (today - state.last_streak_freeze_date).days
        if days_since < MIN_DAYS_BETWEEN_FREEZES:
            return FreezeEligibility(
                can_use=False,
                freezes_remaining=remaining,
                days_since_last_freeze=days_since,
                reason=f"Must wait {MIN_DAYS_BETWEEN_FREEZES - days_since} more days",
            )

    return FreezeEligibility(
        can_use=True,
        freezes_remaining=remaining,
        days_since_last_freeze=days_since,
    )


def use_streak_freeze(
    state: StreakState,
    tier: SubscriptionTier | str = SubscriptionTier.FREE,
    today: date | None = None,
) -> StreakState:
    """
    Spend a streak freeze, carrying the last activity forward to today.

    Raises:
        StreakFreezeError: If the learner is not eligible
    """
    today = today or date.today()
    eligibility = can_use_streak_freeze(state, tier, today)
    if not eligibility.can_use:
        raise StreakFreezeError(eligibility.reason or "Streak freeze not available")

    logger.info(
        f"Streak freeze used on a {state.current_streak} day streak, "
        f"{eligibility.freezes_remaining - 1} left"
    )
    return replace(
        state,
        streak_freeze_count=max(state.streak_freeze_count, 0) + 1,
        last_streak_freeze_date=today,
        last_activity_date=today,
    )


# ============================================================================
# Display helpers
# ============================================================================


class StreakStatus(str, Enum):
    NEW = "new"
    ACTIVE = "active"
    AT_RISK = "at_risk"
    BROKEN = "broken"

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            StreakStatus.NEW: "blue",
            StreakStatus.ACTIVE: "green",
            StreakStatus.AT_RISK: "yellow",
            StreakStatus.BROKEN: "red",
        }[self]


@dataclass(frozen=True)
class StreakStatusDescription:
    status: StreakStatus
    message: str
    action: str | None = None

    @property
    def color(self) -> str:
        return self.status.color


def describe_streak(
    current_streak: int,
    last_activity_date: date | None,
    today: date | None = None,
) -> StreakStatusDescription:
    """Summarize a streak for display, with a nudge when it needs attention."""
    today = today or date.today()

    if current_streak <= 0:
        return StreakStatusDescription(
            StreakStatus.NEW,
            "Start your learning streak today!",
            "Complete a lesson to begin",
        )

    at_risk = StreakStatusDescription(
        StreakStatus.AT_RISK,
        f"Your {current_streak} day streak is at risk!",
        "Complete a lesson today to maintain it",
    )

    if last_activity_date is None or last_activity_date == today - timedelta(days=1):
        return at_risk

    if last_activity_date == today:
        return StreakStatusDescription(
            StreakStatus.ACTIVE,
            f"Great! You've maintained your {current_streak} day streak",
        )

    return StreakStatusDescription(
        StreakStatus.BROKEN,
        "Your streak was broken. Start a new one!",
        "Complete a lesson to begin a new streak",
    )


# ============================================================================
# Daily activity
# ============================================================================


@dataclass(frozen=True)
class ActivityRecord:
    """One logged learner activity (answer, lesson, ...)."""

    activity_type: str
    xp_amount: int
    created_at: datetime


@dataclass(frozen=True)
class DailyActivity:
    activity_date: date
    activities_completed: int = 0
    xp_earned: int = 0
    lessons_completed: int = 0
    questions_answered: int = 0

    @property
    def qualifies(self) -> bool:
        return qualifies_for_daily_activity(
            self.questions_answered,
            self.lessons_completed,
            self.xp_earned,
            0,
        )


def daily_activity_summary(
    activities: Iterable[ActivityRecord],
    target_date: date | None = None,
) -> DailyActivity:
    """
    Totals for one UTC calendar day.

    Lessons are "lesson_complete" activities and questions are
    "question_correct" activities; everything counts toward XP.
    """
    target_date = target_date or date.today()
    day = [a for a in activities if ensure_aware(a.created_at).astimezone(UTC).date() == target_date]

    return DailyActivity(
        activity_date=target_date,
        activities_completed=len(day),
        xp_earned=sum(a.xp_amount for a in day),
        lessons_completed=sum(1 for a in day if a.activity_type == "lesson_complete"),
        questions_answered=sum(1 for a in day if a.activity_type == "question_correct"),
    )
