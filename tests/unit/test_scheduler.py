"""
Unit tests for SpacedRepetitionScheduler.

Review intervals by mastery band and the strict due boundary.
"""

from datetime import timedelta

import pytest

from learnpath.delivery.scheduler import ReviewIntervalConfig, SpacedRepetitionScheduler


class TestReviewInterval:
    """Tests for mastery band -> interval mapping."""

    @pytest.mark.parametrize(
        "mastery,days",
        [
            (0.0, 1),
            (0.29, 1),
            (0.3, 3),
            (0.69, 3),
            (0.7, 7),
            (0.89, 7),
            (0.9, 14),
            (1.0, 14),
        ],
    )
    def test_bands(self, mastery, days):
        assert SpacedRepetitionScheduler().review_interval_days(mastery) == days

    def test_out_of_range_mastery_is_clamped(self):
        scheduler = SpacedRepetitionScheduler()
        assert scheduler.review_interval_days(-1.0) == 1
        assert scheduler.review_interval_days(1.5) == 14

    def test_custom_bands(self):
        config = ReviewIntervalConfig(bands=[(0.5, 2.0)], top_interval_days=10.0)
        scheduler = SpacedRepetitionScheduler(config)

        assert scheduler.review_interval_days(0.4) == 2.0
        assert scheduler.review_interval_days(0.6) == 10.0


class TestIsDue:
    """Tests for review-due decisions."""

    def test_exactly_at_threshold_is_not_due(self, now):
        scheduler = SpacedRepetitionScheduler()
        assert scheduler.is_due(0.2, now - timedelta(days=1), now=now) is False

    def test_just_past_threshold_is_due(self, now):
        scheduler = SpacedRepetitionScheduler()
        assert scheduler.is_due(0.2, now - timedelta(days=1, seconds=1), now=now) is True

    def test_high_mastery_waits_longer(self, now):
        scheduler = SpacedRepetitionScheduler()
        last = now - timedelta(days=10)

        assert scheduler.is_due(0.5, last, now=now) is True
        assert scheduler.is_due(0.95, last, now=now) is False

    def test_never_practiced_is_due(self, now):
        assert SpacedRepetitionScheduler().is_due(1.0, None, now=now) is True

    def test_naive_timestamp_treated_as_utc(self, now):
        naive = (now - timedelta(days=2)).replace(tzinfo=None)
        assert SpacedRepetitionScheduler().is_due(0.1, naive, now=now) is True

    def test_future_practice_is_not_due(self, now):
        assert SpacedRepetitionScheduler().is_due(0.1, now + timedelta(days=1), now=now) is False


class TestNextReviewAt:
    """Tests for next review time."""

    def test_adds_band_interval(self, now):
        assert SpacedRepetitionScheduler().next_review_at(0.5, now) == now + timedelta(days=3)

    def test_never_practiced(self):
        assert SpacedRepetitionScheduler().next_review_at(0.5, None) is None

    def test_due_right_after_next_review(self, now):
        scheduler = SpacedRepetitionScheduler()
        last = now - timedelta(days=20)
        review_at = scheduler.next_review_at(0.8, last)

        assert scheduler.is_due(0.8, last, now=review_at) is False
        assert scheduler.is_due(0.8, last, now=review_at + timedelta(seconds=1)) is True
