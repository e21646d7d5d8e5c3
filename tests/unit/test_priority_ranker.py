"""
Unit tests for PriorityRanker.

priority = (1 - mastery) × time_factor × attempt_factor × weight
"""

from datetime import timedelta

import pytest

from learnpath.adaptive.priority import PriorityConfig, PriorityRanker
from learnpath.core.models import MasteryRecord


class TestFactors:
    """Tests for the individual priority factors."""

    @pytest.mark.parametrize(
        "attempts,factor",
        [(0, 1.5), (-3, 1.5), (5, 0.75), (10, 0.5), (40, 0.5)],
    )
    def test_attempt_factor(self, attempts, factor):
        assert PriorityRanker().attempt_factor(attempts) == pytest.approx(factor)

    @pytest.mark.parametrize(
        "days,factor",
        [(0, 0.0), (3.5, 0.5), (7, 1.0), (30, 2.0), (-2, 0.0)],
    )
    def test_time_factor(self, days, factor):
        assert PriorityRanker().time_factor(days) == pytest.approx(factor)


class TestScore:
    """Tests for single-topic priority."""

    def test_combined_score(self, now):
        score = PriorityRanker().score(0.5, now - timedelta(days=7), 10, now=now)
        assert score == pytest.approx(0.25)

    def test_never_practiced_topic(self, now):
        # 1.0 × min(30/7, 2) × 1.5 × 1.0
        assert PriorityRanker().score(0.0, None, 0, now=now) == pytest.approx(3.0)

    def test_weight_scales_score(self, now):
        ranker = PriorityRanker()
        last = now - timedelta(days=7)

        assert ranker.score(0.5, last, 10, weight=2.0, now=now) == pytest.approx(0.5)

    def test_negative_weight_counts_as_zero(self, now):
        assert PriorityRanker().score(0.5, now - timedelta(days=7), 10, weight=-1.0, now=now) == 0.0

    @pytest.mark.parametrize("weight", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_weight_counts_as_zero(self, now, weight):
        score = PriorityRanker().score(0.5, now - timedelta(days=7), 10, weight=weight, now=now)
        assert score == 0.0

    def test_full_mastery_has_no_priority(self, now):
        ranker = PriorityRanker()
        assert ranker.score(1.0, now - timedelta(days=30), 5, now=now) == 0.0
        assert ranker.score(1.5, now - timedelta(days=30), 5, now=now) == 0.0

    def test_negative_mastery_is_clamped(self, now):
        score = PriorityRanker().score(-1.0, now - timedelta(days=7), 10, now=now)
        assert score == pytest.approx(0.5)

    def test_default_weight_from_config(self, now):
        ranker = PriorityRanker(PriorityConfig(default_weight=3.0))
        assert ranker.score(0.5, now - timedelta(days=7), 10, now=now) == pytest.approx(0.75)

    def test_score_record(self, now):
        record = MasteryRecord("t1", 0.5, 10, 5, 0, now - timedelta(days=7))
        assert PriorityRanker().score_record(record, now=now) == pytest.approx(0.25)


class TestRank:
    """Tests for ranking many topics."""

    def test_most_urgent_first(self, sample_records, now):
        ranked = PriorityRanker().rank(sample_records, now=now)

        assert [r.topic_id for r in ranked] == ["t4", "t2", "t3", "t1"]
        assert [r.rank for r in ranked] == [1, 2, 3, 4]
        assert ranked[0].priority == pytest.approx(0.9 * 10 / 7 * 0.9)

    def test_weights_override(self, sample_records, now):
        ranked = PriorityRanker().rank(sample_records, weights={"t3": 20.0}, now=now)
        assert [r.topic_id for r in ranked] == ["t4", "t3", "t2", "t1"]

    def test_ties_keep_input_order(self, now):
        records = [MasteryRecord("b"), MasteryRecord("a"), MasteryRecord("c")]
        ranked = PriorityRanker().rank(records, now=now)

        assert [r.topic_id for r in ranked] == ["b", "a", "c"]

    def test_empty(self, now):
        assert PriorityRanker().rank([], now=now) == []

    def test_nan_weight_does_not_disturb_order(self, sample_records, now):
        ranked = PriorityRanker().rank(sample_records, weights={"t4": float("nan")}, now=now)

        assert [r.topic_id for r in ranked] == ["t2", "t3", "t1", "t4"]
        assert all(r.priority >= 0 for r in ranked)
