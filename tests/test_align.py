"""Tests for aligning per-query series onto shared month buckets."""

import pandas as pd

from account_explorer.align import align_series
from account_explorer.rollup import AggregatePoint

JAN = pd.Timestamp("2021-01-01")
FEB = pd.Timestamp("2021-02-01")
MAR = pd.Timestamp("2021-03-01")


def _buckets(series):
    return [point.bucket for point in series]


class TestAlignSeries:
    """Tests for align_series zero-filling and ordering."""

    def test_disjoint_series_are_zero_filled(self):
        a = [AggregatePoint(JAN, 10.0)]
        b = [AggregatePoint(FEB, 20.0)]
        aligned_a, aligned_b = align_series([a, b])
        assert aligned_a == [AggregatePoint(JAN, 10.0), AggregatePoint(FEB, 0.0)]
        assert aligned_b == [AggregatePoint(JAN, 0.0), AggregatePoint(FEB, 20.0)]

    def test_buckets_are_identical_and_sorted(self):
        series = [
            [AggregatePoint(MAR, 1.0), AggregatePoint(JAN, 2.0)],
            [AggregatePoint(FEB, 3.0)],
            [],
        ]
        aligned = align_series(series)
        for s in aligned:
            assert _buckets(s) == [JAN, FEB, MAR]
        assert [p.value for p in aligned[2]] == [0.0, 0.0, 0.0]

    def test_idempotent(self):
        series = [
            [AggregatePoint(MAR, 1.25), AggregatePoint(JAN, 2.5)],
            [AggregatePoint(FEB, 3.75)],
        ]
        once = align_series(series)
        assert align_series(once) == once

    def test_input_is_not_modified(self):
        a = [AggregatePoint(FEB, 1.0)]
        b = [AggregatePoint(JAN, 2.0)]
        align_series([a, b])
        assert a == [AggregatePoint(FEB, 1.0)]
        assert b == [AggregatePoint(JAN, 2.0)]

    def test_duplicate_buckets_are_merged(self):
        aligned = align_series([[AggregatePoint(JAN, 1.0), AggregatePoint(JAN, 2.0)]])
        assert aligned == [[AggregatePoint(JAN, 3.0)]]

    def test_empty_inputs(self):
        assert align_series([]) == []
        assert align_series([[], []]) == [[], []]
