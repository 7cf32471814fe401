from __future__ import annotations

from collections import defaultdict
from typing import List, Sequence

from account_explorer.rollup import AggregatePoint


def align_series(series_list: Sequence[Sequence[AggregatePoint]]) -> List[List[AggregatePoint]]:
    """
    Give every series the same, sorted set of month buckets.

    Buckets missing from a series are filled with 0 so the series can be
    stacked index by index.  New lists are returned and the input is left
    untouched; aligning an aligned set gives back an identical set.
    """
    buckets = sorted({point.bucket for series in series_list for point in series})

    aligned = []
    for series in series_list:
        values = defaultdict(float)
        for point in series:
            values[point.bucket] += point.value
        aligned.append([AggregatePoint(bucket, values.get(bucket, 0.0)) for bucket in buckets])
    return aligned
