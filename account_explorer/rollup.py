from __future__ import annotations

from typing import List, NamedTuple

import pandas as pd

from account_explorer.records import AMOUNT_FIELDS


class AggregatePoint(NamedTuple):
    bucket: pd.Timestamp
    value: float


def month_start(dates: pd.Series) -> pd.Series:
    """Map each date to the first day of its (naive, local) calendar month."""
    return pd.to_datetime(dates, errors="coerce").dt.to_period("M").dt.to_timestamp()


def rollup(records: pd.DataFrame, field: str) -> List[AggregatePoint]:
    """
    Sum ``field`` per calendar month.

    Only records whose amount is numeric and nonzero contribute, so a month
    with nothing but zero or missing amounts has no point at all.  Buckets
    come back in the order they are first seen in ``records``.
    """
    if field not in AMOUNT_FIELDS:
        raise ValueError(f"Cannot roll up {field!r}; expected one of {AMOUNT_FIELDS}")
    if records.empty or field not in records.columns:
        return []

    frame = pd.DataFrame({
        "bucket": month_start(records["date"]),
        "value": pd.to_numeric(records[field], errors="coerce").fillna(0.0),
    })
    frame = frame[(frame["value"] != 0) & frame["bucket"].notna()]
    if frame.empty:
        return []

    totals = frame.groupby("bucket", sort=False)["value"].sum()
    return [AggregatePoint(bucket, float(value)) for bucket, value in totals.items()]
