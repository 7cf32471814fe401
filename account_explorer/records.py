"""
records.py
----------
Load a bank statement CSV into a normalized transactions DataFrame.

The file carries five columns in a fixed order: date, description,
credit, debit and balance.  Header names vary between banks so columns are
picked by position and renamed to the canonical names below.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Optional, Tuple, Union

import pandas as pd

from account_explorer.logging_setup import get_logger

logger = get_logger(__name__)

COLUMNS = ["date", "description", "credit", "debit", "balance"]
AMOUNT_FIELDS = ("credit", "debit")


class DatasetLoadError(RuntimeError):
    """The transaction dataset could not be read."""


def _to_amount(values: pd.Series) -> pd.Series:
    text = values.astype(str).str.strip()
    text = text.str.replace(r"[\$£€,\s]", "", regex=True)
    text = text.str.replace(r"^\((.*?)\)$", r"-\1", regex=True)
    return pd.to_numeric(text, errors="coerce")


# A UTC offset or "Z" following a clock time, e.g. "23:30:00+01:00"
_ZONE_SUFFIX = r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)\s*(?:Z|UTC|GMT|[+-]\d{2}(?::?\d{2})?)$"


def _to_dates(values: pd.Series, dayfirst: bool) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(values):
        dates = values
        if getattr(dates.dt, "tz", None) is not None:
            dates = dates.dt.tz_localize(None)
    else:
        # Keep the local wall clock of zone-aware stamps, buckets are calendar months.
        # Offsets are dropped per value so rows on either side of a DST change parse together.
        text = values.astype(str).str.strip()
        text = text.str.replace(_ZONE_SUFFIX, r"\1", regex=True, case=False)
        dates = pd.to_datetime(text, errors="coerce", dayfirst=dayfirst, format="mixed")
    return dates.dt.normalize()


def prepare_records(df: pd.DataFrame, dayfirst: bool = False) -> pd.DataFrame:
    """
    Normalizes a frame that already uses the canonical column names.

    Missing columns are added, bad amounts become 0 (balance becomes NaN)
    and rows without a usable date are dropped.
    """
    df = df.copy()
    for col in COLUMNS:
        if col not in df.columns:
            df[col] = "" if col in ("description", "date") else 0.0

    df["date"] = _to_dates(df["date"], dayfirst)
    df["description"] = df["description"].fillna("").astype(str)
    for col in AMOUNT_FIELDS:
        df[col] = _to_amount(df[col]).fillna(0.0)
    df["balance"] = _to_amount(df["balance"])

    undated = df["date"].isna()
    if undated.any():
        logger.warning("Dropping %d record(s) with an unparseable date", int(undated.sum()))
        df = df[~undated]

    return df[COLUMNS].reset_index(drop=True)


def read_records(source: Union[str, Path, IO], dayfirst: bool = False) -> pd.DataFrame:
    """Read a statement CSV from a path or file-like object."""
    try:
        raw = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        # EmptyDataError is a ValueError
        raise DatasetLoadError(f"Failed to read {source}: {exc}") from exc

    if raw.shape[1] < len(COLUMNS):
        raise DatasetLoadError(
            f"Expected {len(COLUMNS)} columns ({', '.join(COLUMNS)}), found {raw.shape[1]}"
        )

    raw = raw.iloc[:, : len(COLUMNS)]
    raw.columns = COLUMNS
    try:
        records = prepare_records(raw, dayfirst=dayfirst)
    except ValueError as exc:
        raise DatasetLoadError(f"Failed to parse {source}: {exc}") from exc
    logger.info("Loaded %d transaction(s)", len(records))
    return records


def date_extent(records: pd.DataFrame) -> Optional[Tuple[pd.Timestamp, pd.Timestamp]]:
    if records.empty:
        return None
    dates = records["date"].dropna()
    if dates.empty:
        return None
    return dates.min(), dates.max()
