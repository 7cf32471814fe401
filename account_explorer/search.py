"""
search.py
---------
Free-text search over transaction descriptions.

A search string may hold several queries separated by ``|``.  The string
is split *before* each part is compiled as a case-insensitive regular
expression, so ``|`` never acts as regex alternation here.  Every query gets
its own credit/debit rollup, amount statistics and grouped descriptions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from account_explorer.logging_setup import get_logger
from account_explorer.rollup import AggregatePoint, rollup

logger = get_logger(__name__)

QUERY_SEPARATOR = "|"


class InvalidQueryError(ValueError):
    """A search query is not a valid regular expression."""

    def __init__(self, query: str, reason: str):
        super().__init__(f"Invalid search query {query!r}: {reason}")
        self.query = query
        self.reason = reason


@dataclass(frozen=True)
class AmountSummary:
    count: int
    total: float
    # None when there is no data to describe
    mean: Optional[float] = None
    median: Optional[float] = None
    variance: Optional[float] = None
    std_dev: Optional[float] = None


@dataclass(frozen=True)
class DescriptionGroup:
    count: int
    descriptions: str


@dataclass(frozen=True, eq=False)
class QueryResult:
    query: str
    matched: pd.DataFrame
    credit_series: List[AggregatePoint]
    debit_series: List[AggregatePoint]
    credit_summary: AmountSummary
    debit_summary: AmountSummary
    descriptions: Dict[str, DescriptionGroup] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.matched)


@dataclass(frozen=True)
class SearchTotals:
    count: int = 0
    credit_count: int = 0
    credit_total: float = 0.0
    debit_count: int = 0
    debit_total: float = 0.0


def compile_query(query: str) -> re.Pattern:
    try:
        return re.compile(query, re.IGNORECASE)
    except re.error as exc:
        raise InvalidQueryError(query, str(exc)) from exc


def split_queries(query_string: str) -> List[str]:
    if not query_string:
        return []
    return query_string.split(QUERY_SEPARATOR)


def validate_queries(query_string: str) -> List[re.Pattern]:
    """Compile every query of ``query_string``, failing on the first bad one."""
    return [compile_query(q) for q in split_queries(query_string)]


def _optional(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def summarize_amounts(values: pd.Series) -> AmountSummary:
    """Describe a set of amounts; sample variance needs two or more values."""
    values = pd.to_numeric(pd.Series(values), errors="coerce").dropna()
    count = int(values.size)
    if count == 0:
        return AmountSummary(count=0, total=0.0)

    return AmountSummary(
        count=count,
        total=float(values.sum()),
        mean=_optional(values.mean()),
        median=_optional(values.median()),
        variance=_optional(values.var(ddof=1)) if count > 1 else None,
        std_dev=_optional(values.std(ddof=1)) if count > 1 else None,
    )


def condense_description(desc: str) -> str:
    return " ".join(str(desc).split()[:2])


def group_descriptions(matched: pd.DataFrame) -> Dict[str, DescriptionGroup]:
    """Group matched records by the first two words of their description."""
    if matched.empty:
        return {}

    descs = matched["description"].astype(str)
    keys = descs.map(condense_description)
    groups: Dict[str, DescriptionGroup] = {}
    for key, members in descs.groupby(keys, sort=False):
        groups[key] = DescriptionGroup(
            count=int(members.size),
            descriptions="\n".join(members.drop_duplicates()),
        )
    return groups


def _positive(matched: pd.DataFrame, field: str) -> pd.Series:
    return pd.to_numeric(matched[field], errors="coerce") > 0


def _amounts(matched: pd.DataFrame, field: str) -> pd.Series:
    if matched.empty:
        return pd.Series([], dtype="float64")
    return matched[field]


def _run(records: pd.DataFrame, query: str, pattern: re.Pattern) -> QueryResult:
    if records.empty:
        matched = records
        credits = debits = records
    else:
        # Groups in a query are plain regex groups, they do not select what is returned
        hits = records["description"].astype(str).map(lambda desc: pattern.search(desc) is not None)
        matched = records[hits]
        credits = matched[_positive(matched, "credit")]
        debits = matched[_positive(matched, "debit")]

    result = QueryResult(
        query=query,
        matched=matched,
        credit_series=rollup(credits, "credit"),
        debit_series=rollup(debits, "debit"),
        credit_summary=summarize_amounts(_amounts(matched, "credit")),
        debit_summary=summarize_amounts(_amounts(matched, "debit")),
        descriptions=group_descriptions(matched),
    )
    logger.debug("Query %r matched %d record(s)", query, result.count)
    return result


def search(records: pd.DataFrame, query: str) -> QueryResult:
    """Run one query as a single regex, without splitting on ``|``."""
    return _run(records, query, compile_query(query))


def search_all(records: pd.DataFrame, query_string: str) -> List[QueryResult]:
    """Split ``query_string`` on ``|`` and search for each part in order."""
    queries = split_queries(query_string)
    patterns = validate_queries(query_string)
    return [_run(records, q, p) for q, p in zip(queries, patterns)]


def summarize_results(results: List[QueryResult]) -> SearchTotals:
    """Totals across every query of one search."""
    totals = SearchTotals()
    for result in results:
        matched = result.matched
        credit_count = int(_positive(matched, "credit").sum()) if not matched.empty else 0
        debit_count = int(_positive(matched, "debit").sum()) if not matched.empty else 0
        totals = SearchTotals(
            count=totals.count + result.count,
            credit_count=totals.credit_count + credit_count,
            credit_total=totals.credit_total + result.credit_summary.total,
            debit_count=totals.debit_count + debit_count,
            debit_total=totals.debit_total + result.debit_summary.total,
        )
    return totals
