"""Explorer session: the records, the baseline chart and at most one search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from account_explorer.config import ChartOptions
from account_explorer.layout import BaselineLayout, OverlayLayout, build_baseline, build_overlay
from account_explorer.logging_setup import get_logger
from account_explorer.records import date_extent
from account_explorer.report import format_summary
from account_explorer.search import QueryResult, SearchTotals, search_all, summarize_results

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchResultSet:
    queries: List[str]
    results: List[QueryResult]
    layout: OverlayLayout
    totals: SearchTotals


class ExplorerSession:
    """
    Holds the loaded records and the search currently on display.

    The UI calls ``on_query_changed`` on every page run; text equal to the
    current query returns the active search without searching again.  A
    query that does not compile raises ``InvalidQueryError`` and leaves the
    displayed search as it was.
    """

    def __init__(self, records: pd.DataFrame, options: Optional[ChartOptions] = None):
        self.records = records
        self.options = options or ChartOptions()
        self.baseline: BaselineLayout = build_baseline(records, self.options)
        self.active: Optional[SearchResultSet] = None
        # Search text behind ``active``
        self.query = ""

    def clear(self) -> None:
        if self.active is not None:
            logger.debug("Clearing search %r", "|".join(self.active.queries))
        self.active = None
        self.query = ""

    def show(self, query: str) -> SearchResultSet:
        results = search_all(self.records, query)
        layout = build_overlay(
            results,
            self.options,
            time_extent=date_extent(self.records),
            bar_width=self.baseline.geometry.bar_width,
        )
        result_set = SearchResultSet(
            queries=[r.query for r in results],
            results=results,
            layout=layout,
            totals=summarize_results(results),
        )

        self.clear()
        self.active = result_set
        self.query = query
        logger.info("Search results\n%s", format_summary(result_set))
        return result_set

    def on_query_changed(self, query: str) -> Optional[SearchResultSet]:
        # streamlit reruns the page on every interaction with the same text
        if query == self.query:
            return self.active
        if not query:
            self.clear()
            return None
        return self.show(query)
