"""
Search summaries, as text for the log and as DataFrames for display.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import pandas as pd

from account_explorer.search import AmountSummary, QueryResult, SearchTotals

if TYPE_CHECKING:
    # session imports this module
    from account_explorer.session import SearchResultSet


def format_amount(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"{value:,.2f}"


def _line(name: str, value: str) -> str:
    return f"\t{name:<16}= {value}"


def _amount_lines(label: str, summary: AmountSummary) -> List[str]:
    pairs = [
        (f"total {label}s", summary.total),
        (f"mean {label}", summary.mean),
        (f"median {label}", summary.median),
        (f"{label} variance", summary.variance),
        (f"{label} stddev", summary.std_dev),
    ]
    return [_line(name, format_amount(value)) for name, value in pairs]


def format_query_summary(result: QueryResult) -> str:
    lines = [result.query, _line("# transactions", str(result.count))]
    lines += _amount_lines("credit", result.credit_summary)
    lines += _amount_lines("debit", result.debit_summary)
    lines.append("\tSample descriptions: " + ", ".join(result.descriptions))
    lines.append(
        "\tFull descriptions: "
        + ", ".join(group.descriptions for group in result.descriptions.values())
    )
    return "\n".join(lines)


def format_totals(totals: SearchTotals) -> str:
    return "\n".join([
        "Totals",
        f"\t# transactions      = {totals.count}",
        f"\t# credits           = {totals.credit_count}",
        f"\ttotal credit amount = {format_amount(totals.credit_total)}",
        f"\t# debits            = {totals.debit_count}",
        f"\ttotal debit amount  = {format_amount(totals.debit_total)}",
    ])


def format_summary(result_set: SearchResultSet) -> str:
    """Text block for every query of a search followed by the totals."""
    parts = [format_query_summary(r) for r in result_set.results]
    parts.append(format_totals(result_set.totals))
    return "\n".join(parts)


def summary_frame(results: List[QueryResult]) -> pd.DataFrame:
    """One row per query with its counts and amount statistics."""
    rows = []
    for result in results:
        row = {"Query": result.query, "Transactions": result.count}
        for label, summary in (("Credit", result.credit_summary), ("Debit", result.debit_summary)):
            row[f"{label} Total"] = summary.total
            row[f"{label} Mean"] = summary.mean
            row[f"{label} Median"] = summary.median
            row[f"{label} Variance"] = summary.variance
            row[f"{label} Std Dev"] = summary.std_dev
        rows.append(row)
    return pd.DataFrame(rows)


def descriptions_frame(result: QueryResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Description": key, "Count": group.count, "Full Descriptions": group.descriptions}
            for key, group in result.descriptions.items()
        ],
        columns=["Description", "Count", "Full Descriptions"],
    )
