# charts.py: plotly figures drawn from precomputed layouts

from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from account_explorer.layout import BaselineLayout, OverlayLayout, Scales


def _bar_width_ms(scales: Scales, bar_width: float) -> float:
    # plotly measures bar widths on a date axis in milliseconds
    return scales.x.duration(bar_width) / pd.Timedelta(milliseconds=1)


def _value_range(scales: Scales, center: float) -> Optional[List[float]]:
    high = scales.y.domain[1]
    if high <= 0:
        return None
    return [-center, high - center]


def baseline_figure(layout: BaselineLayout) -> go.Figure:
    """
    Credits as upward bars, debits as downward bars and the running balance
    as a line.  The second row is left empty for search results.
    """
    geometry = layout.geometry
    band = geometry.overlay_range[1] - geometry.overlay_range[0]
    fig = make_subplots(
        rows=2,
        cols=1,
        shared_xaxes=True,
        row_heights=[geometry.chart_height, band],
        vertical_spacing=0.04,
    )
    width_ms = _bar_width_ms(layout.scales, geometry.bar_width)

    fig.add_trace(go.Bar(
        x=[p.bucket for p in layout.credits],
        y=[p.value for p in layout.credits],
        width=width_ms,
        offset=0,
        marker_color=layout.credit_colour,
        name="Credits",
    ), row=1, col=1)
    fig.add_trace(go.Bar(
        x=[p.bucket for p in layout.debits],
        y=[-p.value for p in layout.debits],
        width=width_ms,
        offset=0,
        marker_color=layout.debit_colour,
        name="Debits",
    ), row=1, col=1)
    fig.add_trace(go.Scatter(
        x=[p.date for p in layout.balance],
        y=[p.balance for p in layout.balance],
        mode="lines",
        line=dict(color=layout.balance_colour, width=2),
        name="Balance",
    ), row=1, col=1)

    fig.update_xaxes(range=list(layout.scales.x.domain), dtick="M12", ticklabelmode="period")
    value_range = _value_range(layout.scales, layout.center_value)
    if value_range:
        fig.update_yaxes(range=value_range, row=1, col=1)

    fig.update_layout(
        barmode="overlay",
        template="plotly_dark",
        height=int(geometry.height),
        title="Account History",
        legend=dict(orientation="h"),
    )
    return fig


def add_overlay(fig: go.Figure, layout: OverlayLayout) -> go.Figure:
    """Stack one bar layer per query in the second row of ``fig``."""
    width_ms = _bar_width_ms(layout.scales, layout.geometry.bar_width)

    for query, layer, colour in zip(layout.queries, layout.credit_layers, layout.credit_colours):
        fig.add_trace(go.Bar(
            x=[p.bucket for p in layer],
            y=[p.value for p in layer],
            base=[p.base_offset for p in layer],
            width=width_ms,
            offset=0,
            marker_color=colour,
            name=f"{query} credits",
            legendgroup=query,
        ), row=2, col=1)

    for query, layer, colour in zip(layout.queries, layout.debit_layers, layout.debit_colours):
        fig.add_trace(go.Bar(
            x=[p.bucket for p in layer],
            y=[-p.value for p in layer],
            base=[-p.base_offset for p in layer],
            width=width_ms,
            offset=0,
            marker_color=colour,
            name=f"{query} debits",
            legendgroup=query,
        ), row=2, col=1)

    value_range = _value_range(layout.scales, layout.center_value)
    if value_range:
        fig.update_yaxes(range=value_range, row=2, col=1)
    return fig


def chart_figure(baseline: BaselineLayout, overlay: Optional[OverlayLayout] = None) -> go.Figure:
    fig = baseline_figure(baseline)
    if overlay is not None:
        add_overlay(fig, overlay)
    return fig


def figure_to_html(fig: go.Figure) -> str:
    """Standalone HTML page for saving the chart."""
    return fig.to_html(full_html=True, include_plotlyjs="cdn")
