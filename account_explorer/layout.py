"""
layout.py
---------
Everything the renderer needs, computed up front: stacked layers, the
time and value scales, bar geometry and one colour per layer.

Credits and debits share one value axis.  Credits sit above a center line
and debits are mirrored below it, so the value domain covers both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

import pandas as pd

from account_explorer.align import align_series
from account_explorer.config import ChartOptions
from account_explorer.records import date_extent
from account_explorer.rollup import AggregatePoint, rollup
from account_explorer.search import QueryResult

Extent = Tuple[pd.Timestamp, pd.Timestamp]


class StackedPoint(NamedTuple):
    bucket: pd.Timestamp
    base_offset: float
    value: float


class BalancePoint(NamedTuple):
    date: pd.Timestamp
    balance: float


def stack(layers: Sequence[Sequence[AggregatePoint]]) -> List[List[StackedPoint]]:
    """Stack aligned layers; the first layer sits at the bottom."""
    if not layers:
        return []

    buckets = [point.bucket for point in layers[0]]
    for layer in layers[1:]:
        if [point.bucket for point in layer] != buckets:
            raise ValueError("Layers must share the same buckets; align them first")

    offsets = [0.0] * len(buckets)
    stacked = []
    for layer in layers:
        stacked.append([
            StackedPoint(point.bucket, offset, point.value)
            for point, offset in zip(layer, offsets)
        ])
        offsets = [offset + point.value for point, offset in zip(layer, offsets)]
    return stacked


def max_value(series_list: Sequence[Sequence[AggregatePoint]]) -> float:
    """Largest single value across all series, 0 when there is none."""
    values = [point.value for series in series_list for point in series]
    return max(values) if values else 0.0


def max_stacked_total(layers: Sequence[Sequence[StackedPoint]]) -> float:
    """Height of the tallest stack, 0 when there is none."""
    tops = [point.base_offset + point.value for layer in layers for point in layer]
    return max(tops) if tops else 0.0


# ============================================================================
# SCALES
# ============================================================================

@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return float(r0)
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return float(d0)
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)


@dataclass(frozen=True)
class TimeScale:
    domain: Extent
    range: Tuple[float, float]

    @property
    def _linear(self) -> LinearScale:
        return LinearScale((self.domain[0].value, self.domain[1].value), self.range)

    def __call__(self, when) -> float:
        return self._linear(pd.Timestamp(when).value)

    def invert(self, pixel: float) -> pd.Timestamp:
        return pd.Timestamp(int(round(self._linear.invert(pixel))))

    def duration(self, pixels: float) -> pd.Timedelta:
        """Length of time covered by ``pixels`` on this scale."""
        r0 = self.range[0]
        return self.invert(r0 + pixels) - self.invert(r0)


class Scales(NamedTuple):
    x: TimeScale
    y: LinearScale


def nice_month_extent(start, end) -> Extent:
    """Widen a date extent outwards to whole calendar months."""
    start, end = pd.Timestamp(start), pd.Timestamp(end)
    lo = start.to_period("M").to_timestamp()
    hi = end.to_period("M").to_timestamp()
    if hi != end:
        hi = hi + pd.offsets.MonthBegin(1)
    if hi <= lo:
        hi = lo + pd.offsets.MonthBegin(1)
    return lo, hi


def compute_scales(domain_extent, value_extent, pixel_ranges) -> Scales:
    """
    Map data to pixels.

    ``domain_extent`` is the (start, end) date range, widened to whole
    months; ``value_extent`` the (low, high) values; ``pixel_ranges`` the
    (x_range, y_range) pixel pairs.
    """
    x_range, y_range = pixel_ranges
    low, high = value_extent
    return Scales(
        x=TimeScale(nice_month_extent(*domain_extent), tuple(x_range)),
        y=LinearScale((float(low), float(high)), tuple(y_range)),
    )


def months_spanned(extent: Extent) -> int:
    lo, hi = nice_month_extent(*extent)
    return (hi.year - lo.year) * 12 + (hi.month - lo.month)


# ============================================================================
# GEOMETRY AND LAYOUTS
# ============================================================================

@dataclass(frozen=True)
class Geometry:
    width: float
    height: float
    chart_height: float
    overlay_range: Tuple[float, float]
    bar_width: float


def build_geometry(options: ChartOptions, bucket_count: int, bar_width: Optional[float] = None) -> Geometry:
    width = float(options.inner_width)
    height = float(options.inner_height)
    if bar_width is None:
        bar_width = max(width / max(bucket_count, 1) - 1, 1.0)
    low, high = options.overlay_band
    return Geometry(
        width=width,
        height=height,
        chart_height=height * options.chart_fraction,
        overlay_range=(height * low, height * high),
        bar_width=float(bar_width),
    )


def layer_colours(palette: Sequence[str], count: int, override: Optional[str] = None) -> List[str]:
    if override:
        return [override] * count
    return [palette[idx % len(palette)] for idx in range(count)]


def _today_extent() -> Extent:
    today = pd.Timestamp.today().normalize()
    return today, today


@dataclass(frozen=True)
class BaselineLayout:
    credits: List[AggregatePoint]
    debits: List[AggregatePoint]
    balance: List[BalancePoint]
    scales: Scales
    geometry: Geometry
    credit_colour: str
    debit_colour: str
    balance_colour: str

    @property
    def center_value(self) -> float:
        return self.scales.y.domain[1] / 2


@dataclass(frozen=True)
class OverlayLayout:
    queries: List[str]
    credit_layers: List[List[StackedPoint]]
    debit_layers: List[List[StackedPoint]]
    scales: Scales
    geometry: Geometry
    credit_colours: List[str]
    debit_colours: List[str]
    # Credits stack upwards from here, debits downwards
    center_value: float


def _balance_points(records: pd.DataFrame) -> List[BalancePoint]:
    if records.empty:
        return []
    rows = records[["date", "balance"]].dropna().sort_values("date", kind="mergesort")
    return [BalancePoint(d, float(b)) for d, b in zip(rows["date"], rows["balance"])]


def build_baseline(records: pd.DataFrame, options: Optional[ChartOptions] = None) -> BaselineLayout:
    """Monthly totals of every record plus the balance line."""
    options = options or ChartOptions()
    credits = sorted(rollup(records, "credit"), key=lambda p: p.bucket)
    debits = sorted(rollup(records, "debit"), key=lambda p: p.bucket)

    extent = date_extent(records) or _today_extent()
    geometry = build_geometry(options, months_spanned(extent))
    peak = max(max_value([credits]), max_value([debits]))
    scales = compute_scales(
        extent,
        (0.0, peak * 2),
        ((0.0, geometry.width), (0.0, geometry.chart_height)),
    )
    return BaselineLayout(
        credits=credits,
        debits=debits,
        balance=_balance_points(records),
        scales=scales,
        geometry=geometry,
        credit_colour=options.credit_colour,
        debit_colour=options.debit_colour,
        balance_colour=options.balance_colour,
    )


def build_overlay(
    results: Sequence[QueryResult],
    options: Optional[ChartOptions] = None,
    time_extent: Optional[Extent] = None,
    bar_width: Optional[float] = None,
) -> OverlayLayout:
    """
    Stack the per-query rollups of one search.

    Pass the extent of all records as ``time_extent`` to keep the time axis
    identical to the baseline chart while a search is shown.
    """
    options = options or ChartOptions()
    credit_layers = stack(align_series([r.credit_series for r in results]))
    debit_layers = stack(align_series([r.debit_series for r in results]))

    if time_extent is None:
        buckets = [p.bucket for layer in credit_layers + debit_layers for p in layer]
        time_extent = (min(buckets), max(buckets)) if buckets else _today_extent()

    credit_peak = max_stacked_total(credit_layers)
    debit_peak = max_stacked_total(debit_layers)
    geometry = build_geometry(options, months_spanned(time_extent), bar_width)
    scales = compute_scales(
        time_extent,
        (0.0, credit_peak + debit_peak),
        ((0.0, geometry.width), geometry.overlay_range),
    )
    return OverlayLayout(
        queries=[r.query for r in results],
        credit_layers=credit_layers,
        debit_layers=debit_layers,
        scales=scales,
        geometry=geometry,
        credit_colours=layer_colours(options.credit_palette, len(results), options.overlay_credit_colour),
        debit_colours=layer_colours(options.debit_palette, len(results), options.overlay_debit_colour),
        center_value=debit_peak,
    )
