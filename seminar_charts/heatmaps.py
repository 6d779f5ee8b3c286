"""Heatmap binning for trade data.

Two aggregations feed the seminar heatmaps:

* :func:`digit_frequency` counts how often each digit 0-9 appears at each
  position of fixed-width timestamps.  It shows at a glance which digits
  of a nanosecond clock actually vary and which are padding.
* :func:`price_time_heatmap` buckets trades into a sparse price x time grid
  of trade count, traded quantity and mean price.

Both axes of both grids are half-open partitions: each input lands in
exactly one bin per axis.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from loguru import logger

from seminar_charts._utils import coerce_integer, validate_columns, validate_non_empty
from seminar_charts.exceptions import InsufficientDataError
from seminar_charts.models import HeatmapCell

_NS_PER_SECOND = 1_000_000_000


# ── Timestamp digit frequency ─────────────────────────────────────────


def normalise_digits(value: Any, digits: int = 19) -> str | None:
    """Render *value* as a zero-padded digit string of width *digits*.

    Longer values are truncated to their first *digits* digits.  Returns
    ``None`` for missing, negative, fractional or non-digit values, and for
    floats too large to still hold their exact digits.
    """
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            return None
    else:
        number = coerce_integer(value)
        if number is None:
            return None
        text = str(number)
    return text.zfill(digits)[:digits]


def unique_digit_strings(timestamps: Iterable[Any], digits: int = 19) -> list[str]:
    """Normalise *timestamps* and drop duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    skipped = 0
    for value in timestamps:
        text = normalise_digits(value, digits)
        if text is None:
            skipped += 1
            continue
        seen.setdefault(text, None)
    if skipped:
        logger.warning("Skipped {} timestamps that are not {}-digit integers", skipped, digits)
    return list(seen)


def digit_frequency(timestamps: Iterable[Any], digits: int = 19) -> np.ndarray:
    """Count digit occurrences per position across unique timestamps.

    Parameters
    ----------
    timestamps : iterable
        Integers or digit strings.  Identical values are counted once.
    digits : int
        Width every value is padded (or truncated) to.

    Returns
    -------
    numpy.ndarray
        Integer matrix of shape ``(10, digits)`` where ``[d, p]`` is the
        number of unique timestamps with digit ``d`` at position ``p``
        (position 0 is the most significant).
    """
    if digits < 1:
        raise ValueError(f"digits must be at least 1, got {digits}")
    frequency = np.zeros((10, digits), dtype=np.int64)
    unique = unique_digit_strings(timestamps, digits)
    if not unique:
        return frequency
    matrix = np.array([[int(ch) for ch in text] for text in unique], dtype=np.int64)
    for digit in range(10):
        frequency[digit] = (matrix == digit).sum(axis=0)
    return frequency


def position_label(position: int, digits: int = 19) -> str:
    """Place value of *position*, e.g. ``"10^18"`` for the leading digit of 19."""
    return f"10^{digits - 1 - position}"


def digit_frequency_table(timestamps: Iterable[Any], digits: int = 19) -> pd.DataFrame:
    """Long-form digit frequencies for plotting.

    Returns
    -------
    pandas.DataFrame
        One row per (digit, position) with ``count``, ``percentage`` of the
        unique timestamps (two decimals) and ``position_label``.

    Raises
    ------
    InsufficientDataError
        If no usable timestamp remains.
    """
    values = list(timestamps)
    n_unique = len(unique_digit_strings(values, digits))
    if n_unique == 0:
        raise InsufficientDataError("digit_frequency_table: no usable timestamps")
    frequency = digit_frequency(values, digits)
    digit_idx, position_idx = np.indices(frequency.shape)
    table = pd.DataFrame(
        {
            "digit": digit_idx.ravel(),
            "position": position_idx.ravel(),
            "count": frequency.ravel(),
        }
    )
    table["percentage"] = (table["count"] / n_unique * 100).round(2)
    table["position_label"] = [position_label(p, digits) for p in table["position"]]
    return table


# ── Price x time buckets ──────────────────────────────────────────────


@dataclass(frozen=True)
class PriceTimeHeatmap:
    """Sparse price x time grid.

    Attributes
    ----------
    price_bins : pandas.DataFrame
        ``price_bin``, ``price_low``, ``price_high``, ``label`` for every
        bin of the price axis, lowest first.
    time_bins : pandas.DataFrame
        ``time_bin``, ``time_start``, ``time_end`` for every window.
    cells : pandas.DataFrame
        Only the non-empty cells: ``price_bin``, ``time_bin``, the bin
        bounds, ``count``, ``total_quantity``, ``mean_price``.
    """

    price_bin_size: float
    time_interval_seconds: float
    price_bins: pd.DataFrame
    time_bins: pd.DataFrame
    cells: pd.DataFrame

    def to_cells(self) -> list[HeatmapCell]:
        return [HeatmapCell(**record) for record in self.cells.to_dict("records")]


def _price_edges(prices: np.ndarray, bin_size: float, decimals: int) -> np.ndarray:
    """Edges ``floor(min/p)*p + k*p`` until the last bin covers the max.

    Quotients are rounded before flooring so a price sitting on an edge
    (e.g. 100.3 with 0.1 bins) is not pushed into the bin below.
    """
    first = math.floor(round(prices.min() / bin_size, 9))
    n_bins = math.floor(round(prices.max() / bin_size - first, 9)) + 1
    return np.round((first + np.arange(n_bins + 1)) * bin_size, decimals)


def _as_datetime(series: pd.Series) -> pd.DatetimeIndex:
    if pd.api.types.is_datetime64_any_dtype(series):
        times = pd.DatetimeIndex(series)
    elif pd.api.types.is_numeric_dtype(series):
        times = pd.DatetimeIndex(pd.to_datetime(series, unit="ns"))
    else:
        times = pd.DatetimeIndex(pd.to_datetime(series, errors="coerce"))
    return times.as_unit("ns")


def price_time_heatmap(
    points: pd.DataFrame,
    price_bin_size: float,
    time_interval_seconds: float,
    price_decimals: int = 2,
) -> PriceTimeHeatmap:
    """Bucket trades into a sparse price x time grid.

    Parameters
    ----------
    points : pandas.DataFrame
        ``timestamp`` (datetime64, or integer nanoseconds), ``price`` and
        ``quantity``.  Rows with a missing value are dropped.
    price_bin_size : float
        Width of a price bucket.
    time_interval_seconds : float
        Width of a time bucket.
    price_decimals : int
        Precision prices and edges are rounded to before bucketing.

    Returns
    -------
    PriceTimeHeatmap

    Raises
    ------
    ValueError
        If a bin size is not positive, or the price bin size has more
        decimals than *price_decimals*.
    InvalidDataError
        If a required column is missing.
    InsufficientDataError
        If no complete point remains.
    """
    validate_columns(points, {"timestamp", "price", "quantity"}, "price_time_heatmap")
    if price_bin_size <= 0:
        raise ValueError(f"price_bin_size must be positive, got {price_bin_size}")
    # edges are rounded to price_decimals, so the bin size must be exact there
    if not math.isclose(round(price_bin_size, price_decimals), price_bin_size, abs_tol=1e-12):
        raise ValueError(
            f"price_bin_size {price_bin_size} is not a multiple of "
            f"10^-{price_decimals}"
        )
    interval_ns = int(round(time_interval_seconds * _NS_PER_SECOND))
    if interval_ns <= 0:
        raise ValueError(
            f"time_interval_seconds must be positive, got {time_interval_seconds}"
        )

    df = pd.DataFrame(
        {
            "timestamp": _as_datetime(points["timestamp"]),
            "price": pd.to_numeric(points["price"], errors="coerce").to_numpy(),
            "quantity": pd.to_numeric(points["quantity"], errors="coerce").to_numpy(),
        }
    )
    dropped = len(df)
    df = df.dropna()
    dropped -= len(df)
    if dropped:
        logger.warning("price_time_heatmap: dropped {} incomplete points", dropped)
    validate_non_empty(df, "price_time_heatmap")
    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)

    # Price axis
    prices = df["price"].round(price_decimals).to_numpy()
    edges = _price_edges(prices, price_bin_size, price_decimals)
    df["price_bin"] = np.searchsorted(edges, prices, side="right") - 1
    price_bins = pd.DataFrame(
        {
            "price_bin": np.arange(len(edges) - 1),
            "price_low": edges[:-1],
            "price_high": edges[1:],
        }
    )
    price_bins["label"] = [
        f"{low:.{price_decimals}f}-{high:.{price_decimals}f}"
        for low, high in zip(price_bins["price_low"], price_bins["price_high"])
    ]

    # Time axis
    times = pd.DatetimeIndex(df["timestamp"])
    ns = times.asi8
    t0 = int(ns.min())
    n_windows = (int(ns.max()) - t0) // interval_ns + 1
    df["time_bin"] = (ns - t0) // interval_ns
    starts = pd.to_datetime(t0 + np.arange(n_windows + 1) * interval_ns, unit="ns")
    if times.tz is not None:
        starts = starts.tz_localize("UTC").tz_convert(times.tz)
    time_bins = pd.DataFrame(
        {
            "time_bin": np.arange(n_windows),
            "time_start": starts[:-1],
            "time_end": starts[1:],
        }
    )

    cells = (
        df.groupby(["price_bin", "time_bin"], sort=True)
        .agg(
            count=("price", "size"),
            total_quantity=("quantity", "sum"),
            mean_price=("price", "mean"),
        )
        .reset_index()
    )
    cells = cells.merge(price_bins[["price_bin", "price_low", "price_high"]], on="price_bin")
    cells = cells.merge(time_bins, on="time_bin")
    cells = cells[
        [
            "price_bin",
            "time_bin",
            "price_low",
            "price_high",
            "time_start",
            "time_end",
            "count",
            "total_quantity",
            "mean_price",
        ]
    ].sort_values(["price_bin", "time_bin"]).reset_index(drop=True)

    logger.debug(
        "price_time_heatmap: {} points into {} of {} x {} cells",
        len(df),
        len(cells),
        len(price_bins),
        len(time_bins),
    )
    return PriceTimeHeatmap(
        price_bin_size=price_bin_size,
        time_interval_seconds=time_interval_seconds,
        price_bins=price_bins,
        time_bins=time_bins,
        cells=cells,
    )
