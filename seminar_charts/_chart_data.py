"""Backend-agnostic data preparation for visualization.

Each ``prepare_*()`` function turns reshaped snapshots, heatmaps or series
into plain dicts consumable by **any** rendering backend (Plotly, a web
template, ...).  Axis domains, labels and cell colours are settled here so
renderers only draw.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
import pandas as pd

from seminar_charts._utils import validate_columns, validate_non_empty
from seminar_charts.exceptions import InsufficientDataError
from seminar_charts.heatmaps import PriceTimeHeatmap
from seminar_charts.models import BookSnapshot, SplitBookSnapshot


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _colour_scale(values: pd.Series, cmap_name: str, vmax: float | None = None) -> list[str]:
    """Map *values* in ``[0, vmax]`` to hex colours of a matplotlib colormap."""
    from matplotlib import colormaps
    from matplotlib.colors import to_hex

    cmap = colormaps[cmap_name]
    top = float(values.max()) if vmax is None else vmax
    if not top or not math.isfinite(top):
        top = 1.0
    return [to_hex(cmap(min(max(v / top, 0.0), 1.0))) for v in values]


def _palette(n: int, cmap_name: str = "tab10") -> list[str]:
    from matplotlib import colormaps
    from matplotlib.colors import to_hex

    cmap = colormaps[cmap_name]
    return [to_hex(cmap(i % cmap.N)) for i in range(n)]


def _format_price(value: float | None, decimals: int = 2) -> str:
    return "n/a" if value is None else f"{value:.{decimals}f}"


def _tick_stride(n: int, max_ticks: int = 10) -> int:
    return max(1, math.ceil(n / max_ticks))


def _padded_domain(low: float, high: float) -> tuple[float, float]:
    return low * 0.999, high * 1.001


# ---------------------------------------------------------------------------
# Order book
# ---------------------------------------------------------------------------


def prepare_book_depth_data(
    snapshot: BookSnapshot, price_decimals: int = 2
) -> dict[str, Any]:
    """Prepare a single-book depth ladder (bids left, asks right)."""
    bids = pd.DataFrame(
        [(lvl.price, lvl.volume) for lvl in snapshot.bids], columns=["price", "volume"]
    )
    asks = pd.DataFrame(
        [(lvl.price, lvl.volume) for lvl in snapshot.asks], columns=["price", "volume"]
    )
    levels = pd.concat([bids, asks], ignore_index=True)

    if levels.empty:
        price_domain = None
        volume_max = 1.0
    else:
        price_domain = (levels["price"].min() - 0.5, levels["price"].max() + 0.5)
        volume_max = float(levels["volume"].max()) * 1.2 or 1.0

    return {
        "bids": bids,
        "asks": asks,
        "price_domain": price_domain,
        "volume_max": volume_max,
        "unique_prices": sorted(levels["price"].unique().tolist()),
        "mid_price": snapshot.mid_price,
        "mid_price_text": _format_price(snapshot.mid_price, price_decimals),
        "time_text": snapshot.timestamp.strftime("%H:%M:%S"),
    }


def prepare_split_book_data(
    snapshot: SplitBookSnapshot, price_decimals: int = 2
) -> dict[str, Any]:
    """Prepare a split-book ladder with old and new volume per price."""
    cols = ["price", "new_volume", "old_volume", "total_volume"]
    bids = pd.DataFrame([lvl.model_dump() for lvl in snapshot.bids], columns=cols)
    asks = pd.DataFrame([lvl.model_dump() for lvl in snapshot.asks], columns=cols)
    levels = pd.concat([bids, asks], ignore_index=True)

    if levels.empty:
        price_domain = None
        volume_max = 1.0
    else:
        price_domain = (levels["price"].min() - 0.5, levels["price"].max() + 0.5)
        volume_max = float(levels["total_volume"].max()) * 1.2 or 1.0

    return {
        "bids": bids,
        "asks": asks,
        "price_domain": price_domain,
        "volume_max": volume_max,
        "mid_price": snapshot.mid_price,
        "mid_price_text": _format_price(snapshot.mid_price, price_decimals),
        "time_text": snapshot.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
    }


# ---------------------------------------------------------------------------
# Heatmaps
# ---------------------------------------------------------------------------


def prepare_digit_heatmap_data(table: pd.DataFrame) -> dict[str, Any]:
    """Prepare the digit x position frequency heatmap."""
    validate_columns(
        table, {"digit", "position", "count", "percentage"}, "prepare_digit_heatmap_data"
    )
    validate_non_empty(table, "prepare_digit_heatmap_data")
    cells = table.copy()
    max_count = int(cells["count"].max())
    cells["colour"] = _colour_scale(cells["count"], "Blues", vmax=max_count)
    matrix = cells.pivot(index="digit", columns="position", values="count")
    return {
        "cells": cells,
        "matrix": matrix,
        "max_count": max_count,
        "n_positions": int(cells["position"].nunique()),
    }


def prepare_price_time_heatmap_data(
    heatmap: PriceTimeHeatmap, label_threshold: float = 0.2
) -> dict[str, Any]:
    """Prepare the price x time quantity heatmap.

    Price rows are listed highest first, as drawn.  Cells whose quantity
    exceeds ``label_threshold`` of the maximum are flagged for a text label.
    """
    if heatmap.cells.empty:
        raise InsufficientDataError("prepare_price_time_heatmap_data: no cells")

    time_bins = heatmap.time_bins.copy()
    time_bins["label"] = [
        f"{start:%H:%M:%S}-{end:%H:%M:%S}"
        for start, end in zip(time_bins["time_start"], time_bins["time_end"])
    ]

    cells = heatmap.cells.merge(
        heatmap.price_bins[["price_bin", "label"]].rename(columns={"label": "price_label"}),
        on="price_bin",
    ).merge(
        time_bins[["time_bin", "label"]].rename(columns={"label": "time_label"}),
        on="time_bin",
    )
    max_quantity = float(cells["total_quantity"].max())
    cells["colour"] = _colour_scale(cells["total_quantity"], "viridis", vmax=max_quantity)

    return {
        "cells": cells,
        "labelled_cells": cells[cells["total_quantity"] > max_quantity * label_threshold],
        "price_rows": heatmap.price_bins.iloc[::-1].reset_index(drop=True),
        "time_columns": time_bins,
        "max_quantity": max_quantity,
        "time_tick_stride": _tick_stride(len(time_bins)),
        "rotate_time_labels": len(time_bins) > 10,
    }


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------


def prepare_tick_data(ticks: pd.DataFrame) -> dict[str, Any]:
    """Prepare a trade-price line chart."""
    validate_columns(ticks, {"timestamp", "price"}, "prepare_tick_data")
    validate_non_empty(ticks, "prepare_tick_data")
    return {
        "ticks": ticks,
        "x_domain": (ticks["timestamp"].min(), ticks["timestamp"].max()),
        "y_domain": _padded_domain(ticks["price"].min(), ticks["price"].max()),
    }


def prepare_ohlc_data(bars: pd.DataFrame) -> dict[str, Any]:
    """Prepare a daily OHLC chart; ``rising`` marks close >= open."""
    validate_columns(bars, {"date", "open", "high", "low", "close"}, "prepare_ohlc_data")
    validate_non_empty(bars, "prepare_ohlc_data")
    bars = bars.assign(rising=bars["close"] >= bars["open"])
    stride = _tick_stride(len(bars))
    return {
        "bars": bars,
        "y_domain": _padded_domain(bars["low"].min(), bars["high"].max()),
        "tick_dates": bars["date"].iloc[::stride].tolist(),
    }


def prepare_results_data(results: pd.DataFrame) -> dict[str, Any]:
    """Prepare the pLOB results line chart, one series per pivoted column."""
    validate_columns(results, {"time"}, "prepare_results_data")
    validate_non_empty(results, "prepare_results_data")
    names = [col for col in results.columns if col != "time"]
    colours = dict(zip(names, _palette(len(names))))
    series = [
        {
            "name": name,
            "values": pd.DataFrame(
                {"time": results["time"], "value": results[name].fillna(0)}
            ),
            "colour": colours[name],
        }
        for name in names
    ]
    return {
        "series": series,
        "x_domain": (results["time"].min(), results["time"].max()),
        "y_max": float(np.nanmax(results[names].to_numpy(dtype=float))) if names else 0.0,
    }
