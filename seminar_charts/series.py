"""Trade ticks, daily OHLC bars and pLOB results tables.

Each function maps one seminar export onto the tidy columns its chart
needs.  Rows that cannot be read as numbers are dropped, matching the
charts' habit of plotting only what parses.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from loguru import logger

from seminar_charts._utils import coerce_integer, validate_columns, validate_non_empty
from seminar_charts.config import ChartConfig
from seminar_charts.exceptions import InsufficientDataError
from seminar_charts.models import OhlcBar


def load_trade_points(
    frame: pd.DataFrame, config: ChartConfig | None = None
) -> pd.DataFrame:
    """Extract time, price and quantity from an MBO trade export.

    Parameters
    ----------
    frame : pandas.DataFrame
        Raw trade table with the configured tag columns.
    config : ChartConfig, optional
        Names the time/price/quantity columns and the epoch unit.

    Returns
    -------
    pandas.DataFrame
        ``timestamp`` (datetime64), ``timestamp_ns`` (int64), ``price`` and
        ``quantity``, sorted by time.  Rows with a non-numeric field are
        dropped.

    Raises
    ------
    InvalidDataError
        If a configured column is missing.
    InsufficientDataError
        If no complete row remains.
    """
    config = config or ChartConfig()
    ts_col = config.trade_timestamp_column
    price_col = config.trade_price_column
    qty_col = config.trade_quantity_column
    validate_columns(frame, {ts_col, price_col, qty_col}, "load_trade_points")

    raw_time = pd.array([coerce_integer(v) for v in frame[ts_col]], dtype="Int64")
    points = pd.DataFrame(
        {
            "raw_time": raw_time,
            "price": pd.to_numeric(frame[price_col], errors="coerce").to_numpy(),
            "quantity": pd.to_numeric(frame[qty_col], errors="coerce").to_numpy(),
        }
    ).dropna()
    dropped = len(frame) - len(points)
    if dropped:
        logger.warning("load_trade_points: dropped {} non-numeric rows", dropped)
    if points.empty:
        raise InsufficientDataError("load_trade_points: no complete trade rows")

    # Int64 to int64 has no float64 step, so all 19 digits survive
    timestamps = pd.to_datetime(
        points["raw_time"].astype(np.int64), unit=config.trade_timestamp_unit
    )
    points = points.assign(
        timestamp=timestamps.dt.as_unit("ns"),
    ).drop(columns="raw_time")
    points["timestamp_ns"] = points["timestamp"].astype(np.int64)
    points = points.sort_values("timestamp", kind="stable").reset_index(drop=True)
    logger.debug("load_trade_points: {} trades", len(points))
    return points[["timestamp", "timestamp_ns", "price", "quantity"]]


def tick_series(points: pd.DataFrame) -> pd.DataFrame:
    """One price per distinct timestamp, first trade wins, sorted by time."""
    validate_columns(points, {"timestamp", "price"}, "tick_series")
    ticks = points.drop_duplicates(subset="timestamp", keep="first")
    return ticks.sort_values("timestamp", kind="stable").reset_index(drop=True)


_OHLC_COLUMNS = {
    "date": "date",
    "open": "open",
    "high_trade": "high",
    "low_trade": "low",
    "settlement": "close",
}


def ohlc_bars(frame: pd.DataFrame) -> pd.DataFrame:
    """Rename a settlement export to ``date, open, high, low, close``.

    The close is the settlement price.  Rows with a non-numeric price are
    dropped.
    """
    validate_columns(frame, set(_OHLC_COLUMNS), "ohlc_bars")
    bars = frame[list(_OHLC_COLUMNS)].rename(columns=_OHLC_COLUMNS).copy()
    bars["date"] = bars["date"].astype(str)
    for col in ("open", "high", "low", "close"):
        bars[col] = pd.to_numeric(bars[col], errors="coerce")
    bars = bars.dropna().reset_index(drop=True)
    validate_non_empty(bars, "ohlc_bars")
    return bars


def to_ohlc_models(bars: pd.DataFrame) -> list[OhlcBar]:
    return [OhlcBar(**record) for record in bars.to_dict("records")]


_RESULTS_COLUMNS = {
    "pLOB based on age (minutes)": "time",
    "Last Price": "last_price",
    "New pLOB Step 1-10": "new_plob",
    "Old pLOB Step 1-10": "old_plob",
}


def pivot_results(frame: pd.DataFrame) -> pd.DataFrame:
    """Pivot the long pLOB results table to one row per age.

    Input rows are ``(Commodity, age, Last Price, New pLOB, Old pLOB)``;
    header names are matched after stripping surrounding whitespace.  The
    output has a ``time`` column followed by ``{commodity}_last_price``,
    ``{commodity}_new_plob`` and ``{commodity}_old_plob`` for each
    commodity (lower-cased), sorted by ``time``.
    """
    frame = frame.rename(columns=lambda c: str(c).strip())
    validate_columns(frame, {"Commodity", *_RESULTS_COLUMNS}, "pivot_results")
    validate_non_empty(frame, "pivot_results")

    long = frame[["Commodity", *_RESULTS_COLUMNS]].rename(columns=_RESULTS_COLUMNS).copy()
    for col in _RESULTS_COLUMNS.values():
        long[col] = pd.to_numeric(long[col], errors="coerce")
    long["commodity"] = long["Commodity"].astype(str).str.strip().str.lower()

    wide = long.pivot_table(
        index="time",
        columns="commodity",
        values=["last_price", "new_plob", "old_plob"],
        aggfunc="last",
    )
    wide.columns = [f"{commodity}_{measure}" for measure, commodity in wide.columns]
    ordered = sorted(wide.columns)
    return wide[ordered].sort_index().reset_index()
