"""Chart-ready data from limit order book and trade exports.

Reshape order-book snapshot rows, aggregate split (old/new) books, bin
trades into price x time heatmaps, count timestamp digits, and render the
results as interactive figures for seminar slides.

Quick start::

    from seminar_charts import ChartPipeline

    frames = ChartPipeline().book_frames("lob_snapshots.csv")

The package exposes two layers:

* **High-level**: :class:`ChartPipeline` loads a file and returns the data
  for one chart, or an inline error message via :meth:`ChartPipeline.run`.
* **Low-level**: Individual functions (``reshape_row``,
  ``aggregate_levels``, ``digit_frequency``, ``price_time_heatmap``, etc.)
  for working on rows and DataFrames directly.
"""

from loguru import logger
from seminar_charts.config import ChartConfig
from seminar_charts.exceptions import (
    ConfigurationError,
    InsufficientDataError,
    InvalidDataError,
    MissingColumnError,
    SeminarChartsError,
    TimestampParseError,
)
from seminar_charts.heatmaps import (
    PriceTimeHeatmap,
    digit_frequency,
    digit_frequency_table,
    price_time_heatmap,
)
from seminar_charts.io import CsvLoader
from seminar_charts.models import (
    AggregatedLevel,
    BookSnapshot,
    HeatmapCell,
    LevelParseError,
    OhlcBar,
    PriceLevel,
    SplitBookSnapshot,
)
from seminar_charts.pipeline import ChartPipeline, ChartResult
from seminar_charts.playback import (
    PlaybackState,
    advance_frame,
    current_frame,
    reset_playback,
    step_frame,
    tick,
    toggle_playback,
)
from seminar_charts.protocols import RowReshaper, TableLoader
from seminar_charts.reshape import BookReshaper, mid_price, reshape_frame, reshape_row
from seminar_charts.schema import BookSchema, LevelColumn
from seminar_charts.series import (
    load_trade_points,
    ohlc_bars,
    pivot_results,
    tick_series,
    to_ohlc_models,
)
from seminar_charts.split_book import (
    aggregate_levels,
    reshape_split_frame,
    reshape_split_row,
    split_snapshots,
)
from seminar_charts.timestamps import parse_timestamp

logger.disable("seminar_charts")

__all__ = [
    # Pipeline
    "ChartPipeline",
    "ChartResult",
    # Configuration
    "ChartConfig",
    "BookSchema",
    "LevelColumn",
    # Protocols and default implementations
    "TableLoader",
    "RowReshaper",
    "CsvLoader",
    "BookReshaper",
    # Reshaping
    "reshape_row",
    "reshape_frame",
    "mid_price",
    "parse_timestamp",
    # Split book
    "aggregate_levels",
    "reshape_split_row",
    "reshape_split_frame",
    "split_snapshots",
    # Heatmaps
    "digit_frequency",
    "digit_frequency_table",
    "price_time_heatmap",
    "PriceTimeHeatmap",
    # Series
    "load_trade_points",
    "tick_series",
    "ohlc_bars",
    "to_ohlc_models",
    "pivot_results",
    # Playback
    "PlaybackState",
    "reset_playback",
    "advance_frame",
    "tick",
    "toggle_playback",
    "step_frame",
    "current_frame",
    # Domain models
    "PriceLevel",
    "BookSnapshot",
    "AggregatedLevel",
    "SplitBookSnapshot",
    "HeatmapCell",
    "OhlcBar",
    "LevelParseError",
    # Exceptions
    "SeminarChartsError",
    "InvalidDataError",
    "MissingColumnError",
    "TimestampParseError",
    "InsufficientDataError",
    "ConfigurationError",
]
