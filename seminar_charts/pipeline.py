"""Composable pipeline from seminar exports to chart-ready data.

:class:`ChartPipeline` loads a table with a pluggable
:class:`~seminar_charts.protocols.TableLoader`, reshapes or bins it, and
hands back the objects the renderers consume.

Usage with defaults::

    from seminar_charts.pipeline import ChartPipeline

    frames = ChartPipeline().book_frames("lob_snapshots.csv")

Usage with custom configuration::

    from seminar_charts.config import ChartConfig

    config = ChartConfig(price_bin_size=0.5, time_interval_seconds=300)
    heatmap = ChartPipeline(config=config).price_time_heatmap("trades.csv")

For display code that must never raise, :meth:`ChartPipeline.run` wraps any
of the above and turns failures into an inline error message::

    result = ChartPipeline().run("ticks", "trades.csv")
    if result.error:
        show(result.error)
"""


from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger

from seminar_charts.config import ChartConfig
from seminar_charts.exceptions import MissingColumnError, SeminarChartsError
from seminar_charts.heatmaps import PriceTimeHeatmap, digit_frequency_table, price_time_heatmap
from seminar_charts.io import CsvLoader
from seminar_charts.models import BookSnapshot, SplitBookSnapshot
from seminar_charts.protocols import RowReshaper, TableLoader
from seminar_charts.reshape import BookReshaper
from seminar_charts.series import load_trade_points, ohlc_bars, pivot_results, tick_series
from seminar_charts.split_book import reshape_split_frame


@dataclass(frozen=True)
class ChartResult:
    """Outcome of :meth:`ChartPipeline.run`.

    Attributes
    ----------
    kind : str
        The chart that was requested.
    data : object or None
        What the matching pipeline method returned; ``None`` on failure.
    error : str or None
        User-facing message when the run failed.
    """

    kind: str
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _epoch_text_columns(config: ChartConfig) -> dict[str, str]:
    """Nanosecond epoch columns, read as text so a gap cannot turn them into floats."""
    column = config.trade_timestamp_column
    names = (column, f"{config.old_prefix}{column}", f"{config.new_prefix}{column}")
    return {name: "string" for name in names}


class ChartPipeline:
    """Configurable loader + transform for every seminar chart.

    Parameters
    ----------
    config : ChartConfig, optional
        Central configuration.  Passed to default components when they are
        not explicitly provided.
    loader : TableLoader, optional
        Loads the raw table.  Defaults to a :class:`CsvLoader` that keeps
        the nanosecond epoch columns as strings.
    reshaper : RowReshaper, optional
        Reshapes snapshot rows.  Defaults to :class:`BookReshaper`.
    """

    def __init__(
        self,
        config: ChartConfig | None = None,
        *,
        loader: TableLoader | None = None,
        reshaper: RowReshaper | None = None,
    ) -> None:
        self.config = config or ChartConfig()
        self.loader = loader or CsvLoader(dtype=_epoch_text_columns(self.config))
        self.reshaper = reshaper or BookReshaper(self.config)

    def _load(self, source: str | Path) -> pd.DataFrame:
        logger.info("ChartPipeline: loading {}", source)
        return self.loader.load(source)

    def book_frames(self, source: str | Path) -> list[BookSnapshot]:
        """One :class:`BookSnapshot` per usable snapshot row."""
        frame = self._load(source)
        logger.info("ChartPipeline: reshaping {} snapshot rows", len(frame))
        return self.reshaper.reshape_frame(frame)

    def split_book_frames(self, source: str | Path) -> list[SplitBookSnapshot]:
        """One :class:`SplitBookSnapshot` per usable split-book row."""
        frame = self._load(source)
        logger.info("ChartPipeline: aggregating {} split-book rows", len(frame))
        return reshape_split_frame(frame, self.config)

    def digit_heatmap(self, source: str | Path) -> pd.DataFrame:
        """Digit x position frequencies of the trade timestamps."""
        frame = self._load(source)
        column = self.config.trade_timestamp_column
        if column not in frame.columns:
            raise MissingColumnError(column, "digit_heatmap")
        logger.info("ChartPipeline: counting digits of {} timestamps", len(frame))
        return digit_frequency_table(frame[column], self.config.timestamp_digits)

    def price_time_heatmap(
        self,
        source: str | Path,
        price_bin_size: float | None = None,
        time_interval_seconds: float | None = None,
    ) -> PriceTimeHeatmap:
        """Sparse price x time grid of the trades in *source*."""
        points = load_trade_points(self._load(source), self.config)
        if price_bin_size is None:
            price_bin_size = self.config.price_bin_size
        if time_interval_seconds is None:
            time_interval_seconds = self.config.time_interval_seconds
        logger.info(
            "ChartPipeline: binning {} trades (price {}, interval {}s)",
            len(points),
            price_bin_size,
            time_interval_seconds,
        )
        return price_time_heatmap(
            points,
            price_bin_size,
            time_interval_seconds,
            price_decimals=self.config.price_decimals,
        )

    def ticks(self, source: str | Path) -> pd.DataFrame:
        """Trade prices de-duplicated by timestamp."""
        return tick_series(load_trade_points(self._load(source), self.config))

    def ohlc(self, source: str | Path) -> pd.DataFrame:
        return ohlc_bars(self._load(source))

    def results(self, source: str | Path) -> pd.DataFrame:
        return pivot_results(self._load(source))

    _KINDS = (
        "book_frames",
        "split_book_frames",
        "digit_heatmap",
        "price_time_heatmap",
        "ticks",
        "ohlc",
        "results",
    )

    def run(self, kind: str, source: str | Path, **params: Any) -> ChartResult:
        """Run the *kind* method on *source*, converting failures to a message.

        Package errors and I/O errors are logged and returned as
        ``ChartResult.error``; nothing is retried.  Unknown *kind* values
        and programming errors still raise.
        """
        if kind not in self._KINDS:
            raise ValueError(f"kind must be one of {self._KINDS}, got {kind!r}")
        try:
            data = getattr(self, kind)(source, **params)
        except (SeminarChartsError, OSError) as exc:
            logger.error("ChartPipeline: {} failed for {}: {}", kind, source, exc)
            return ChartResult(kind=kind, error=f"Error loading data: {exc}")
        logger.info("ChartPipeline: {} complete", kind)
        return ChartResult(kind=kind, data=data)
