"""Tests for seminar_charts._plotly, the Plotly interactive rendering backend.

Skipped entirely if plotly is not installed.
"""

import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest

go = pytest.importorskip("plotly.graph_objects", reason="plotly not installed")

from seminar_charts._chart_data import (
    prepare_book_depth_data,
    prepare_digit_heatmap_data,
    prepare_ohlc_data,
    prepare_price_time_heatmap_data,
    prepare_results_data,
    prepare_split_book_data,
    prepare_tick_data,
)
from seminar_charts._plotly import (
    plotly_book_depth,
    plotly_digit_heatmap,
    plotly_ohlc,
    plotly_price_time_heatmap,
    plotly_results,
    plotly_split_book,
    plotly_ticks,
)
from seminar_charts.heatmaps import digit_frequency_table, price_time_heatmap
from seminar_charts.models import BookSnapshot
from seminar_charts.reshape import reshape_row
from seminar_charts.series import load_trade_points, ohlc_bars, pivot_results, tick_series
from seminar_charts.split_book import reshape_split_row


class TestBookFigures:
    def test_book_depth(self, snapshot_row):
        fig = plotly_book_depth(prepare_book_depth_data(reshape_row(snapshot_row)))
        assert isinstance(fig, go.Figure)
        assert [trace.name for trace in fig.data] == ["Bids", "Asks"]
        # bids drawn to the left of the axis
        assert all(x < 0 for x in fig.data[0].x)
        assert "101.00" in fig.layout.title.text

    def test_book_depth_without_mid(self):
        snap = BookSnapshot(timestamp=pd.Timestamp("2023-03-24 10:45:32"))
        fig = plotly_book_depth(prepare_book_depth_data(snap))
        assert not fig.layout.shapes

    def test_split_book(self, split_row):
        fig = plotly_split_book(prepare_split_book_data(reshape_split_row(split_row)))
        assert len(fig.data) == 4
        assert fig.layout.barmode == "relative"
        assert len(fig.layout.shapes) == 1


class TestHeatmapFigures:
    def test_digit_heatmap(self):
        table = digit_frequency_table(["0000000000000000001", "0000000000000000002"])
        fig = plotly_digit_heatmap(prepare_digit_heatmap_data(table))
        assert isinstance(fig.data[0], go.Heatmap)
        assert len(fig.data[0].z) == 10

    def test_price_time_heatmap(self, trade_frame):
        heatmap = price_time_heatmap(load_trade_points(trade_frame), 0.25, 60)
        fig = plotly_price_time_heatmap(prepare_price_time_heatmap_data(heatmap))
        assert isinstance(fig.data[0], go.Heatmap)
        assert len(fig.data[0].z) == len(heatmap.cells)
        assert fig.data[1].mode == "text"


class TestSeriesFigures:
    def test_ticks(self, trade_frame):
        fig = plotly_ticks(prepare_tick_data(tick_series(load_trade_points(trade_frame))))
        assert len(fig.data[0].y) == 4

    def test_ohlc(self, ohlc_frame):
        fig = plotly_ohlc(prepare_ohlc_data(ohlc_bars(ohlc_frame)))
        assert isinstance(fig.data[0], go.Ohlc)

    def test_results(self, results_frame):
        fig = plotly_results(prepare_results_data(pivot_results(results_frame)))
        assert len(fig.data) == 6
        assert fig.data[0].line.shape == "spline"

    def test_write_html(self, trade_frame, tmp_path):
        fig = plotly_ticks(prepare_tick_data(tick_series(load_trade_points(trade_frame))))
        out = tmp_path / "ticks.html"
        fig.write_html(out)
        assert out.stat().st_size > 0
