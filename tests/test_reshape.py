"""Tests for seminar_charts.reshape."""


import numpy as np
import pandas as pd
import pytest
from loguru import logger

from seminar_charts.config import ChartConfig
from seminar_charts.exceptions import InsufficientDataError, MissingColumnError
from seminar_charts.models import LevelParseError, PriceLevel
from seminar_charts.protocols import RowReshaper
from seminar_charts.reshape import (
    BookReshaper,
    extract_side,
    mid_price,
    parse_field,
    parse_level,
    reshape_frame,
    reshape_row,
)
from seminar_charts.schema import BookSchema


@pytest.fixture
def captured_warnings():
    """Collect loguru records emitted by seminar_charts at WARNING and above."""
    records = []
    logger.enable("seminar_charts")
    handler_id = logger.add(lambda msg: records.append(msg.record), level="WARNING")
    yield records
    logger.remove(handler_id)
    logger.disable("seminar_charts")


class TestParseField:
    def test_number(self):
        assert parse_field({"p": 100.5}, "p") == 100.5

    def test_numeric_string(self):
        assert parse_field({"p": " 100.5 "}, "p") == 100.5

    def test_absent_column(self):
        assert parse_field({}, "p") == LevelParseError("p", None, "missing")

    @pytest.mark.parametrize("value", [None, np.nan, "", "  "])
    def test_missing_values(self, value):
        assert parse_field({"p": value}, "p").reason == "missing"

    @pytest.mark.parametrize(
        "value, reason",
        [("abc", "not a number"), (float("inf"), "not finite"), (-1.0, "negative"), (True, "not a number")],
    )
    def test_unusable_values(self, value, reason):
        result = parse_field({"p": value}, "p")
        assert isinstance(result, LevelParseError)
        assert result.reason == reason
        assert result.column == "p"


class TestParseLevel:
    def test_level(self):
        assert parse_level({"p": 100, "q": 5}, "p", "q") == PriceLevel(price=100, volume=5)

    def test_bad_quantity(self):
        result = parse_level({"p": 100, "q": "x"}, "p", "q")
        assert result == LevelParseError("q", "x", "not a number")


class TestExtractSide:
    def test_stops_at_gap(self, snapshot_row):
        row = dict(snapshot_row)
        schema = BookSchema(levels=7)
        for level in range(4, 8):
            row[f"bid_{level:02d}_price"] = 99.0 - level
            row[f"bid_{level:02d}_qty"] = 1
        del row["bid_05_price"]
        bids = extract_side(row, schema, "bid")
        assert len(bids) == 4
        assert [lvl.price for lvl in bids[:3]] == [100.0, 99.75, 99.5]

    def test_missing_level_is_silent(self, snapshot_row, captured_warnings):
        extract_side(snapshot_row, BookSchema(), "bid")
        assert captured_warnings == []

    def test_malformed_level_logs_structured_warning(self, snapshot_row, captured_warnings):
        row = {**snapshot_row, "ask_02_price": "n/a"}
        asks = extract_side(row, BookSchema(), "ask")
        assert len(asks) == 1
        assert len(captured_warnings) == 1
        extra = captured_warnings[0]["extra"]
        assert extra == {"column": "ask_02_price", "value": "n/a", "reason": "not a number"}

    def test_negative_quantity_truncates(self, snapshot_row):
        row = {**snapshot_row, "bid_01_qty": -5}
        assert extract_side(row, BookSchema(), "bid") == ()


class TestMidPrice:
    def test_average_of_best(self):
        bids = (PriceLevel(price=100, volume=5),)
        asks = (PriceLevel(price=102, volume=3),)
        assert mid_price(bids, asks) == 101.0

    def test_empty_side(self):
        assert mid_price((), (PriceLevel(price=102, volume=3),)) is None
        assert mid_price((PriceLevel(price=100, volume=5),), ()) is None


class TestReshapeRow:
    def test_snapshot(self, snapshot_row):
        snap = reshape_row(snapshot_row)
        assert snap.timestamp == pd.Timestamp("2023-03-24 10:45:32")
        assert snap.mid_price == 101.0
        assert [lvl.price for lvl in snap.bids] == [100.0, 99.75, 99.5]
        assert [lvl.price for lvl in snap.asks] == [102.0, 102.25, 102.5]
        assert snap.best_bid == PriceLevel(price=100.0, volume=5)
        assert snap.spread == 2.0

    def test_one_level_each_side(self):
        row = {
            "timestamp": "2023-03-24T10:45:32",
            "bid_01_price": "100",
            "bid_01_qty": "5",
            "ask_01_price": "102",
            "ask_01_qty": "3",
        }
        snap = reshape_row(row)
        assert snap.mid_price == 101.0
        assert snap.bids == (PriceLevel(price=100, volume=5),)
        assert snap.asks == (PriceLevel(price=102, volume=3),)

    def test_empty_ask_side(self, snapshot_row):
        row = {k: v for k, v in snapshot_row.items() if not k.startswith("ask")}
        snap = reshape_row(row)
        assert snap.asks == ()
        assert snap.mid_price is None
        assert snap.spread is None

    def test_idempotent(self, snapshot_row):
        assert reshape_row(snapshot_row) == reshape_row(snapshot_row)

    def test_series_row(self, snapshot_row):
        assert reshape_row(pd.Series(snapshot_row)) == reshape_row(snapshot_row)

    def test_missing_timestamp_raises(self, snapshot_row):
        row = dict(snapshot_row)
        del row["timestamp"]
        with pytest.raises(ValueError):
            reshape_row(row)


class TestBookReshaper:
    def test_satisfies_protocol(self):
        assert isinstance(BookReshaper(), RowReshaper)

    def test_reshape_frame(self, snapshot_frame):
        snaps = BookReshaper().reshape_frame(snapshot_frame)
        assert len(snaps) == 3
        assert [s.timestamp.second for s in snaps] == [32, 33, 34]
        assert snaps[1].bids[0].volume == 7
        assert len(snaps[2].asks) == 1

    def test_skips_bad_timestamps(self, snapshot_frame, captured_warnings):
        frame = snapshot_frame.copy()
        frame.loc[1, "timestamp"] = "not a time"
        snaps = reshape_frame(frame)
        assert len(snaps) == 2
        assert captured_warnings[0]["extra"] == {"row": 2}

    def test_no_usable_rows(self, snapshot_frame):
        frame = snapshot_frame.assign(timestamp="bad")
        with pytest.raises(InsufficientDataError, match="none of 3 rows"):
            reshape_frame(frame)

    def test_empty_frame(self):
        with pytest.raises(InsufficientDataError):
            reshape_frame(pd.DataFrame())

    def test_missing_header_column(self, snapshot_frame):
        with pytest.raises(MissingColumnError) as info:
            reshape_frame(snapshot_frame.drop(columns="ask_01_qty"))
        assert info.value.column == "ask_01_qty"

    def test_prefixed_book(self, split_row):
        config = ChartConfig(book_timestamp_column="new_tag60_unix_nanoseconds")
        snap = BookReshaper(config, prefix="new_").reshape(split_row)
        assert [lvl.price for lvl in snap.bids] == [100.25, 100.0]
        assert [lvl.price for lvl in snap.asks] == [101.0, 101.25]

    def test_epoch_unit(self, snapshot_row):
        row = {**snapshot_row, "timestamp": 1679654732000000}
        snap = BookReshaper(ChartConfig(timestamp_unit="us")).reshape(row)
        assert snap.timestamp == pd.Timestamp("2023-03-24 10:45:32")
