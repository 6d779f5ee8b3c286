"""Shared fixtures for seminar-charts tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest


def _book_columns(prefix: str, side: str, levels: list[tuple[float, float]]) -> dict:
    row = {}
    for number, (price, qty) in enumerate(levels, start=1):
        row[f"{prefix}{side}_{number:02d}_price"] = price
        row[f"{prefix}{side}_{number:02d}_qty"] = qty
    return row


@pytest.fixture
def snapshot_row() -> dict:
    """One snapshot row, three levels per side, ISO timestamp."""
    row = {"timestamp": "2023-03-24T10:45:32"}
    row.update(_book_columns("", "bid", [(100.0, 5), (99.75, 8), (99.5, 2)]))
    row.update(_book_columns("", "ask", [(102.0, 3), (102.25, 4), (102.5, 9)]))
    return row


@pytest.fixture
def snapshot_frame(snapshot_row) -> pd.DataFrame:
    """Three snapshot rows one second apart; the last has a thinner ask side."""
    second = {**snapshot_row, "timestamp": "2023-03-24T10:45:33", "bid_01_qty": 7}
    third = {
        **snapshot_row,
        "timestamp": "2023-03-24T10:45:34",
        "ask_02_price": np.nan,
        "ask_02_qty": np.nan,
    }
    return pd.DataFrame([snapshot_row, second, third])


@pytest.fixture
def split_row() -> dict:
    """A split-book row whose old and new halves share some prices."""
    row = {"new_tag60_unix_nanoseconds": "2023032410453212345"}
    row.update(_book_columns("old_", "bid", [(100.0, 4), (99.75, 6)]))
    row.update(_book_columns("new_", "bid", [(100.25, 2), (100.0, 1)]))
    row.update(_book_columns("old_", "ask", [(101.0, 3)]))
    row.update(_book_columns("new_", "ask", [(101.0, 5), (101.25, 7)]))
    return row


@pytest.fixture
def trade_frame() -> pd.DataFrame:
    """MBO trade export: nanosecond epochs, tag270 price, tag32 quantity."""
    t0 = pd.Timestamp("2023-03-24 10:00:00").value
    second = 1_000_000_000
    return pd.DataFrame(
        {
            "tag60_unix_nanoseconds": [
                t0,
                t0 + 10 * second,
                t0 + 10 * second,
                t0 + 70 * second,
                t0 + 125 * second,
            ],
            "tag270": [100.0, 100.5, 100.75, 101.0, 100.25],
            "tag32": [2, 3, 1, 5, 4],
        }
    )


@pytest.fixture
def gappy_trade_frame() -> pd.DataFrame:
    """Trade export whose timestamp column has a blank and a non-numeric cell."""
    return pd.DataFrame(
        {
            "tag60_unix_nanoseconds": [
                "1711276800123456789",
                None,
                "bad",
                "1711276800123456801",
            ],
            "tag270": [100.0, 100.25, 100.5, 100.75],
            "tag32": [1, 2, 3, 4],
        }
    )


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write a DataFrame to a CSV under ``tmp_path`` and return its path."""

    def _write(frame: pd.DataFrame, name: str = "data.csv") -> Path:
        path = tmp_path / name
        frame.to_csv(path, index=False)
        return path

    return _write


@pytest.fixture
def ohlc_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": ["2023-03-20", "2023-03-21", "2023-03-22"],
            "open": [640.0, 642.5, 645.0],
            "high_trade": [646.0, 648.0, 647.25],
            "low_trade": [638.5, 640.0, 641.0],
            "settlement": [643.0, 641.75, 646.5],
        }
    )


@pytest.fixture
def results_frame() -> pd.DataFrame:
    """Long pLOB results table with padded header names."""
    return pd.DataFrame(
        {
            " Commodity ": ["Corn", "Corn", "Wheat", "Wheat"],
            "pLOB based on age (minutes)": [5, 1, 1, 5],
            "Last Price ": [1.5, 1.2, 2.1, 2.4],
            "New pLOB Step 1-10": [30.0, 20.0, 40.0, 45.0],
            "Old pLOB Step 1-10": [70.0, 80.0, 60.0, 55.0],
        }
    )
