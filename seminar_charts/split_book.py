"""Split-book aggregation: old and new orders side by side.

The split exports carry two books per row, one for orders resting since
before the reference time (``old_`` columns) and one for orders placed
after it (``new_`` columns).  The chart shows both at every price either
book quotes, so the two level lists are unioned per price.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd
from loguru import logger

from seminar_charts._utils import is_missing, validate_non_empty
from seminar_charts.config import ChartConfig
from seminar_charts.exceptions import InsufficientDataError, TimestampParseError
from seminar_charts.models import (
    AggregatedLevel,
    BookSnapshot,
    PriceLevel,
    SplitBookSnapshot,
)
from seminar_charts.reshape import extract_side
from seminar_charts.schema import Side
from seminar_charts.timestamps import parse_timestamp


def _volume_by_price(levels: Iterable[PriceLevel]) -> dict[float, float]:
    volumes: dict[float, float] = {}
    for level in levels:
        volumes[level.price] = volumes.get(level.price, 0.0) + level.volume
    return volumes


def aggregate_levels(
    old: Iterable[PriceLevel],
    new: Iterable[PriceLevel],
    side: Side,
) -> tuple[AggregatedLevel, ...]:
    """Union *old* and *new* levels per price.

    Prices are ordered best first: descending for bids, ascending for
    asks.  A price quoted by only one book gets zero volume from the other.
    Every input price appears exactly once in the result.
    """
    if side not in ("bid", "ask"):
        raise ValueError(f"side must be 'bid' or 'ask', got {side!r}")
    old_volumes = _volume_by_price(old)
    new_volumes = _volume_by_price(new)
    prices = sorted(set(old_volumes) | set(new_volumes), reverse=side == "bid")
    return tuple(
        AggregatedLevel(
            price=price,
            new_volume=new_volumes.get(price, 0.0),
            old_volume=old_volumes.get(price, 0.0),
        )
        for price in prices
    )


def _split_mid_price(
    bids: tuple[AggregatedLevel, ...], asks: tuple[AggregatedLevel, ...]
) -> float | None:
    if not bids or not asks:
        return None
    return (bids[0].price + asks[0].price) / 2


def split_snapshots(old: BookSnapshot, new: BookSnapshot) -> SplitBookSnapshot:
    """Aggregate two separately reshaped snapshots.  The newer time wins."""
    bids = aggregate_levels(old.bids, new.bids, "bid")
    asks = aggregate_levels(old.asks, new.asks, "ask")
    return SplitBookSnapshot(
        timestamp=max(old.timestamp, new.timestamp),
        mid_price=_split_mid_price(bids, asks),
        bids=bids,
        asks=asks,
    )


def _split_time_cell(row: Mapping[str, Any], config: ChartConfig) -> tuple[Any, str]:
    """First present time value of a split row and the epoch unit it is in."""
    candidates = (
        (f"{config.new_prefix}{config.trade_timestamp_column}", config.trade_timestamp_unit),
        ("tag60", config.trade_timestamp_unit),
        (config.book_timestamp_column, config.timestamp_unit),
    )
    for column, unit in candidates:
        value = row.get(column)
        if not is_missing(value):
            return value, unit
    return None, config.timestamp_unit


def split_timestamp_value(row: Mapping[str, Any], config: ChartConfig) -> Any:
    """Pick the raw time of a split row.

    Preference: the new book's transact time, then the unprefixed ``tag60``,
    then the snapshot timestamp column.
    """
    return _split_time_cell(row, config)[0]


def reshape_split_row(
    row: Mapping[str, Any], config: ChartConfig | None = None
) -> SplitBookSnapshot:
    """Reshape one row carrying both ``old_`` and ``new_`` books.

    Raises
    ------
    TimestampParseError
        If no time column holds a readable value.
    """
    config = config or ChartConfig()
    old_schema = config.book_schema(config.old_prefix)
    new_schema = config.book_schema(config.new_prefix)

    value, unit = _split_time_cell(row, config)
    timestamp = parse_timestamp(value, unit=unit)
    bids = aggregate_levels(
        extract_side(row, old_schema, "bid"), extract_side(row, new_schema, "bid"), "bid"
    )
    asks = aggregate_levels(
        extract_side(row, old_schema, "ask"), extract_side(row, new_schema, "ask"), "ask"
    )
    return SplitBookSnapshot(
        timestamp=timestamp,
        mid_price=_split_mid_price(bids, asks),
        bids=bids,
        asks=asks,
    )


def reshape_split_frame(
    frame: pd.DataFrame, config: ChartConfig | None = None
) -> list[SplitBookSnapshot]:
    """Reshape every row of a split-book table, skipping undatable rows.

    Raises
    ------
    MissingColumnError
        If either book lacks its top-of-book columns.
    InsufficientDataError
        If *frame* is empty or no row survives.
    """
    config = config or ChartConfig()
    validate_non_empty(frame, "reshape_split_frame")
    for prefix in (config.new_prefix, config.old_prefix):
        config.book_schema(prefix).validate(
            frame.columns, "reshape_split_frame", require_timestamp=False
        )

    snapshots: list[SplitBookSnapshot] = []
    for number, row in enumerate(frame.to_dict("records"), start=1):
        try:
            snapshots.append(reshape_split_row(row, config))
        except TimestampParseError as exc:
            logger.bind(row=number).warning("Skipping row {}: {}", number, exc)

    if not snapshots:
        raise InsufficientDataError(
            f"reshape_split_frame: none of {len(frame)} rows had a usable timestamp"
        )
    return snapshots
