"""Row reshaping: flat snapshot rows to :class:`BookSnapshot` objects.

A snapshot row lists up to ``N`` levels per side::

    bid_01_price, bid_01_qty, bid_02_price, bid_02_qty, ...

A side is read best level first and stops at the first level whose price
or quantity is absent or unusable.  Levels after a gap are dropped with it,
so a side never contains a hole.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

import pandas as pd
from loguru import logger

from seminar_charts._utils import coerce_number, is_missing, validate_non_empty
from seminar_charts.config import ChartConfig
from seminar_charts.exceptions import InsufficientDataError, TimestampParseError
from seminar_charts.models import BookSnapshot, LevelParseError, PriceLevel
from seminar_charts.schema import BookSchema, Side
from seminar_charts.timestamps import EpochUnit, parse_timestamp

MISSING = "missing"


def parse_field(row: Mapping[str, Any], column: str) -> float | LevelParseError:
    """Read one numeric level field from *row*."""
    if column not in row:
        return LevelParseError(column, None, MISSING)
    value = row[column]
    if is_missing(value):
        return LevelParseError(column, value, MISSING)
    number = coerce_number(value)
    if number is None:
        return LevelParseError(column, value, "not a number")
    if not math.isfinite(number):
        return LevelParseError(column, value, "not finite")
    if number < 0:
        return LevelParseError(column, value, "negative")
    return number


def parse_level(
    row: Mapping[str, Any], price_column: str, qty_column: str
) -> PriceLevel | LevelParseError:
    """Build the level stored in *price_column* / *qty_column*."""
    price = parse_field(row, price_column)
    if isinstance(price, LevelParseError):
        return price
    qty = parse_field(row, qty_column)
    if isinstance(qty, LevelParseError):
        return qty
    return PriceLevel(price=price, volume=qty)


def extract_side(
    row: Mapping[str, Any], schema: BookSchema, side: Side
) -> tuple[PriceLevel, ...]:
    """Levels of one side, best first, truncated at the first unusable level."""
    levels: list[PriceLevel] = []
    for level, price_column, qty_column in schema.level_columns(side):
        result = parse_level(row, price_column, qty_column)
        if isinstance(result, LevelParseError):
            if result.reason != MISSING:
                logger.bind(
                    column=result.column, value=result.value, reason=result.reason
                ).warning(
                    "Dropping {} levels {}..{}: {} is {} ({!r})",
                    side,
                    level,
                    schema.levels,
                    result.column,
                    result.reason,
                    result.value,
                )
            break
        levels.append(result)
    return tuple(levels)


def mid_price(
    bids: tuple[PriceLevel, ...], asks: tuple[PriceLevel, ...]
) -> float | None:
    """Average of best bid and best ask; ``None`` if either side is empty."""
    if not bids or not asks:
        return None
    return (bids[0].price + asks[0].price) / 2


def reshape_row(
    row: Mapping[str, Any],
    schema: BookSchema | None = None,
    unit: EpochUnit = "ms",
) -> BookSnapshot:
    """Reshape one snapshot row.

    Parameters
    ----------
    row : Mapping
        A dict or :class:`pandas.Series` keyed by column name.
    schema : BookSchema, optional
        Column layout.  Defaults to 11 unprefixed levels.
    unit : {"ms", "us", "ns"}
        Unit of raw integer timestamps.

    Returns
    -------
    BookSnapshot

    Raises
    ------
    TimestampParseError
        If the timestamp column is missing or unreadable.  Malformed level
        fields never raise; they end their side instead.
    """
    schema = schema or BookSchema()
    timestamp = parse_timestamp(row.get(schema.timestamp_column), unit=unit)
    bids = extract_side(row, schema, "bid")
    asks = extract_side(row, schema, "ask")
    return BookSnapshot(
        timestamp=timestamp,
        mid_price=mid_price(bids, asks),
        bids=bids,
        asks=asks,
    )


class BookReshaper:
    """Default :class:`~seminar_charts.protocols.RowReshaper`.

    Parameters
    ----------
    config : ChartConfig, optional
        Supplies the level count, timestamp column and epoch unit.
    prefix : str
        Column prefix of the book to read (``""``, ``"old_"``, ``"new_"``).
    """

    def __init__(self, config: ChartConfig | None = None, prefix: str = "") -> None:
        self.config = config or ChartConfig()
        self.schema = self.config.book_schema(prefix)

    def reshape(self, row: Mapping[str, Any]) -> BookSnapshot:
        return reshape_row(row, self.schema, unit=self.config.timestamp_unit)

    def reshape_frame(self, frame: pd.DataFrame) -> list[BookSnapshot]:
        """Reshape every row of *frame*.

        The header is validated once against the schema.  Rows whose
        timestamp cannot be parsed are skipped and logged.

        Raises
        ------
        MissingColumnError
            If the timestamp or top-of-book columns are absent.
        InsufficientDataError
            If *frame* is empty or no row survives.
        """
        validate_non_empty(frame, "reshape_frame")
        self.schema.validate(frame.columns, "reshape_frame")

        snapshots: list[BookSnapshot] = []
        for number, row in enumerate(frame.to_dict("records"), start=1):
            try:
                snapshots.append(self.reshape(row))
            except TimestampParseError as exc:
                logger.bind(row=number).warning("Skipping row {}: {}", number, exc)

        if not snapshots:
            raise InsufficientDataError(
                f"reshape_frame: none of {len(frame)} rows had a usable timestamp"
            )
        logger.debug("Reshaped {} of {} snapshot rows", len(snapshots), len(frame))
        return snapshots


def reshape_frame(
    frame: pd.DataFrame, config: ChartConfig | None = None
) -> list[BookSnapshot]:
    """Reshape every row of *frame* with the default :class:`BookReshaper`."""
    return BookReshaper(config).reshape_frame(frame)
