"""Column schema for order-book snapshot tables.

Snapshot exports lay one book out over a flat row::

    timestamp, bid_01_price, bid_01_qty, ..., ask_11_price, ask_11_qty

The split-book exports repeat the block behind ``old_`` and ``new_``
prefixes.  :class:`BookSchema` names every column once and checks a
table header before any row is reshaped.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Literal

from seminar_charts.exceptions import MissingColumnError

Side = Literal["bid", "ask"]
FieldRole = Literal["price", "qty"]

SIDES: tuple[Side, ...] = ("bid", "ask")


@dataclass(frozen=True)
class LevelColumn:
    """One ``{side, level, field}`` slot and its canonical column name."""

    side: Side
    level: int
    field: FieldRole
    name: str


@dataclass(frozen=True)
class BookSchema:
    """Ordered description of the level columns of a snapshot table.

    Parameters
    ----------
    levels : int
        Depth levels per side.
    prefix : str
        Prepended to every level column (``"old_"``, ``"new_"`` or ``""``).
    timestamp_column : str
        Column carrying the snapshot time.  Not prefixed.
    """

    levels: int = 11
    prefix: str = ""
    timestamp_column: str = "timestamp"

    def __post_init__(self) -> None:
        if self.levels < 1:
            raise ValueError(f"levels must be at least 1, got {self.levels}")

    def column(self, side: Side, level: int, field: FieldRole) -> str:
        """Canonical name, e.g. ``column("bid", 1, "price") == "bid_01_price"``."""
        if not 1 <= level <= self.levels:
            raise ValueError(f"level {level} outside 1..{self.levels}")
        return f"{self.prefix}{side}_{level:02d}_{field}"

    def level_columns(self, side: Side) -> Iterator[tuple[int, str, str]]:
        """Yield ``(level, price_column, qty_column)`` best level first."""
        for level in range(1, self.levels + 1):
            yield (
                level,
                self.column(side, level, "price"),
                self.column(side, level, "qty"),
            )

    @property
    def columns(self) -> list[LevelColumn]:
        """Every level column, bids before asks, price before qty."""
        return [
            LevelColumn(side, level, field, self.column(side, level, field))
            for side in SIDES
            for level in range(1, self.levels + 1)
            for field in ("price", "qty")
        ]

    @property
    def required_columns(self) -> list[str]:
        """Columns that must be present in the header.

        Deeper levels may legitimately be missing from an export once the
        book runs out of liquidity, so only the top of book is required.
        """
        return [self.timestamp_column] + self.top_of_book_columns

    @property
    def top_of_book_columns(self) -> list[str]:
        return [
            self.column(side, 1, field) for side in SIDES for field in ("price", "qty")
        ]

    def validate(
        self,
        columns: Iterable[str],
        context: str = "",
        require_timestamp: bool = True,
    ) -> None:
        """Raise :class:`MissingColumnError` for the first absent required column."""
        present = set(columns)
        required = self.required_columns if require_timestamp else self.top_of_book_columns
        for name in required:
            if name not in present:
                raise MissingColumnError(name, context or "BookSchema")
