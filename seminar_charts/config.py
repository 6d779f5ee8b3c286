"""Chart configuration for seminar-charts.

Centralises the column names, bin sizes and precision settings that the
seminar scripts hard-coded per file.
"""


from typing import Literal

from pydantic import BaseModel, Field

from seminar_charts.schema import BookSchema


class ChartConfig(BaseModel):
    """Validated, immutable configuration for the chart pipeline.

    Defaults match the seminar exports: 11-level CME book snapshots with ISO
    timestamps, and MBO trade files keyed by FIX tags (``tag60`` transact
    time in nanoseconds, ``tag270`` price, ``tag32`` quantity).
    """

    model_config = {"frozen": True}

    # ── Order book snapshots ─────────────────────────────────────────────
    book_levels: int = Field(
        default=11,
        ge=1,
        le=99,
        description="Number of depth levels per side in a snapshot row.",
    )
    book_timestamp_column: str = Field(
        default="timestamp",
        description="Column holding the snapshot timestamp.",
    )
    timestamp_unit: Literal["ms", "us", "ns"] = Field(
        default="ms",
        description=(
            "Unit of raw integer epochs in book snapshot files.  Calendar "
            "digit strings (YYYYMMDDHHMMSS...) and ISO strings are detected "
            "before this unit is applied."
        ),
    )
    old_prefix: str = Field(default="old_", description="Prefix of the old book half.")
    new_prefix: str = Field(default="new_", description="Prefix of the new book half.")

    # ── Trades ────────────────────────────────────────────────────────────
    trade_timestamp_column: str = Field(default="tag60_unix_nanoseconds")
    trade_price_column: str = Field(default="tag270")
    trade_quantity_column: str = Field(default="tag32")
    trade_timestamp_unit: Literal["ms", "us", "ns"] = Field(
        default="ns",
        description="Unit of the trade transact-time epochs.",
    )

    # ── Heatmaps ──────────────────────────────────────────────────────────
    price_decimals: int = Field(
        default=2,
        ge=0,
        le=10,
        description=(
            "Decimal places prices and price-bin edges are rounded to "
            "before bucketing."
        ),
    )
    price_bin_size: float = Field(
        default=0.25,
        gt=0,
        description="Width of a price bucket.  0.25 is the corn futures tick.",
    )
    time_interval_seconds: int = Field(
        default=60,
        gt=0,
        description="Width of a time bucket in seconds.",
    )
    timestamp_digits: int = Field(
        default=19,
        ge=1,
        description="Width of the zero-padded timestamps in the digit heatmap.",
    )

    # ── Playback ──────────────────────────────────────────────────────────
    playback_interval_ms: int = Field(
        default=3000,
        gt=0,
        description="Period of the external timer that advances playback.",
    )

    # ── Derived helpers ───────────────────────────────────────────────────
    @property
    def price_tick(self) -> float:
        """Smallest representable price increment."""
        return 10.0**-self.price_decimals

    def book_schema(self, prefix: str = "") -> BookSchema:
        """Schema descriptor for a (possibly prefixed) snapshot table."""
        return BookSchema(
            levels=self.book_levels,
            prefix=prefix,
            timestamp_column=self.book_timestamp_column,
        )
