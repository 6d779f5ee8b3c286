"""Pydantic domain models for seminar-charts.

These models are the **data contracts** handed to renderers:

* :class:`PriceLevel` / :class:`BookSnapshot`: one reshaped snapshot row.
* :class:`AggregatedLevel` / :class:`SplitBookSnapshot`: old and new book
  halves unioned per price.
* :class:`HeatmapCell`: one non-empty price x time bucket.
* :class:`OhlcBar`: one daily bar.

Binning and series work stays in DataFrames; models are built at the edges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field, model_validator


class PriceLevel(BaseModel):
    """Resting volume at one price in one side of the book."""

    model_config = {"frozen": True, "allow_inf_nan": False}

    price: float = Field(ge=0)
    volume: float = Field(ge=0)


class BookSnapshot(BaseModel):
    """Book state decoded from one snapshot row.

    ``bids`` run from the best (highest) price downwards and ``asks`` from
    the best (lowest) price upwards, in the order the export lists them.
    ``mid_price`` is ``None`` when either side is empty.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    timestamp: pd.Timestamp
    mid_price: float | None = None
    bids: tuple[PriceLevel, ...] = ()
    asks: tuple[PriceLevel, ...] = ()

    @property
    def best_bid(self) -> PriceLevel | None:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> PriceLevel | None:
        return self.asks[0] if self.asks else None

    @property
    def spread(self) -> float | None:
        if not self.bids or not self.asks:
            return None
        return self.asks[0].price - self.bids[0].price


class AggregatedLevel(BaseModel):
    """Old and new volume resting at the same price."""

    model_config = {"frozen": True, "allow_inf_nan": False}

    price: float = Field(ge=0)
    new_volume: float = Field(default=0.0, ge=0)
    old_volume: float = Field(default=0.0, ge=0)
    total_volume: float = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _fill_total(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("total_volume") is None:
            data = {**data}
            data["total_volume"] = data.get("new_volume", 0.0) + data.get("old_volume", 0.0)
        return data

    @model_validator(mode="after")
    def _check_total(self) -> AggregatedLevel:
        if self.total_volume != self.new_volume + self.old_volume:
            raise ValueError(
                f"total_volume {self.total_volume} != new_volume "
                f"{self.new_volume} + old_volume {self.old_volume}"
            )
        return self


class SplitBookSnapshot(BaseModel):
    """Book state of a split (old/new) snapshot row."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    timestamp: pd.Timestamp
    mid_price: float | None = None
    bids: tuple[AggregatedLevel, ...] = ()
    asks: tuple[AggregatedLevel, ...] = ()


class HeatmapCell(BaseModel):
    """One non-empty cell of the price x time heatmap.

    Both intervals are half-open: ``price_low <= price < price_high`` and
    ``time_start <= timestamp < time_end``.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    price_bin: int = Field(ge=0)
    time_bin: int = Field(ge=0)
    price_low: float
    price_high: float
    time_start: pd.Timestamp
    time_end: pd.Timestamp
    count: int = Field(gt=0)
    total_quantity: float
    mean_price: float


class OhlcBar(BaseModel):
    """Daily open/high/low/close bar."""

    model_config = {"frozen": True}

    date: str
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class LevelParseError:
    """Why a book level could not be built from its row.

    Returned (not raised) by the field parser so the reshaper can stop the
    side at that level and log a structured diagnostic.
    """

    column: str
    value: Any
    reason: str
