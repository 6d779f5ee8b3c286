"""Validation and coercion helpers shared across seminar-charts."""

from __future__ import annotations

import math
from collections.abc import Iterable
from numbers import Real
from typing import Any

import numpy as np
import pandas as pd

from seminar_charts.exceptions import InsufficientDataError, InvalidDataError


def validate_columns(df: pd.DataFrame, required: Iterable[str], context: str) -> None:
    """Raise :class:`InvalidDataError` if *df* lacks any of *required*."""
    missing = sorted(set(required) - set(df.columns))
    if missing:
        raise InvalidDataError(
            f"{context}: missing required columns {missing}; "
            f"available columns are {sorted(map(str, df.columns))}"
        )


def validate_non_empty(df: pd.DataFrame, context: str) -> None:
    """Raise :class:`InsufficientDataError` if *df* has no rows."""
    if df.empty:
        raise InsufficientDataError(f"{context}: received an empty DataFrame")


def is_missing(value: Any) -> bool:
    """True for ``None``, ``NaN``, ``pd.NA`` and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def coerce_number(value: Any) -> float | None:
    """Convert a parsed CSV cell to a float.

    Returns ``None`` when *value* is not numeric.  Non-finite results are
    returned as-is; callers decide whether ``inf``/``nan`` are acceptable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (Real, np.number)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


# Largest magnitude below which every integer is exact in float64.
_FLOAT_EXACT_LIMIT = 2**53
_INT64_MAX = 2**63 - 1


def coerce_integer(value: Any) -> int | None:
    """Convert a parsed CSV cell to a non-negative int64 without a float round trip.

    Digit strings are read exactly.  Floats are accepted only when integral
    and below 2**53; larger float cells no longer hold the digits the file
    had.  Returns ``None`` for anything else, including values past int64.
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        number = int(value)
    elif isinstance(value, (float, np.floating)):
        if not math.isfinite(value) or not float(value).is_integer():
            return None
        if abs(value) >= _FLOAT_EXACT_LIMIT:
            return None
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        number = int(text)
    else:
        return None
    return number if 0 <= number <= _INT64_MAX else None
