"""Timestamp normalisation for snapshot and trade exports.

The seminar exports carry time in three shapes:

* ISO-like strings (``2023-03-24T10:45:32``) in the hand-made snapshot
  files,
* calendar digit strings (``YYYYMMDDHHMMSS`` followed by sub-second digits)
  in the split-book ``tag60`` columns,
* raw integer epochs (milliseconds in book files, nanoseconds in the MBO
  trade files).

:func:`parse_timestamp` reads digit values as calendar digits first and as
an epoch second; other strings go to the ISO parser.  When none applies it
raises :class:`~seminar_charts.exceptions.TimestampParseError`; there is no
wall-clock fallback.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Literal

import numpy as np
import pandas as pd

from seminar_charts.exceptions import TimestampParseError

EpochUnit = Literal["ms", "us", "ns"]

_CALENDAR_WIDTH = 14  # YYYYMMDDHHMMSS


def parse_calendar_digits(digits: str) -> pd.Timestamp | None:
    """Slice ``YYYYMMDDHHMMSS[fraction]`` into a timestamp.

    Returns ``None`` when *digits* is too short or the fields do not form a
    valid calendar date, so callers can fall through to another format.
    Digits after the seconds are read as a decimal fraction of a second,
    truncated to nanoseconds.
    """
    if len(digits) < _CALENDAR_WIDTH or not digits.isdigit():
        return None
    try:
        ts = pd.Timestamp(
            year=int(digits[0:4]),
            month=int(digits[4:6]),
            day=int(digits[6:8]),
            hour=int(digits[8:10]),
            minute=int(digits[10:12]),
            second=int(digits[12:14]),
        ).as_unit("ns")
    except (ValueError, OverflowError):
        return None
    fraction = digits[_CALENDAR_WIDTH:]
    if fraction:
        ts += pd.Timedelta(nanoseconds=int(fraction[:9].ljust(9, "0")))
    return ts


def parse_epoch(value: int | float, unit: EpochUnit = "ms") -> pd.Timestamp:
    """Interpret *value* as an epoch count in *unit*.

    The result must fit a nanosecond timestamp (years 1677-2262); a count
    read in too coarse a unit fails here instead of landing millions of
    years out.
    """
    try:
        return pd.Timestamp(value, unit=unit).as_unit("ns")
    except (ValueError, OverflowError) as exc:
        raise TimestampParseError(
            f"epoch value {value!r} out of range for unit {unit!r}"
        ) from exc


def parse_timestamp(
    value: Any,
    unit: EpochUnit = "ms",
    calendar_digits: bool = True,
) -> pd.Timestamp:
    """Normalise a raw timestamp cell to a :class:`pandas.Timestamp`.

    Parameters
    ----------
    value
        A datetime, an ISO-like string, a digit string or a number.
    unit : {"ms", "us", "ns"}
        Unit applied when *value* is read as a raw epoch.
    calendar_digits : bool
        Try the ``YYYYMMDDHHMMSS`` slicing for digit values of 14 or more
        digits before falling back to the epoch reading.

    Raises
    ------
    TimestampParseError
        If *value* is missing or matches no supported format.
    """
    if value is None or value is pd.NaT:
        raise TimestampParseError("timestamp is missing")
    if isinstance(value, (datetime, np.datetime64)):
        return pd.Timestamp(value)
    if isinstance(value, bool):
        raise TimestampParseError(f"unsupported timestamp value {value!r}")

    if isinstance(value, (int, np.integer)):
        return _parse_digits(str(int(value)), unit, calendar_digits)

    if isinstance(value, (float, np.floating)):
        if not math.isfinite(value):
            raise TimestampParseError(f"timestamp is not finite: {value!r}")
        if float(value).is_integer():
            return _parse_digits(str(int(value)), unit, calendar_digits)
        return parse_epoch(float(value), unit)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise TimestampParseError("timestamp is blank")
        if text.isdigit():
            return _parse_digits(text, unit, calendar_digits)
        try:
            ts = pd.Timestamp(text)
        except (ValueError, OverflowError) as exc:
            raise TimestampParseError(f"unrecognised timestamp {text!r}") from exc
        if ts is pd.NaT:
            raise TimestampParseError(f"unrecognised timestamp {text!r}")
        return ts

    raise TimestampParseError(
        f"unsupported timestamp type {type(value).__name__}: {value!r}"
    )


def _parse_digits(digits: str, unit: EpochUnit, calendar_digits: bool) -> pd.Timestamp:
    if calendar_digits:
        ts = parse_calendar_digits(digits)
        if ts is not None:
            return ts
    return parse_epoch(int(digits), unit)
