"""Custom exception hierarchy for the seminar-charts package.

All exceptions inherit from :class:`SeminarChartsError`, allowing callers to
catch every package-specific error with a single ``except`` clause.
"""


class SeminarChartsError(Exception):
    """Base exception for all seminar-charts errors."""


class InvalidDataError(SeminarChartsError):
    """Input data is missing required columns or has invalid values."""


class MissingColumnError(InvalidDataError):
    """A column required by a table schema is absent from the header."""

    def __init__(self, column: str, context: str = "") -> None:
        self.column = column
        self.context = context
        where = f"{context}: " if context else ""
        super().__init__(f"{where}missing required column {column!r}")


class TimestampParseError(SeminarChartsError, ValueError):
    """A timestamp value matches none of the supported formats."""


class InsufficientDataError(SeminarChartsError):
    """Not enough data to perform the requested operation."""


class ConfigurationError(SeminarChartsError):
    """Configuration values are invalid or an optional backend is missing."""
