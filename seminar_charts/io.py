"""Table loading for seminar exports."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from loguru import logger

from seminar_charts.exceptions import InvalidDataError


class CsvLoader:
    """Default :class:`~seminar_charts.protocols.TableLoader` for CSV files.

    Header names are stripped of surrounding whitespace and blank lines are
    skipped.  Empty cells load as ``NaN``.
    """

    def __init__(self, **read_csv_kwargs) -> None:
        self.read_csv_kwargs = {"skip_blank_lines": True, **read_csv_kwargs}

    def load(self, source: str | Path) -> pd.DataFrame:
        """Read *source* into a DataFrame.

        Raises
        ------
        FileNotFoundError
            If *source* does not exist.
        InvalidDataError
            If the file is empty or cannot be tokenised.
        """
        logger.info("Loading table from {}", source)
        try:
            frame = pd.read_csv(source, **self.read_csv_kwargs)
        except pd.errors.EmptyDataError as exc:
            raise InvalidDataError(f"{source}: file is empty") from exc
        except pd.errors.ParserError as exc:
            raise InvalidDataError(f"{source}: cannot parse CSV ({exc})") from exc
        frame.columns = [str(col).strip() for col in frame.columns]
        logger.debug("Loaded {} rows x {} columns from {}", len(frame), len(frame.columns), source)
        return frame
