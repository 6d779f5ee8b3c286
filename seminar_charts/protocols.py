"""Protocol interfaces for seminar-charts.

These define the contracts that pluggable components must satisfy.
Implementations are discovered by structural (duck) typing; there is
no need to inherit from these classes.

Default implementations ship with the package:

* :class:`CsvLoader` in ``io.py``
* :class:`BookReshaper` in ``reshape.py``

Pass your own to :class:`~seminar_charts.pipeline.ChartPipeline`.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import pandas as pd

from seminar_charts.models import BookSnapshot


@runtime_checkable
class TableLoader(Protocol):
    """Loads a header-first table from a data source."""

    def load(self, source: str | Path) -> pd.DataFrame:
        """Load *source* and return one row per record.

        Parameters
        ----------
        source : str or Path
            Data source identifier (e.g. a file path).

        Returns
        -------
        pandas.DataFrame
            Columns named after the header row; empty cells as ``NaN``.
        """
        ...


@runtime_checkable
class RowReshaper(Protocol):
    """Turns flat snapshot rows into :class:`BookSnapshot` objects."""

    def reshape(self, row: Mapping[str, Any]) -> BookSnapshot:
        """Reshape a single row."""
        ...

    def reshape_frame(self, frame: pd.DataFrame) -> list[BookSnapshot]:
        """Reshape every usable row of *frame*, in order."""
        ...
