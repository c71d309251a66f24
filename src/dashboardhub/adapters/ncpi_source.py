"""Adapter that ingests the NCPI platform/study source CSV."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from dashboardhub.adapters.base import DataAdapter
from dashboardhub.models import StudyListingRow

logger = logging.getLogger(__name__)

SOURCE_HEADER_KEY = {
    "DB_GAP_ID": "identifier",
    "PLATFORM": "platform",
}

SOURCE_FIELD_KEY = {
    SOURCE_HEADER_KEY["DB_GAP_ID"]: "db_gap_id",
    SOURCE_HEADER_KEY["PLATFORM"]: "platform",
}


class NcpiSourceAdapter(DataAdapter[StudyListingRow]):
    """Read ``dashboard-source-ncpi.csv`` into study listing rows."""

    name = "ncpi_source"

    def __init__(self, *, csv_path: str | Path, delimiter: str = ",") -> None:
        self.csv_path = Path(csv_path)
        self.delimiter = delimiter

    def read(self) -> Iterable[StudyListingRow]:
        frame = pd.read_csv(
            self.csv_path,
            sep=self.delimiter,
            dtype=str,
            skipinitialspace=True,
        )
        frame.columns = [str(column).strip().lower() for column in frame.columns]

        missing = [header for header in SOURCE_FIELD_KEY if header not in frame.columns]
        if missing:
            raise ValueError(
                f"NCPI source {self.csv_path} is missing columns: {', '.join(missing)}"
            )

        frame = frame.rename(columns=SOURCE_FIELD_KEY)
        skipped = 0
        for row in frame.itertuples(index=False):
            db_gap_id = self._to_string(getattr(row, "db_gap_id", None))
            if not db_gap_id:
                skipped += 1
                continue

            yield StudyListingRow(
                db_gap_id=db_gap_id,
                platform=self._to_string(getattr(row, "platform", None)) or "",
            )

        if skipped:
            logger.warning("Skipped %s NCPI source rows without an identifier", skipped)

    @staticmethod
    def _to_string(value: Any) -> str | None:
        if value is None or pd.isna(value):
            return None

        cleaned = str(value).strip()
        if not cleaned or cleaned.lower() in {"nan", "none", "null"}:
            return None

        return cleaned
