"""
Index Service Module

This module writes the corpus index (one row of metadata per post) to
CSV or JSON so it can be consumed by other tools.
"""

import os

import pandas as pd

from postlint.utils.exceptions import ExportError
from postlint.utils.helpers import ensure_dir_exists
from postlint.utils.logger import get_logger

logger = get_logger(__name__)

LIST_COLUMNS = ["tags", "languages"]
SUPPORTED_FORMATS = (".csv", ".json")


class IndexService:
    """Service for exporting the corpus index."""

    def export(self, df: pd.DataFrame, output_path: str) -> str:
        """
        Write the index to a file, picking the format from its extension.

        Args:
            df: Frame built by data.corpus.to_dataframe
            output_path: Destination ending in .csv or .json

        Returns:
            str: The path written

        Raises:
            ExportError: For unsupported extensions or write failures
        """
        extension = os.path.splitext(output_path)[1].lower()
        if extension not in SUPPORTED_FORMATS:
            raise ExportError(
                f"Unsupported index format '{extension or output_path}', "
                f"use one of {', '.join(SUPPORTED_FORMATS)}"
            )

        directory = os.path.dirname(output_path)
        try:
            if directory:
                ensure_dir_exists(directory)
            if extension == ".csv":
                self._to_csv_frame(df).to_csv(output_path, index=False)
            else:
                self._to_json_frame(df).to_json(output_path, orient="records", date_format="iso", indent=2)
        except OSError as e:
            raise ExportError(f"Cannot write index to {output_path}: {e}") from e

        logger.info(f"Wrote index of {len(df)} posts to {output_path}")
        return output_path

    @staticmethod
    def _to_json_frame(df: pd.DataFrame) -> pd.DataFrame:
        """Write dates as ISO strings; the date column mixes naive and offset-aware values."""
        flat = df.copy()
        if "date" in flat.columns:
            flat["date"] = flat["date"].apply(
                lambda value: value.isoformat() if pd.notna(value) else None
            )
        return flat

    @staticmethod
    def _to_csv_frame(df: pd.DataFrame) -> pd.DataFrame:
        """Join list columns into comma-separated strings for CSV."""
        flat = df.copy()
        for column in LIST_COLUMNS:
            if column in flat.columns:
                flat[column] = flat[column].apply(
                    lambda value: ",".join(value) if isinstance(value, list) else value
                )
        return flat
