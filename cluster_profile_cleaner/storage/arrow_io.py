"""Arrow/CSV storage layer for run outcomes.

This module writes the outcome stream of a run as a CSV file through pyarrow.
"""
import logging
import os
from typing import Optional

import pyarrow as pa
import pyarrow.csv as pacsv
from cluster_profile_cleaner.models.outcome import CleanupResults
from cluster_profile_cleaner.models.outcome import RunMode

from .datasink import IDataSink

logger = logging.getLogger(__name__)


class CsvSink(IDataSink):
    """
    A data sink that writes the outcome records of a run to
    <output_dir>/<mode>_<timestamp>.csv.
    """

    def __init__(self, output_dir: str, timestamp: str):
        """
        :param output_dir: Directory the CSV file is written to.
        :param timestamp: Run timestamp used in the file name.
        """
        self.output_dir = output_dir.rstrip("/") or "."
        self.timestamp = timestamp

    def _get_schema(self, mode: RunMode) -> pa.Schema:
        last_column = "ACTION" if mode == RunMode.CLEANUP else "UID"
        return pa.schema(
            [
                pa.field("PROFILE_NAME", pa.string()),
                pa.field("VERSION", pa.string()),
                pa.field("SCOPE", pa.string()),
                pa.field("PROJECT", pa.string()),
                pa.field("STATUS", pa.string()),
                pa.field(last_column, pa.string()),
            ]
        )

    def path_for(self, mode: RunMode) -> str:
        return os.path.join(self.output_dir, f"{mode.value}_{self.timestamp}.csv")

    def save(self, data: CleanupResults) -> Optional[str]:
        """
        Saves one row per outcome record. Nothing is written for a run without records.
        """
        if not isinstance(data, CleanupResults):
            raise TypeError("Data must be a CleanupResults object")
        if not data.records:
            return None

        schema = self._get_schema(data.mode)
        last_column = schema.names[-1]
        table_data = {
            "PROFILE_NAME": [r.name for r in data.records],
            "VERSION": [r.version for r in data.records],
            "SCOPE": [r.scope for r in data.records],
            "PROJECT": [r.project for r in data.records],
            "STATUS": [r.status.value for r in data.records],
            last_column: [
                r.action.value if data.mode == RunMode.CLEANUP else r.uid
                for r in data.records
            ],
        }
        table = pa.Table.from_pydict(table_data, schema=schema)

        os.makedirs(self.output_dir, exist_ok=True)
        csv_path = self.path_for(data.mode)
        pacsv.write_csv(
            table,
            csv_path,
            write_options=pacsv.WriteOptions(quoting_style="all_valid"),
        )
        logger.info("CSV export saved to: %s", csv_path)
        return csv_path
