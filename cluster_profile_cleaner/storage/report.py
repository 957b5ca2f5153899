"""Deletion report written at the end of every cleanup run."""
import json
import logging
import os
from datetime import datetime
from typing import Optional

from cluster_profile_cleaner.models.outcome import CleanupResults

from .datasink import IDataSink

logger = logging.getLogger(__name__)

RULE = "=" * 66


class DeletionReportSink(IDataSink):
    """
    Writes deleted_profiles_<timestamp>.txt, and deleted_profiles_<timestamp>.json
    (the deleted-items manifest) when at least one profile was deleted.
    """

    def __init__(self, output_dir: str, timestamp: str, backup_enabled: bool):
        self.output_dir = output_dir
        self.timestamp = timestamp
        self.backup_enabled = backup_enabled

    @property
    def text_path(self) -> str:
        return os.path.join(self.output_dir, f"deleted_profiles_{self.timestamp}.txt")

    @property
    def json_path(self) -> str:
        return os.path.join(self.output_dir, f"deleted_profiles_{self.timestamp}.json")

    def save(self, data: CleanupResults) -> Optional[str]:
        os.makedirs(self.output_dir, exist_ok=True)

        lines = [
            RULE,
            "Deleted Cluster Profiles Report",
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"Backup enabled: {str(self.backup_enabled).lower()}",
            RULE,
            "",
            f"Total profiles checked: {data.total_checked}",
            f"Profiles deleted: {data.deleted_count}",
            "",
            RULE,
            "Deleted Profiles:",
            RULE,
        ]
        if data.deleted:
            for item in data.deleted:
                lines.append(f"Profile: {item.profile_name} v{item.version}")
                lines.append(f"  UID: {item.profile_uid}")
                lines.append("")
        else:
            lines.append("No unused profiles were deleted.")

        with open(self.text_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        logger.info("Deletion report saved to: %s", self.text_path)

        if data.deleted:
            with open(self.json_path, "w", encoding="utf-8") as f:
                json.dump([item.to_dict() for item in data.deleted], f, indent=2)
            logger.info("Deletion JSON saved to: %s", self.json_path)

        return self.text_path
