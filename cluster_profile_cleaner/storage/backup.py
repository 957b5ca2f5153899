"""Per-profile backups written before a cluster profile is deleted."""
import json
import logging
import os
from typing import Any
from typing import Dict
from typing import Optional

from cluster_profile_cleaner.collectors.datasource import IDataSource
from cluster_profile_cleaner.exceptions import PaletteApiError

logger = logging.getLogger(__name__)


class ProfileBackupWriter:
    """
    Writes <output_dir>/backups/profile_<name>_v<version>_<timestamp>.json.

    The export endpoint's payload is preferred; when the export fails the detail
    payload already fetched for the profile is written instead.
    """

    def __init__(self, datasource: IDataSource, output_dir: str, timestamp: str):
        self.datasource = datasource
        self.backup_dir = os.path.join(output_dir, "backups")
        self.timestamp = timestamp

    def path_for(self, name: str, version: str) -> str:
        filename = f"profile_{name}_v{version}_{self.timestamp}.json"
        return os.path.join(self.backup_dir, filename.replace(os.sep, "_"))

    def backup(
        self,
        profile_uid: str,
        name: str,
        version: str,
        detail: Dict[str, Any],
        project_uid: Optional[str] = None,
    ) -> str:
        """Back up one profile and return the written path.

        Raises:
            OSError: If neither the export nor the fallback could be written.
        """
        os.makedirs(self.backup_dir, exist_ok=True)
        backup_file = self.path_for(name, version)

        logger.info("  Exporting profile backup...")
        try:
            payload = self.datasource.export_cluster_profile(profile_uid, project_uid)
            with open(backup_file, "wb") as f:
                f.write(payload)
            logger.info("  Backed up to: %s", backup_file)
            return backup_file
        except (PaletteApiError, OSError) as e:
            logger.warning(
                "  Failed to export profile backup, using JSON fallback (%s)", e
            )

        with open(backup_file, "w", encoding="utf-8") as f:
            json.dump(detail, f, indent=2)
        logger.info("  Backed up detail snapshot to: %s", backup_file)
        return backup_file
