"""
Output Manager — Timestamped node snapshots and retention cleanup.

Each sourcing run writes its snapshot to a folder under the base output
directory named YYYYMMDD_HHMM_{provider_name}
(e.g., "20261018_1430_Nacelle_Space").

Inside each folder, the orchestrator saves:
  - nodes.json:             Every sourced node, sorted by id
  - sourcing_results.json:  Run metadata, per-type node counts, errors

The retention policy deletes folders older than OUTPUT_RETENTION_DAYS at CLI
start (before a new folder is created). Set retention_days=0 to keep all
snapshots.
"""

import json
import os
import re
import shutil
from datetime import datetime, timedelta
from typing import Any


class OutputManager:
    """Manages snapshot directories with timestamping and retention.

    Attributes:
        base_dir: Root output directory (default: ./output).
        provider_name: Used in folder naming (sanitized to alphanumeric, '-' and '_').
        retention_days: Delete folders older than this many days (0 = keep forever).
        current_dir: Path to the current run's directory (None until created).
    """

    FOLDER_PATTERN = re.compile(r'^(\d{8})_(\d{4})_.*$')

    def __init__(self, base_dir: str, provider_name: str, retention_days: int = 30):
        self.base_dir = base_dir
        self.provider_name = provider_name
        self.retention_days = retention_days
        self.current_dir = None
        self._run_timestamp = datetime.now()

    def create_timestamped_dir(self) -> str:
        """Create the snapshot directory of the current run.

        Returns:
            The full path to the created directory.
        """
        timestamp = self._run_timestamp.strftime("%Y%m%d_%H%M")
        safe_provider = "".join(
            c if c.isalnum() or c in '-_' else '_'
            for c in self.provider_name
        )
        self.current_dir = os.path.join(self.base_dir, f"{timestamp}_{safe_provider}")
        os.makedirs(self.current_dir, exist_ok=True)
        return self.current_dir

    def cleanup_old_folders(self, debug: bool = False) -> int:
        """Remove snapshot folders older than retention_days.

        Returns:
            The number of folders deleted.
        """
        if self.retention_days <= 0 or not os.path.exists(self.base_dir):
            return 0

        deleted_count = 0
        cutoff_date = datetime.now() - timedelta(days=self.retention_days)

        for folder_name in os.listdir(self.base_dir):
            folder_path = os.path.join(self.base_dir, folder_name)
            if not os.path.isdir(folder_path):
                continue

            match = self.FOLDER_PATTERN.match(folder_name)
            if not match:
                continue

            try:
                folder_datetime = datetime.strptime(
                    f"{match.group(1)}_{match.group(2)}", "%Y%m%d_%H%M"
                )
                if folder_datetime < cutoff_date:
                    shutil.rmtree(folder_path)
                    deleted_count += 1
                    if debug:
                        print(f"  Deleted old output folder: {folder_name}")
            except (ValueError, OSError) as e:
                if debug:
                    print(f"  Warning: Could not process folder {folder_name}: {e}")

        return deleted_count

    def get_output_path(self, filename: str) -> str:
        """Full path of a file in the current snapshot directory.

        Raises:
            RuntimeError: If create_timestamped_dir() has not been called yet.
        """
        if not self.current_dir:
            raise RuntimeError("Output directory not created. Call create_timestamped_dir() first.")
        return os.path.join(self.current_dir, filename)

    def write_json(self, filename: str, data: Any) -> str:
        """Write data as indented JSON into the current snapshot directory."""
        path = self.get_output_path(filename)
        with open(path, "w") as f:
            json.dump(data, f, indent=2, default=str)
        return path

