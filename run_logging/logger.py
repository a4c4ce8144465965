"""
Run Logger
==========
Writes one CSV row per suite to a dated run log and reads it back.
"""

import csv
from pathlib import Path
from datetime import datetime
from typing import List, Dict, Any, Optional
from .schemas import SuiteRecord, SuiteStatus


class RunLogger:
    """
    Manages the CSV run log.
    Writes to a dated file with automatic directory creation.
    """

    def __init__(self, log_directory: str = "logs", verbose: bool = True):
        self.run_log_path = Path(log_directory) / "runs"
        self.run_log_path.mkdir(parents=True, exist_ok=True)

        self.run_log_file = self._get_log_filename()

        if verbose:
            print(f"📋 Run log: {self.run_log_file}")

    def _get_log_filename(self) -> Path:
        """Generate dated log filename."""
        date_str = datetime.now().strftime("%Y%m%d")
        return self.run_log_path / f"runs_{date_str}.csv"

    def log_suite(self, record: SuiteRecord) -> None:
        """
        Append one suite outcome to the run log.

        The header is written when the file is new or empty, so several
        runs on the same day share one file.

        Args:
            record: SuiteRecord instance
        """
        record_dict = record.to_dict()
        write_header = (
            not self.run_log_file.exists() or self.run_log_file.stat().st_size == 0
        )

        with open(self.run_log_file, 'a', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=record_dict.keys())
            if write_header:
                writer.writeheader()
            writer.writerow(record_dict)


class LogReader:
    """Reads and analyzes run logs."""

    def __init__(self, log_directory: str = "logs"):
        self.log_dir = Path(log_directory)

    def read_runs(self, date: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Read the run log for a given date.

        Args:
            date: Date string in YYYYMMDD format (default: today)

        Returns:
            List of row dictionaries
        """
        if date is None:
            date = datetime.now().strftime("%Y%m%d")

        filepath = self.log_dir / "runs" / f"runs_{date}.csv"

        if not filepath.exists():
            return []

        with open(filepath, 'r', newline='') as f:
            reader = csv.DictReader(f)
            return list(reader)

    def failure_counts(self, date: Optional[str] = None) -> Dict[str, int]:
        """Count non-passing rows per suite."""
        counts: Dict[str, int] = {}
        for row in self.read_runs(date):
            if row.get('status') != SuiteStatus.PASSED.value:
                suite = row.get('suite', 'UNKNOWN')
                counts[suite] = counts.get(suite, 0) + 1
        return counts
