"""
Run Logging Tests
=================
Schemas, CSV writer and reader.
"""

import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from run_logging.logger import LogReader, RunLogger
from run_logging.schemas import RunSummary, SuiteRecord, SuiteStatus


def make_record(suite: str, status: SuiteStatus, returncode: int = 0) -> SuiteRecord:
    return SuiteRecord(
        run_id="20250101-000000",
        timestamp=datetime(2025, 1, 1, 12, 0, 0),
        suite=suite,
        path=Path("/tmp") / suite,
        command=["cargo", "test"],
        status=status,
        returncode=returncode,
        duration_s=1.23456
    )


class TestSchemas(unittest.TestCase):
    """Test class for run log schemas."""

    def test_record_to_dict(self):
        d = make_record("intcode", SuiteStatus.PASSED).to_dict()

        self.assertEqual(d['timestamp'], "2025-01-01T12:00:00")
        self.assertEqual(d['command'], "cargo test")
        self.assertEqual(d['status'], "PASSED")
        self.assertEqual(d['duration_s'], 1.235)
        self.assertEqual(d['path'], str(Path("/tmp") / "intcode"))

    def test_summary_exit_codes(self):
        summary = RunSummary(root=Path("."), discovered=2)
        self.assertEqual(summary.exit_code, 0)

        summary.records.append(make_record("a", SuiteStatus.PASSED))
        summary.records.append(make_record("b", SuiteStatus.FAILED, returncode=101))
        self.assertFalse(summary.success)
        self.assertEqual(summary.failed.suite, "b")
        self.assertEqual(summary.exit_code, 101)
        self.assertEqual(summary.passed_count, 1)


class TestRunLogger(unittest.TestCase):
    """Test class for the CSV run log."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.log_dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_header_written_once(self):
        logger = RunLogger(self.log_dir, verbose=False)
        logger.log_suite(make_record("a", SuiteStatus.PASSED))

        # A second logger on the same day appends to the same file
        RunLogger(self.log_dir, verbose=False).log_suite(
            make_record("b", SuiteStatus.FAILED, returncode=1)
        )

        lines = logger.run_log_file.read_text().splitlines()
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("run_id,"))

        rows = LogReader(self.log_dir).read_runs()
        self.assertEqual([r['suite'] for r in rows], ["a", "b"])

    def test_failure_counts(self):
        logger = RunLogger(self.log_dir, verbose=False)
        logger.log_suite(make_record("a", SuiteStatus.FAILED, returncode=1))
        logger.log_suite(make_record("a", SuiteStatus.LAUNCH_ERROR, returncode=127))
        logger.log_suite(make_record("b", SuiteStatus.PASSED))

        self.assertEqual(LogReader(self.log_dir).failure_counts(), {"a": 2})

    def test_read_missing_date(self):
        self.assertEqual(LogReader(self.log_dir).read_runs("19990101"), [])


if __name__ == '__main__':
    unittest.main()
