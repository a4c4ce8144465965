"""
Suite Runner
============
Runs the test command inside every discovered suite.

Execution is strictly sequential: each command blocks until it exits.
The command gets the suite directory as its working directory; the
runner's own working directory is never changed.

Failure policy (fail_fast=True, the default):
- A non-zero exit aborts the run, remaining suites are not invoked
- A command that cannot be started counts as a failure
"""

import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from core.discovery import Suite, discover_suites
from run_logging.logger import RunLogger
from run_logging.schemas import RunSummary, SuiteRecord, SuiteStatus
from utils.config_loader import ConfigLoader

# Shell conventions for "command not found" / "not executable"
RC_NOT_FOUND = 127
RC_NOT_EXECUTABLE = 126


class SuiteRunner:
    """
    Executes one test command per suite.
    """

    def __init__(
        self,
        command: Sequence[str],
        fail_fast: bool = True,
        logger: Optional[RunLogger] = None,
        env: Optional[Dict[str, str]] = None
    ):
        """
        Initialize suite runner.

        Args:
            command: Test command and its arguments, resolved through PATH
            fail_fast: Stop at the first suite that does not pass
            logger: Optional CSV run logger
            env: Environment for the command (default: inherited)
        """
        if not command:
            raise ValueError("command must not be empty")
        self.command = list(command)
        self.fail_fast = fail_fast
        self.logger = logger
        self.env = env
        self.run_id = datetime.now().strftime("%Y%m%d-%H%M%S")

    def run_suite(self, suite: Suite) -> SuiteRecord:
        """
        Run the command in one suite and wait for it to exit.

        Args:
            suite: Suite to test

        Returns:
            SuiteRecord with status, return code and duration
        """
        started = datetime.now()
        t0 = time.monotonic()
        returncode: Optional[int] = None
        error: Optional[str] = None

        try:
            proc = subprocess.run(self.command, cwd=suite.path, env=self.env)
            returncode = proc.returncode
            status = SuiteStatus.PASSED if returncode == 0 else SuiteStatus.FAILED
        except FileNotFoundError as e:
            status = SuiteStatus.LAUNCH_ERROR
            returncode = RC_NOT_FOUND
            error = str(e)
        except OSError as e:
            status = SuiteStatus.LAUNCH_ERROR
            returncode = RC_NOT_EXECUTABLE
            error = str(e)

        record = SuiteRecord(
            run_id=self.run_id,
            timestamp=started,
            suite=suite.name,
            path=suite.path,
            command=self.command,
            status=status,
            returncode=returncode,
            duration_s=time.monotonic() - t0,
            error=error
        )

        if self.logger is not None:
            self.logger.log_suite(record)

        return record

    def run(self, suites: List[Suite], root: Union[str, Path] = ".") -> RunSummary:
        """
        Run every suite in order.

        Args:
            suites: Suites in traversal order
            root: Root the suites were discovered under

        Returns:
            RunSummary; suites skipped after a failure are recorded
            as NOT_RUN
        """
        summary = RunSummary(root=Path(root), discovered=len(suites))

        print(f"[INFO] Running {len(suites)} suites: {' '.join(self.command)}", flush=True)

        for index, suite in enumerate(suites):
            print(f"\n[RUN] {suite.name}", flush=True)
            record = self.run_suite(suite)
            summary.records.append(record)

            if record.passed:
                print(f"[PASS] {suite.name} ({record.duration_s:.1f}s)", flush=True)
                continue

            if record.status == SuiteStatus.LAUNCH_ERROR:
                print(f"[FAIL] {suite.name}: cannot start command ({record.error})", flush=True)
            else:
                print(f"[FAIL] {suite.name} (rc={record.returncode})", flush=True)

            if self.fail_fast:
                for skipped in suites[index + 1:]:
                    summary.records.append(SuiteRecord(
                        run_id=self.run_id,
                        timestamp=datetime.now(),
                        suite=skipped.name,
                        path=skipped.path,
                        command=self.command,
                        status=SuiteStatus.NOT_RUN
                    ))
                break

        self._print_summary(summary)
        return summary

    @staticmethod
    def _print_summary(summary: RunSummary) -> None:
        invoked = [r for r in summary.records if r.status != SuiteStatus.NOT_RUN]
        skipped = len(summary.records) - len(invoked)

        print("\n" + "=" * 60)
        if summary.success:
            print(f"[ALL PASS] {summary.passed_count}/{summary.discovered}")
        else:
            failures = [r.suite for r in invoked if not r.passed]
            print(f"[FAILED] {', '.join(failures)}")
            print(f"   Passed: {summary.passed_count}/{summary.discovered}")
            if skipped:
                print(f"   Not run: {skipped}")
        print("=" * 60)


def run_directory(
    root: Optional[Union[str, Path]] = None,
    config: Optional[ConfigLoader] = None,
    log: bool = True
) -> RunSummary:
    """
    Discover the suites under ``root`` and run them.

    Args:
        root: Directory to scan (default: current working directory)
        config: Loaded configuration (default: config file or defaults)
        log: Write the CSV run log when the config names a log_dir

    Raises:
        DiscoveryError: root cannot be listed
    """
    if config is None:
        config = ConfigLoader()
        config.load_all()
    root = Path.cwd() if root is None else Path(root)

    suites = discover_suites(
        root,
        config.get('manifest'),
        name_pattern=config.get('name_pattern')
    )

    logger = None
    log_dir = config.get('log_dir')
    if log and log_dir and suites:
        logger = RunLogger(log_dir)

    runner = SuiteRunner(
        config.get('command'),
        fail_fast=config.get('fail_fast'),
        logger=logger
    )
    return runner.run(suites, root)
