"""
Run Log Schemas
===============
Data structures describing the outcome of one suite and of a whole run.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
from enum import Enum


class SuiteStatus(Enum):
    """Outcome of a single suite."""
    PASSED = "PASSED"
    FAILED = "FAILED"              # Command exited non-zero
    LAUNCH_ERROR = "LAUNCH_ERROR"  # Command could not be started
    NOT_RUN = "NOT_RUN"            # Skipped after an earlier failure


@dataclass
class SuiteRecord:
    """
    One row per suite.
    Logged for every suite the runner invoked.
    """
    run_id: str
    timestamp: datetime
    suite: str
    path: Path
    command: List[str]
    status: SuiteStatus
    returncode: Optional[int] = None
    duration_s: float = 0.0
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == SuiteStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for CSV writing."""
        d = asdict(self)
        d['timestamp'] = self.timestamp.isoformat()
        d['path'] = str(self.path)
        d['command'] = " ".join(self.command)
        d['status'] = self.status.value if isinstance(self.status, SuiteStatus) else self.status
        d['duration_s'] = round(self.duration_s, 3)
        return d


@dataclass
class RunSummary:
    """Everything one invocation of the runner did."""
    root: Path
    discovered: int = 0
    records: List[SuiteRecord] = field(default_factory=list)

    @property
    def failed(self) -> Optional[SuiteRecord]:
        """First suite that did not pass, if any."""
        for record in self.records:
            if not record.passed:
                return record
        return None

    @property
    def success(self) -> bool:
        return self.failed is None

    @property
    def exit_code(self) -> int:
        """
        0 when every invoked suite passed, otherwise the return code of
        the first failure (1 when that code is not a positive integer,
        e.g. a process killed by a signal).
        """
        failed = self.failed
        if failed is None:
            return 0
        if failed.returncode is not None and failed.returncode > 0:
            return failed.returncode
        return 1

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.records if r.passed)
