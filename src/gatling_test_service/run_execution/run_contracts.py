"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RunStatus(str, Enum):
    """Terminal state of one load test run."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    status: RunStatus
    message: str
    started_at: datetime
    finished_at: datetime
    output: str = ""
    reported: bool = True

    @property
    def event_status(self) -> str:
        """Status value carried by the finished event."""
        return "errored" if self.status == RunStatus.FAILED else "succeeded"

    @property
    def event_result(self) -> str:
        """Result value carried by the finished event."""
        return "failed" if self.status == RunStatus.FAILED else "pass"

    @staticmethod
    def skipped(started_at: datetime, finished_at: datetime, message: str) -> RunOutcome:
        return RunOutcome(
            status=RunStatus.SKIPPED,
            message=message,
            started_at=started_at,
            finished_at=finished_at,
        )

    @staticmethod
    def succeeded(
        started_at: datetime, finished_at: datetime, message: str, output: str
    ) -> RunOutcome:
        return RunOutcome(
            status=RunStatus.SUCCEEDED,
            message=message,
            started_at=started_at,
            finished_at=finished_at,
            output=output,
        )

    @staticmethod
    def failed(
        started_at: datetime, finished_at: datetime, error: Exception, output: str = ""
    ) -> RunOutcome:
        return RunOutcome(
            status=RunStatus.FAILED,
            message=str(error),
            started_at=started_at,
            finished_at=finished_at,
            output=output,
        )
