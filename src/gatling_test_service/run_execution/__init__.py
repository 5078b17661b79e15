"""Run execution domain exports."""

from .load_test_run_use_case import (
    SKIPPED_MESSAGE,
    SUCCEEDED_MESSAGE,
    LoadTestRunOrchestrator,
)
from .run_contracts import RunOutcome, RunStatus

__all__ = [
    "RunOutcome",
    "RunStatus",
    "LoadTestRunOrchestrator",
    "SKIPPED_MESSAGE",
    "SUCCEEDED_MESSAGE",
]
