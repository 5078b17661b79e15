"""Tests for run execution domain entities."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from gatling_test_service.run_execution.run_contracts import RunOutcome, RunStatus

START = datetime(2024, 5, 1, 10, 0, tzinfo=UTC)
END = datetime(2024, 5, 1, 10, 1, tzinfo=UTC)


@pytest.mark.parametrize(
    ("outcome", "status", "result"),
    [
        (RunOutcome.skipped(START, END, "skipped"), "succeeded", "pass"),
        (RunOutcome.succeeded(START, END, "done", "output"), "succeeded", "pass"),
        (RunOutcome.failed(START, END, RuntimeError("boom")), "errored", "failed"),
    ],
)
def test_outcome_maps_to_event_status_and_result(
    outcome: RunOutcome, status: str, result: str
) -> None:
    assert outcome.event_status == status
    assert outcome.event_result == result


def test_failed_outcome_uses_error_text_as_message() -> None:
    outcome = RunOutcome.failed(START, END, RuntimeError("execution failed"), output="trace")

    assert outcome.status == RunStatus.FAILED
    assert outcome.message == "execution failed"
    assert outcome.output == "trace"
    assert outcome.reported is True


def test_outcome_is_immutable() -> None:
    outcome = RunOutcome.skipped(START, END, "skipped")

    with pytest.raises(AttributeError):
        outcome.message = "changed"  # type: ignore[misc]
