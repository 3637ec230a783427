"""Tests for result recording and the acceptance gate."""

import pytest

from core.domain.enums import OutcomeStatus
from core.reporting.recorder import ResultRecorder, evaluate_acceptance, success_rate
from orchestration.models import Outcome, WorkflowContext


def _recorder(passed: int, failed: int = 0, errored: int = 0) -> ResultRecorder:
    recorder = ResultRecorder()
    for i in range(passed):
        recorder.record(f"ok-{i}", Outcome.success())
    for i in range(failed):
        recorder.record(f"failed-{i}", Outcome.failure(400, {"message": "bad"}, "bad request"))
    for i in range(errored):
        recorder.record(f"errored-{i}", Outcome.error("TransportError: timed out"))
    return recorder


@pytest.mark.parametrize(
    "passed,total,expected",
    [(0, 0, 0), (6, 8, 75), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (1, 201, 0), (8, 8, 100)],
)
def test_success_rate_rounds_half_up(passed, total, expected):
    assert success_rate(passed, total) == expected


def test_counts_and_rate_for_mixed_run():
    """6 successes, 1 failure, 1 error: 75% and the default gate accepts."""
    report = _recorder(6, 1, 1).summarize()

    assert (report.total, report.passed, report.failed, report.errored) == (8, 6, 1, 1)
    assert report.success_rate == 75

    context = WorkflowContext({"access_token": "t", "provider_id": "p", "patient_id": "q"})
    verdict = evaluate_acceptance(report, context)
    assert verdict.accepted is True
    assert verdict.reasons == []


def test_rate_below_threshold_rejects():
    report = _recorder(5, 2, 1).summarize()
    context = {"access_token": "t", "provider_id": "p", "patient_id": "q"}

    verdict = evaluate_acceptance(report, context)

    assert report.success_rate == 63
    assert verdict.accepted is False
    assert verdict.reasons == ["success rate 63% below 75%"]


def test_missing_critical_value_rejects_even_at_full_rate():
    report = _recorder(8).summarize()
    context = WorkflowContext({"access_token": "t", "provider_id": "", "patient_id": "q"})

    verdict = evaluate_acceptance(report, context)

    assert verdict.accepted is False
    assert verdict.missing_keys == ("provider_id",)


def test_custom_threshold_and_keys():
    report = _recorder(1, 1).summarize()

    verdict = evaluate_acceptance(report, {"token": "x"}, required_keys=("token",), threshold=50)

    assert verdict.accepted is True
    assert verdict.threshold == 50


def test_outcomes_keep_execution_order():
    recorder = _recorder(1, 1, 1)

    assert [e.index for e in recorder.outcomes] == [0, 1, 2]
    assert [e.status for e in recorder.outcomes] == [
        OutcomeStatus.SUCCESS,
        OutcomeStatus.FAILURE,
        OutcomeStatus.ERROR,
    ]
    assert len(recorder) == 3


def test_empty_run_reports_zero():
    report = ResultRecorder().summarize()

    assert report.total == 0
    assert report.success_rate == 0
    assert evaluate_acceptance(report, {}, required_keys=()).accepted is False
