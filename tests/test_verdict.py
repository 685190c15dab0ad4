"""Tests for verdict classification."""

from datetime import datetime

import pytest

from lk_harness import ExecutionOutcome, SupervisionResult, Verdict, classify


class TestClassify:
    """Test classify() over every outcome/deadline combination."""

    def test_timeout_with_deadline_is_success(self):
        assert classify(ExecutionOutcome.timed_out(), deadline_set=True) is Verdict.SUCCESS

    def test_error_with_deadline_is_failure(self):
        outcome = ExecutionOutcome.returned(RuntimeError("x"))
        assert classify(outcome, deadline_set=True) is Verdict.FAILURE

    def test_clean_return_with_deadline_is_premature(self):
        outcome = ExecutionOutcome.returned()
        assert classify(outcome, deadline_set=True) is Verdict.PREMATURE_EXIT

    def test_error_without_deadline(self):
        outcome = ExecutionOutcome.returned(RuntimeError("x"))
        assert classify(outcome, deadline_set=False) is Verdict.UNBOUNDED_FAILURE

    def test_clean_return_without_deadline(self):
        outcome = ExecutionOutcome.returned()
        assert classify(outcome, deadline_set=False) is Verdict.UNBOUNDED_SUCCESS

    def test_timeout_without_deadline_is_impossible(self):
        """An unbounded run cannot be observed as timed out."""
        with pytest.raises(ValueError):
            classify(ExecutionOutcome.timed_out(), deadline_set=False)


class TestVerdict:
    """Test verdict to exit code mapping."""

    @pytest.mark.parametrize(
        "verdict,exit_code,passed",
        [
            (Verdict.SUCCESS, 0, True),
            (Verdict.UNBOUNDED_SUCCESS, 0, True),
            (Verdict.FAILURE, 1, False),
            (Verdict.UNBOUNDED_FAILURE, 1, False),
            (Verdict.PREMATURE_EXIT, 1, False),
        ],
    )
    def test_exit_codes(self, verdict, exit_code, passed):
        assert verdict.exit_code == exit_code
        assert verdict.passed is passed

    def test_mapping_is_total(self):
        """Every verdict maps to 0 or 1."""
        assert {v.exit_code for v in Verdict} == {0, 1}


class TestExecutionOutcome:
    """Test outcome constructors."""

    def test_timed_out_has_no_error(self):
        outcome = ExecutionOutcome.timed_out()
        assert not outcome.completed
        assert outcome.error is None

    def test_returned_keeps_error(self):
        err = KeyError("k")
        outcome = ExecutionOutcome.returned(err)
        assert outcome.completed
        assert outcome.error is err


class TestSupervisionResultModel:
    """Test SupervisionResult built by hand."""

    def test_unbounded_summary(self):
        now = datetime.now()
        result = SupervisionResult(
            verdict=Verdict.UNBOUNDED_SUCCESS,
            outcome=ExecutionOutcome.returned(),
            deadline=None,
            start_time=now,
            end_time=now,
        )
        assert "unbounded" in result.summary()
        assert result.passed
        assert result.to_dict()["deadline_seconds"] is None
