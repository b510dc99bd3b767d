"""Shapes the terminal ExecutionResponse from per-action outcomes."""

from typing import Any, Optional

from actionflow.types import (
    ConfirmationRequest,
    ExecutionFailure,
    ExecutionResult,
    ExecutionSuccess,
    ExecutionSuspended,
    StepError,
)

FAILURE_MESSAGE = "Failed to execute workflow"


class ResultAggregator:
    """Accumulates results and step errors in action declaration order.

    One instance per run; the executor appends as actions finish and asks for
    exactly one of success(), failure() or suspended() at the end.
    """

    def __init__(self):
        self.results: list[ExecutionResult] = []
        self.errors: list[StepError] = []

    def add_result(self, action_id: str, value: Any) -> ExecutionResult:
        result = ExecutionResult(action_id=action_id, result=value)
        self.results.append(result)
        return result

    def add_error(self, action_id: str, error: str, details: Optional[str] = None) -> StepError:
        step_error = StepError(action_id=action_id, error=error, details=details)
        self.errors.append(step_error)
        return step_error

    def success(self) -> ExecutionSuccess:
        """Collect-mode envelope. Still ``success: true`` when every step failed."""
        return ExecutionSuccess(
            results=list(self.results),
            errors=list(self.errors) or None,
        )

    def failure(self, details: str) -> ExecutionFailure:
        return ExecutionFailure(
            error=FAILURE_MESSAGE,
            details=details,
            step_errors=list(self.errors) or None,
        )

    def suspended(self, confirmation: ConfirmationRequest) -> ExecutionSuspended:
        return ExecutionSuspended(pending=confirmation, results=list(self.results))
