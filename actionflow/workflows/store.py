"""Per-execution result store: action id → produced value."""

from typing import Any

from actionflow.exceptions import ActionflowError, ReferenceNotFound


class ResultStore:
    """Append-only mapping of action results for a single workflow run.

    Created fresh by WorkflowExecutor for every execution and discarded once
    the response is built. Failed actions (collect mode) are remembered so a
    later reference to them reports the failure instead of a bare miss.
    """

    def __init__(self):
        self._values: dict[str, Any] = {}
        self._failures: dict[str, str] = {}

    def record(self, action_id: str, value: Any) -> None:
        if action_id in self._values or action_id in self._failures:
            raise ActionflowError(f"Result for action '{action_id}' is already recorded")
        self._values[action_id] = value

    def mark_failed(self, action_id: str, error: str) -> None:
        if action_id in self._values or action_id in self._failures:
            raise ActionflowError(f"Result for action '{action_id}' is already recorded")
        self._failures[action_id] = error

    def get(self, action_id: str, reference: str = "") -> Any:
        """Return the recorded value.

        Raises:
            ReferenceNotFound: if the action has not produced a value
        """
        if action_id in self._values:
            return self._values[action_id]
        if action_id in self._failures:
            raise ReferenceNotFound(
                f'Referenced action "{action_id}" failed: {self._failures[action_id]}',
                action_id=action_id,
                reference=reference,
            )
        raise ReferenceNotFound(
            f'Referenced action "{action_id}" not found',
            action_id=action_id,
            reference=reference,
        )

    def has_failed(self, action_id: str) -> bool:
        return action_id in self._failures

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, action_id: str) -> bool:
        return action_id in self._values

    def __len__(self) -> int:
        return len(self._values)
