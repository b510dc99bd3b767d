"""Workflow executor. Drives a Workflow through its actions in declared order.

Orchestrates, per action: lookup → resolve → [expand] → invoke → record.

Run states:   pending → running → {completed, failed, awaiting_confirmation}
Step states:  resolving → (expanding) → invoking → {recorded, errored, awaiting_confirmation}
"""

import contextvars
import inspect
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from actionflow.callbacks.base import WorkflowCallback
from actionflow.config import ActionflowConfig
from actionflow.exceptions import ActionflowError
from actionflow.functions.registry import FunctionRegistry
from actionflow.types import (
    Action,
    ExecutionResponse,
    FailurePolicy,
    StepState,
    Workflow,
    WorkflowRun,
    WorkflowState,
)

from .aggregator import ResultAggregator
from .expander import MapExpander
from .invoker import ActionInvoker
from .resolver import ReferenceResolver
from .store import ResultStore
from .validator import check_structure

logger = logging.getLogger(__name__)

# Per-request callbacks override instance callbacks; async-safe via ContextVar
_request_callbacks: contextvars.ContextVar = contextvars.ContextVar("_actionflow_callbacks", default=None)


class WorkflowExecutor:
    """Single entry point for running a workflow against a FunctionRegistry.

    Constructor dependencies (all injected):
        - registry: FunctionRegistry
        - config: ActionflowConfig (failure policy default, map concurrency, tool prefix)
        - callbacks: WorkflowCallback hook objects, or plain
          ``async def cb(event: str, data: dict)`` callables (sync also accepted)

    The executor holds no per-run state; one instance can serve concurrent runs.
    """

    def __init__(
        self,
        registry: FunctionRegistry,
        config: ActionflowConfig = None,
        callbacks: Optional[list[Union[WorkflowCallback, Callable]]] = None,
        resolver: ReferenceResolver = None,
    ):
        self.registry = registry
        self.config = config or ActionflowConfig()
        self.callbacks = callbacks or []
        self.resolver = resolver or ReferenceResolver()
        self.expander = MapExpander(self.resolver)
        self.invoker = ActionInvoker(registry, tool_prefix=self.config.tool_prefix)

    async def execute(
        self,
        workflow: Workflow,
        *,
        policy: Optional[FailurePolicy] = None,
        debug: Optional[bool] = None,
        callbacks: list = None,
    ) -> ExecutionResponse:
        """Run every action and return the terminal response.

        Raises:
            WorkflowValidationError: the workflow is structurally invalid; no
                action has run.
        """
        response, _ = await self.execute_with_run(
            workflow, policy=policy, debug=debug, callbacks=callbacks
        )
        return response

    async def execute_with_run(
        self,
        workflow: Workflow,
        *,
        policy: Optional[FailurePolicy] = None,
        debug: Optional[bool] = None,
        callbacks: list = None,
    ) -> tuple[ExecutionResponse, WorkflowRun]:
        """Like execute(), but also returns the WorkflowRun bookkeeping record."""
        check_structure(workflow)

        _tok = _request_callbacks.set(callbacks) if callbacks is not None else None
        try:
            return await self._run(workflow, policy, debug)
        finally:
            if _tok is not None:
                _request_callbacks.reset(_tok)

    def resolve_policy(self, workflow: Workflow, policy: Optional[FailurePolicy] = None) -> FailurePolicy:
        """Per-run argument > workflow options > configured default."""
        if policy is not None:
            return FailurePolicy(policy)
        if workflow.options.failure_policy is not None:
            return workflow.options.failure_policy
        return FailurePolicy(self.config.failure_policy)

    async def _run(
        self,
        workflow: Workflow,
        policy: Optional[FailurePolicy],
        debug: Optional[bool],
    ) -> tuple[ExecutionResponse, WorkflowRun]:
        run = WorkflowRun(
            policy=self.resolve_policy(workflow, policy),
            debug=self.config.debug if debug is None else debug,
            action_count=len(workflow.actions),
            tools=[a.tool for a in workflow.actions],
            started_at=datetime.now(timezone.utc),
        )
        run.state = WorkflowState.RUNNING
        started = time.monotonic()

        logger.info(
            f"[Executor] Run {run.id} started: {run.action_count} action(s), "
            f"policy={run.policy.value}"
        )
        await self._fire_callbacks("workflow_started", {
            "execution_id": run.id,
            "action_count": run.action_count,
            "tools": run.tools,
            "policy": run.policy.value,
        })

        store = ResultStore()
        aggregator = ResultAggregator()
        response: Optional[ExecutionResponse] = None

        for index, action in enumerate(workflow.actions):
            await self._fire_callbacks("step_started", {
                "execution_id": run.id,
                "action_id": action.id,
                "step_index": index,
                "tool": action.tool,
                "map": action.map,
            })
            try:
                outcome = await self._execute_action(action, store, run)
            except ActionflowError as exc:
                message = str(exc)
                run.step_states[action.id] = StepState.ERRORED
                logger.warning(f"[Executor] Action '{action.id}' failed: {message}")
                details = exc.details.get("traceback") if run.debug else None
                aggregator.add_error(action.id, message, details=details)
                await self._fire_callbacks("step_failed", {
                    "execution_id": run.id,
                    "action_id": action.id,
                    "step_index": index,
                    "tool": action.tool,
                    "error_type": type(exc).__name__,
                    "error": message,
                })
                if run.policy == FailurePolicy.FAIL_FAST:
                    run.state = WorkflowState.FAILED
                    run.error = message
                    response = aggregator.failure(message)
                    break
                store.mark_failed(action.id, message)
                continue

            if outcome.awaiting_confirmation:
                run.step_states[action.id] = StepState.AWAITING_CONFIRMATION
                run.state = WorkflowState.AWAITING_CONFIRMATION
                logger.info(
                    f"[Executor] Run {run.id} suspended at '{action.id}': "
                    f"'{outcome.confirmation.tool}' requires confirmation"
                )
                await self._fire_callbacks("confirmation_required", {
                    "execution_id": run.id,
                    "action_id": action.id,
                    "step_index": index,
                    "tool": outcome.confirmation.tool,
                })
                response = aggregator.suspended(outcome.confirmation)
                break

            store.record(action.id, outcome.value)
            aggregator.add_result(action.id, outcome.value)
            run.step_states[action.id] = StepState.RECORDED
            self._log_payload(run, f"[Executor] Action '{action.id}' result: {outcome.value!r}")
            await self._fire_callbacks("step_completed", {
                "execution_id": run.id,
                "action_id": action.id,
                "step_index": index,
                "tool": action.tool,
                "result_type": type(outcome.value).__name__,
            })

        if response is None:
            run.state = WorkflowState.COMPLETED
            response = aggregator.success()

        run.completed_at = datetime.now(timezone.utc)
        run.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"[Executor] Run {run.id} {run.state.value}: {len(aggregator.results)} result(s), "
            f"{len(aggregator.errors)} error(s) in {run.duration_ms}ms"
        )
        await self._fire_callbacks("workflow_completed", {
            "execution_id": run.id,
            "state": run.state.value,
            "success": response.success,
            "result_count": len(aggregator.results),
            "error_count": len(aggregator.errors),
            "duration_ms": run.duration_ms,
        })
        return response, run

    async def _execute_action(self, action: Action, store: ResultStore, run: WorkflowRun):
        # Unknown tools are reported before any reference is looked at
        self.invoker.capability_for(action.tool)

        run.step_states[action.id] = StepState.RESOLVING
        resolved = self.resolver.resolve_parameters(action.parameters, store)
        self._log_payload(run, f"[Executor] Action '{action.id}' params: {resolved!r}")

        if not action.map:
            run.step_states[action.id] = StepState.INVOKING
            return await self.invoker.invoke(
                action.tool, resolved, confirmed=action.confirmed, action_id=action.id,
            )

        run.step_states[action.id] = StepState.EXPANDING
        expanded = self.expander.expand_resolved(action, resolved)
        logger.debug(f"[Executor] Action '{action.id}' expanded into {len(expanded)} call(s)")

        run.step_states[action.id] = StepState.INVOKING
        return await self.invoker.invoke_many(
            action.tool,
            [a.parameters for a in expanded],
            confirmed=action.confirmed,
            action_id=action.id,
            concurrency=self.config.map_concurrency,
        )

    def _log_payload(self, run: WorkflowRun, message: str) -> None:
        logger.log(logging.INFO if run.debug else logging.DEBUG, message[:2000])

    async def _fire_callbacks(self, event: str, data: dict[str, Any]) -> None:
        """Invoke all registered callbacks for a lifecycle event."""
        cbs = _request_callbacks.get()
        if cbs is None:
            cbs = self.callbacks
        if not cbs:
            return
        for cb in cbs:
            try:
                if isinstance(cb, WorkflowCallback):
                    result = getattr(cb, f"on_{event}")(data)
                else:
                    result = cb(event, data)
                if inspect.isawaitable(result):
                    await result
            except Exception as cb_exc:
                logger.warning(f"[Executor] Callback error on '{event}': {cb_exc}")
