"""Orchestrates: lookup → confirmation gate → presence check → call → normalize.

The last stop before a registered function actually runs.
"""

import asyncio
import json
import logging
import traceback
from typing import Any

from actionflow.exceptions import InvocationError
from actionflow.functions.registry import Capability, FunctionRegistry
from actionflow.types import ConfirmationRequest, InvocationResult, InvocationStatus

logger = logging.getLogger(__name__)


def _format_details(params: Any, tb: str) -> str:
    try:
        rendered = json.dumps(params, default=str)
    except (TypeError, ValueError):
        rendered = repr(params)
    return f"params={rendered}\n{tb}"


class ActionInvoker:
    """Invokes registry functions on behalf of WorkflowExecutor."""

    def __init__(self, registry: FunctionRegistry, tool_prefix: str = "functions."):
        """
        Args:
            registry: Function registry to look tools up in
            tool_prefix: Prefix stripped from tool names before lookup
                         (LLM tool calls arrive as ``functions.<name>``).
        """
        self.registry = registry
        self.tool_prefix = tool_prefix

    def normalize(self, tool: str) -> str:
        if self.tool_prefix and tool.startswith(self.tool_prefix):
            return tool[len(self.tool_prefix):]
        return tool

    def capability_for(self, tool: str) -> Capability:
        """Raises ToolNotFound if ``tool`` is not an active registry entry."""
        return self.registry.get(self.normalize(tool))

    async def invoke(
        self,
        tool: str,
        params: dict[str, Any],
        *,
        confirmed: bool = False,
        action_id: str = "",
    ) -> InvocationResult:
        """Invoke one function with resolved parameters.

        Returns:
            InvocationResult — SUCCEEDED with the value, or AWAITING_CONFIRMATION
            when the function is gated and ``confirmed`` is False (the function
            is not called).

        Raises:
            ToolNotFound: unknown or inactive function
            InvocationError: missing required parameter, or the function raised
        """
        capability = self.capability_for(tool)
        if capability.needs_confirmation() and not confirmed:
            logger.info(f"[Invoker] '{capability.name}' requires confirmation (action={action_id})")
            return InvocationResult(
                status=InvocationStatus.AWAITING_CONFIRMATION,
                confirmation=ConfirmationRequest(
                    action_id=action_id, tool=capability.name, arguments=params,
                ),
            )
        value = await self._call(capability, params)
        return InvocationResult(status=InvocationStatus.SUCCEEDED, value=value)

    async def invoke_many(
        self,
        tool: str,
        param_sets: list[dict[str, Any]],
        *,
        confirmed: bool = False,
        action_id: str = "",
        concurrency: int = 10,
    ) -> InvocationResult:
        """Invoke one function once per parameter set (map execution).

        Calls run concurrently, bounded by ``concurrency``, and are all awaited
        before returning. The value list follows ``param_sets`` order. If any
        call fails, the first failure in source order is raised.
        """
        capability = self.capability_for(tool)
        if not param_sets:
            return InvocationResult(status=InvocationStatus.SUCCEEDED, value=[])
        if capability.needs_confirmation() and not confirmed:
            logger.info(
                f"[Invoker] '{capability.name}' requires confirmation for "
                f"{len(param_sets)} mapped calls (action={action_id})"
            )
            return InvocationResult(
                status=InvocationStatus.AWAITING_CONFIRMATION,
                confirmation=ConfirmationRequest(
                    action_id=action_id, tool=capability.name, arguments=list(param_sets),
                ),
            )

        semaphore = asyncio.Semaphore(max(1, concurrency))

        async def _bounded(params: dict[str, Any]) -> Any:
            async with semaphore:
                return await self._call(capability, params)

        outcomes = await asyncio.gather(
            *(_bounded(p) for p in param_sets), return_exceptions=True
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return InvocationResult(status=InvocationStatus.SUCCEEDED, value=list(outcomes))

    async def _call(self, capability: Capability, params: dict[str, Any]) -> Any:
        name = capability.name
        missing = [p for p in capability.definition.required_parameters() if p not in params]
        if missing:
            raise InvocationError(
                f"Missing required parameter(s) {', '.join(repr(m) for m in missing)} "
                f"for function {name}",
                tool_name=name,
                params=params,
            )

        try:
            return await capability.invoke(params)
        except Exception as exc:
            logger.warning(f"[Invoker] Function '{name}' raised: {exc}")
            raise InvocationError(
                str(exc) or type(exc).__name__,
                tool_name=name,
                params=params,
                details={"traceback": _format_details(params, traceback.format_exc())},
            ) from exc
