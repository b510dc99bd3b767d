"""Base callback protocol for workflow lifecycle hooks.

Callbacks are called at key points of a workflow run. Implement this protocol
to observe or instrument execution without modifying core logic.

Usage:
    class MyCallback(BaseCallback):
        async def on_step_failed(self, data, **kw):
            print(f"{data['action_id']} failed: {data['error']}")

    executor = WorkflowExecutor(registry, callbacks=[MyCallback()])
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WorkflowCallback(Protocol):
    """Protocol defining hooks for workflow lifecycle events.

    All methods are async; the executor awaits each registered callback in order.
    Each hook receives the event payload dict the executor emits.
    """

    async def on_workflow_started(self, data: dict[str, Any], **kwargs: Any) -> None:
        """Called once, after structural validation, before the first action."""
        ...

    async def on_step_started(self, data: dict[str, Any], **kwargs: Any) -> None:
        ...

    async def on_step_completed(self, data: dict[str, Any], **kwargs: Any) -> None:
        """Called after an action's result is recorded."""
        ...

    async def on_step_failed(self, data: dict[str, Any], **kwargs: Any) -> None:
        """Called when an action errors, under either failure policy."""
        ...

    async def on_confirmation_required(self, data: dict[str, Any], **kwargs: Any) -> None:
        ...

    async def on_workflow_completed(self, data: dict[str, Any], **kwargs: Any) -> None:
        """Called when the run ends (completed, failed, or suspended)."""
        ...


class BaseCallback:
    """Concrete base with no-op implementations of all hooks.

    Instances are callable as ``await cb(event, data)``, which is the shape
    WorkflowExecutor expects; ``__call__`` dispatches to ``on_<event>``.
    Subclass this to override only the hooks you need.
    """

    async def __call__(self, event: str, data: dict[str, Any]) -> None:
        handler = getattr(self, f"on_{event}", None)
        if handler is not None:
            await handler(data)

    async def on_workflow_started(self, data: dict[str, Any], **kwargs: Any) -> None:
        pass

    async def on_step_started(self, data: dict[str, Any], **kwargs: Any) -> None:
        pass

    async def on_step_completed(self, data: dict[str, Any], **kwargs: Any) -> None:
        pass

    async def on_step_failed(self, data: dict[str, Any], **kwargs: Any) -> None:
        pass

    async def on_confirmation_required(self, data: dict[str, Any], **kwargs: Any) -> None:
        pass

    async def on_workflow_completed(self, data: dict[str, Any], **kwargs: Any) -> None:
        pass
