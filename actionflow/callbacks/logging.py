"""Structured JSON logging callback for workflow lifecycle events."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from actionflow.callbacks.base import BaseCallback

logger = logging.getLogger("actionflow.audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _clip(data: dict[str, Any]) -> dict[str, Any]:
    return {
        k: (v if isinstance(v, (int, float, bool)) or v is None else str(v)[:200])
        for k, v in data.items()
    }


class LoggingCallback(BaseCallback):
    """Emits structured JSON log lines for every lifecycle event.

    Each log line is a self-contained JSON object with:
      - event: event type name
      - ts: ISO-8601 UTC timestamp
      - relevant fields depending on event

    Log level: INFO for normal events, WARNING for step failures.
    Logger name: actionflow.audit (configure in your logging setup)

        executor = WorkflowExecutor(registry, callbacks=[LoggingCallback()])
    """

    async def on_workflow_started(self, data: dict[str, Any], **kwargs: Any) -> None:
        logger.info(json.dumps({
            "event": "workflow_started",
            "ts": _now(),
            "execution_id": data.get("execution_id", ""),
            "action_count": data.get("action_count", 0),
            "tools": list(data.get("tools", [])),
            "policy": data.get("policy", ""),
        }))

    async def on_step_started(self, data: dict[str, Any], **kwargs: Any) -> None:
        logger.info(json.dumps({"event": "step_started", "ts": _now(), **_clip(data)}))

    async def on_step_completed(self, data: dict[str, Any], **kwargs: Any) -> None:
        logger.info(json.dumps({
            "event": "step_completed",
            "ts": _now(),
            "execution_id": data.get("execution_id", ""),
            "action_id": data.get("action_id", ""),
            "step_index": data.get("step_index", 0),
            "tool": data.get("tool", ""),
            "result_type": data.get("result_type", ""),
        }))

    async def on_step_failed(self, data: dict[str, Any], **kwargs: Any) -> None:
        logger.warning(json.dumps({
            "event": "step_failed",
            "ts": _now(),
            "execution_id": data.get("execution_id", ""),
            "action_id": data.get("action_id", ""),
            "step_index": data.get("step_index", 0),
            "tool": data.get("tool", ""),
            "error_type": data.get("error_type", ""),
            "error": str(data.get("error", ""))[:500],
        }))

    async def on_confirmation_required(self, data: dict[str, Any], **kwargs: Any) -> None:
        logger.info(json.dumps({"event": "confirmation_required", "ts": _now(), **_clip(data)}))

    async def on_workflow_completed(self, data: dict[str, Any], **kwargs: Any) -> None:
        logger.info(json.dumps({
            "event": "workflow_completed",
            "ts": _now(),
            "execution_id": data.get("execution_id", ""),
            "state": data.get("state", ""),
            "success": data.get("success", False),
            "result_count": data.get("result_count", 0),
            "error_count": data.get("error_count", 0),
            "duration_ms": data.get("duration_ms", 0),
        }))
