"""Callback/hook system for workflow lifecycle events."""

from actionflow.callbacks.base import BaseCallback, WorkflowCallback
from actionflow.callbacks.logging import LoggingCallback

__all__ = ["BaseCallback", "WorkflowCallback", "LoggingCallback"]
