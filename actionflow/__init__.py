"""actionflow — execute declarative workflows against a registry of functions.

Usage:
    from actionflow import FunctionRegistry, Workflow, WorkflowExecutor

    registry = FunctionRegistry.from_registered()
    executor = WorkflowExecutor(registry)
    response = await executor.execute(Workflow.model_validate(payload))
"""

from actionflow.types import (
    Action, Workflow, WorkflowOptions, ParamSpec, FunctionDefinition,
    ExecutionResult, StepError, ExecutionSuccess, ExecutionFailure,
    ExecutionSuspended, ExecutionResponse, ConfirmationRequest,
    FailurePolicy, WorkflowRun, WorkflowState, StepState,
)
from actionflow.exceptions import (
    ActionflowError, WorkflowValidationError, ToolNotFound, ResolutionError,
    ReferenceNotFound, FieldNotFound, UnresolvedUserInput, ParameterError,
    MapExpansionError, InvocationError,
)
from actionflow.functions import Capability, FunctionRegistry, function
from actionflow.workflows import WorkflowExecutor, WorkflowValidator
from actionflow.version import __version__

__all__ = [
    "Action", "Workflow", "WorkflowOptions", "ParamSpec", "FunctionDefinition",
    "ExecutionResult", "StepError", "ExecutionSuccess", "ExecutionFailure",
    "ExecutionSuspended", "ExecutionResponse", "ConfirmationRequest",
    "FailurePolicy", "WorkflowRun", "WorkflowState", "StepState",
    "ActionflowError", "WorkflowValidationError", "ToolNotFound", "ResolutionError",
    "ReferenceNotFound", "FieldNotFound", "UnresolvedUserInput", "ParameterError",
    "MapExpansionError", "InvocationError",
    "Capability", "FunctionRegistry", "function",
    "WorkflowExecutor", "WorkflowValidator",
    "__version__",
]
