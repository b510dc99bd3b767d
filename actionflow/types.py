"""All shared types, enums, and type aliases. Everything imports from here."""

import time
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


# ── Enums ──────────────────────────────────────────────────────────────

class FailurePolicy(str, Enum):
    COLLECT = "collect"       # record a StepError and keep going
    FAIL_FAST = "fail_fast"   # abort the run on the first failing action

class WorkflowState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"                                # only under fail_fast
    AWAITING_CONFIRMATION = "awaiting_confirmation"

class StepState(str, Enum):
    RESOLVING = "resolving"
    EXPANDING = "expanding"
    INVOKING = "invoking"
    RECORDED = "recorded"
    ERRORED = "errored"
    AWAITING_CONFIRMATION = "awaiting_confirmation"

class InvocationStatus(str, Enum):
    SUCCEEDED = "succeeded"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


# ── Function registry shapes ───────────────────────────────────────────

class ParamSpec(BaseModel):
    """Declared shape of one function parameter."""
    type: str = "string"                # "string", "number", "boolean", "array", "object"
    description: str = ""
    required: bool = False
    enum: Optional[list[Any]] = None    # allowed values, if constrained

class FunctionDefinition(BaseModel):
    """Registration record for a function the workflow engine can call."""
    name: str                                                   # unique identifier
    description: str = ""
    parameters: dict[str, ParamSpec] = Field(default_factory=dict)   # declaration order is call order
    needs_confirmation: bool = False    # if True, the caller must resubmit with confirmed=true
    is_active: bool = True

    def required_parameters(self) -> list[str]:
        return [name for name, spec in self.parameters.items() if spec.required]

    def metadata(self) -> dict[str, Any]:
        """Public description used by the /functions endpoint and the CLI."""
        return {
            "name": self.name,
            "description": self.description,
            "needConfirmation": self.needs_confirmation,
            "isActive": self.is_active,
            "parameters": [
                {"name": name, **spec.model_dump(exclude_none=True)}
                for name, spec in self.parameters.items()
            ],
        }


# ── Workflow shapes ────────────────────────────────────────────────────

class Action(BaseModel):
    """One step of a workflow: a registered function plus its parameters."""
    id: str = ""                        # handle later actions use to reference this output
    tool: str = ""                      # registry name, optionally prefixed "functions."
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)   # literals or reference strings
    parameter_metadata: dict[str, ParamSpec] = Field(default_factory=dict, alias="parameterMetadata")
    map: bool = False                   # fan out over the array parameter
    confirmed: bool = False             # caller acknowledged a confirmation-gated function

    model_config = {"populate_by_name": True, "frozen": True}

class WorkflowOptions(BaseModel):
    execute_immediately: bool = Field(default=False, alias="executeImmediately")
    failure_policy: Optional[FailurePolicy] = Field(default=None, alias="failurePolicy")

    model_config = {"populate_by_name": True, "frozen": True}

class Workflow(BaseModel):
    """Declarative, ordered list of actions submitted for execution."""
    type: str = "workflow"
    actions: list[Action]
    options: WorkflowOptions = Field(default_factory=WorkflowOptions)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _default_action_ids(cls, data: Any) -> Any:
        # Actions without an id get a positional one so they can still be reported.
        if isinstance(data, dict) and isinstance(data.get("actions"), list):
            actions = []
            for index, action in enumerate(data["actions"]):
                if isinstance(action, dict) and not action.get("id"):
                    action = {**action, "id": f"action_{index}"}
                elif isinstance(action, Action) and not action.id:
                    action = action.model_copy(update={"id": f"action_{index}"})
                actions.append(action)
            data = {**data, "actions": actions}
        return data

    def action_ids(self) -> list[str]:
        return [a.id for a in self.actions]


# ── Invocation outcomes ────────────────────────────────────────────────

class ConfirmationRequest(BaseModel):
    """Emitted instead of a call when a gated function was not confirmed."""
    action_id: str = Field(default="", alias="actionId")
    tool: str
    arguments: Any                      # dict, or list of dicts for a mapped action

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

class InvocationResult(BaseModel):
    """Outcome of one Action Invoker call that did not raise."""
    status: InvocationStatus
    value: Any = None
    confirmation: Optional[ConfirmationRequest] = None

    @property
    def awaiting_confirmation(self) -> bool:
        return self.status == InvocationStatus.AWAITING_CONFIRMATION


# ── Execution report ───────────────────────────────────────────────────

class ExecutionResult(BaseModel):
    """Output of one successful action."""
    action_id: str = Field(alias="actionId")
    result: Any = None

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict:
        return {"actionId": self.action_id, "result": self.result}

class StepError(BaseModel):
    """Failure of one action."""
    action_id: str = Field(alias="actionId")
    error: str
    details: Optional[str] = None       # traceback / params, debug runs only

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict:
        data = {"actionId": self.action_id, "error": self.error}
        if self.details is not None:
            data["details"] = self.details
        return data

class ExecutionSuccess(BaseModel):
    success: Literal[True] = True
    results: list[ExecutionResult] = Field(default_factory=list)
    errors: Optional[list[StepError]] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "success": True,
            "results": [r.to_dict() for r in self.results],
        }
        if self.errors:
            data["errors"] = [e.to_dict() for e in self.errors]
        return data

class ExecutionFailure(BaseModel):
    success: Literal[False] = False
    error: str
    details: str
    step_errors: Optional[list[StepError]] = Field(default=None, alias="stepErrors")

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"success": False, "error": self.error, "details": self.details}
        if self.step_errors:
            data["stepErrors"] = [e.to_dict() for e in self.step_errors]
        return data

class ExecutionSuspended(BaseModel):
    """Run halted at a confirmation-gated action; resubmit with confirmed=true."""
    success: Literal[False] = False
    confirmation_required: Literal[True] = Field(default=True, alias="confirmationRequired")
    pending: ConfirmationRequest
    results: list[ExecutionResult] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict:
        return {
            "success": False,
            "confirmationRequired": True,
            "pending": self.pending.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }

ExecutionResponse = Union[ExecutionSuccess, ExecutionFailure, ExecutionSuspended]


# ── Run record ─────────────────────────────────────────────────────────

def _execution_id() -> str:
    return f"wf_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

class WorkflowRun(BaseModel):
    """Mutable bookkeeping for a single execution. Owned by WorkflowExecutor."""
    id: str = Field(default_factory=_execution_id)
    state: WorkflowState = WorkflowState.PENDING
    policy: FailurePolicy = FailurePolicy.COLLECT
    debug: bool = False
    action_count: int = 0
    tools: list[str] = Field(default_factory=list)
    step_states: dict[str, StepState] = Field(default_factory=dict)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: int = 0
    error: Optional[str] = None
