"""Pydantic models for API request/response. Mirrors types.py for API I/O."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from actionflow.types import FailurePolicy


# ── Requests ──

class ExecuteRequest(BaseModel):
    workflow: Any = None                        # validated into a Workflow by the route → 400 on failure
    debug: Optional[bool] = None                # None = use ACTIONFLOW_DEBUG
    failure_policy: Optional[FailurePolicy] = Field(default=None, alias="failurePolicy")

    model_config = {"populate_by_name": True}


class VerifyRequest(BaseModel):
    workflow: Any = None


# ── Responses ──

class VerifyResponse(BaseModel):
    valid: bool
    errors: list[str] = []


class ToggleResponse(BaseModel):
    name: str
    is_active: bool = Field(alias="isActive")

    model_config = {"populate_by_name": True}


class HealthResponse(BaseModel):
    status: str                                 # "ok"
    version: str
    functions: int                              # active registry entries
