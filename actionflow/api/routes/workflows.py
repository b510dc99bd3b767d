"""POST /workflow/execute and POST /workflow/verify."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from actionflow.api.schemas import ExecuteRequest, VerifyRequest, VerifyResponse
from actionflow.exceptions import WorkflowValidationError
from actionflow.types import ExecutionFailure, ExecutionSuccess, ExecutionSuspended, Workflow
from actionflow.workflows.aggregator import FAILURE_MESSAGE

logger = logging.getLogger(__name__)
router = APIRouter(tags=["workflows"])

INVALID_FORMAT = "Invalid workflow format"


# ─────────────────────────────────────────────────────────────────────────────
# Dependency helpers
# ─────────────────────────────────────────────────────────────────────────────

def _get_executor(request: Request):
    executor = getattr(request.app.state, "executor", None)
    if executor is None:
        raise HTTPException(status_code=503, detail="WorkflowExecutor not initialised.")
    return executor


def _parse_workflow(payload) -> Workflow:
    """Raises WorkflowValidationError with the pydantic errors as violations."""
    if not isinstance(payload, dict) or not isinstance(payload.get("actions"), list):
        raise WorkflowValidationError(
            "Workflow must be an object with an actions array",
            violations=["Workflow must be an object with an actions array"],
        )
    try:
        return Workflow.model_validate(payload)
    except ValidationError as exc:
        violations = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        raise WorkflowValidationError("; ".join(violations), violations=violations) from exc


def _invalid(exc: WorkflowValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": INVALID_FORMAT, "details": str(exc)})


# ─────────────────────────────────────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/workflow/execute")
async def execute_workflow(body: ExecuteRequest, request: Request):
    """Execute a workflow.

    200: completed (collect mode, possibly with per-step errors)
    202: suspended at a function that needs confirmation
    400: malformed workflow, nothing ran
    500: aborted (fail_fast) or unexpected error
    504: ``request_timeout_seconds`` exceeded
    """
    executor = _get_executor(request)
    try:
        workflow = _parse_workflow(body.workflow)
    except WorkflowValidationError as exc:
        return _invalid(exc)

    timeout = request.app.state.config.request_timeout_seconds
    try:
        response = await asyncio.wait_for(
            executor.execute(workflow, policy=body.failure_policy, debug=body.debug),
            timeout=timeout,
        )
    except WorkflowValidationError as exc:
        return _invalid(exc)
    except asyncio.TimeoutError:
        logger.warning(f"[workflows] Execution exceeded {timeout}s")
        failure = ExecutionFailure(
            error=FAILURE_MESSAGE,
            details=f"Workflow execution timed out after {timeout}s",
        )
        return JSONResponse(status_code=504, content=failure.to_dict())
    except Exception as exc:
        logger.exception(f"[workflows] Unexpected error executing workflow: {exc}")
        failure = ExecutionFailure(error=FAILURE_MESSAGE, details=str(exc) or type(exc).__name__)
        return JSONResponse(status_code=500, content=failure.to_dict())

    if isinstance(response, ExecutionSuccess):
        status_code = 200
    elif isinstance(response, ExecutionSuspended):
        status_code = 202
    else:
        status_code = 500
    return JSONResponse(status_code=status_code, content=jsonable_encoder(response.to_dict()))


@router.post("/workflow/verify", response_model=VerifyResponse)
async def verify_workflow(body: VerifyRequest, request: Request):
    """Statically check a workflow without running it.

    ``valid`` is False only for hard errors; "WARNING:" messages are reported
    but do not invalidate the workflow.
    """
    try:
        workflow = _parse_workflow(body.workflow)
    except WorkflowValidationError as exc:
        return VerifyResponse(valid=False, errors=exc.violations)

    validator = getattr(request.app.state, "validator", None)
    if validator is None:
        raise HTTPException(status_code=503, detail="WorkflowValidator not initialised.")
    errors = validator.validate(
        workflow,
        registry=request.app.state.registry,
        tool_prefix=request.app.state.config.tool_prefix,
    )
    hard_errors = [e for e in errors if not e.startswith("WARNING:")]
    return VerifyResponse(valid=not hard_errors, errors=errors)
