"""GET /functions and POST /functions/{name}/toggle_active — registry listing and control."""

import logging

from fastapi import APIRouter, HTTPException, Request

from actionflow.api.schemas import ToggleResponse
from actionflow.exceptions import ToolNotFound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["functions"])


def _get_registry(request: Request):
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Function registry not initialised.")
    return registry


@router.get("/functions")
async def list_functions(request: Request):
    """List every registered function, active or not."""
    registry = _get_registry(request)
    return {"functions": [d.metadata() for d in registry.list_functions()]}


@router.post("/functions/{name}/toggle_active", response_model=ToggleResponse)
async def toggle_active(name: str, request: Request):
    """Flip a function's active flag. Inactive functions cannot be invoked."""
    registry = _get_registry(request)
    try:
        definition = registry.toggle_active(name)
    except ToolNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ToggleResponse(name=definition.name, is_active=definition.is_active)
