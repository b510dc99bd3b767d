"""GET /health — liveness plus registry size."""

from fastapi import APIRouter, Request

from actionflow.api.schemas import HealthResponse
from actionflow.version import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    registry = getattr(request.app.state, "registry", None)
    count = len(registry.list_functions(include_inactive=False)) if registry is not None else 0
    return HealthResponse(status="ok", version=__version__, functions=count)
