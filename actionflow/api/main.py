"""FastAPI application factory with lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from actionflow.config import ActionflowConfig, config
from actionflow.functions.registry import FunctionRegistry
from actionflow.version import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    # ── Startup ──
    cfg: ActionflowConfig = app.state.config
    logger.info(f"actionflow v{__version__} starting...")

    # 1. Function registry (injected, or built from @function registrations)
    registry = getattr(app.state, "registry", None)
    if registry is None:
        registry = FunctionRegistry.from_registered(
            include_builtins=cfg.include_builtins,
            modules=cfg.function_modules,
        )
        app.state.registry = registry

    # 2. Executor + audit callback
    from actionflow.callbacks import LoggingCallback
    from actionflow.workflows import WorkflowExecutor, WorkflowValidator
    app.state.executor = WorkflowExecutor(registry, config=cfg, callbacks=[LoggingCallback()])
    app.state.validator = WorkflowValidator()

    logger.info(f"actionflow v{__version__} ready — {len(registry)} functions registered")

    yield

    # ── Shutdown ──
    logger.info("actionflow shutting down...")


def create_app(
    registry: Optional[FunctionRegistry] = None,
    cfg: Optional[ActionflowConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        registry: Pre-built registry. If None, one is built at startup from
                  the builtins and ``function_modules``.
        cfg: Configuration override. Defaults to the module-level config.
    """
    cfg = cfg or config
    app = FastAPI(
        title=cfg.app_name,
        description="Workflow execution engine: run declarative action lists against registered functions.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = cfg
    app.state.registry = registry

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Routes
    from actionflow.api.routes import functions, health, workflows
    app.include_router(workflows.router)
    app.include_router(functions.router)
    app.include_router(health.router)

    return app


app = create_app()
