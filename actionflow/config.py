"""Application configuration. All env vars defined here with defaults."""

from typing import Optional

from pydantic_settings import BaseSettings

from actionflow.types import FailurePolicy


class ActionflowConfig(BaseSettings):
    # ── App ──
    app_name: str = "actionflow"
    debug: bool = False
    log_level: str = "INFO"

    # ── Engine ──
    failure_policy: FailurePolicy = FailurePolicy.COLLECT
    map_concurrency: int = 10                   # max in-flight invocations per mapped action
    tool_prefix: str = "functions."             # stripped from action.tool before lookup

    # ── Function registry ──
    include_builtins: bool = True
    function_modules: list[str] = []            # modules imported at startup for @function registration

    # ── Server ──
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]
    request_timeout_seconds: Optional[float] = None   # None = no request-level timeout

    model_config = {"env_prefix": "ACTIONFLOW_", "env_file": ".env", "extra": "ignore"}


config = ActionflowConfig()
