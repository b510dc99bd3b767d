"""@function decorator for registering callables as workflow functions.

Usage:
    @function(name="get_user_by_id", description="Get user information")
    async def get_user_by_id(userId: str) -> dict:
        ...

Auto-generates FunctionDefinition from function signature + type hints.
"""

import inspect
import typing
from typing import Any, Callable, Optional

from actionflow.types import FunctionDefinition, ParamSpec

# Global collection of decorated functions, filled at import time.
# FunctionRegistry.from_registered() copies from here; the engine never reads it directly.
_registered_functions: dict[str, tuple[FunctionDefinition, Callable[..., Any]]] = {}

_TYPE_MAP = {
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    list: "array",
    tuple: "array",
    dict: "object",
}


def _param_type(annotation: Any) -> str:
    origin = typing.get_origin(annotation)
    if origin is not None:
        if origin is typing.Union:
            # Optional[X] → X
            args = [a for a in typing.get_args(annotation) if a is not type(None)]
            return _param_type(args[0]) if len(args) == 1 else "string"
        annotation = origin
    return _TYPE_MAP.get(annotation, "string")


def build_definition(
    func: Callable[..., Any],
    name: Optional[str] = None,
    description: Optional[str] = None,
    needs_confirmation: bool = False,
    params: Optional[dict[str, ParamSpec]] = None,
) -> FunctionDefinition:
    """Derive a FunctionDefinition from a callable's signature.

    Explicit ``params`` entries override the inferred spec for that name.
    """
    params = params or {}
    try:
        hints = typing.get_type_hints(func)
    except Exception:
        hints = {}

    specs: dict[str, ParamSpec] = {}
    for param_name, param in inspect.signature(func).parameters.items():
        if param_name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param_name in params:
            specs[param_name] = params[param_name]
            continue
        annotation = hints.get(param_name, param.annotation)
        specs[param_name] = ParamSpec(
            type=_param_type(annotation) if annotation is not inspect.Parameter.empty else "string",
            description=f"Parameter: {param_name}",
            required=param.default is inspect.Parameter.empty,
        )

    return FunctionDefinition(
        name=name or func.__name__,
        description=description or (func.__doc__ or "").strip().split("\n")[0],
        parameters=specs,
        needs_confirmation=needs_confirmation,
    )


def function(
    name: str = None,
    description: str = None,
    needs_confirmation: bool = False,
    params: dict[str, ParamSpec] = None,
):
    """Decorator to register a callable as a workflow function.

    Args:
        name: Function name (defaults to the callable's __name__)
        description: Description (defaults to the first docstring line)
        needs_confirmation: Require an explicit ``confirmed: true`` on the action
        params: ParamSpec overrides, e.g. to declare an ``enum``
    """
    def decorator(func):
        definition = build_definition(
            func,
            name=name,
            description=description,
            needs_confirmation=needs_confirmation,
            params=params,
        )
        _registered_functions[definition.name] = (definition, func)
        func._actionflow_function = definition
        return func

    return decorator


def get_registered_functions() -> dict[str, tuple[FunctionDefinition, Callable[..., Any]]]:
    """Return all functions registered via @function decorator."""
    return _registered_functions.copy()
