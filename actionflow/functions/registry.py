"""Function registry: name → Capability table consumed by the workflow engine.

The registry is an explicit dependency of WorkflowExecutor; there is no
module-level instance, so tests and servers each build their own.
"""

import asyncio
import functools
import importlib
import inspect
import logging
from typing import Any, Callable, Iterable, Optional

from actionflow.exceptions import ToolNotFound
from actionflow.types import FunctionDefinition

logger = logging.getLogger(__name__)

_BUILTIN_PACKAGE = "actionflow.functions.builtin"


def _is_builtin(implementation: Callable[..., Any]) -> bool:
    module = getattr(implementation, "__module__", None) or ""
    return module == _BUILTIN_PACKAGE or module.startswith(_BUILTIN_PACKAGE + ".")


class Capability:
    """A registered function: its definition plus the callable that implements it."""

    def __init__(self, definition: FunctionDefinition, implementation: Callable[..., Any]):
        self.definition = definition
        self.implementation = implementation
        self._signature = inspect.signature(implementation)
        self._accepts_kwargs = any(
            p.kind == p.VAR_KEYWORD for p in self._signature.parameters.values()
        )

    @property
    def name(self) -> str:
        return self.definition.name

    def needs_confirmation(self) -> bool:
        return self.definition.needs_confirmation

    def _bind(self, args: dict[str, Any]) -> dict[str, Any]:
        """Keep only the keyword arguments the implementation can accept."""
        if self._accepts_kwargs:
            return dict(args)
        return {k: v for k, v in args.items() if k in self._signature.parameters}

    async def invoke(self, args: dict[str, Any]) -> Any:
        """Call the implementation with keyword arguments.

        Coroutine functions are awaited; plain functions run in the default
        executor so they cannot block the event loop. Exceptions propagate.
        """
        kwargs = self._bind(args)
        if inspect.iscoroutinefunction(self.implementation):
            return await self.implementation(**kwargs)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, functools.partial(self.implementation, **kwargs))
        if inspect.isawaitable(result):
            result = await result
        return result


class FunctionRegistry:
    """Central registry of all callable workflow functions."""

    def __init__(self):
        self._capabilities: dict[str, Capability] = {}

    def register(self, definition: FunctionDefinition, implementation: Callable[..., Any]) -> Capability:
        """Register a function with its definition and implementation.

        Re-registering a name replaces the previous entry.
        """
        capability = Capability(definition, implementation)
        self._capabilities[definition.name] = capability
        return capability

    def lookup(self, name: str, include_inactive: bool = False) -> Optional[Capability]:
        """Return the capability for ``name``, or None when absent or deactivated."""
        capability = self._capabilities.get(name)
        if capability is None:
            return None
        if not include_inactive and not capability.definition.is_active:
            return None
        return capability

    def get(self, name: str) -> Capability:
        """Get an active capability.

        Raises:
            ToolNotFound: if the function is not registered or is deactivated
        """
        capability = self._capabilities.get(name)
        if capability is None:
            raise ToolNotFound(f"Function {name} not found in registry", tool_name=name)
        if not capability.definition.is_active:
            raise ToolNotFound(f"Function {name} is not active", tool_name=name)
        return capability

    def list_functions(self, include_inactive: bool = True) -> list[FunctionDefinition]:
        """List registered function definitions in registration order."""
        return [
            c.definition for c in self._capabilities.values()
            if include_inactive or c.definition.is_active
        ]

    def set_active(self, name: str, active: bool) -> FunctionDefinition:
        capability = self._capabilities.get(name)
        if capability is None:
            raise ToolNotFound(f"Function {name} not found in registry", tool_name=name)
        capability.definition = capability.definition.model_copy(update={"is_active": active})
        logger.info(f"[Registry] Function '{name}' active={active}")
        return capability.definition

    def toggle_active(self, name: str) -> FunctionDefinition:
        """Flip a function between active and inactive. Returns the new definition."""
        capability = self._capabilities.get(name)
        if capability is None:
            raise ToolNotFound(f"Function {name} not found in registry", tool_name=name)
        return self.set_active(name, not capability.definition.is_active)

    def __contains__(self, name: str) -> bool:
        return name in self._capabilities

    def __len__(self) -> int:
        return len(self._capabilities)

    @classmethod
    def from_registered(
        cls,
        include_builtins: bool = True,
        modules: Iterable[str] = (),
    ) -> "FunctionRegistry":
        """Build a registry from every @function-decorated callable.

        Args:
            include_builtins: Import actionflow.functions.builtin first
            modules: Extra dotted module paths to import for their registrations
        """
        from actionflow.functions.plugin import get_registered_functions

        if include_builtins:
            import actionflow.functions.builtin  # noqa: F401  triggers @function registrations
        for module in modules:
            importlib.import_module(module)

        registry = cls()
        for definition, impl in get_registered_functions().values():
            # Skip by implementation so user functions reusing a builtin name survive
            if not include_builtins and _is_builtin(impl):
                continue
            registry.register(definition, impl)
        logger.info(f"[Registry] Loaded {len(registry)} functions")
        return registry
