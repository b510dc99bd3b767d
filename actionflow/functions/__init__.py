"""actionflow.functions — function registry and @function decorator."""

from .plugin import function, get_registered_functions
from .registry import Capability, FunctionRegistry

__all__ = ["Capability", "FunctionRegistry", "function", "get_registered_functions"]
