"""Built-in functions package. Import to register all built-in functions."""

from actionflow.functions.builtin.arithmetic import add, subtract, multiply, divide, round_number
from actionflow.functions.builtin.text import (
    to_uppercase, to_lowercase, trim, extract, replace, split, join,
)
from actionflow.functions.builtin.utility import get_current_time, generate_uuid, add_days, filter_items

# Registry names (not Python names) of everything defined here
BUILTIN_FUNCTIONS = [
    "add", "subtract", "multiply", "divide", "round",
    "to_uppercase", "to_lowercase", "trim", "extract", "replace", "split", "join",
    "get_current_time", "generate_uuid", "add_days", "filter",
]

__all__ = [
    "add", "subtract", "multiply", "divide", "round_number",
    "to_uppercase", "to_lowercase", "trim", "extract", "replace", "split", "join",
    "get_current_time", "generate_uuid", "add_days", "filter_items",
    "BUILTIN_FUNCTIONS",
]
