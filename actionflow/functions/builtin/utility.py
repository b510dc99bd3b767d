"""Built-in utility functions: time, identifiers, list filtering."""

import uuid
from datetime import datetime, timedelta, timezone

from actionflow.functions.plugin import function
from actionflow.types import ParamSpec

_OPERATORS = {
    "equals": lambda a, b: a == b,
    "not_equals": lambda a, b: a != b,
    "contains": lambda a, b: b in a if isinstance(a, (str, list)) else False,
    "greater_than": lambda a, b: a > b,
    "less_than": lambda a, b: a < b,
}


@function(name="get_current_time", description="get the current date and time")
def get_current_time() -> str:
    return datetime.now(timezone.utc).isoformat()


@function(name="generate_uuid", description="generate a random UUID")
def generate_uuid() -> str:
    return str(uuid.uuid4())


@function(name="add_days", description="add or subtract days from a date")
def add_days(date: str, days: int) -> str:
    """Shift an ISO-8601 date by a (possibly negative) number of days."""
    parsed = datetime.fromisoformat(str(date).replace("Z", "+00:00"))
    return (parsed + timedelta(days=int(days))).isoformat()


@function(
    name="filter",
    description="filter an array based on a condition",
    params={
        "items": ParamSpec(type="array", description="Array of objects to filter", required=True),
        "field": ParamSpec(type="string", description="Field to compare", required=True),
        "operator": ParamSpec(
            type="string",
            description="Comparison operator",
            required=True,
            enum=list(_OPERATORS),
        ),
        "value": ParamSpec(type="string", description="Value to compare against", required=True),
    },
)
def filter_items(items: list, field: str, operator: str, value) -> list:
    if operator not in _OPERATORS:
        raise ValueError(f"Unsupported operator: {operator}")
    compare = _OPERATORS[operator]
    return [
        item for item in items
        if isinstance(item, dict) and field in item and compare(item[field], value)
    ]
