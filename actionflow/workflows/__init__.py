"""actionflow.workflows — reference resolution, map expansion, invocation and execution."""

from .aggregator import ResultAggregator
from .executor import WorkflowExecutor
from .expander import MapExpander
from .invoker import ActionInvoker
from .references import ActionRef, is_reference, iter_references, parse_reference
from .resolver import ReferenceResolver
from .store import ResultStore
from .validator import WorkflowValidator, check_structure

__all__ = [
    "ActionInvoker",
    "ActionRef",
    "MapExpander",
    "ReferenceResolver",
    "ResultAggregator",
    "ResultStore",
    "WorkflowExecutor",
    "WorkflowValidator",
    "check_structure",
    "is_reference",
    "iter_references",
    "parse_reference",
]
