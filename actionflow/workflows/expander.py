"""
MapExpander — fans a ``map: true`` action out into one action per array element.

Source selection:
  - every parameter written as a wildcard reference (``A[*].field``) selects
    element ``i``; they must all resolve to arrays of the same length,
  - without a wildcard parameter, the first parameter whose resolved value
    is a list is the source,
  - every other parameter is broadcast unchanged.

The synthetic actions keep the parent's id and carry fully resolved, literal
parameters. Their outputs are gathered by the executor into one list stored
under that id.
"""

from __future__ import annotations

from typing import Any

from actionflow.exceptions import MapExpansionError
from actionflow.types import Action

from .references import parse_reference
from .resolver import ReferenceResolver
from .store import ResultStore


class MapExpander:

    def __init__(self, resolver: ReferenceResolver | None = None):
        self.resolver = resolver or ReferenceResolver()

    def expand(self, action: Action, store: ResultStore) -> list[Action]:
        """Resolve ``action``'s parameters and expand them into unmapped actions.

        Raises:
            ParameterError: if a parameter reference cannot be resolved
            MapExpansionError: if there is nothing to map over
        """
        resolved = self.resolver.resolve_parameters(action.parameters, store)
        return self.expand_resolved(action, resolved)

    def expand_resolved(self, action: Action, resolved: dict[str, Any]) -> list[Action]:
        """Expand an action whose parameters have already been resolved."""
        if not action.map:
            return [action.model_copy(update={"parameters": resolved})]

        source_keys = self._source_keys(action, resolved)
        count = len(resolved[source_keys[0]])

        expanded = []
        for i in range(count):
            params = dict(resolved)
            for key in source_keys:
                params[key] = resolved[key][i]
            expanded.append(action.model_copy(update={"parameters": params, "map": False}))
        return expanded

    def _source_keys(self, action: Action, resolved: dict[str, Any]) -> list[str]:
        wildcard_keys = []
        for key, raw in action.parameters.items():
            ref = parse_reference(raw)
            if ref is not None and ref.wildcard:
                wildcard_keys.append(key)

        if wildcard_keys:
            lengths = {key: len(resolved[key]) for key in wildcard_keys}
            if len(set(lengths.values())) > 1:
                raise MapExpansionError(
                    f"Action {action.id} maps over wildcard parameters of different "
                    f"lengths: {lengths}",
                    action_id=action.id,
                )
            return wildcard_keys

        for key, value in resolved.items():
            if isinstance(value, list):
                return [key]

        raise MapExpansionError(
            f"Action {action.id} has map:true but no array parameters were found",
            action_id=action.id,
        )
