"""
ReferenceResolver — turns parameter values into concrete values.

Literals pass through unchanged. Reference strings (see references.py) are
looked up in the ResultStore and walked field by field. Nested dicts and
lists inside a parameter are resolved recursively.

Missing-field contract:
  - a key absent from a mapping raises FieldNotFound naming the key,
  - a field name applied to a non-mapping value (a list, a scalar) yields
    None, which is passed on to the invoked function as-is,
  - walking further from None raises FieldNotFound.
  - under a wildcard, a key absent from one element yields None for that
    element instead of failing the whole list.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from actionflow.exceptions import (
    FieldNotFound,
    ParameterError,
    ResolutionError,
    UnresolvedUserInput,
)

from .references import ActionRef, parse_reference
from .store import ResultStore

_SCALARS = (str, bytes, int, float, bool)


class ReferenceResolver:
    """Stateless resolver; safe to share between runs."""

    def resolve(self, value: Any, store: ResultStore) -> Any:
        """Resolve a single value that may be, or contain, references."""
        if isinstance(value, str):
            ref = parse_reference(value)
            if ref is None:
                return value
            return self.resolve_reference(ref, store)
        if isinstance(value, dict):
            return {k: self.resolve(v, store) for k, v in value.items()}
        if isinstance(value, list):
            return [self.resolve(v, store) for v in value]
        return value

    def resolve_parameters(self, parameters: dict[str, Any], store: ResultStore) -> dict[str, Any]:
        """Resolve every parameter of an action.

        Raises:
            ParameterError: naming the parameter and the raw reference that failed
        """
        resolved: dict[str, Any] = {}
        for key, value in (parameters or {}).items():
            try:
                resolved[key] = self.resolve(value, store)
            except ResolutionError as exc:
                reference = exc.reference or str(value)
                raise ParameterError(
                    f'Parameter error for "{key}" referencing "{reference}": {exc}',
                    parameter=key,
                    cause=exc,
                    reference=reference,
                ) from exc
        return resolved

    def resolve_reference(self, ref: ActionRef, store: ResultStore) -> Any:
        if ref.is_user_input:
            raise UnresolvedUserInput(
                f"Unresolved userInput parameter: {ref.raw} - it should have been "
                "replaced with form data before execution",
                reference=ref.raw,
            )

        root = store.get(ref.action_id, reference=ref.raw)

        if ref.selector is None:
            return _walk(root, ref.path, ref, ref.action_id)

        if ref.wildcard:
            items = root if isinstance(root, list) else [root]
            return [
                _walk(item, ref.path, ref, f"{ref.action_id}[{i}]", missing_as_none=True)
                for i, item in enumerate(items)
            ]

        if not isinstance(root, list):
            raise FieldNotFound(
                f"Expected array from {ref.action_id} but got: {type(root).__name__} "
                f'(reference "{ref.raw}")',
                reference=ref.raw,
                path=ref.action_id,
                field=str(ref.selector),
            )
        index = _selector_index(ref, root)
        return _walk(root[index], ref.path, ref, f"{ref.action_id}[{index}]")


def _selector_index(ref: ActionRef, items: list) -> int:
    if ref.selector == "first":
        index = 0
    elif ref.selector == "last":
        index = len(items) - 1
    else:
        index = int(ref.selector)
    if index < 0 or index >= len(items):
        raise FieldNotFound(
            f"Array index {ref.selector} out of bounds for {ref.action_id} "
            f'(length: {len(items)}, reference "{ref.raw}")',
            reference=ref.raw,
            path=ref.action_id,
            field=str(ref.selector),
        )
    return index


def _walk(
    value: Any,
    path: tuple[str, ...],
    ref: ActionRef,
    walked: str,
    missing_as_none: bool = False,
) -> Any:
    """Follow ``path`` from ``value``; ``walked`` names the container reached so far."""
    current = value
    for segment in path:
        if isinstance(current, Mapping):
            if segment in current:
                current = current[segment]
            elif missing_as_none:
                current = None
            else:
                raise FieldNotFound(
                    f'Field "{segment}" not found on {walked} (reference "{ref.raw}")',
                    reference=ref.raw,
                    path=walked,
                    field=segment,
                )
        elif current is None:
            raise FieldNotFound(
                f'Cannot access field "{segment}" of undefined value at {walked} '
                f'(reference "{ref.raw}")',
                reference=ref.raw,
                path=walked,
                field=segment,
            )
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                raise FieldNotFound(
                    f"Array index {index} out of bounds for {walked} "
                    f'(length: {len(current)}, reference "{ref.raw}")',
                    reference=ref.raw,
                    path=walked,
                    field=segment,
                )
            current = current[index]
        elif not isinstance(current, (list, tuple) + _SCALARS) and hasattr(current, segment):
            # Plain objects / pydantic models returned by functions
            current = getattr(current, segment)
        else:
            current = None
        walked = f"{walked}.{segment}"
    return current
