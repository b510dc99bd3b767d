"""
WorkflowValidator — static correctness checker for Workflow definitions.

Two entry points:

  - ``check_structure`` is the cheap gate WorkflowExecutor runs before any
    action executes.  It raises WorkflowValidationError.
  - ``WorkflowValidator.validate`` runs every check (including registry and
    parameter checks) without executing anything and returns the full list
    of messages.  Items prefixed "WARNING:" are soft issues.
"""

from __future__ import annotations

import json
from collections import Counter
from typing import TYPE_CHECKING, Any, Optional

from actionflow.exceptions import WorkflowValidationError
from actionflow.types import Action, ParamSpec, Workflow

from .references import iter_references, parse_reference

if TYPE_CHECKING:
    from actionflow.functions.registry import FunctionRegistry


def _structural_errors(workflow: Workflow) -> list[str]:
    errors: list[str] = []
    counts = Counter(a.id for a in workflow.actions)
    for action_id, count in counts.items():
        if count > 1:
            errors.append(f"Duplicate action id: {action_id}")
    for index, action in enumerate(workflow.actions):
        if not action.tool or not action.tool.strip():
            errors.append(f"Action #{index + 1} ({action.id}): missing tool name.")
    return errors


def check_structure(workflow: Workflow) -> None:
    """Raise WorkflowValidationError if the workflow cannot be executed at all."""
    errors = _structural_errors(workflow)
    if errors:
        raise WorkflowValidationError(
            f"Invalid workflow format: {'; '.join(errors)}",
            violations=errors,
        )


def _type_error(value: Any, spec: ParamSpec) -> Optional[str]:
    """Return a message if a literal ``value`` does not fit ``spec``."""
    kind = spec.type
    if kind == "string":
        ok = isinstance(value, str)
    elif kind == "number":
        ok = (isinstance(value, (int, float)) and not isinstance(value, bool)) or _numeric_string(value)
    elif kind == "boolean":
        ok = isinstance(value, bool) or value in ("true", "false")
    elif kind == "array":
        ok = isinstance(value, list) or _json_array_string(value)
    elif kind == "object":
        ok = isinstance(value, dict)
    else:
        ok = True
    if not ok:
        return f"expected {kind}, got {type(value).__name__}"
    if spec.enum is not None and value not in spec.enum:
        return f"value {value!r} is not one of {spec.enum}"
    return None


def _numeric_string(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def _json_array_string(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        return isinstance(json.loads(value), list)
    except ValueError:
        return False


class WorkflowValidator:
    """
    Validates a Workflow without executing it.

    Usage::

        validator = WorkflowValidator()
        errors = validator.validate(workflow, registry=registry)
        hard_errors = [e for e in errors if not e.startswith("WARNING:")]

    All checks are run even if earlier ones fail, so callers get the full
    error list in one shot.
    """

    def validate(
        self,
        workflow: Workflow,
        registry: Optional["FunctionRegistry"] = None,
        tool_prefix: str = "functions.",
    ) -> list[str]:
        """
        Args:
            workflow:    The workflow to validate.
            registry:    Optional FunctionRegistry; tool and parameter checks
                         are skipped if None.
            tool_prefix: Prefix stripped from tool names before lookup.

        Returns:
            List of messages.  Empty list means the workflow is valid.
        """
        errors: list[str] = []

        # ── Check 1: Root shape ───────────────────────────────────────────────
        if workflow.type != "workflow":
            errors.append('Root object must have type="workflow".')
        if not workflow.actions:
            errors.append("Workflow must contain a non-empty actions array.")
            return errors

        # ── Check 2: Ids and tool names ───────────────────────────────────────
        errors.extend(_structural_errors(workflow))

        seen_ids: set[str] = set()
        for index, action in enumerate(workflow.actions):
            prefix = f"Action #{index + 1} ({action.id})"

            # ── Check 3: References point backwards ───────────────────────────
            for ref in iter_references(dict(action.parameters)):
                if ref.is_user_input:
                    errors.append(
                        f"WARNING: {prefix}: parameter placeholder {ref.raw!r} must be "
                        "filled in before execution."
                    )
                elif ref.action_id == action.id:
                    errors.append(f"{prefix}: references its own output ({ref.raw!r}).")
                elif ref.action_id not in seen_ids:
                    errors.append(
                        f"{prefix}: reference {ref.raw!r} points to action "
                        f"{ref.action_id!r}, which does not run before it."
                    )

            # ── Check 4: Map source ───────────────────────────────────────────
            if action.map and not any(
                isinstance(v, list) or parse_reference(v) is not None
                for v in action.parameters.values()
            ):
                errors.append(
                    f"{prefix}: has map:true but no array or reference parameter to map over."
                )

            # ── Check 5: Tool existence + parameters ──────────────────────────
            if registry is not None and action.tool:
                errors.extend(self._check_against_registry(action, prefix, registry, tool_prefix))

            seen_ids.add(action.id)

        return errors

    def _check_against_registry(
        self,
        action: Action,
        prefix: str,
        registry: "FunctionRegistry",
        tool_prefix: str,
    ) -> list[str]:
        errors: list[str] = []
        name = action.tool[len(tool_prefix):] if tool_prefix and action.tool.startswith(tool_prefix) else action.tool
        capability = registry.lookup(name, include_inactive=True)
        if capability is None:
            return [f'{prefix}: Unknown tool "{name}".']
        if not capability.definition.is_active:
            errors.append(f'{prefix}: Tool "{name}" is not active.')

        specs = {**capability.definition.parameters, **action.parameter_metadata}
        for param_name, spec in specs.items():
            provided = param_name in action.parameters
            if spec.required and not provided:
                errors.append(
                    f'{prefix}: Missing required parameter "{param_name}" for tool "{name}".'
                )
                continue
            if not provided:
                continue

            value = action.parameters[param_name]
            if any(True for _ in iter_references(value)):
                continue  # placeholders are checked at execution time
            values = value if action.map and isinstance(value, list) else [value]
            for item in values:
                problem = _type_error(item, spec)
                if problem:
                    errors.append(
                        f'{prefix}: Parameter "{param_name}" failed validation – {problem}'
                    )
                    break

        return errors
