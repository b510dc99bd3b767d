"""
Reference grammar for action parameters.

A parameter value that is a string of one of these forms points into the
output of an earlier action instead of being a literal:

    <actionId>.<field>.<field>        plain path
    <actionId>[*].<field>             wildcard: the field of every element
    <actionId>[2].<field>             one element by index
    <actionId>[first].<field>         first element
    <actionId>[last].<field>          last element

Anything else (non-strings, strings with whitespace, strings that do not
start with an identifier) is a literal. Parsing is pure and produces an
ActionRef that the resolver consumes; nothing else splits reference strings.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel

_IDENT = r"[A-Za-z_][A-Za-z0-9_\-]*"
_SEGMENT = r"[A-Za-z0-9_$\-]+"

_REFERENCE_RE = re.compile(
    rf"^(?P<action_id>{_IDENT})"
    rf"(?:\[(?P<selector>\*|\d+|first|last)\])?"
    rf"(?P<path>(?:\.{_SEGMENT})+)$"
)

WILDCARD = "*"
USER_INPUT = "userInput"


class ActionRef(BaseModel):
    """Parsed reference to a prior action's output."""
    action_id: str
    selector: Optional[Union[int, str]] = None   # None, "*", "first", "last", or an index
    path: tuple[str, ...]
    raw: str

    model_config = {"frozen": True}

    @property
    def wildcard(self) -> bool:
        return self.selector == WILDCARD

    @property
    def indexed(self) -> bool:
        return self.selector is not None and not self.wildcard

    @property
    def is_user_input(self) -> bool:
        return self.action_id == USER_INPUT


def parse_reference(value: Any) -> Optional[ActionRef]:
    """Return an ActionRef if ``value`` is a reference string, else None."""
    if not isinstance(value, str):
        return None
    match = _REFERENCE_RE.match(value)
    if match is None:
        return None

    selector: Optional[Union[int, str]] = match.group("selector")
    if selector is not None and selector.isdigit():
        selector = int(selector)

    return ActionRef(
        action_id=match.group("action_id"),
        selector=selector,
        path=tuple(match.group("path")[1:].split(".")),
        raw=value,
    )


def is_reference(value: Any) -> bool:
    return parse_reference(value) is not None


def iter_references(value: Any) -> Iterator[ActionRef]:
    """Yield every reference found in ``value``, descending into dicts and lists."""
    if isinstance(value, str):
        ref = parse_reference(value)
        if ref is not None:
            yield ref
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_references(item)
    elif isinstance(value, list):
        for item in value:
            yield from iter_references(item)
