"""Tests for ReferenceResolver and ResultStore.

Coverage:
  literal passthrough, plain paths, missing fields, wildcard/indexed selectors,
  missing and failed actions, userInput placeholders, nested structures,
  parameter-level error wrapping.
"""

import pytest
from pydantic import BaseModel

from actionflow.exceptions import (
    ActionflowError,
    FieldNotFound,
    ParameterError,
    ReferenceNotFound,
    ResolutionError,
    UnresolvedUserInput,
)
from actionflow.workflows.resolver import ReferenceResolver
from actionflow.workflows.store import ResultStore


# ── Helpers ───────────────────────────────────────────────────────────────────

def _store(**values) -> ResultStore:
    store = ResultStore()
    for action_id, value in values.items():
        store.record(action_id, value)
    return store


@pytest.fixture
def resolver():
    return ReferenceResolver()


# ── ResultStore ───────────────────────────────────────────────────────────────

class TestResultStore:

    def test_record_and_get(self):
        store = _store(A={"x": 5})
        assert store.get("A") == {"x": 5}
        assert "A" in store
        assert len(store) == 1

    def test_record_twice_rejected(self):
        store = _store(A=1)
        with pytest.raises(ActionflowError):
            store.record("A", 2)

    def test_missing_action(self):
        with pytest.raises(ReferenceNotFound) as exc_info:
            ResultStore().get("ghost", reference="ghost.x")
        assert 'Referenced action "ghost" not found' in str(exc_info.value)
        assert exc_info.value.action_id == "ghost"
        assert exc_info.value.reference == "ghost.x"

    def test_failed_action_reports_failure(self):
        store = ResultStore()
        store.mark_failed("A", "boom")
        assert store.has_failed("A")
        assert "A" not in store
        with pytest.raises(ReferenceNotFound, match='"A" failed: boom'):
            store.get("A")

    def test_snapshot_is_a_copy(self):
        store = _store(A=1)
        snap = store.snapshot()
        snap["B"] = 2
        assert "B" not in store


# ── Literals ──────────────────────────────────────────────────────────────────

class TestLiterals:

    @pytest.mark.parametrize("value", [
        5, 0, -1.5, True, False, None, "hello", "hello world. ok", "1.5", [1, 2], {"k": "v"},
    ])
    def test_literal_values_unchanged(self, resolver, value):
        assert resolver.resolve(value, ResultStore()) == value


# ── Plain paths ───────────────────────────────────────────────────────────────

class TestPlainPaths:

    def test_resolves_field(self, resolver):
        assert resolver.resolve("A.x", _store(A={"x": 5})) == 5

    def test_resolves_nested_field(self, resolver):
        store = _store(A={"profile": {"address": {"city": "Lima"}}})
        assert resolver.resolve("A.profile.address.city", store) == "Lima"

    def test_missing_field_names_field_and_reference(self, resolver):
        with pytest.raises(FieldNotFound) as exc_info:
            resolver.resolve("A.x", _store(A={"y": 1}))
        exc = exc_info.value
        assert exc.field == "x"
        assert '"x"' in str(exc)
        assert "A.x" in str(exc)

    def test_missing_nested_field_names_container(self, resolver):
        with pytest.raises(FieldNotFound) as exc_info:
            resolver.resolve("A.profile.zip", _store(A={"profile": {"city": "Lima"}}))
        assert exc_info.value.path == "A.profile"
        assert exc_info.value.field == "zip"

    def test_falsy_values_resolve(self, resolver):
        store = _store(A={"zero": 0, "empty": "", "none": None})
        assert resolver.resolve("A.zero", store) == 0
        assert resolver.resolve("A.empty", store) == ""
        assert resolver.resolve("A.none", store) is None

    def test_field_on_list_yields_none(self, resolver):
        assert resolver.resolve("A.items.name", _store(A={"items": [1, 2]})) is None

    def test_field_on_scalar_yields_none(self, resolver):
        assert resolver.resolve("A.count.value", _store(A={"count": 3})) is None

    def test_walking_past_none_raises(self, resolver):
        with pytest.raises(FieldNotFound, match="undefined"):
            resolver.resolve("A.items.name.first", _store(A={"items": [1, 2]}))

    def test_numeric_segment_indexes_list(self, resolver):
        assert resolver.resolve("A.items.1", _store(A={"items": ["a", "b"]})) == "b"

    def test_numeric_segment_out_of_bounds(self, resolver):
        with pytest.raises(FieldNotFound, match="out of bounds"):
            resolver.resolve("A.items.5", _store(A={"items": ["a"]}))

    def test_attribute_access_on_models(self, resolver):
        class User(BaseModel):
            name: str

        assert resolver.resolve("A.name", _store(A=User(name="Jane"))) == "Jane"

    def test_missing_action_raises(self, resolver):
        with pytest.raises(ReferenceNotFound, match='"B" not found'):
            resolver.resolve("B.x", _store(A={"x": 1}))


# ── Selectors ─────────────────────────────────────────────────────────────────

class TestSelectors:

    USERS = [
        {"name": "John", "email": "john@example.com"},
        {"name": "Jane", "email": "jane@example.com"},
        {"name": "Ana", "email": "ana@example.com"},
    ]

    def test_wildcard_returns_field_of_each_element_in_order(self, resolver):
        result = resolver.resolve("U[*].email", _store(U=self.USERS))
        assert result == ["john@example.com", "jane@example.com", "ana@example.com"]

    def test_wildcard_keeps_duplicates(self, resolver):
        store = _store(U=[{"t": "a"}, {"t": "a"}])
        assert resolver.resolve("U[*].t", store) == ["a", "a"]

    def test_wildcard_on_empty_list(self, resolver):
        assert resolver.resolve("U[*].email", _store(U=[])) == []

    def test_wildcard_on_non_list_is_single_element(self, resolver):
        assert resolver.resolve("U[*].email", _store(U=self.USERS[0])) == ["john@example.com"]

    def test_wildcard_missing_field_yields_none_for_that_element(self, resolver):
        store = _store(U=[{"email": "a@x"}, {"name": "no email"}])
        assert resolver.resolve("U[*].email", store) == ["a@x", None]

    def test_wildcard_walk_past_missing_field_names_element(self, resolver):
        store = _store(U=[{"profile": {"email": "a@x"}}, {"name": "no profile"}])
        with pytest.raises(FieldNotFound) as exc_info:
            resolver.resolve("U[*].profile.email", store)
        assert exc_info.value.path == "U[1].profile"

    def test_index(self, resolver):
        assert resolver.resolve("U[1].name", _store(U=self.USERS)) == "Jane"

    def test_first_and_last(self, resolver):
        store = _store(U=self.USERS)
        assert resolver.resolve("U[first].name", store) == "John"
        assert resolver.resolve("U[last].name", store) == "Ana"

    def test_index_out_of_bounds(self, resolver):
        with pytest.raises(FieldNotFound, match="out of bounds"):
            resolver.resolve("U[7].name", _store(U=self.USERS))

    def test_first_on_empty_list(self, resolver):
        with pytest.raises(FieldNotFound):
            resolver.resolve("U[first].name", _store(U=[]))

    def test_index_on_non_list(self, resolver):
        with pytest.raises(FieldNotFound, match="Expected array"):
            resolver.resolve("U[0].name", _store(U={"name": "x"}))


# ── Placeholders + nesting ────────────────────────────────────────────────────

class TestPlaceholdersAndNesting:

    def test_user_input_is_rejected(self, resolver):
        with pytest.raises(UnresolvedUserInput, match="userInput.email"):
            resolver.resolve("userInput.email", ResultStore())

    def test_nested_structures_resolved(self, resolver):
        store = _store(A={"x": 1, "y": 2})
        value = {"point": {"x": "A.x", "y": "A.y"}, "list": ["A.x", "literal"]}
        assert resolver.resolve(value, store) == {"point": {"x": 1, "y": 2}, "list": [1, "literal"]}

    def test_resolver_is_pure(self, resolver):
        store = _store(A={"x": [1, 2]})
        resolver.resolve("A.x", store)
        assert store.get("A") == {"x": [1, 2]}
        assert len(store) == 1


# ── resolve_parameters ────────────────────────────────────────────────────────

class TestResolveParameters:

    def test_resolves_all_parameters(self, resolver):
        store = _store(u={"userId": "2"})
        params = {"userId": "u.userId", "limit": 10}
        assert resolver.resolve_parameters(params, store) == {"userId": "2", "limit": 10}

    def test_empty_parameters(self, resolver):
        assert resolver.resolve_parameters({}, ResultStore()) == {}

    def test_error_names_parameter_and_reference(self, resolver):
        with pytest.raises(ParameterError) as exc_info:
            resolver.resolve_parameters({"userId": "u.userId"}, _store(u={"name": "Jane"}))
        exc = exc_info.value
        assert str(exc).startswith('Parameter error for "userId" referencing "u.userId": ')
        assert exc.parameter == "userId"
        assert isinstance(exc.cause, FieldNotFound)
        assert isinstance(exc, ResolutionError)
