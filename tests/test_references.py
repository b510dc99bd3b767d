"""Tests for the reference grammar: parse_reference, is_reference, iter_references."""

import pytest

from actionflow.workflows.references import is_reference, iter_references, parse_reference


class TestParseReference:

    def test_plain_path(self):
        ref = parse_reference("u.userId")
        assert ref.action_id == "u"
        assert ref.selector is None
        assert ref.path == ("userId",)
        assert ref.raw == "u.userId"
        assert not ref.wildcard and not ref.indexed

    def test_nested_path(self):
        ref = parse_reference("get_user.profile.address.city")
        assert ref.action_id == "get_user"
        assert ref.path == ("profile", "address", "city")

    def test_wildcard(self):
        ref = parse_reference("users[*].email")
        assert ref.action_id == "users"
        assert ref.wildcard
        assert ref.path == ("email",)

    def test_numeric_index_is_int(self):
        ref = parse_reference("files[2].name")
        assert ref.selector == 2
        assert ref.indexed

    @pytest.mark.parametrize("selector", ["first", "last"])
    def test_named_selectors(self, selector):
        ref = parse_reference(f"files[{selector}].name")
        assert ref.selector == selector
        assert ref.indexed

    def test_hyphenated_action_id(self):
        ref = parse_reference("action-1.result")
        assert ref.action_id == "action-1"

    def test_user_input(self):
        ref = parse_reference("userInput.email")
        assert ref.is_user_input

    @pytest.mark.parametrize("literal", [
        "hello",
        "hello world. ok",
        "1.5",
        "u.",
        ".userId",
        "u[*]",
        "u[-1].x",
        "u[abc].x",
        "",
    ])
    def test_literals_do_not_parse(self, literal):
        assert parse_reference(literal) is None
        assert not is_reference(literal)

    @pytest.mark.parametrize("value", [5, 1.5, None, True, ["u.userId"], {"a": "u.userId"}])
    def test_non_strings_are_not_references(self, value):
        assert parse_reference(value) is None


class TestIterReferences:

    def test_finds_nested_references_in_order(self):
        value = {
            "a": "u.userId",
            "b": ["literal", "f[*].name", {"c": "g[first].id"}],
            "d": 3,
        }
        raws = [ref.raw for ref in iter_references(value)]
        assert raws == ["u.userId", "f[*].name", "g[first].id"]

    def test_literal_yields_nothing(self):
        assert list(iter_references({"x": "plain", "y": [1, 2]})) == []
