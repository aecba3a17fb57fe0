# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the bracket-notation key grammar."""

import pytest

from bracketqs.grammar import (
    PathKey,
    build_key,
    claim,
    find_values,
    flat_key,
    nested_key,
    parse_key,
    sub_map,
    top_names,
)
from bracketqs.model import Values

# ###############
# Helpers
# ###############


def _sample() -> Values:
    return Values(
        {
            "foo": ["1"],
            "array[]": ["a", "b"],
            "nested[id]": ["7"],
            "nested[name]": ["n"],
            "nested[deep][x]": ["x"],
            "objs[][id]": ["1", "2"],
        }
    )


# ###############
# parse_key
# ###############


class TestParseKey:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("foo", PathKey("foo", False, "")),
            ("foo[]", PathKey("foo", True, "")),
            ("foo[id]", PathKey("foo", False, "[id]")),
            ("foo[][id]", PathKey("foo", True, "[id]")),
            ("foo[bar][baz][]", PathKey("foo", False, "[bar][baz][]")),
        ],
    )
    def test_split(self, key: str, expected: PathKey) -> None:
        assert parse_key(key) == expected

    def test_leading_bracket_is_literal(self) -> None:
        """A key without a top name before its first bracket is a flat name."""
        assert parse_key("[id]") == PathKey("[id]", False, "")

    def test_group_carries_array_marker(self) -> None:
        assert parse_key("foo[][id]").group == "foo[]"
        assert parse_key("foo[id]").group == "foo"


# ###############
# nested_key / sub_map
# ###############


class TestNestedKey:
    def test_object_key(self) -> None:
        assert nested_key("foo[id]") == ("foo", "id")

    def test_array_of_objects_key(self) -> None:
        assert nested_key("foo[][id]") == ("foo", "id")

    def test_deeper_chain_is_kept(self) -> None:
        assert nested_key("foo[bar][name]") == ("foo", "bar[name]")
        assert nested_key("obj[a][][b]") == ("obj", "a[][b]")

    @pytest.mark.parametrize("key", ["foo", "foo[]", "foo[", "foo[]]", "[x]"])
    def test_flat_or_malformed_keys(self, key: str) -> None:
        assert nested_key(key) is None


class TestSubMap:
    def test_strips_one_level(self) -> None:
        assert sub_map(_sample(), "nested") == {"id": ["7"], "name": ["n"], "deep[x]": ["x"]}

    def test_array_group_is_stripped_too(self) -> None:
        assert sub_map(_sample(), "objs") == {"id": ["1", "2"]}

    def test_flat_keys_are_excluded(self) -> None:
        assert sub_map(_sample(), "foo") == {}
        assert sub_map(_sample(), "array") == {}

    def test_returns_values(self) -> None:
        assert isinstance(sub_map(_sample(), "nested"), Values)


# ###############
# Lookup and removal
# ###############


class TestFindValues:
    def test_exact_key(self) -> None:
        assert find_values(_sample(), "foo") == (None, ["1"])

    def test_array_key(self) -> None:
        assert find_values(_sample(), "array") == (None, ["a", "b"])

    def test_nested_group(self) -> None:
        submap, vals = find_values(_sample(), "objs[]")
        assert vals is None
        assert submap == {"id": ["1", "2"]}

    def test_missing(self) -> None:
        assert find_values(_sample(), "nope") == (None, None)

    def test_exact_key_wins_over_nested(self) -> None:
        m = Values({"foo[x]": ["1"], "foo": ["2"]})
        assert find_values(m, "foo") == (None, ["2"])

    def test_flat_key_helper(self) -> None:
        assert flat_key(_sample(), "array") == "array[]"
        assert flat_key(_sample(), "foo") == "foo"
        assert flat_key(_sample(), "nested") is None


class TestClaim:
    def test_removes_whole_group(self) -> None:
        m = _sample()
        claim(m, "nested")
        assert "nested[id]" not in m
        assert "nested[deep][x]" not in m
        assert "foo" in m

    def test_removes_flat_and_array_keys(self) -> None:
        m = Values({"ids": ["1"], "ids[]": ["2"], "idsx": ["3"]})
        claim(m, "ids")
        assert m == {"idsx": ["3"]}


class TestTopNames:
    def test_first_appearance_order(self) -> None:
        assert top_names(_sample()) == ["foo", "array", "nested", "objs"]

    def test_empty(self) -> None:
        assert top_names([]) == []


# ###############
# build_key
# ###############


class TestBuildKey:
    @pytest.mark.parametrize(
        ("top", "inner", "array", "expected"),
        [
            ("foo", "", False, "foo"),
            ("foo", "id", False, "foo[id]"),
            ("foo", "bar[id]", False, "foo[bar][id]"),
            ("foo", "ids[]", False, "foo[ids][]"),
            ("foo", "id", True, "foo[][id]"),
            ("foo", "", True, "foo[]"),
            ("foo", "a[][b]", True, "foo[][a][][b]"),
        ],
    )
    def test_build(self, top: str, inner: str, array: bool, expected: str) -> None:
        assert build_key(top, inner, array=array) == expected

    def test_inverse_of_nested_key(self) -> None:
        for key in ("foo[id]", "foo[bar][name]", "foo[ids][]"):
            top, inner = nested_key(key)
            assert build_key(top, inner) == key
