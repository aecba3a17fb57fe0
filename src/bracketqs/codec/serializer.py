# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical query-string serialization of flat multimaps.

Keys are grouped by top name and the groups are written in sorted order, so
the output depends only on the key names and the order of values inside each
key. Arrays of records are written element by element rather than key by key,
which keeps the fields of one element together for Rack style parsers::

    {"foo[][id]": ["1", "2"], "foo[][name]": ["a", "b"]}
    -> foo[][id]=1&foo[][name]=a&foo[][id]=2&foo[][name]=b   (percent-encoded)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import quote_plus

from bracketqs.grammar.keys import ARRAY_MARKER, nested_key, parse_key

# ###############
# Public Interface
# ###############


def serialize(m: Mapping[str, Sequence[str]]) -> str:
    """Serialize a flat multimap into a percent-encoded query string.

    Keys and values are escaped like ``application/x-www-form-urlencoded``
    data, including the brackets (``%5B``/``%5D``). An empty multimap yields
    an empty string.
    """
    return "&".join(_fragments("", m))


# ################
# Implementation
# ################

_ARRAY_SUFFIX = "%5B%5D"


def _escape(text: str) -> str:
    return quote_plus(text, safe="")


def _group_of(key: str) -> str:
    """Return the group a key is written in: its top name plus any array marker.

    Keys that cannot be split into a top name and an inner key form a group of
    their own.
    """
    if nested_key(key) is None:
        return key
    return parse_key(key).group


def _fragments(prefix: str, m: Mapping[str, Sequence[str]]) -> list[str]:
    groups: dict[str, list[str]] = {}
    for key in m:
        groups.setdefault(_group_of(key), []).append(key)
    out: list[str] = []
    for group in sorted(groups):
        is_array = group.endswith(ARRAY_MARKER)
        name = _escape(group.removesuffix(ARRAY_MARKER))
        if prefix:
            name = f"{prefix}%5B{name}%5D"
        if group in m:
            suffix = _ARRAY_SUFFIX if is_array else ""
            out.extend(f"{name}{suffix}={_escape(value)}" for value in m[group])
        nested = {}
        for key in groups[group]:
            split = nested_key(key)
            if split is not None:
                nested[split[1]] = m[key]
        if not nested:
            continue
        if is_array:
            out.extend(_array_fragments(name + _ARRAY_SUFFIX, nested))
        else:
            out.extend(_fragments(name, nested))
    return out


def _array_fragments(prefix: str, nested: Mapping[str, Sequence[str]]) -> list[str]:
    """Write an array-of-records group one element at a time."""
    out: list[str] = []
    count = max(len(vals) for vals in nested.values())
    for index in range(count):
        element = {key: [vals[index]] for key, vals in nested.items() if index < len(vals)}
        out.extend(_fragments(prefix, element))
    return out
