# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Grammar of bracket-notation wire keys.

A wire key names a top-level entry and, optionally, a chain of bracketed
segments addressing nested objects and arrays::

    key          := top_name suffix?
    top_name     := 1*(char except '[')
    suffix       := "[]" | bracket_chain
    bracket_chain := "[" segment "]" bracket_chain?
    segment      := 1*(char except ']')

``name[]`` marks a flat array, ``name[x]`` a nested object and ``name[][x]``
an array of objects. Everything here is plain string slicing; malformed
trailing content is carried along literally.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from bracketqs.model.values import Values

# ###############
# Public Interface
# ###############

ARRAY_MARKER = "[]"


@dataclass(frozen=True)
class PathKey:
    """The parsed form of one wire key.

    Attributes:
        top_name: The text before the first ``[``.
        is_array: True iff the top name is immediately followed by ``[]``.
        remainder: The rest of the bracket chain after the top name (and after
            the array marker, if any). Empty for flat keys.
    """

    top_name: str
    is_array: bool
    remainder: str

    @property
    def group(self) -> str:
        """The top name with its array marker, e.g. ``"foo[]"`` for ``foo[][id]``."""
        return self.top_name + ARRAY_MARKER if self.is_array else self.top_name


def parse_key(key: str) -> PathKey:
    """Split a wire key into its top name, array marker and remaining chain.

    A key that begins with ``[`` has no valid top name and is treated
    literally as a flat top name.
    """
    bracket = key.find("[")
    if bracket <= 0:
        return PathKey(key, False, "")
    top_name = key[:bracket]
    rest = key[bracket:]
    if rest.startswith(ARRAY_MARKER):
        return PathKey(top_name, True, rest[len(ARRAY_MARKER) :])
    return PathKey(top_name, False, rest)


def nested_key(key: str) -> tuple[str, str] | None:
    """Strip one bracket level from a nested key.

    ``foo[id]`` and ``foo[][id]`` both yield ``("foo", "id")``;
    ``foo[bar][name]`` yields ``("foo", "bar[name]")``.

    Returns:
        The top name and the inner key, or ``None`` when *key* is flat
        (``foo``, ``foo[]``) or its first segment is empty or unterminated.
    """
    path = parse_key(key)
    rest = path.remainder
    if not rest.startswith("["):
        return None
    close = rest.find("]", 1)
    if close <= 1:
        return None
    return path.top_name, rest[1:close] + rest[close + 1 :]


def sub_map(m: Mapping[str, Sequence[str]], top_name: str) -> Values:
    """Return every entry nested under *top_name*, with one bracket level stripped.

    ::

        {"foo": [...], "nested[id]": [...], "nested[name]": [...]}
        sub_map(m, "nested") == {"id": [...], "name": [...]}

    Keys that are exactly ``top_name`` or ``top_name[]`` are not part of the
    result; they hold flat values, not nested ones.
    """
    result = Values()
    for key, vals in m.items():
        split = nested_key(key)
        if split is None or split[0] != top_name:
            continue
        result[split[1]] = vals
    return result


def find_values(m: Mapping[str, Sequence[str]], name: str) -> tuple[Values | None, list[str] | None]:
    """Look up the data stored for a wire name.

    Tries the exact key, then ``name[]``, then the non-empty sub map of all
    keys nested under the name (with any trailing ``[]`` of *name* ignored).

    Returns:
        ``(None, values)`` for flat data, ``(submap, None)`` for nested data,
        or ``(None, None)`` when nothing is stored under the name.
    """
    if name in m:
        return None, list(m[name])
    if name + ARRAY_MARKER in m:
        return None, list(m[name + ARRAY_MARKER])
    submap = sub_map(m, name.removesuffix(ARRAY_MARKER))
    if submap:
        return submap, None
    return None, None


def flat_key(m: Mapping[str, Sequence[str]], name: str) -> str | None:
    """Return the key (``name`` or ``name[]``) holding flat values for *name*, if any."""
    if name in m:
        return name
    if name + ARRAY_MARKER in m:
        return name + ARRAY_MARKER
    return None


def claim(m: dict[str, list[str]], name: str) -> None:
    """Remove every key that belongs to the wire name *name* from *m*.

    This drops the flat keys ``name`` and ``name[]`` as well as every key
    nested under ``name``, so that no later field can read them again.
    """
    top = name.removesuffix(ARRAY_MARKER)
    for key in list(m):
        if key in (top, top + ARRAY_MARKER):
            del m[key]
            continue
        split = nested_key(key)
        if split is not None and split[0] == top:
            del m[key]


def top_names(keys: Iterable[str]) -> list[str]:
    """Return the distinct top names of *keys*, in first-appearance order."""
    seen: dict[str, None] = {}
    for key in keys:
        seen.setdefault(parse_key(key).top_name, None)
    return list(seen)


def build_key(top_name: str, inner_key: str = "", *, array: bool = False) -> str:
    """Nest *inner_key* one bracket level below *top_name*.

    ``build_key("foo", "id")`` is ``foo[id]``, ``build_key("foo", "bar[id]")``
    is ``foo[bar][id]`` and ``build_key("foo", "ids[]")`` is ``foo[ids][]``.
    With ``array=True`` the array marker is inserted after *top_name*.
    An empty *inner_key* yields the bare top name (plus marker). An inner key
    that begins with ``[`` is appended as-is.
    """
    head = top_name + ARRAY_MARKER if array else top_name
    if not inner_key:
        return head
    if inner_key.startswith("["):
        return head + inner_key
    inner = parse_key(inner_key)
    marker = ARRAY_MARKER if inner.is_array else ""
    return f"{head}[{inner.top_name}]{marker}{inner.remainder}"
