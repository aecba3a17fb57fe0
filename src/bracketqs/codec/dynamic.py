# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Build untyped nested values from a flat multimap."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from bracketqs.grammar.keys import flat_key, sub_map, top_names
from bracketqs.model.values import DynamicValue

# ###############
# Public Interface
# ###############


def to_dynamic(m: Mapping[str, Sequence[str]]) -> dict[str, DynamicValue]:
    """Convert a flat multimap into nested dicts of string lists.

    ``name`` and ``name[]`` keys become lists under ``name``; every other top
    name becomes a dict built recursively from its sub map::

        {"ids[]": ["1", "2"], "car[color]": ["red"]}
        -> {"ids": ["1", "2"], "car": {"color": ["red"]}}

    Always succeeds; an empty multimap yields an empty dict.
    """
    result: dict[str, DynamicValue] = {}
    for name in top_names(m):
        key = flat_key(m, name)
        if key is not None:
            result[name] = list(m[key])
        else:
            result[name] = to_dynamic(sub_map(m, name))
    return result
