# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Bracket-notation key grammar and field directive parsing."""

from bracketqs.grammar.directives import FieldDirective, parse_directive
from bracketqs.grammar.keys import (
    ARRAY_MARKER,
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

__all__ = [
    # Keys
    "ARRAY_MARKER",
    "PathKey",
    "build_key",
    "claim",
    "find_values",
    "flat_key",
    "nested_key",
    "parse_key",
    "sub_map",
    "top_names",
    # Directives
    "FieldDirective",
    "parse_directive",
]
