# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Capabilities a type can expose to own its wire representation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from bracketqs.model.values import Values

# ###############
# Public Interface
# ###############

ENCODE_HOOK = "encode_query"
DECODE_HOOK = "decode_query"


@runtime_checkable
class QueryEncodable(Protocol):
    """A value that encodes itself into a flat multimap.

    The returned keys are relative to the value's own namespace: when the
    value is stored in a field named ``foo``, a returned key ``id`` becomes
    ``foo[id]`` and the empty key ``""`` becomes ``foo`` itself.
    """

    def encode_query(self) -> Mapping[str, Sequence[str]]: ...


@runtime_checkable
class QueryDecodable(Protocol):
    """A value that fills itself from a flat multimap.

    The multimap is already stripped to the value's namespace. When the value
    sits in a field that matched a flat key, the field's values are passed
    under the empty key ``""``. Hookable classes must be constructible
    without arguments.
    """

    def decode_query(self, values: Values) -> None: ...


def has_encode_hook(cls: type) -> bool:
    """Return True if instances of *cls* expose a callable ``encode_query``."""
    return callable(getattr(cls, ENCODE_HOOK, None))


def has_decode_hook(cls: type) -> bool:
    """Return True if instances of *cls* expose a callable ``decode_query``."""
    return callable(getattr(cls, DECODE_HOOK, None))
