# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""The flat multimap exchanged on the wire and the untyped nested value."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Union

# ###############
# Public Interface
# ###############

# A nested value built without a static shape: either the raw string list of a
# flat key, or a mapping from top names to further nested values.
DynamicValue = Union[list[str], dict[str, "DynamicValue"]]


class Values(dict[str, list[str]]):
    """Flat multimap from wire keys to ordered lists of string values.

    Key insertion order is kept. The order of values inside one key is
    significant and is preserved by every codec operation.
    """

    def __init__(
        self,
        data: Mapping[str, Sequence[str] | None] | Iterable[tuple[str, Sequence[str] | None]] = (),
    ) -> None:
        super().__init__()
        items = data.items() if isinstance(data, Mapping) else data
        for key, vals in items:
            self[key] = list(vals) if vals is not None else []

    def first(self, key: str) -> str:
        """Return the first value stored under *key*, or ``""`` when there is none."""
        vals = self.get(key)
        if not vals:
            return ""
        return vals[0]

    def add(self, key: str, value: str) -> None:
        """Append *value* to the list stored under *key*."""
        self.setdefault(key, []).append(value)

    def set(self, key: str, value: str) -> None:
        """Replace the list stored under *key* with the single *value*."""
        self[key] = [value]

    def copy(self) -> Values:
        """Return a copy whose value lists are independent of this multimap."""
        return Values(self)

    def encode(self) -> str:
        """Serialize into the canonical, percent-encoded query string."""
        from bracketqs.codec.serializer import serialize

        return serialize(self)
