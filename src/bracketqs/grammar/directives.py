# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-field directives controlling how a record field maps to wire keys.

A directive is written as a short tag string::

    directive := "-" | name? ("," option)*
    option    := "omitempty" | "comma"

Examples:

- ``""``              the field's wire name is its attribute name
- ``"id"``            the wire name is ``id``
- ``"id,omitempty"``  skipped on encode when the field holds an empty value
- ``",omitempty"``    attribute name, skipped when empty
- ``"ints,comma"``    sequence joined by ``,`` into a single value
- ``"-"``             the field is never encoded or decoded
"""

from __future__ import annotations

from dataclasses import dataclass

# ###############
# Public Interface
# ###############

IGNORE_TAG = "-"
OPTION_OMIT_EMPTY = "omitempty"
OPTION_COMMA = "comma"


@dataclass(frozen=True)
class FieldDirective:
    """The parsed form of a field tag.

    Attributes:
        wire_name: Key name used on the wire.
        ignore: The field takes no part in encoding or decoding.
        omit_empty: Skip the field on encode when its value is empty
            (``""``, ``0``, ``False``, ``None``, empty list or dict).
        comma: Join sequence elements with ``,`` on encode and split on
            ``,`` on decode.
    """

    wire_name: str
    ignore: bool = False
    omit_empty: bool = False
    comma: bool = False


def parse_directive(tag: str, attribute: str) -> FieldDirective:
    """Parse a field tag string.

    Args:
        tag: The tag string, e.g. ``"name,omitempty"``.
        attribute: The declared attribute name, used when the tag has no name.

    Returns:
        The corresponding :class:`FieldDirective`. Unknown options are ignored.
    """
    parts = tag.split(",")
    if parts[0] == IGNORE_TAG:
        return FieldDirective(wire_name=attribute, ignore=True)
    options = set(parts[1:])
    return FieldDirective(
        wire_name=parts[0] or attribute,
        omit_empty=OPTION_OMIT_EMPTY in options,
        comma=OPTION_COMMA in options,
    )
