# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration helpers for records: field tags, embedding and type markers.

Records are plain dataclasses. The wire layout of a field is controlled by a
tag stored in the field's metadata, and numeric widths or fixed array lengths
by :data:`typing.Annotated` markers::

    @dataclass
    class Color:
        id: Int32 = query_field("id")
        name: str = query_field("name,omitempty", default="")
        rgb: Annotated[list[Uint8], FixedLength(3)] = query_field("rgb", default_factory=list)
        audit: Audit = embedded(default_factory=Audit)
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Annotated, Any

# ###############
# Public Interface
# ###############

TAG_METADATA_KEY = "bracketqs"
EMBED_METADATA_KEY = "bracketqs_embedded"


class PrimitiveKind(enum.Enum):
    """Leaf kinds understood by the primitive converters."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"


@dataclass(frozen=True)
class Numeric:
    """Annotated marker fixing the kind and bit width of a numeric field."""

    kind: PrimitiveKind
    bits: int


@dataclass(frozen=True)
class FixedLength:
    """Annotated marker turning a ``list[T]`` into a fixed-size array of *length* items.

    Decoding zero-fills missing items and drops surplus data.
    """

    length: int


Int8 = Annotated[int, Numeric(PrimitiveKind.INT, 8)]
Int16 = Annotated[int, Numeric(PrimitiveKind.INT, 16)]
Int32 = Annotated[int, Numeric(PrimitiveKind.INT, 32)]
Int64 = Annotated[int, Numeric(PrimitiveKind.INT, 64)]
Uint = Annotated[int, Numeric(PrimitiveKind.UINT, 64)]
Uint8 = Annotated[int, Numeric(PrimitiveKind.UINT, 8)]
Uint16 = Annotated[int, Numeric(PrimitiveKind.UINT, 16)]
Uint32 = Annotated[int, Numeric(PrimitiveKind.UINT, 32)]
Uint64 = Annotated[int, Numeric(PrimitiveKind.UINT, 64)]
Float32 = Annotated[float, Numeric(PrimitiveKind.FLOAT, 32)]
Float64 = Annotated[float, Numeric(PrimitiveKind.FLOAT, 64)]


def query_field(tag: str = "", **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a wire tag.

    Args:
        tag: Directive string, see :mod:`bracketqs.grammar.directives`.
        **kwargs: Passed through to :func:`dataclasses.field`
            (``default``, ``default_factory``, ``repr``...).
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_METADATA_KEY] = tag
    return dataclasses.field(metadata=metadata, **kwargs)


def embedded(**kwargs: Any) -> Any:
    """Declare a dataclass field whose record is embedded into its parent.

    The embedded record's keys appear at the parent's level without a
    wrapping name. Fields declared directly on the parent win over embedded
    fields with the same wire name.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[EMBED_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)
