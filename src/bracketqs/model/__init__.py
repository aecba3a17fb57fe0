# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model: the flat multimap, shape descriptors, field declarations and hooks."""

from bracketqs.model.fields import (
    FixedLength,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Numeric,
    PrimitiveKind,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    embedded,
    query_field,
)
from bracketqs.model.hooks import QueryDecodable, QueryEncodable
from bracketqs.model.shapes import (
    DynamicShape,
    EmbeddedField,
    HookShape,
    MapShape,
    OptionalShape,
    PrimitiveShape,
    RecordField,
    RecordLayout,
    RecordShape,
    SequenceShape,
    Shape,
    record_layout,
    shape_of,
)
from bracketqs.model.values import DynamicValue, Values

__all__ = [
    # Values
    "Values",
    "DynamicValue",
    # Field declarations
    "query_field",
    "embedded",
    "PrimitiveKind",
    "Numeric",
    "FixedLength",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",
    # Hooks
    "QueryEncodable",
    "QueryDecodable",
    # Shapes
    "Shape",
    "PrimitiveShape",
    "OptionalShape",
    "SequenceShape",
    "MapShape",
    "DynamicShape",
    "RecordShape",
    "HookShape",
    "RecordField",
    "EmbeddedField",
    "RecordLayout",
    "record_layout",
    "shape_of",
]
