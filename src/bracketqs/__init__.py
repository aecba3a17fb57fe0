# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Encode and decode typed Python values as Rails style bracket-notation query strings."""

from bracketqs.codec import decode, encode, serialize, to_dynamic, unmarshal
from bracketqs.errors import (
    HookError,
    IncompleteArrayDataError,
    InvalidDecodeTargetError,
    NumericOverflowError,
    ParseFailureError,
    QueryError,
    QuerySyntaxError,
    TypeMismatchError,
    UnsupportedShapeError,
)
from bracketqs.model import (
    DynamicValue,
    FixedLength,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    QueryDecodable,
    QueryEncodable,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    Values,
    embedded,
    query_field,
    shape_of,
)
from bracketqs.query import parse_query, parse_url, unmarshal_url

__all__ = [
    # Codec
    "encode",
    "decode",
    "unmarshal",
    "serialize",
    "to_dynamic",
    # Query strings
    "parse_query",
    "parse_url",
    "unmarshal_url",
    # Model
    "Values",
    "DynamicValue",
    "shape_of",
    "query_field",
    "embedded",
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
    "QueryEncodable",
    "QueryDecodable",
    # Errors
    "QueryError",
    "InvalidDecodeTargetError",
    "TypeMismatchError",
    "IncompleteArrayDataError",
    "ParseFailureError",
    "NumericOverflowError",
    "UnsupportedShapeError",
    "HookError",
    "QuerySyntaxError",
]
