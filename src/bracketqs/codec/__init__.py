# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Codec engines: typed decoding and encoding, dynamic values and serialization."""

from bracketqs.codec.decoder import decode, unmarshal, zero_value
from bracketqs.codec.dynamic import to_dynamic
from bracketqs.codec.encoder import encode, is_empty
from bracketqs.codec.primitives import decode_primitive, encode_primitive
from bracketqs.codec.serializer import serialize

__all__ = [
    # Decoding
    "decode",
    "unmarshal",
    "zero_value",
    "to_dynamic",
    # Encoding
    "encode",
    "is_empty",
    "serialize",
    # Primitives
    "decode_primitive",
    "encode_primitive",
]
