# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Conversion between wire strings and primitive leaf values."""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from bracketqs.errors import NumericOverflowError, ParseFailureError
from bracketqs.model.fields import PrimitiveKind
from bracketqs.model.shapes import PrimitiveShape

# ###############
# Public Interface
# ###############

TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def decode_primitive(value: str, shape: PrimitiveShape) -> Any:
    """Convert one wire string into a value of *shape*.

    Raises:
        ParseFailureError: If *value* is not a valid literal of the kind.
        NumericOverflowError: If the number does not fit the shape's bit width.
    """
    kind = shape.primitive
    if kind is PrimitiveKind.STRING:
        return value
    if kind is PrimitiveKind.BOOL:
        if value in TRUE_LITERALS:
            return True
        if value in FALSE_LITERALS:
            return False
        raise ParseFailureError(value, shape, kind="bool")
    if kind is PrimitiveKind.FLOAT:
        return _parse_float(value, shape)
    return _parse_integer(value, shape)


def decode_first(values: Sequence[str], shape: PrimitiveShape, current: Any) -> Any:
    """Convert the first of *values*; with no values, *current* is returned unchanged."""
    if not values:
        return current
    return decode_primitive(values[0], shape)


def encode_primitive(value: Any, shape: PrimitiveShape) -> str:
    """Format a primitive value for the wire.

    Integers are written in base 10, booleans as ``true``/``false`` and
    floats in the shortest plain decimal form that reads back to the same
    value at the shape's precision (``1.0`` becomes ``1``).
    """
    kind = shape.primitive
    if kind is PrimitiveKind.BOOL:
        return "true" if value else "false"
    if kind in (PrimitiveKind.INT, PrimitiveKind.UINT):
        return str(int(value))
    if kind is PrimitiveKind.FLOAT:
        return _format_float(float(value), shape)
    return str(value)


# ################
# Implementation
# ################

_INFINITY_LITERALS = frozenset({"inf", "infinity"})


def _int_bounds(shape: PrimitiveShape) -> tuple[int, int]:
    if shape.primitive is PrimitiveKind.UINT:
        return 0, (1 << shape.bits) - 1
    limit = 1 << (shape.bits - 1)
    return -limit, limit - 1


def _parse_integer(value: str, shape: PrimitiveShape) -> int:
    digits = value
    if shape.primitive is PrimitiveKind.INT and digits[:1] in ("+", "-"):
        digits = digits[1:]
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ParseFailureError(value, shape, kind="number")
    number = int(value)
    low, high = _int_bounds(shape)
    if not low <= number <= high:
        raise NumericOverflowError(value, shape)
    return number


def _parse_float(value: str, shape: PrimitiveShape) -> float:
    # float() also accepts surrounding whitespace and digit separators.
    if not value or value != value.strip() or "_" in value:
        raise ParseFailureError(value, shape, kind="number")
    try:
        number = float(value)
    except ValueError:
        raise ParseFailureError(value, shape, kind="number") from None
    if math.isinf(number) and value.lstrip("+-").lower() not in _INFINITY_LITERALS:
        raise NumericOverflowError(value, shape)
    if shape.bits == 32:
        try:
            return _round_float32(number)
        except OverflowError:
            raise NumericOverflowError(value, shape) from None
    return number


def _round_float32(number: float) -> float:
    """Round *number* to the nearest float32.

    Raises:
        OverflowError: If a finite *number* is out of float32 range.
    """
    result = struct.unpack("f", struct.pack("f", number))[0]
    # Depending on the interpreter, pack either raises or rounds to infinity.
    if math.isinf(result) and not math.isinf(number):
        raise OverflowError(f"{number!r} is out of float32 range")
    return result


def _format_float(number: float, shape: PrimitiveShape) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    text = repr(number) if shape.bits != 32 else _shortest_float32(number, shape)
    return format(Decimal(text).normalize(), "f")


def _shortest_float32(number: float, shape: PrimitiveShape) -> str:
    try:
        target = _round_float32(number)
    except OverflowError:
        raise NumericOverflowError(repr(number), shape) from None
    for digits in range(1, 10):
        text = f"{target:.{digits}g}"
        try:
            candidate = _round_float32(float(text))
        except OverflowError:
            continue
        if candidate == target:
            return text
    return repr(target)
