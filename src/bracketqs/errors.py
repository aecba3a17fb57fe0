# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by the bracketqs codec.

Every error is raised at the point of failure and propagates to the caller.
A destination passed to :func:`bracketqs.unmarshal` must be discarded after
any of these errors.
"""

from __future__ import annotations

from typing import Any

# ###############
# Public Interface
# ###############


class QueryError(Exception):
    """Base class of every error raised by bracketqs."""


class InvalidDecodeTargetError(QueryError):
    """Raised when the destination of an unmarshal is not a writable object.

    Attributes:
        target: The rejected destination.
    """

    def __init__(self, target: Any) -> None:
        if target is None:
            message = "bracketqs: unmarshal(None)"
        elif isinstance(target, type):
            message = f"bracketqs: unmarshal(class {target.__qualname__}), expected an instance"
        else:
            message = f"bracketqs: unmarshal(non-writable {type(target).__qualname__})"
        super().__init__(message)
        self.target = target


class TypeMismatchError(QueryError):
    """Raised when the flat data cannot satisfy the target shape.

    Attributes:
        value: Short description of the offending data (e.g. ``"object"``).
        shape: The shape descriptor that was being decoded.
    """

    def __init__(self, value: str, shape: Any, detail: str | None = None) -> None:
        message = f"bracketqs: cannot decode {value} into value of type {shape}"
        if detail:
            message = f"{message}. {detail}"
        super().__init__(message)
        self.value = value
        self.shape = shape


class IncompleteArrayDataError(TypeMismatchError):
    """Raised when an array-of-records group has keys with different value counts."""

    def __init__(self, shape: Any, lengths: dict[str, int]) -> None:
        super().__init__(
            "object",
            shape,
            "every slice element must contain the same amount of data "
            f"(value counts: {lengths})",
        )
        self.lengths = lengths


class ParseFailureError(QueryError):
    """Raised when a string does not parse into the target primitive kind.

    Attributes:
        value: The offending string.
        shape: The primitive shape it was converted to.
    """

    def __init__(self, value: str, shape: Any, kind: str = "value") -> None:
        super().__init__(f"bracketqs: cannot decode {kind} {value!r} into value of type {shape}")
        self.value = value
        self.shape = shape


class NumericOverflowError(ParseFailureError):
    """Raised when a parsed number does not fit into the target bit width."""

    def __init__(self, value: str, shape: Any) -> None:
        super().__init__(value, shape, kind="number (out of range)")


class UnsupportedShapeError(QueryError):
    """Raised when a type or shape cannot take part in encoding or decoding.

    Attributes:
        shape: The offending type or shape descriptor.
    """

    def __init__(self, shape: Any, detail: str | None = None) -> None:
        message = f"bracketqs: unsupported type: {_describe(shape)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.shape = shape


class HookError(QueryError):
    """Wraps an exception raised by a custom ``encode_query``/``decode_query`` hook.

    Attributes:
        shape: The hookable shape the hook belongs to.
        operation: ``"encode_query"`` or ``"decode_query"``.
        cause: The original exception (also available as ``__cause__``).
    """

    def __init__(self, shape: Any, operation: str, cause: BaseException) -> None:
        super().__init__(f"bracketqs: error calling {operation} for type {shape}: {cause}")
        self.shape = shape
        self.operation = operation
        self.cause = cause


class QuerySyntaxError(QueryError):
    """Raised when a URL or query string cannot be split into key/value pairs."""


# ################
# Implementation
# ################


def _describe(shape: Any) -> str:
    if isinstance(shape, type):
        return shape.__qualname__
    return str(shape)
