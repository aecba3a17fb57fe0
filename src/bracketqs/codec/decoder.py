# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type-directed decoding of flat multimaps into typed values.

Records are filled field by field in declaration order. A field claims every
key of its wire name (the flat ``name``/``name[]`` keys or the whole
``name[...]`` group) so that no sibling can read them again. Embedded records
are resolved afterwards against the keys that are left, which makes directly
declared fields win over embedded fields with the same wire name.

Arrays of records arrive as one key per record field, each holding one value
per element::

    {"foo[][id]": ["1", "2"], "foo[][name]": ["a", "b"]}
    -> [Foo(id=1, name="a"), Foo(id=2, name="b")]

which only works when every key of the group holds the same number of values.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from bracketqs.codec.dynamic import to_dynamic
from bracketqs.codec.primitives import decode_first, decode_primitive
from bracketqs.errors import (
    HookError,
    IncompleteArrayDataError,
    InvalidDecodeTargetError,
    TypeMismatchError,
)
from bracketqs.grammar.directives import FieldDirective
from bracketqs.grammar.keys import claim, find_values, top_names
from bracketqs.model.fields import PrimitiveKind
from bracketqs.model.shapes import (
    DynamicShape,
    EmbeddedField,
    HookShape,
    MapShape,
    OptionalShape,
    PrimitiveShape,
    RecordShape,
    SequenceShape,
    Shape,
    is_object_shape,
    record_layout,
    shape_of,
    unwrap_optional,
)
from bracketqs.model.values import Values

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def decode(values: Mapping[str, Sequence[str]], tp: Any) -> Any:
    """Decode a flat multimap into a new value of type *tp*.

    Args:
        values: The flat multimap, e.g. from :func:`bracketqs.parse_query`.
            It is copied and never modified.
        tp: Target type: a dataclass, ``dict[str, T]``, ``Any`` or a hookable
            class.

    Returns:
        The decoded value. Fields without data keep their zero value or their
        dataclass default.

    Raises:
        TypeMismatchError: If the data does not fit the target shape.
        IncompleteArrayDataError: If an array-of-records group has keys with
            different value counts.
        ParseFailureError: If a string does not parse as its primitive kind.
        NumericOverflowError: If a number does not fit its bit width.
        UnsupportedShapeError: If *tp* cannot be described as a shape.
        HookError: If a ``decode_query`` hook raises.
    """
    return _decode_object(Values(values), shape_of(tp), None)


def unmarshal(values: Mapping[str, Sequence[str]], target: Any, tp: Any = None) -> None:
    """Decode a flat multimap into an existing object, in place.

    Keys without a matching field leave the target untouched. After an error
    the target may be partially filled and must be discarded.

    Args:
        values: The flat multimap. It is copied and never modified.
        target: A dataclass instance, a dict or a hookable object.
        tp: Optional type overriding ``type(target)``, e.g. ``dict[str, list[int]]``
            for a dict target.

    Raises:
        InvalidDecodeTargetError: If *target* is ``None``, a class, an immutable
            value or a frozen dataclass instance.
        QueryError: Any of the errors listed for :func:`decode`.
    """
    _check_target(target)
    shape = shape_of(tp if tp is not None else type(target))
    _decode_object(Values(values), shape, target)


def zero_value(shape: Shape) -> Any:
    """Return the value a field of *shape* holds before any data is decoded."""
    if isinstance(shape, (OptionalShape, DynamicShape)):
        return None
    if isinstance(shape, PrimitiveShape):
        return _PRIMITIVE_ZEROS[shape.primitive]
    if isinstance(shape, SequenceShape):
        if shape.fixed_length is None:
            return []
        return [zero_value(shape.element) for _ in range(shape.fixed_length)]
    if isinstance(shape, MapShape):
        return {}
    if isinstance(shape, RecordShape):
        return _apply(shape, None, {})
    return shape.cls()


# ################
# Implementation
# ################

# Marks a field for which the multimap holds no usable data.
_MISSING = object()

_PRIMITIVE_ZEROS: dict[PrimitiveKind, Any] = {
    PrimitiveKind.STRING: "",
    PrimitiveKind.INT: 0,
    PrimitiveKind.UINT: 0,
    PrimitiveKind.FLOAT: 0.0,
    PrimitiveKind.BOOL: False,
}

_IMMUTABLE_TARGETS = (str, bytes, int, float, complex, tuple, frozenset)


def _check_target(target: Any) -> None:
    if target is None or isinstance(target, type) or isinstance(target, _IMMUTABLE_TARGETS):
        raise InvalidDecodeTargetError(target)
    if dataclasses.is_dataclass(target) and record_layout(type(target)).frozen:
        raise InvalidDecodeTargetError(target)


def _structural(shape: Shape) -> Shape:
    """Return the shape to decode structurally, looking through hook-less hook shapes."""
    if isinstance(shape, HookShape) and not shape.decodable:
        if shape.inner is None:
            raise TypeMismatchError("object", shape, "type has no decode_query hook")
        return shape.inner
    return shape


def _decode_object(m: Values, shape: Shape, current: Any) -> Any:
    """Decode a whole multimap (already stripped to this value's namespace)."""
    if isinstance(shape, OptionalShape):
        return _decode_object(m, shape.inner, current)
    if isinstance(shape, HookShape) and shape.decodable:
        return _call_decode_hook(m, shape, current)
    shape = _structural(shape)
    if isinstance(shape, DynamicShape):
        return _replace_dict(current, to_dynamic(m))
    if isinstance(shape, MapShape):
        return _decode_map(m, shape, current)
    if isinstance(shape, RecordShape):
        return _apply(shape, current, _collect(m, shape, current))
    raise TypeMismatchError("object", shape)


def _call_decode_hook(m: Values, shape: HookShape, current: Any) -> Any:
    target = current if current is not None else shape.cls()
    logger.debug("Decoding %s through decode_query with %d key(s)", shape, len(m))
    try:
        target.decode_query(m)
    except Exception as exc:
        raise HookError(shape, "decode_query", exc) from exc
    return target


def _collect(m: Values, shape: RecordShape, current: Any) -> dict[str, Any]:
    """Decode every field of a record and return the values that were found."""
    layout = record_layout(shape.cls)
    assigned: dict[str, Any] = {}
    for field in layout.fields:
        if field.directive.ignore:
            continue
        existing = getattr(current, field.attribute, None)
        value = _decode_member(m, field.directive, field.shape, existing)
        if value is not _MISSING:
            assigned[field.attribute] = value
    if layout.embedded:
        logger.debug(
            "Resolving %d embedded field(s) of %s against %d remaining key(s)",
            len(layout.embedded),
            shape,
            len(m),
        )
    for emb in layout.embedded:
        existing = getattr(current, emb.attribute, None)
        value = _decode_embedded(m, emb, existing)
        if value is not _MISSING:
            assigned[emb.attribute] = value
    return assigned


def _apply(shape: RecordShape, current: Any, assigned: dict[str, Any]) -> Any:
    """Store decoded field values into *current*, or build a new record from them."""
    layout = record_layout(shape.cls)
    if current is not None and not layout.frozen:
        for attribute, value in assigned.items():
            setattr(current, attribute, value)
        return current
    init_values = {a: v for a, v in assigned.items() if a not in layout.no_init}
    late_values = {a: v for a, v in assigned.items() if a in layout.no_init}
    if current is None:
        kwargs = {
            attribute: zero_value(field_shape) if field_shape is not None else None
            for attribute, field_shape in layout.required
            if attribute not in assigned
        }
        kwargs.update(init_values)
        record = shape.cls(**kwargs)
    else:
        # replace() re-initialises init=False fields, so their current values are carried over.
        late_values = {a: getattr(current, a) for a in layout.no_init if hasattr(current, a)} | late_values
        record = dataclasses.replace(current, **init_values)
    for attribute, value in late_values.items():
        object.__setattr__(record, attribute, value)
    return record


def _decode_member(m: Values, directive: FieldDirective, shape: Shape, existing: Any) -> Any:
    """Decode the data stored under one wire name and claim its keys from *m*."""
    submap, vals = find_values(m, directive.wire_name)
    if submap is not None:
        claim(m, directive.wire_name)
        return _decode_nested(submap, shape, existing)
    if vals is not None:
        claim(m, directive.wire_name)
        return _decode_flat(vals, shape, directive.comma, existing)
    return _MISSING


def _decode_embedded(m: Values, emb: EmbeddedField, existing: Any) -> Any:
    inner = _structural(unwrap_optional(emb.shape))
    if isinstance(inner, RecordShape):
        assigned = _collect(m, inner, existing)
        if not assigned:
            return _MISSING
        return _apply(inner, existing, assigned)
    if not m:
        return _MISSING
    return _decode_object(m, emb.shape, existing)


def _decode_nested(submap: Values, shape: Shape, existing: Any) -> Any:
    """Decode the sub map of a nested key group (``name[...]``)."""
    if isinstance(shape, OptionalShape):
        return _decode_nested(submap, shape.inner, existing)
    if isinstance(shape, HookShape) and shape.decodable:
        return _call_decode_hook(submap, shape, existing)
    shape = _structural(shape)
    if isinstance(shape, SequenceShape):
        return _decode_indexed(submap, shape)
    if isinstance(shape, PrimitiveShape):
        raise TypeMismatchError("object", shape)
    return _decode_object(submap, shape, existing)


def _decode_flat(vals: list[str], shape: Shape, comma: bool, existing: Any) -> Any:
    """Decode the value list of a flat key (``name`` or ``name[]``)."""
    if isinstance(shape, OptionalShape):
        if not vals:
            return _MISSING
        return _decode_flat(vals, shape.inner, comma, existing)
    if isinstance(shape, HookShape) and shape.decodable:
        return _call_decode_hook(Values({"": vals}), shape, existing)
    shape = _structural(shape)
    if comma:
        vals = [part for value in vals for part in value.split(",")]
    if isinstance(shape, DynamicShape):
        return vals
    if isinstance(shape, SequenceShape):
        return _fit([_decode_element(value, shape.element) for value in vals], shape)
    if isinstance(shape, PrimitiveShape):
        if not vals:
            return _MISSING
        return decode_first(vals, shape, existing)
    raise TypeMismatchError(f"value list {vals!r}", shape)


def _decode_element(value: str, shape: Shape) -> Any:
    """Decode one element of a flat list."""
    if isinstance(shape, OptionalShape):
        return _decode_element(value, shape.inner)
    if isinstance(shape, HookShape) and shape.decodable:
        return _call_decode_hook(Values({"": [value]}), shape, None)
    shape = _structural(shape)
    if isinstance(shape, PrimitiveShape):
        return decode_primitive(value, shape)
    if isinstance(shape, DynamicShape):
        return [value]
    raise TypeMismatchError(f"value {value!r}", shape)


def _decode_indexed(submap: Values, shape: SequenceShape) -> list[Any]:
    """Rebuild a list of records from a group whose keys hold one value per element."""
    element = shape.element
    if not (is_object_shape(element) or isinstance(unwrap_optional(element), DynamicShape)):
        raise TypeMismatchError("object", shape)
    lengths = {key: len(vals) for key, vals in submap.items()}
    count = next(iter(lengths.values()))
    if any(length != count for length in lengths.values()):
        raise IncompleteArrayDataError(shape, lengths)
    logger.debug("Reconstructing %d %s element(s) from %d key(s)", count, element, len(submap))
    items = []
    for index in range(count):
        element_map = Values({key: [vals[index]] for key, vals in submap.items()})
        items.append(_decode_object(element_map, element, None))
    return _fit(items, shape)


def _fit(items: list[Any], shape: SequenceShape) -> list[Any]:
    """Truncate or zero-fill *items* to the length of a fixed-size array."""
    if shape.fixed_length is None:
        return items
    items = items[: shape.fixed_length]
    items.extend(zero_value(shape.element) for _ in range(shape.fixed_length - len(items)))
    return items


def _decode_map(m: Values, shape: MapShape, current: Any) -> dict[str, Any]:
    # Entries are read from a copy: a map never consumes its parent's keys.
    work = m.copy()
    result: dict[str, Any] = {}
    for name in top_names(m):
        value = _decode_member(work, FieldDirective(wire_name=name), shape.value, None)
        result[name] = zero_value(shape.value) if value is _MISSING else value
    return _replace_dict(current, result)


def _replace_dict(current: Any, result: dict[str, Any]) -> dict[str, Any]:
    if isinstance(current, dict):
        current.clear()
        current.update(result)
        return current
    return result
