# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type-directed encoding of typed values into flat multimaps.

Nested records, maps and hook results are merged into their parent under the
field's wire name (``bar`` + ``{"id": [...]}`` becomes ``bar[id]``). Lists of
records are flattened into one key per record field with one value per
element::

    [Foo(id=1, name="a"), Foo(id=2, name="b")]
    -> {"foo[][id]": ["1", "2"], "foo[][name]": ["a", "b"]}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bracketqs.codec.primitives import encode_primitive
from bracketqs.errors import HookError, UnsupportedShapeError
from bracketqs.grammar.keys import ARRAY_MARKER, build_key
from bracketqs.model.shapes import (
    DynamicShape,
    HookShape,
    MapShape,
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


def encode(value: Any, tp: Any = None) -> Values:
    """Encode a record, a string-keyed dict or a hookable object into a flat multimap.

    Args:
        value: The value to encode. ``None`` encodes to an empty multimap.
        tp: Optional static type of *value*; the runtime type is used when omitted.

    Raises:
        UnsupportedShapeError: If the value (or a value inside it) has no wire
            representation, e.g. a top-level list or a record stored in a dict.
        HookError: If an ``encode_query`` hook raises.
    """
    if value is None:
        return Values()
    shape = shape_of(tp) if tp is not None else _DYNAMIC
    return _encode_object(value, shape)


def is_empty(value: Any) -> bool:
    """Return True for values skipped by ``omitempty``.

    These are ``None``, ``False``, numeric zero and empty strings, lists and
    dicts. Records are never empty.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float)):
        return value == 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


# ################
# Implementation
# ################

_DYNAMIC = DynamicShape()
_DYNAMIC_MAP = MapShape(value=_DYNAMIC)
_DYNAMIC_LIST = SequenceShape(element=_DYNAMIC)


def _resolve(value: Any, shape: Shape) -> Shape:
    """Return the concrete shape of a non-``None`` *value* declared as *shape*."""
    shape = unwrap_optional(shape)
    if isinstance(shape, HookShape) and not shape.encodable:
        if shape.inner is None:
            raise UnsupportedShapeError(shape, "type has no encode_query hook")
        return shape.inner
    if not isinstance(shape, DynamicShape):
        return shape
    if isinstance(value, Mapping):
        return _DYNAMIC_MAP
    if isinstance(value, (list, tuple)):
        return _DYNAMIC_LIST
    return _resolve(value, shape_of(type(value)))


def _encode_object(value: Any, shape: Shape) -> Values:
    shape = _resolve(value, shape)
    if isinstance(shape, HookShape):
        return _call_encode_hook(value, shape)
    if isinstance(shape, RecordShape):
        return _encode_record(value, shape)
    if isinstance(shape, MapShape):
        return _encode_map(value, shape)
    raise UnsupportedShapeError(shape, "only records, maps and hookable values encode to a multimap")


def _call_encode_hook(value: Any, shape: HookShape) -> Values:
    logger.debug("Encoding %s through encode_query", shape)
    try:
        return Values(value.encode_query())
    except Exception as exc:
        raise HookError(shape, "encode_query", exc) from exc


def _encode_record(value: Any, shape: RecordShape) -> Values:
    layout = record_layout(shape.cls)
    out = Values()
    for field in layout.fields:
        directive = field.directive
        if directive.ignore:
            continue
        item = getattr(value, field.attribute)
        if directive.omit_empty and is_empty(item):
            continue
        _encode_member(out, directive.wire_name, directive.comma, item, field.shape)
    for emb in layout.embedded:
        item = getattr(value, emb.attribute)
        if item is None:
            continue
        for key, vals in _encode_object(item, emb.shape).items():
            if key in out:
                logger.debug("Skipping key %r of embedded %s: already set on %s", key, emb.attribute, shape)
                continue
            out[key] = vals
    return out


def _encode_member(out: Values, name: str, comma: bool, item: Any, shape: Shape) -> None:
    """Encode one named value (a record field or a map entry) into *out*."""
    if item is None:
        return
    shape = _resolve(item, shape)
    if isinstance(shape, (HookShape, RecordShape, MapShape)):
        _merge_by_key(out, name, _encode_object(item, shape))
    elif isinstance(shape, SequenceShape):
        _encode_sequence(out, name, comma, item, shape)
    else:
        out[name] = [encode_primitive(item, shape)]


def _merge_by_key(out: Values, name: str, src: Mapping[str, list[str]], *, array: bool = False) -> None:
    """Nest every key of *src* under *name*; the empty key maps to *name* itself."""
    for key, vals in src.items():
        out[build_key(name, key, array=array)] = list(vals)


def _encode_sequence(out: Values, name: str, comma: bool, items: Any, shape: SequenceShape) -> None:
    if is_object_shape(shape.element):
        _encode_indexed(out, name, items, shape.element)
        return
    strs = []
    for item in items:
        if item is None:
            continue
        element = _resolve(item, shape.element)
        if not isinstance(element, PrimitiveShape):
            raise UnsupportedShapeError(element, f"list {name!r} may only hold primitive values")
        strs.append(encode_primitive(item, element))
    if not strs:
        return
    if comma:
        out[name] = [",".join(strs)]
    else:
        out[name + ARRAY_MARKER] = strs


def _encode_indexed(out: Values, name: str, items: Any, element: Shape) -> None:
    """Flatten a list of records into ``name[][key]`` keys holding one value per element."""
    collected = Values()
    for item in items:
        if item is None:
            continue
        # Multiple values of one element are joined so every key keeps one value per element.
        for key, vals in _encode_object(item, element).items():
            collected.add(key, ",".join(vals))
    logger.debug("Flattened %d %s element(s) of %r into %d key(s)", len(items), element, name, len(collected))
    _merge_by_key(out, name, collected, array=True)


def _encode_map(value: Mapping[Any, Any], shape: MapShape) -> Values:
    out = Values()
    for key, item in value.items():
        if not isinstance(key, str):
            raise UnsupportedShapeError(shape, f"map key {key!r} is not a string")
        if item is None:
            continue
        if isinstance(_resolve(item, shape.value), RecordShape):
            raise UnsupportedShapeError(shape, f"map entry {key!r} holds a record")
        _encode_member(out, key, False, item, shape.value)
    return out
