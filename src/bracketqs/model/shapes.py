# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shape descriptors: the static description of an encode/decode target.

A shape is derived once per Python type by :func:`shape_of` and drives both
codec engines, so neither of them inspects type annotations while running.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from bracketqs.errors import UnsupportedShapeError
from bracketqs.grammar.directives import FieldDirective, parse_directive
from bracketqs.model.fields import (
    EMBED_METADATA_KEY,
    TAG_METADATA_KEY,
    FixedLength,
    Numeric,
    PrimitiveKind,
)
from bracketqs.model.hooks import has_decode_hook, has_encode_hook

# ###############
# Public Interface
# ###############


class _ShapeBase(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class PrimitiveShape(_ShapeBase):
    """A leaf value: string, signed/unsigned integer, float or bool."""

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveKind
    bits: int = 64

    def __str__(self) -> str:
        if self.primitive is PrimitiveKind.STRING:
            return "str"
        if self.primitive is PrimitiveKind.BOOL:
            return "bool"
        return f"{self.primitive.value}{self.bits}"


class OptionalShape(_ShapeBase):
    """A value that may be ``None``; storage is allocated when data arrives."""

    kind: Literal["optional"] = "optional"
    inner: Shape

    def __str__(self) -> str:
        return f"{self.inner} | None"


class SequenceShape(_ShapeBase):
    """A growable list, or a fixed-size array when *fixed_length* is set."""

    kind: Literal["sequence"] = "sequence"
    element: Shape
    fixed_length: int | None = None

    def __str__(self) -> str:
        if self.fixed_length is None:
            return f"list[{self.element}]"
        return f"array[{self.element}, {self.fixed_length}]"


class MapShape(_ShapeBase):
    """A dict with string keys."""

    kind: Literal["map"] = "map"
    value: Shape

    def __str__(self) -> str:
        return f"dict[str, {self.value}]"


class DynamicShape(_ShapeBase):
    """No static shape: decodes to nested dicts of string lists."""

    kind: Literal["dynamic"] = "dynamic"

    def __str__(self) -> str:
        return "Any"


class RecordShape(_ShapeBase):
    """A dataclass record; its field layout is resolved lazily by :func:`record_layout`."""

    kind: Literal["record"] = "record"
    cls: type

    @property
    def fields(self) -> tuple[RecordField, ...]:
        """Directly declared fields in declaration order."""
        return record_layout(self.cls).fields

    @property
    def embedded(self) -> tuple[EmbeddedField, ...]:
        """Embedded records, resolved after all direct fields."""
        return record_layout(self.cls).embedded

    def __str__(self) -> str:
        return self.cls.__qualname__


class HookShape(_ShapeBase):
    """A class exposing ``encode_query`` and/or ``decode_query``.

    A present hook fully replaces structural handling in its direction.
    *inner* is the structural shape used for the direction without a hook,
    or ``None`` when the class has no structural form.
    """

    kind: Literal["hook"] = "hook"
    cls: type
    encodable: bool
    decodable: bool
    inner: Shape | None = None

    def __str__(self) -> str:
        return self.cls.__qualname__


# A shape descriptor. The `kind` discriminator tags each variant.
Shape = Annotated[
    Union[PrimitiveShape, OptionalShape, SequenceShape, MapShape, DynamicShape, RecordShape, HookShape],
    _Field(discriminator="kind"),
]


@dataclass(frozen=True)
class RecordField:
    """A directly declared record field.

    Attributes:
        attribute: Python attribute name.
        directive: Parsed wire tag.
        shape: Shape of the field, or ``None`` for ignored fields.
    """

    attribute: str
    directive: FieldDirective
    shape: Shape | None


@dataclass(frozen=True)
class EmbeddedField:
    """A record field whose keys are merged into the parent's namespace."""

    attribute: str
    shape: Shape


@dataclass(frozen=True)
class RecordLayout:
    """The resolved wire layout of a dataclass.

    Attributes:
        fields: Direct fields, declaration order.
        embedded: Embedded fields, declaration order.
        required: ``(attribute, shape)`` for every ``__init__`` argument without
            a default; shape is ``None`` for fields outside the wire layout.
        frozen: Whether the dataclass is frozen.
        no_init: Wire attributes declared with ``init=False``; they are set
            after construction.
    """

    fields: tuple[RecordField, ...]
    embedded: tuple[EmbeddedField, ...]
    required: tuple[tuple[str, Shape | None], ...]
    frozen: bool
    no_init: frozenset[str] = frozenset()


@functools.cache
def shape_of(tp: Any) -> Shape:
    """Derive the shape descriptor of a Python type.

    Supported: ``str``, ``bool``, ``int``, ``float`` and the width markers of
    :mod:`bracketqs.model.fields`; ``T | None``; ``list[T]`` (optionally
    annotated with :class:`FixedLength`); ``dict[str, T]``; ``Any``;
    dataclasses; classes exposing ``encode_query``/``decode_query``.

    Raises:
        UnsupportedShapeError: For any other type.
    """
    if tp is Any or tp is object:
        return DynamicShape()
    origin = typing.get_origin(tp)
    if origin is Annotated:
        base, *metadata = typing.get_args(tp)
        return _annotated_shape(tp, base, metadata)
    if origin is Union or origin is types.UnionType:
        return _optional_shape(tp)
    if origin is list:
        args = typing.get_args(tp)
        return SequenceShape(element=shape_of(args[0]) if args else DynamicShape())
    if origin is dict:
        return _map_shape(tp)
    if tp is list:
        return SequenceShape(element=DynamicShape())
    if tp is dict:
        return MapShape(value=DynamicShape())
    if isinstance(tp, type):
        encodable, decodable = has_encode_hook(tp), has_decode_hook(tp)
        structural = _structural_shape(tp)
        if encodable or decodable:
            return HookShape(cls=tp, encodable=encodable, decodable=decodable, inner=structural)
        if structural is not None:
            return structural
    raise UnsupportedShapeError(tp)


@functools.cache
def record_layout(cls: type) -> RecordLayout:
    """Resolve the fields of a dataclass into direct and embedded wire fields.

    Attributes whose names start with ``_`` are not part of the wire layout.

    Raises:
        UnsupportedShapeError: If a field's type is unsupported or an embedded
            field does not hold a record, map, hookable or dynamic value.
    """
    hints = typing.get_type_hints(cls, include_extras=True)
    fields: list[RecordField] = []
    embeds: list[EmbeddedField] = []
    required: list[tuple[str, Shape | None]] = []
    no_init: set[str] = set()
    for f in dataclasses.fields(cls):
        needs_value = f.init and f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        if f.name.startswith("_"):
            if needs_value:
                required.append((f.name, None))
            continue
        if f.metadata.get(EMBED_METADATA_KEY):
            shape = shape_of(hints[f.name])
            _check_embeddable(cls, f.name, shape)
            embeds.append(EmbeddedField(f.name, shape))
        else:
            directive = parse_directive(f.metadata.get(TAG_METADATA_KEY, ""), f.name)
            shape = None if directive.ignore else shape_of(hints[f.name])
            fields.append(RecordField(f.name, directive, shape))
        if needs_value:
            required.append((f.name, shape))
        if not f.init:
            no_init.add(f.name)
    frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    return RecordLayout(tuple(fields), tuple(embeds), tuple(required), frozen, frozenset(no_init))


def unwrap_optional(shape: Shape) -> Shape:
    """Strip every :class:`OptionalShape` wrapper from *shape*."""
    while isinstance(shape, OptionalShape):
        shape = shape.inner
    return shape


def is_object_shape(shape: Shape) -> bool:
    """Return True for shapes that encode to a multimap of their own.

    These are records, maps and hookables, optionally wrapped
    in :class:`OptionalShape`. Sequences of such shapes use the array-of-records
    key layout (``name[][key]``).
    """
    return isinstance(unwrap_optional(shape), (RecordShape, MapShape, HookShape))


# ################
# Implementation
# ################


def _annotated_shape(tp: Any, base: Any, metadata: list[Any]) -> Shape:
    shape = shape_of(base)
    for marker in metadata:
        if isinstance(marker, Numeric):
            if not isinstance(shape, PrimitiveShape) or shape.primitive not in (
                PrimitiveKind.INT,
                PrimitiveKind.FLOAT,
            ):
                raise UnsupportedShapeError(tp, "numeric marker on a non-numeric type")
            shape = PrimitiveShape(primitive=marker.kind, bits=marker.bits)
        elif isinstance(marker, FixedLength):
            if not isinstance(shape, SequenceShape):
                raise UnsupportedShapeError(tp, "FixedLength on a non-list type")
            shape = SequenceShape(element=shape.element, fixed_length=marker.length)
    return shape


def _optional_shape(tp: Any) -> Shape:
    args = typing.get_args(tp)
    members = [a for a in args if a is not type(None)]
    if len(members) != 1 or len(args) != 2:
        raise UnsupportedShapeError(tp, "only T | None unions are supported")
    return OptionalShape(inner=shape_of(members[0]))


def _map_shape(tp: Any) -> Shape:
    key_type, value_type = typing.get_args(tp)
    if key_type is not str:
        raise UnsupportedShapeError(tp, "map keys must be str")
    return MapShape(value=shape_of(value_type))


def _structural_shape(tp: type) -> Shape | None:
    # bool is a subclass of int and must be checked first.
    if issubclass(tp, bool):
        return PrimitiveShape(primitive=PrimitiveKind.BOOL)
    if issubclass(tp, int):
        return PrimitiveShape(primitive=PrimitiveKind.INT)
    if issubclass(tp, float):
        return PrimitiveShape(primitive=PrimitiveKind.FLOAT)
    if issubclass(tp, str):
        return PrimitiveShape(primitive=PrimitiveKind.STRING)
    if dataclasses.is_dataclass(tp):
        return RecordShape(cls=tp)
    return None


def _check_embeddable(cls: type, attribute: str, shape: Shape) -> None:
    if not isinstance(unwrap_optional(shape), (RecordShape, MapShape, HookShape, DynamicShape)):
        raise UnsupportedShapeError(cls, f"embedded field {attribute!r} must hold a record, map or dynamic value")


# Resolve forward references for the recursive shape models.
OptionalShape.model_rebuild()
SequenceShape.model_rebuild()
MapShape.model_rebuild()
HookShape.model_rebuild()
