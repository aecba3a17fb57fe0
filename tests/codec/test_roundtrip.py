# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests: typed value -> multimap -> query string -> multimap -> typed value."""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote_plus

import pytest

import bracketqs
from bracketqs import Float32, IncompleteArrayDataError, Uint8, Values, embedded, query_field

# ###############
# Test records
# ###############


@dataclass
class Pointer:
    pint: int | None = query_field("pint", default=None)


@dataclass
class SliceInt:
    items: list[int] = field(default_factory=list)

    def encode_query(self) -> Values:
        return Values({"": [",".join(str(item) for item in self.items)]})

    def decode_query(self, values: Values) -> None:
        text = values.first("")
        self.items = [int(part) for part in text.split(",")] if text else []


@dataclass
class Foo:
    id: int = query_field("id", default=0)
    name: str = query_field("name", default="")
    pointer: Pointer = query_field("pointer", default_factory=Pointer)
    slice: SliceInt = query_field("slice", default_factory=SliceInt)


@dataclass
class EmbeddedT:
    int_: int = query_field("int", default=0)
    x: Float32 = query_field("x", default=0.0)


@dataclass
class EmbeddedA:
    int_: int = query_field("int", default=0)
    foos: list[Foo] = query_field("foos", default_factory=list)
    slice: list[float] = query_field("slice", default_factory=list)
    ints: list[int] = query_field("ints,comma", default_factory=list)


@dataclass
class A:
    int_: int = query_field("int", default=0)
    a: EmbeddedA = query_field("a", default_factory=EmbeddedA)


@dataclass
class T:
    x: str = query_field("x", default="")
    inner: EmbeddedT = embedded(default_factory=EmbeddedT)
    foo: Foo = query_field("foo", default_factory=Foo)
    a: A = query_field("a", default_factory=A)


@dataclass
class RGB:
    r: Uint8 = query_field("R", default=0)
    g: Uint8 = query_field("G", default=0)
    b: Uint8 = query_field("B", default=0)


@dataclass
class Color:
    id: int = query_field("ID", default=0)
    name: str = query_field("Name", default="")
    rgb: RGB = query_field("RGB", default_factory=RGB)


@dataclass
class Colors:
    colors: list[Color] = query_field("Colors", default_factory=list)


@dataclass
class RGBA:
    r: Uint8 = query_field("R", default=0)
    g: Uint8 = query_field("G", default=0)
    b: Uint8 = query_field("B", default=0)
    a: Uint8 = query_field("A", default=0)


@dataclass
class Paint:
    id: int = query_field("ID", default=0)
    palette: list[RGBA] = query_field("Palette", default_factory=list)


@dataclass
class Filter:
    ids: list[int] = query_field("ids,comma", default_factory=list)
    sort: str = query_field("sort,omitempty", default="")
    page: int = query_field("page,omitempty", default=0)
    secret: str = query_field("-", default="")


# ###############
# Helpers
# ###############


def _through_wire(value: Any, tp: Any) -> Any:
    """Encode *value*, serialize it, parse the string back and decode it as *tp*."""
    query = bracketqs.serialize(bracketqs.encode(value, tp))
    return bracketqs.decode(bracketqs.parse_query(query), tp)


def _readable(value: Any) -> str:
    return unquote_plus(bracketqs.encode(value).encode())


FULL_QUERY = (
    "a%5Ba%5D%5Bfoos%5D%5B%5D%5Bid%5D=2&a%5Ba%5D%5Bfoos%5D%5B%5D%5Bnam"
    "e%5D=foo1&a%5Ba%5D%5Bfoos%5D%5B%5D%5Bpointer%5D%5Bpint%5D=2&a%5Ba%5D%5Bf"
    "oos%5D%5B%5D%5Bslice%5D=1%2C2&a%5Ba%5D%5Bfoos%5D%5B%5D%5Bid%5D=2&a%5Ba%5"
    "D%5Bfoos%5D%5B%5D%5Bname%5D=foo3&a%5Ba%5D%5Bfoos%5D%5B%5D%5Bpointer%5D%5"
    "Bpint%5D=3&a%5Ba%5D%5Bfoos%5D%5B%5D%5Bslice%5D=2&a%5Ba%5D%5Bint%5D=5&a%5"
    "Ba%5D%5Bints%5D=1%2C2%2C3&a%5Ba%5D%5Bslice%5D%5B%5D=1.1&a%5Ba%5D%5Bslice"
    "%5D%5B%5D=2.2&a%5Bint%5D=5&foo%5Bid%5D=1&foo%5Bname%5D=foo&foo%5Bpointer"
    "%5D%5Bpint%5D=5&foo%5Bslice%5D=1%2C2%2C3&int=2&x=x"
)

FULL_VALUE = T(
    x="x",
    inner=EmbeddedT(int_=2),
    foo=Foo(1, "foo", Pointer(5), SliceInt([1, 2, 3])),
    a=A(
        int_=5,
        a=EmbeddedA(
            int_=5,
            foos=[
                Foo(2, "foo1", Pointer(2), SliceInt([1, 2])),
                Foo(2, "foo3", Pointer(3), SliceInt([2])),
            ],
            slice=[1.1, 2.2],
            ints=[1, 2, 3],
        ),
    ),
)


# ###############
# Full documents
# ###############


class TestFullQuery:
    def test_decodes(self) -> None:
        assert bracketqs.decode(bracketqs.parse_query(FULL_QUERY), T) == FULL_VALUE

    def test_unmarshal_into_existing(self) -> None:
        target = T()
        bracketqs.unmarshal(bracketqs.parse_query(FULL_QUERY), target)
        assert target == FULL_VALUE

    def test_encodes_byte_for_byte(self) -> None:
        assert bracketqs.serialize(bracketqs.encode(FULL_VALUE)) == FULL_QUERY

    def test_decode_then_encode(self) -> None:
        decoded = bracketqs.decode(bracketqs.parse_query(FULL_QUERY), T)
        assert bracketqs.encode(decoded).encode() == FULL_QUERY

    def test_from_url(self) -> None:
        target = T()
        bracketqs.unmarshal_url(f"https://example.com/search?{FULL_QUERY}#top", target)
        assert target == FULL_VALUE


class TestArraysOfRecords:
    def test_colors(self) -> None:
        colors = Colors(
            [
                Color(1, "red", RGB(255, 0, 0)),
                Color(2, "blue", RGB(0, 0, 255)),
            ]
        )
        assert _readable(colors) == (
            "Colors[][ID]=1&Colors[][Name]=red&Colors[][RGB][B]=0&Colors[][RGB][G]=0&Colors[][RGB][R]=255"
            "&Colors[][ID]=2&Colors[][Name]=blue&Colors[][RGB][B]=255&Colors[][RGB][G]=0&Colors[][RGB][R]=0"
        )
        assert _through_wire(colors, Colors) == colors

    def test_palette_ordering(self) -> None:
        paint = Paint(1, [RGBA(r=255), RGBA(g=255)])
        assert _readable(paint) == (
            "ID=1&Palette[][A]=0&Palette[][B]=0&Palette[][G]=0&Palette[][R]=255"
            "&Palette[][A]=0&Palette[][B]=0&Palette[][G]=255&Palette[][R]=0"
        )
        assert _through_wire(paint, Paint) == paint

    def test_uneven_data_is_rejected(self) -> None:
        values = bracketqs.parse_query("Colors[][ID]=1&Colors[][ID]=2&Colors[][Name]=red")
        with pytest.raises(IncompleteArrayDataError):
            bracketqs.decode(values, Colors)


# ###############
# Maps and dynamic values
# ###############


class TestMaps:
    def test_int_map(self) -> None:
        value = {"first": 1, "second": 2}
        assert _readable(value) == "first=1&second=2"
        assert _through_wire(value, dict[str, int]) == value

    def test_int_list_map(self) -> None:
        value = {"first_array": [1, 2], "second_array": [3, 4]}
        assert _readable(value) == "first_array[]=1&first_array[]=2&second_array[]=3&second_array[]=4"
        assert _through_wire(value, dict[str, list[int]]) == value

    def test_dynamic_map(self) -> None:
        value = {"name": "Bob", "address": {"city": "New York", "state": "NY"}}
        assert _readable(value) == "address[city]=New York&address[state]=NY&name=Bob"
        assert _through_wire(value, Any) == {
            "address": {"city": ["New York"], "state": ["NY"]},
            "name": ["Bob"],
        }


# ###############
# Directives and hooks
# ###############


class TestDirectives:
    def test_comma_join(self) -> None:
        value = Filter(ids=[3, 1, 2])
        assert _readable(value) == "ids=3,1,2"
        assert _through_wire(value, Filter) == value

    def test_omit_and_ignore(self) -> None:
        value = Filter(ids=[1], sort="name", page=0, secret="s")
        encoded = bracketqs.encode(value)
        assert encoded == {"ids": ["1"], "sort": ["name"]}
        assert _through_wire(value, Filter) == Filter(ids=[1], sort="name")

    def test_embedded_field_loses_to_direct_field(self) -> None:
        value = T(x="direct", inner=EmbeddedT(int_=4, x=9.5))
        decoded = _through_wire(value, T)
        assert decoded.x == "direct"
        assert decoded.inner == EmbeddedT(int_=4, x=0.0)


class TestHooks:
    def test_hook_controls_its_key(self) -> None:
        foo = Foo(slice=SliceInt([4, 5]))
        assert bracketqs.encode(foo)["slice"] == ["4,5"]
        assert _through_wire(foo, Foo) == foo
