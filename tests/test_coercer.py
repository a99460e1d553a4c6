"""Tests for string-to-type coercion."""

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Optional

import pytest

from envbind.core.coercer import (
    coerce,
    describe_type,
    find_capability,
    register_parser,
    unregister_parser,
)
from envbind.types import Float32, Int8, UInt8, UInt16


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Upper(str):
    """A str subclass that decodes itself into upper case."""

    def decode(self, value):
        return Upper(value.upper())


class Counter(int):
    """Plain int subclass without any capability."""


@dataclass
class Flag:
    value: str = ""
    calls: int = 0

    def set(self, value):
        self.value = value
        self.calls += 1


@dataclass
class Verbosity:
    """Setter that reports success like a flag value."""

    level: str = "info"

    def set(self, value):
        self.level = value
        return True


@dataclass
class Both:
    via: str = ""

    def decode(self, value):
        self.via = f"decode:{value}"

    def set(self, value):
        self.via = f"set:{value}"


@dataclass
class Blob:
    data: bytes = b""

    def unmarshal_text(self, data):
        self.data = data


@dataclass
class Raw:
    data: bytes = b""

    def unmarshal_binary(self, data):
        self.data = data[::-1]


class Point:
    def __init__(self, x, y):
        self.x, self.y = x, y

    @classmethod
    def decode(cls, value):
        x, y = value.split("x")
        return cls(int(x), int(y))


class TestPrimitives:
    def test_string_is_copied_verbatim(self):
        assert coerce(" spaced ", str) == " spaced "

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("8080", 8080), ("-5", -5), ("0x1F", 31), ("0o17", 15), ("017", 15), ("0b101", 5), ("1_000", 1000)],
    )
    def test_int_detects_base(self, raw, expected):
        assert coerce(raw, int) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "1.5", "09", " 1"])
    def test_int_rejects_bad_syntax(self, raw):
        with pytest.raises(ValueError):
            coerce(raw, int)

    def test_sized_int_overflow(self):
        assert coerce("127", Int8) == 127
        with pytest.raises(ValueError, match="out of range"):
            coerce("128", Int8)
        with pytest.raises(ValueError, match="out of range"):
            coerce("256", UInt8)

    def test_unsigned_rejects_sign(self):
        assert coerce("65535", UInt16) == 65535
        with pytest.raises(ValueError):
            coerce("-1", UInt16)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("1", True), ("T", True), ("False", False), ("0", False), ("f", False)],
    )
    def test_bool_tokens(self, raw, expected):
        assert coerce(raw, bool) is expected

    @pytest.mark.parametrize("raw", ["yes", "on", "", "truthy"])
    def test_bool_rejects_other_tokens(self, raw):
        with pytest.raises(ValueError):
            coerce(raw, bool)

    def test_float_precision(self):
        assert coerce("0.1", float) == 0.1
        assert coerce("0.1", Float32) == pytest.approx(0.1, rel=1e-7)
        assert coerce("0.1", Float32) != 0.1

    def test_float32_overflow(self):
        with pytest.raises(ValueError, match="float32"):
            coerce("1e39", Float32)

    def test_duration(self):
        assert coerce("5s", timedelta) == timedelta(seconds=5)
        assert coerce("1h30m", timedelta) == timedelta(hours=1, minutes=30)

    def test_duration_rejects_plain_integer(self):
        with pytest.raises(ValueError, match="missing unit"):
            coerce("5", timedelta)

    def test_enum_by_name_or_value(self):
        assert coerce("RED", Color) is Color.RED
        assert coerce("green", Color) is Color.GREEN
        with pytest.raises(ValueError, match="not one of"):
            coerce("blue", Color)

    def test_int_subclass_keeps_its_type(self):
        result = coerce("7", Counter)

        assert isinstance(result, Counter)
        assert result == 7

    def test_registered_parsers(self):
        assert coerce("/etc/app", Path) == Path("/etc/app")
        assert coerce("1.10", Decimal) == Decimal("1.10")

    def test_register_custom_parser(self):
        class Version(tuple):
            pass

        register_parser(Version, lambda raw: Version(int(part) for part in raw.split(".")))
        try:
            assert coerce("1.2.3", Version) == (1, 2, 3)
        finally:
            unregister_parser(Version)

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="unsupported type"):
            coerce("x", object)


class TestOptional:
    def test_optional_is_allocated(self):
        assert coerce("3", Optional[int]) == 3
        assert coerce("3", int | None) == 3

    def test_optional_list(self):
        assert coerce("a,b", Optional[list[str]]) == ["a", "b"]


class TestBytes:
    def test_bytes_are_not_split(self):
        assert coerce("a,b", bytes) == b"a,b"

    def test_bytearray(self):
        assert coerce("raw", bytearray) == bytearray(b"raw")


class TestSequences:
    def test_list_of_strings(self):
        assert coerce("a,b,c", list[str]) == ["a", "b", "c"]

    def test_blank_yields_empty_list(self):
        for raw in ("", "   "):
            result = coerce(raw, list[str])
            assert result == []
            assert result is not None

    def test_elements_are_coerced(self):
        assert coerce("1,0x10,3", list[int]) == [1, 16, 3]

    def test_element_error_propagates(self):
        with pytest.raises(ValueError):
            coerce("1,x", list[int])

    def test_bare_list_holds_strings(self):
        assert coerce("a,b", list) == ["a", "b"]

    def test_tuple_set_and_frozenset(self):
        assert coerce("1,2", tuple[int, ...]) == (1, 2)
        assert coerce("1,2,2", set[int]) == {1, 2}
        assert coerce("a", frozenset[str]) == frozenset({"a"})

    def test_fixed_tuple(self):
        assert coerce("a,1", tuple[str, int]) == ("a", 1)
        with pytest.raises(ValueError, match="expected 2 items"):
            coerce("a", tuple[str, int])

    def test_list_of_durations(self):
        assert coerce("1s,2m", list[timedelta]) == [timedelta(seconds=1), timedelta(minutes=2)]


class TestMappings:
    def test_map_of_string_to_int(self):
        assert coerce("a:1,b:2", dict[str, int]) == {"a": 1, "b": 2}

    def test_blank_yields_empty_dict(self):
        assert coerce(" ", dict[str, int]) == {}

    @pytest.mark.parametrize("raw", ["a:1:2", "a", "a:1,b"])
    def test_malformed_pair(self, raw):
        with pytest.raises(ValueError, match="invalid map item"):
            coerce(raw, dict[str, int])

    def test_value_error_propagates(self):
        with pytest.raises(ValueError):
            coerce("a:x", dict[str, int])

    def test_nested_containers_in_values(self):
        assert coerce("x:1s", dict[str, timedelta]) == {"x": timedelta(seconds=1)}


class TestCapabilities:
    def test_decode_wins_over_primitive(self):
        result = coerce("shout", Upper)

        assert result == "SHOUT"
        assert isinstance(result, Upper)

    def test_setter_mutates_current_value(self):
        current = Flag(calls=3)

        result = coerce("on", Flag, current)

        assert result is current
        assert current.value == "on"
        assert current.calls == 4

    def test_setter_creates_instance_when_missing(self):
        result = coerce("on", Optional[Flag])

        assert isinstance(result, Flag)
        assert result.value == "on"

    def test_setter_status_does_not_replace_receiver(self):
        current = Verbosity()

        result = coerce("debug", Verbosity, current)

        assert result is current
        assert current.level == "debug"

    def test_setter_status_on_fresh_instance(self):
        result = coerce("debug", Optional[Verbosity])

        assert isinstance(result, Verbosity)
        assert result.level == "debug"

    def test_decode_has_precedence_over_set(self):
        assert coerce("v", Both).via == "decode:v"
        assert find_capability(Both) == ("decode", False)

    def test_text_unmarshal_receives_bytes(self):
        assert coerce("abc", Blob).data == b"abc"

    def test_binary_unmarshal_receives_bytes(self):
        assert coerce("abc", Raw).data == b"cba"

    def test_classmethod_decoder(self):
        point = coerce("3x4", Point)

        assert (point.x, point.y) == (3, 4)

    def test_builtin_methods_are_not_capabilities(self):
        assert find_capability(bytes) is None
        assert find_capability(str) is None
        assert find_capability(set) is None


class TestDescribeType:
    @pytest.mark.parametrize(
        ("annotation", "expected"),
        [
            (int, "int"),
            (list[str], "list[str]"),
            (dict[str, int], "dict[str, int]"),
            (Optional[int], "int | None"),
            (Int8, "int8"),
            (timedelta, "timedelta"),
            (tuple[int, ...], "tuple[int, ...]"),
        ],
    )
    def test_describe_type(self, annotation, expected):
        assert describe_type(annotation) == expected
