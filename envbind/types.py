"""Sized numeric aliases for fields that need range or precision checks.

Plain ``int`` is unbounded and plain ``float`` is double precision. Use these
aliases when a value must fit a fixed width::

    @dataclass
    class Spec:
        port: UInt16 = 8080
        ratio: Float32 = 0.5
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated


@dataclass(frozen=True)
class IntWidth:
    """Marker carried in ``Annotated`` metadata for sized integers."""

    bits: int
    signed: bool = True
    name: str = "int"


@dataclass(frozen=True)
class FloatWidth:
    """Marker carried in ``Annotated`` metadata for sized floats."""

    bits: int
    name: str = "float64"


Int = Annotated[int, IntWidth(64, name="int")]
Int8 = Annotated[int, IntWidth(8, name="int8")]
Int16 = Annotated[int, IntWidth(16, name="int16")]
Int32 = Annotated[int, IntWidth(32, name="int32")]
Int64 = Annotated[int, IntWidth(64, name="int64")]

UInt = Annotated[int, IntWidth(64, signed=False, name="uint")]
UInt8 = Annotated[int, IntWidth(8, signed=False, name="uint8")]
UInt16 = Annotated[int, IntWidth(16, signed=False, name="uint16")]
UInt32 = Annotated[int, IntWidth(32, signed=False, name="uint32")]
UInt64 = Annotated[int, IntWidth(64, signed=False, name="uint64")]

Float32 = Annotated[float, FloatWidth(32, name="float32")]
Float64 = Annotated[float, FloatWidth(64, name="float64")]

__all__: tuple[str, ...] = (
    "Float32",
    "Float64",
    "FloatWidth",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntWidth",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
)
