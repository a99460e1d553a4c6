"""Scalar parsers for integers, booleans and floats."""

from __future__ import annotations

import re
import struct

_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Legacy octal: a leading zero followed by more digits, e.g. "0755".
_LEGACY_OCTAL = re.compile(r"0[0-9_]+")


def parse_bool(value: str) -> bool:
    """Parse one of the canonical true/false tokens."""
    if value in _TRUE_TOKENS:
        return True
    if value in _FALSE_TOKENS:
        return False
    msg = f"invalid syntax for bool: {value!r}"
    raise ValueError(msg)


def is_true(value: object) -> bool:
    """Return True for ``True`` or a true token; anything else is False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value in _TRUE_TOKENS
    return False


def parse_int(value: str, bits: int | None = None, *, signed: bool = True) -> int:
    """
    Parse an integer, detecting the base from its prefix.

    ``0x`` selects hex, ``0o`` or a bare leading ``0`` octal, ``0b`` binary,
    anything else is decimal. Underscores between digits are allowed.

    Args:
        value: The literal to parse
        bits: Width to range-check against, or None for unbounded
        signed: Whether negative values are allowed

    Raises:
        ValueError: On bad syntax or when the result does not fit ``bits``.
    """
    if not value or value != value.strip():
        msg = f"invalid syntax for integer: {value!r}"
        raise ValueError(msg)

    sign = ""
    body = value
    if body[0] in "+-":
        if not signed:
            msg = f"invalid syntax for unsigned integer: {value!r}"
            raise ValueError(msg)
        sign, body = body[0], body[1:]

    if _LEGACY_OCTAL.fullmatch(body):
        body = "0o" + body[1:]

    try:
        result = int(sign + body, 0)
    except ValueError:
        msg = f"invalid syntax for integer: {value!r}"
        raise ValueError(msg) from None

    if bits is not None:
        if signed:
            low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            low, high = 0, (1 << bits) - 1
        if not low <= result <= high:
            msg = f"value out of range for {bits}-bit integer: {value!r}"
            raise ValueError(msg)
    return result


def parse_float(value: str, bits: int = 64) -> float:
    """
    Parse a float, rounding to single precision when ``bits`` is 32.

    Hexadecimal literals (``0x1p-2``) and ``inf``/``nan`` are accepted.

    Raises:
        ValueError: On bad syntax or when a 32-bit value overflows.
    """
    if not value or value != value.strip():
        msg = f"invalid syntax for float: {value!r}"
        raise ValueError(msg)

    try:
        result = float(value)
    except ValueError:
        try:
            result = float.fromhex(value)
        except (ValueError, OverflowError):
            msg = f"invalid syntax for float: {value!r}"
            raise ValueError(msg) from None

    if bits == 32:
        try:
            (result,) = struct.unpack("f", struct.pack("f", result))
        except OverflowError:
            msg = f"value out of range for float32: {value!r}"
            raise ValueError(msg) from None
    return result
