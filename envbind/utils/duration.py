"""Parsing of duration literals such as ``"300ms"`` or ``"1h30m"``."""

from __future__ import annotations

import re
from datetime import timedelta
from fractions import Fraction

_NANOS_PER_UNIT: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

# One "<number><unit>" component; the number needs at least one digit.
_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)([^\d.]*)")

_MAX_NANOS = (1 << 63) - 1


def parse_duration(value: str) -> timedelta:
    """
    Parse a signed sequence of decimal numbers with unit suffixes.

    Valid units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and
    ``h``. ``"0"`` on its own is accepted without a unit. Resolution is
    truncated to microseconds.

    Args:
        value: Literal such as ``"1.5h"`` or ``"-2m3.5s"``

    Returns:
        The equivalent timedelta.

    Raises:
        ValueError: If the literal is malformed, uses an unknown unit, or
            exceeds the range of a signed 64-bit nanosecond count.
    """
    original = value
    negative = False
    if value[:1] in ("-", "+"):
        negative = value[0] == "-"
        value = value[1:]

    if value == "0":
        return timedelta(0)
    if not value:
        msg = f"invalid duration {original!r}"
        raise ValueError(msg)

    total = Fraction(0)
    pos = 0
    while pos < len(value):
        match = _COMPONENT.match(value, pos)
        if match is None:
            msg = f"invalid duration {original!r}"
            raise ValueError(msg)
        number, unit = match.groups()
        if unit not in _NANOS_PER_UNIT:
            if not unit:
                msg = f"missing unit in duration {original!r}"
            else:
                msg = f"unknown unit {unit!r} in duration {original!r}"
            raise ValueError(msg)
        total += Fraction(number) * _NANOS_PER_UNIT[unit]
        pos = match.end()

    if total > _MAX_NANOS:
        msg = f"invalid duration {original!r}"
        raise ValueError(msg)

    nanos = int(total)
    if negative:
        nanos = -nanos
    return timedelta(microseconds=int(Fraction(nanos, 1000)))
