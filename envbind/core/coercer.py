"""
Conversion of raw strings into the declared type of a field.

Resolution order, first match wins:

1. ``T | None`` is unwrapped to ``T``
2. ``decode(value)`` defined on the type
3. ``set(value)`` defined on the type
4. ``unmarshal_text(data)`` defined on the type
5. ``unmarshal_binary(data)`` defined on the type
6. parsers added with :func:`register_parser`
7. built-in scalars, bytes, sequences and mappings
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Protocol, Union, get_args, get_origin, runtime_checkable

from envbind.types import FloatWidth, IntWidth
from envbind.utils.duration import parse_duration
from envbind.utils.numbers import parse_bool, parse_float, parse_int

logger = logging.getLogger(__name__)


@runtime_checkable
class Decoder(Protocol):
    """Type that decodes itself; takes precedence over :class:`Setter`."""

    def decode(self, value: str) -> Any: ...


@runtime_checkable
class Setter(Protocol):
    """Type that sets itself from a string, like a command-line flag value."""

    def set(self, value: str) -> Any: ...


@runtime_checkable
class TextUnmarshaler(Protocol):
    def unmarshal_text(self, data: bytes) -> Any: ...


@runtime_checkable
class BinaryUnmarshaler(Protocol):
    def unmarshal_binary(self, data: bytes) -> Any: ...


# Method name and whether it receives bytes instead of str.
_CAPABILITIES: tuple[tuple[str, bool], ...] = (
    ("decode", False),
    ("set", False),
    ("unmarshal_text", True),
    ("unmarshal_binary", True),
)

_SEQUENCE_TYPES = (list, tuple, set, frozenset)

_UNSUPPORTED = object()

_PARSERS: dict[type, Callable[[str], Any]] = {
    Path: Path,
    Decimal: Decimal,
}


def register_parser(tp: type, parser: Callable[[str], Any]) -> None:
    """
    Use ``parser`` for fields declared exactly as ``tp``.

    The registry is shared by every call in the process. Register parsers
    once at startup, before the first :func:`process`, and do not change
    them while configuration is being loaded.
    """
    _PARSERS[tp] = parser
    logger.debug("Registered parser for %s", tp.__name__)


def unregister_parser(tp: type) -> None:
    _PARSERS.pop(tp, None)


def strip_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, ...]`` into ``T`` and its metadata."""
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        return base, tuple(extras)
    return annotation, ()


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Return ``(T, True)`` for ``T | None``, otherwise ``(annotation, False)``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        inner = [arg for arg in args if arg is not type(None)]
        if len(inner) == 1 and len(args) == 2:
            return inner[0], True
    return annotation, False


def resolve_type(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Strip ``Annotated`` and ``Optional`` wrappers in any nesting order."""
    extras: tuple[Any, ...] = ()
    while True:
        annotation, more = strip_annotated(annotation)
        extras += more
        annotation, optional = unwrap_optional(annotation)
        if not optional and not more:
            return annotation, extras


def find_capability(tp: Any) -> tuple[str, bool] | None:
    """
    Find the highest-precedence self-parsing method defined on ``tp``.

    Methods inherited from built-in types (``bytes.decode`` for instance)
    do not count.
    """
    if not isinstance(tp, type):
        return None
    for name, wants_bytes in _CAPABILITIES:
        for klass in tp.__mro__:
            if klass.__module__ == "builtins":
                continue
            if name in vars(klass) and callable(getattr(tp, name, None)):
                return name, wants_bytes
    return None


def is_self_describing(tp: Any) -> bool:
    """Whether ``tp`` parses itself and must not be walked into."""
    return find_capability(tp) is not None


def _apply_capability(tp: type, method: str, wants_bytes: bool, value: str, current: Any) -> Any:
    arg: str | bytes = value.encode() if wants_bytes else value
    raw = inspect.getattr_static(tp, method)
    if isinstance(raw, (classmethod, staticmethod)):
        return getattr(tp, method)(arg)

    target = current if isinstance(current, tp) else tp()
    result = getattr(target, method)(arg)
    # Immutable types (int or str subclasses) return their replacement; any
    # other return value is a status and the receiver stays the result.
    return result if isinstance(result, tp) else target


def _width(extras: tuple[Any, ...], kind: type) -> Any:
    for extra in extras:
        if isinstance(extra, kind):
            return extra
    return None


def _parse_enum(tp: type[Enum], value: str) -> Enum:
    if value in tp.__members__:
        return tp.__members__[value]
    for member in tp:
        if str(member.value) == value:
            return member
    choices = ", ".join(tp.__members__)
    msg = f"{value!r} is not one of: {choices}"
    raise ValueError(msg)


def _coerce_scalar(value: str, tp: type, extras: tuple[Any, ...]) -> Any:  # noqa: PLR0911
    if issubclass(tp, Enum):
        return _parse_enum(tp, value)
    if issubclass(tp, bool):
        return tp(parse_bool(value))
    if issubclass(tp, int):
        width = _width(extras, IntWidth)
        if width is None:
            return tp(parse_int(value))
        return tp(parse_int(value, width.bits, signed=width.signed))
    if issubclass(tp, float):
        width = _width(extras, FloatWidth)
        return tp(parse_float(value, width.bits if width else 64))
    if issubclass(tp, timedelta):
        return parse_duration(value)
    if issubclass(tp, (bytes, bytearray)):
        return tp(value.encode())
    if issubclass(tp, str):
        return value if tp is str else tp(value)
    return _UNSUPPORTED


def _coerce_sequence(value: str, origin: type, args: tuple[Any, ...]) -> Any:
    if not value.strip():
        return origin()

    items = value.split(",")
    if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        if len(items) != len(args):
            msg = f"expected {len(args)} items, got {len(items)}"
            raise ValueError(msg)
        return tuple(coerce(item, arg) for item, arg in zip(items, args, strict=True))

    element = args[0] if args else str
    return origin(coerce(item, element) for item in items)


def _coerce_mapping(value: str, args: tuple[Any, ...]) -> dict[Any, Any]:
    key_type, value_type = args if args else (str, str)
    result: dict[Any, Any] = {}
    if not value.strip():
        return result

    for pair in value.split(","):
        parts = pair.split(":")
        if len(parts) != 2:  # noqa: PLR2004
            msg = f"invalid map item: {pair!r}"
            raise ValueError(msg)
        result[coerce(parts[0], key_type)] = coerce(parts[1], value_type)
    return result


def coerce(value: str, annotation: Any, current: Any = None) -> Any:
    """
    Convert ``value`` into an instance of ``annotation``.

    Args:
        value: Raw string resolved from the environment
        annotation: Declared field type, possibly ``Annotated`` or optional
        current: Value the field holds now, reused by self-parsing types

    Returns:
        The converted value; the caller stores it on the owning object.

    Raises:
        ValueError: If the string does not parse as the target type.
        TypeError: If the target type is not supported.
    """
    tp, extras = resolve_type(annotation)

    capability = find_capability(tp)
    if capability is not None:
        method, wants_bytes = capability
        return _apply_capability(tp, method, wants_bytes, value, current)

    if isinstance(tp, type) and tp in _PARSERS:
        return _PARSERS[tp](value)

    origin = get_origin(tp)
    if origin is None and isinstance(tp, type):
        if tp in _SEQUENCE_TYPES:
            return _coerce_sequence(value, tp, ())
        if tp is dict:
            return _coerce_mapping(value, ())
        result = _coerce_scalar(value, tp, extras)
        if result is not _UNSUPPORTED:
            return result
    elif origin in _SEQUENCE_TYPES:
        return _coerce_sequence(value, origin, get_args(tp))
    elif origin is dict:
        return _coerce_mapping(value, get_args(tp))

    msg = f"unsupported type {describe_type(annotation)}"
    raise TypeError(msg)


def describe_type(annotation: Any) -> str:
    """Render a declared type the way it reads in source, e.g. ``dict[str, int]``."""
    tp, extras = strip_annotated(annotation)
    for extra in extras:
        if isinstance(extra, (IntWidth, FloatWidth)):
            return extra.name

    inner, optional = unwrap_optional(tp)
    if optional:
        return f"{describe_type(inner)} | None"

    origin = get_origin(tp)
    if origin is not None:
        args = ", ".join("..." if arg is Ellipsis else describe_type(arg) for arg in get_args(tp))
        return f"{getattr(origin, '__name__', str(origin))}[{args}]"
    if isinstance(tp, type):
        return tp.__name__
    return str(tp)
