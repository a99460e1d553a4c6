"""
Discovery of bindable fields on a dataclass instance.

Walks the fields of a specification in declaration order, derives the
environment key of each one and flattens nested dataclasses into a single
list of :class:`Variable` entries that point back into the live instance.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import typing
from dataclasses import dataclass
from typing import Any

from envbind.config import Options
from envbind.core.coercer import (
    is_self_describing,
    resolve_type,
    strip_annotated,
    unwrap_optional,
)
from envbind.core.tags import Tags
from envbind.errors import InvalidSpecificationError

logger = logging.getLogger(__name__)

_GATHER_WORDS = re.compile(r"([^A-Z]+|[A-Z]+[^A-Z]+|[A-Z]+)")
_ACRONYM = re.compile(r"([A-Z]+)([A-Z][^A-Z]+)")


@dataclass
class Variable:
    """
    One configuration slot discovered on a specification.

    Attributes:
        key: Upper-cased, prefix-qualified environment name
        alt_key: Explicit name from the field metadata without the prefix,
            or empty when the key was derived from the field name
        name: Field name on ``owner``
        annotation: Declared type of the field
        tags: Directives attached to the field
        owner: The (possibly nested) dataclass instance holding the field
        options: Options in effect for this field
    """

    key: str
    alt_key: str
    name: str
    annotation: Any
    tags: Tags
    owner: Any
    options: Options

    def get(self) -> Any:
        return getattr(self.owner, self.name)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)

    @property
    def is_required(self) -> bool:
        return self.tags.required

    @property
    def default(self) -> str | None:
        return self.tags.default

    @property
    def description(self) -> str:
        return self.tags.description


def split_words(identifier: str) -> list[str]:
    """Split ``"APIKey"`` into ``["API", "Key"]`` and ``"DBHost"`` into ``["DB", "Host"]``."""
    words: list[str] = []
    for match in _GATHER_WORDS.finditer(identifier):
        word = match.group(0)
        acronym = _ACRONYM.fullmatch(word)
        if acronym is not None:
            words.extend(acronym.groups())
        else:
            words.append(word)
    return words


def resolve_key(prefix: str, name: str, tags: Tags) -> tuple[str, str]:
    """
    Derive ``(key, alt_key)`` for a field.

    An explicit name wins over the field name; ``split_words`` joins the
    words of the field name with underscores. The prefix is prepended to the
    key only, never to ``alt_key``.
    """
    alt_key = tags.name.upper()
    if alt_key:
        key = alt_key
    elif tags.split_words:
        key = "_".join(split_words(name))
    else:
        key = name

    if prefix:
        key = f"{prefix}_{key}"
    return key.upper(), alt_key


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"cannot resolve annotations of {cls.__name__}: {exc}"
        raise InvalidSpecificationError(msg) from exc


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _allocate(owner: Any, name: str, annotation: Any) -> Any:
    """Instantiate a ``Nested | None`` field holding None so it can be filled."""
    value = getattr(owner, name)
    inner, optional = unwrap_optional(strip_annotated(annotation)[0])
    if value is not None or not optional:
        return value

    target, _ = resolve_type(inner)
    if not _is_dataclass_type(target):
        return None

    try:
        value = target()
    except TypeError as exc:
        msg = f"cannot instantiate {target.__name__} for field {name}: {exc}"
        raise InvalidSpecificationError(msg) from exc
    setattr(owner, name, value)
    return value


def gather_variables(spec: Any, options: Options) -> list[Variable]:
    """
    Collect the bindable variables of ``spec``.

    Args:
        spec: Dataclass instance to populate in place
        options: Options for this level of the walk

    Returns:
        Variables in field declaration order, nested dataclasses flattened
        into their leaf fields.

    Raises:
        InvalidSpecificationError: If ``spec`` is not a mutable dataclass
            instance, or a nested dataclass cannot be created.
    """
    if isinstance(spec, type) or not dataclasses.is_dataclass(spec):
        raise InvalidSpecificationError
    if spec.__dataclass_params__.frozen:
        msg = f"specification {type(spec).__name__} must not be frozen"
        raise InvalidSpecificationError(msg)

    hints = _type_hints(type(spec))
    variables: list[Variable] = []

    for field in dataclasses.fields(spec):
        tags = Tags(field.metadata)
        if field.name.startswith("_") or tags.ignored:
            continue

        annotation = hints.get(field.name, field.type)
        value = _allocate(spec, field.name, annotation)

        key, alt_key = resolve_key(options.prefix, field.name, tags)
        variable = Variable(
            key=key,
            alt_key=alt_key,
            name=field.name,
            annotation=annotation,
            tags=tags,
            owner=spec,
            options=options,
        )

        target, _ = resolve_type(annotation)
        if _is_dataclass_type(target) and isinstance(value, target) and not is_self_describing(target):
            inner_options = options if tags.embedded else options.nested(key)
            variables.extend(gather_variables(value, inner_options))
        else:
            variables.append(variable)

    logger.debug(
        "Discovered %d variables on %s (prefix=%r)",
        len(variables),
        type(spec).__name__,
        options.prefix,
    )
    return variables
