"""Field-level directives carried in ``dataclasses.field`` metadata."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from envbind.utils.numbers import is_true

TAG_NAME = "envconfig"
TAG_IGNORED = "ignored"
TAG_DEFAULT = "default"
TAG_SPLIT_WORDS = "split_words"
TAG_REQUIRED = "required"
TAG_FILE = "file"
TAG_DESC = "desc"
TAG_EMBEDDED = "embedded"


@dataclass(frozen=True)
class Tags:
    """Read-only view of the directives attached to one field."""

    metadata: Any

    @property
    def ignored(self) -> bool:
        return is_true(self.metadata.get(TAG_IGNORED))

    @property
    def name(self) -> str:
        return str(self.metadata.get(TAG_NAME) or "").strip()

    @property
    def split_words(self) -> bool:
        return is_true(self.metadata.get(TAG_SPLIT_WORDS))

    @property
    def required(self) -> bool:
        return is_true(self.metadata.get(TAG_REQUIRED))

    @property
    def default(self) -> str | None:
        return self.metadata.get(TAG_DEFAULT)

    @property
    def file(self) -> bool | str | None:
        return self.metadata.get(TAG_FILE)

    @property
    def description(self) -> str:
        return str(self.metadata.get(TAG_DESC) or "")

    @property
    def embedded(self) -> bool:
        return is_true(self.metadata.get(TAG_EMBEDDED))

    def lookup(self, tag: str) -> tuple[Any, bool]:
        """Return ``(value, present)`` for a raw tag."""
        if tag in self.metadata:
            return self.metadata[tag], True
        return None, False


def env(  # noqa: PLR0913
    name: str | None = None,
    *,
    default: str | int | float | bool | None = None,
    required: bool = False,
    split_words: bool = False,
    ignored: bool = False,
    file: bool | str | None = None,
    desc: str | None = None,
    embedded: bool = False,
    **field_kwargs: Any,
) -> Any:
    """
    Declare a dataclass field together with its environment directives.

    Any extra keyword arguments (``default_factory``, ``init``, ``repr``...)
    are passed to ``dataclasses.field``; the Python-side default of the
    field is given as ``field_default`` to keep it apart from the
    environment ``default`` string.

    Args:
        name: Explicit key, used instead of the field name
        default: Literal used when the environment provides nothing
        required: Fail when no value resolves
        split_words: Derive ``MULTI_WORD`` keys from ``MultiWord`` names
        ignored: Skip the field entirely
        file: ``True``/``False`` to force file indirection on or off, or a
            custom suffix such as ``"_PATH"``
        desc: Description shown in usage output
        embedded: Treat a nested dataclass as inlined, without a key prefix

    Returns:
        The ``dataclasses.Field`` to assign in the class body.
    """
    metadata: dict[str, Any] = dict(field_kwargs.pop("metadata", None) or {})
    if name is not None:
        metadata[TAG_NAME] = name
    if default is not None:
        if isinstance(default, bool):
            default = "true" if default else "false"
        metadata[TAG_DEFAULT] = str(default)
    if required:
        metadata[TAG_REQUIRED] = True
    if split_words:
        metadata[TAG_SPLIT_WORDS] = True
    if ignored:
        metadata[TAG_IGNORED] = True
    if file is not None:
        metadata[TAG_FILE] = file
    if desc is not None:
        metadata[TAG_DESC] = desc
    if embedded:
        metadata[TAG_EMBEDDED] = True

    if "field_default" in field_kwargs:
        field_kwargs["default"] = field_kwargs.pop("field_default")
    return dataclasses.field(metadata=metadata, **field_kwargs)
