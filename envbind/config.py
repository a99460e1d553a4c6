"""Options controlling a single walk over a specification."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

DEFAULT_FILE_SUFFIX = "_FILE"


@dataclass(frozen=True)
class Options:
    """Process-wide settings captured once per call.

    Attributes:
        prefix: Prepended to every derived key as ``PREFIX_KEY``.
        load_from_files: Whether ``<KEY>_FILE`` indirection applies to fields
            without an explicit ``file`` tag.
        file_suffix: Suffix used to derive the file variable name.
        trim_spaces: Strip whitespace around values read from the
            environment or from files.
    """

    prefix: str = ""
    load_from_files: bool = True
    file_suffix: str = DEFAULT_FILE_SUFFIX
    trim_spaces: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefix", (self.prefix or "").upper())
        suffix = (self.file_suffix or "").strip()
        object.__setattr__(self, "file_suffix", suffix or DEFAULT_FILE_SUFFIX)

    def nested(self, prefix: str) -> Options:
        """Return a copy for a nested walk with ``prefix`` replaced."""
        return replace(self, prefix=prefix)


def resolve_options(options: Options | None = None, **overrides: Any) -> Options:
    """Merge keyword overrides into ``options`` (or the defaults)."""
    base = options if options is not None else Options()
    unknown = set(overrides) - {"prefix", "load_from_files", "file_suffix", "trim_spaces"}
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        msg = f"Unknown options: {unknown_str}"
        raise TypeError(msg)
    if not overrides:
        return base
    return replace(base, **overrides)


__all__: tuple[str, ...] = (
    "DEFAULT_FILE_SUFFIX",
    "Options",
    "resolve_options",
)
