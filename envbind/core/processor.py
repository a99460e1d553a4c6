"""Entry points that populate a specification from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, find_dotenv, load_dotenv

from envbind.config import Options, resolve_options
from envbind.core.coercer import coerce, describe_type
from envbind.core.resolver import resolve_value
from envbind.core.walker import gather_variables
from envbind.errors import EnvbindError, ParseError, RequiredKeyMissingError, UnknownVariableError

logger = logging.getLogger(__name__)


def _dotenv_file(dotenv_path: str | Path | bool | None) -> str | None:
    if dotenv_path is None or dotenv_path is False:
        return None
    return find_dotenv(usecwd=True) if dotenv_path is True else str(dotenv_path)


def _load_dotenv(dotenv_path: str | Path | bool | None, environ: Mapping[str, str] | None) -> Mapping[str, str] | None:
    """Merge a ``.env`` file under ``environ``, or into ``os.environ`` when none is given."""
    path = _dotenv_file(dotenv_path)
    if path is None:
        return environ

    if environ is not None:
        values = {name: value for name, value in dotenv_values(path).items() if value is not None}
        logger.debug("Merged %d variables from %r under the given environment", len(values), path)
        return {**values, **environ}

    if load_dotenv(path, override=False):
        logger.info("Loaded environment from %s", path)
    else:
        logger.debug("No variables loaded from .env file %r", path)
    return None


def process(
    spec: Any,
    options: Options | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    dotenv_path: str | Path | bool | None = None,
    **overrides: Any,
) -> None:
    """
    Populate ``spec`` in place from environment variables.

    Args:
        spec: Mutable dataclass instance describing the configuration
        options: Base options; keyword overrides (``prefix``,
            ``load_from_files``, ``file_suffix``, ``trim_spaces``) win
        environ: Environment to read instead of ``os.environ``
        dotenv_path: ``.env`` file merged into the environment before
            reading, or True to search for one from the working directory;
            its values never override variables already set

    Raises:
        InvalidSpecificationError: If ``spec`` is not a dataclass instance.
        RequiredKeyMissingError: If a required key has no value.
        FileIndirectionError: If a file variable is empty or unreadable.
        ParseError: If a value cannot be converted to its field type.
    """
    opts = resolve_options(options, **overrides)
    environ = _load_dotenv(dotenv_path, environ)

    variables = gather_variables(spec, opts)
    for variable in variables:
        value, found = resolve_value(variable, environ)
        if not found:
            if variable.is_required:
                raise RequiredKeyMissingError(variable.key)
            continue

        try:
            variable.set(coerce(value, variable.annotation, variable.get()))
        except Exception as exc:
            raise ParseError(
                key_name=variable.key,
                field_name=variable.name,
                type_name=describe_type(variable.annotation),
                value=value,
                err=exc,
            ) from exc

    logger.info("Loaded %d configuration variables into %s", len(variables), type(spec).__name__)


def must_process(spec: Any, options: Options | None = None, **kwargs: Any) -> None:
    """Same as :func:`process` but exits the interpreter with the error message."""
    try:
        process(spec, options, **kwargs)
    except EnvbindError as exc:
        logger.error("Configuration error: %s", exc)  # noqa: TRY400
        raise SystemExit(str(exc)) from exc


def check_disallowed(
    spec: Any,
    options: Options | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> None:
    """
    Fail when a prefixed variable is set that no field declares.

    Only meaningful with a non-empty prefix: without one every variable in
    the environment has to be declared.

    Raises:
        UnknownVariableError: For the first undeclared variable, in the
            order the environment yields them.
    """
    opts = resolve_options(options, **overrides)
    known = {variable.key for variable in gather_variables(spec, opts)}

    prefix = f"{opts.prefix}_" if opts.prefix else ""
    for name in os.environ if environ is None else environ:
        if not name.startswith(prefix):
            continue
        if name not in known:
            raise UnknownVariableError(name)
