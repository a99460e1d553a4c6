"""Resolution of the raw string value for a discovered variable."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from envbind.core.tags import TAG_FILE
from envbind.errors import FileIndirectionError
from envbind.utils.numbers import parse_bool

if TYPE_CHECKING:
    from envbind.core.walker import Variable

logger = logging.getLogger(__name__)


def file_loading(variable: Variable) -> tuple[bool, str]:
    """
    Decide whether file indirection applies to ``variable``.

    A boolean ``file`` directive forces it on or off, any other string is a
    custom suffix and turns it on. Without the directive the option default
    applies.

    Returns:
        ``(enabled, suffix)`` where ``suffix`` already falls back to the
        option default.
    """
    tag_value, present = variable.tags.lookup(TAG_FILE)
    default_suffix = variable.options.file_suffix
    if not present:
        return variable.options.load_from_files, default_suffix

    if isinstance(tag_value, bool):
        return tag_value, default_suffix

    tag_str = str(tag_value)
    try:
        enabled = parse_bool(tag_str)
    except ValueError:
        return True, tag_str.strip() or default_suffix
    return enabled, default_suffix


def _load_from_file(variable: Variable, env_name: str, environ: Mapping[str, str]) -> tuple[str, bool]:
    enabled, suffix = file_loading(variable)
    if not enabled:
        return "", False

    file_env_name = (env_name + suffix).upper()
    file_path = environ.get(file_env_name)
    if file_path is None:
        return "", False

    file_path = file_path.strip()
    if not file_path:
        raise FileIndirectionError(file_env_name)

    # Raw bytes so line endings inside the secret survive.
    try:
        content = Path(file_path).read_bytes().decode("utf-8")
    except OSError as exc:
        raise FileIndirectionError(file_env_name, file_path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise FileIndirectionError(file_env_name, file_path, f"not valid UTF-8 text: {exc.reason}") from exc

    logger.debug("Loaded %s from file named by %s", env_name, file_env_name)
    return content, True


def _try_env(variable: Variable, env_name: str, environ: Mapping[str, str]) -> tuple[str, bool]:
    value = environ.get(env_name)
    if value is not None:
        logger.debug("Loaded %s from environment", env_name)
        return value, True
    return _load_from_file(variable, env_name, environ)


def resolve_value(variable: Variable, environ: Mapping[str, str] | None = None) -> tuple[str, bool]:
    """
    Find the string value for ``variable``.

    Each candidate name (the key, then the explicit unprefixed name when it
    differs) is tried against the environment and then through its file
    variable before moving on. The metadata default is used last.

    Args:
        variable: Variable produced by the field walker
        environ: Environment to read, ``os.environ`` when omitted

    Returns:
        ``(value, found)``; ``found`` is False when nothing applied.

    Raises:
        FileIndirectionError: If a file variable is set but empty, or the
            file it names cannot be read.
    """
    if environ is None:
        environ = os.environ

    names = [variable.key]
    if variable.alt_key and variable.alt_key != variable.key:
        names.append(variable.alt_key)

    for env_name in names:
        value, found = _try_env(variable, env_name, environ)
        if found:
            if variable.options.trim_spaces:
                value = value.strip()
            return value, True

    default = variable.default
    if default is not None:
        logger.debug("Using default for %s", variable.key)
        return default, True
    return "", False
