"""Populate dataclasses from environment variables."""

from envbind.config import DEFAULT_FILE_SUFFIX, Options
from envbind.core.coercer import (
    BinaryUnmarshaler,
    Decoder,
    Setter,
    TextUnmarshaler,
    register_parser,
    unregister_parser,
)
from envbind.core.processor import check_disallowed, must_process, process
from envbind.core.tags import env
from envbind.core.usage import (
    DEFAULT_LIST_FORMAT,
    DEFAULT_TABLE_FORMAT,
    UsageFormat,
    type_description,
    usage,
    usagef,
)
from envbind.core.walker import Variable, gather_variables, split_words
from envbind.errors import (
    EnvbindError,
    FileIndirectionError,
    InvalidSpecificationError,
    ParseError,
    RequiredKeyMissingError,
    UnknownVariableError,
    UsageFormatError,
)
from envbind.utils.duration import parse_duration
from envbind.utils.rich_logging import configure_logging

__all__: tuple[str, ...] = (
    "DEFAULT_FILE_SUFFIX",
    "DEFAULT_LIST_FORMAT",
    "DEFAULT_TABLE_FORMAT",
    "BinaryUnmarshaler",
    "Decoder",
    "EnvbindError",
    "FileIndirectionError",
    "InvalidSpecificationError",
    "Options",
    "ParseError",
    "RequiredKeyMissingError",
    "Setter",
    "TextUnmarshaler",
    "UnknownVariableError",
    "UsageFormat",
    "UsageFormatError",
    "Variable",
    "check_disallowed",
    "configure_logging",
    "env",
    "gather_variables",
    "must_process",
    "parse_duration",
    "process",
    "register_parser",
    "split_words",
    "type_description",
    "unregister_parser",
    "usage",
    "usagef",
)
