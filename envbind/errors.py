"""Exceptions raised while binding environment values onto a dataclass."""

from __future__ import annotations


class EnvbindError(Exception):
    """Base class for every error raised by envbind."""


class InvalidSpecificationError(EnvbindError, TypeError):
    """Raised when the specification is not a dataclass instance."""

    def __init__(self, message: str = "specification must be a dataclass instance") -> None:
        super().__init__(message)


class RequiredKeyMissingError(EnvbindError):
    """Raised when a required key resolves to no value."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"required key {key} missing value")


class FileIndirectionError(EnvbindError):
    """Raised when a ``*_FILE`` variable is empty or its file cannot be read."""

    def __init__(self, env_name: str, path: str | None = None, reason: str | None = None) -> None:
        self.env_name = env_name
        self.path = path
        if path is None:
            msg = f"environment variable {env_name} is empty"
        else:
            msg = f"reading {path} named by {env_name}: {reason}"
        super().__init__(msg)


class ParseError(EnvbindError, ValueError):
    """
    A string could not be converted to the type of the target field.

    Attributes:
        key_name: Environment key the value came from
        field_name: Name of the dataclass field
        type_name: Readable name of the declared type
        value: The raw string value
        err: Underlying exception
    """

    def __init__(
        self,
        key_name: str,
        field_name: str,
        type_name: str,
        value: str,
        err: BaseException,
    ) -> None:
        self.key_name = key_name
        self.field_name = field_name
        self.type_name = type_name
        self.value = value
        self.err = err
        super().__init__(
            f"envbind.process: assigning {key_name} to {field_name}: "
            f"converting '{value}' to type {type_name}. details: {err}"
        )


class UnknownVariableError(EnvbindError):
    """Raised by check_disallowed for a prefixed variable nobody declared."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown environment variable {name}")


class UsageFormatError(EnvbindError):
    """Raised when a usage template cannot be rendered."""
