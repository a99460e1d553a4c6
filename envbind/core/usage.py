"""Human-readable description of the variables a specification accepts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, TextIO, get_args, get_origin

from rich import box
from rich.table import Table
from rich.text import Text

from envbind.config import Options, resolve_options
from envbind.core.coercer import is_self_describing, strip_annotated, unwrap_optional
from envbind.core.tags import TAG_REQUIRED
from envbind.core.walker import Variable, gather_variables
from envbind.errors import UsageFormatError
from envbind.types import FloatWidth, IntWidth
from envbind.utils.numbers import parse_bool
from envbind.utils.rich_logging import get_console

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)

USAGE_HEADER = (
    "This application is configured via the environment. The following environment\n"
    "variables can be used:\n"
)

TABLE_COLUMNS: tuple[str, ...] = ("KEY", "TYPE", "DEFAULT", "REQUIRED", "DESCRIPTION")

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class UsageFormat:
    """
    Template for :func:`usagef`.

    ``item`` is a :meth:`str.format` template rendered once per variable with
    the fields ``key``, ``description``, ``type``, ``default`` and
    ``required``. ``header`` and ``footer`` are written verbatim. With
    ``align_columns`` set, tab-separated cells are padded into columns.
    """

    item: str
    header: str = ""
    footer: str = ""
    align_columns: bool = False


DEFAULT_LIST_FORMAT = UsageFormat(
    header=USAGE_HEADER,
    item=(
        "\n{key}\n"
        "  [description] {description}\n"
        "  [type]        {type}\n"
        "  [default]     {default}\n"
        "  [required]    {required}"
    ),
    footer="\n",
)

DEFAULT_TABLE_FORMAT = UsageFormat(
    header=USAGE_HEADER + "\n" + "\t".join(TABLE_COLUMNS) + "\n",
    item="{key}\t{type}\t{default}\t{required}\t{description}\n",
    align_columns=True,
)


def type_description(annotation: Any) -> str:  # noqa: PLR0911
    """Describe a declared type for people, e.g. ``Comma-separated list of Integer``."""
    tp, extras = strip_annotated(annotation)
    inner, optional = unwrap_optional(tp)
    if optional:
        return type_description(inner)
    for extra in extras:
        if isinstance(extra, IntWidth):
            return "Integer" if extra.signed else "Unsigned Integer"
        if isinstance(extra, FloatWidth):
            return "Float"

    origin = get_origin(tp)
    args = get_args(tp)
    if tp in _SEQUENCE_TYPES or origin in _SEQUENCE_TYPES:
        element = args[0] if args else str
        return f"Comma-separated list of {type_description(element)}"
    if tp is dict or origin is dict:
        key_type, value_type = args if args else (str, str)
        return (
            f"Comma-separated list of {type_description(key_type)}:"
            f"{type_description(value_type)} pairs"
        )
    if not isinstance(tp, type):
        return str(tp)

    if is_self_describing(tp):
        return tp.__name__
    if issubclass(tp, (bytes, bytearray)):
        return "String"
    for base, label in ((bool, "True or False"), (int, "Integer"), (float, "Float"), (str, "String")):
        if tp is base:
            return label
    if issubclass(tp, timedelta):
        return "Duration"
    return tp.__name__


def usage_key(variable: Variable) -> str:
    return variable.key


def usage_description(variable: Variable) -> str:
    return variable.description


def usage_type(variable: Variable) -> str:
    return type_description(variable.annotation)


def usage_default(variable: Variable) -> str:
    return variable.default or ""


def usage_required(variable: Variable) -> str:
    """Render the ``required`` directive; an unparsable one is an error."""
    raw, present = variable.tags.lookup(TAG_REQUIRED)
    if not present or raw == "":
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    try:
        return "true" if parse_bool(str(raw)) else str(raw)
    except ValueError as exc:
        msg = f"invalid required directive on {variable.key}: {raw!r}"
        raise UsageFormatError(msg) from exc


def _fields(variable: Variable) -> dict[str, str]:
    return {
        "key": usage_key(variable),
        "description": usage_description(variable),
        "type": usage_type(variable),
        "default": usage_default(variable),
        "required": usage_required(variable),
    }


def align_columns(text: str, padding: int = 4) -> str:
    """Pad tab-terminated cells so that columns line up across lines."""
    lines = text.split("\n")
    widths: list[int] = []
    for line in lines:
        cells = line.split("\t")[:-1]
        for index, cell in enumerate(cells):
            if index == len(widths):
                widths.append(0)
            widths[index] = max(widths[index], len(cell))

    aligned = []
    for line in lines:
        *cells, last = line.split("\t")
        padded = [cell.ljust(widths[index] + padding) for index, cell in enumerate(cells)]
        aligned.append("".join(padded) + last)
    return "\n".join(aligned)


def render(variables: list[Variable], fmt: UsageFormat | str) -> str:
    """Render ``variables`` with a template and return the text."""
    if isinstance(fmt, str):
        fmt = UsageFormat(item=fmt)

    parts = [fmt.header]
    for variable in variables:
        try:
            parts.append(fmt.item.format(**_fields(variable)))
        except (KeyError, IndexError, ValueError, AttributeError) as exc:
            msg = f"rendering usage template at {variable.key}: {exc!r}"
            raise UsageFormatError(msg) from exc
    parts.append(fmt.footer)

    text = "".join(parts)
    return align_columns(text) if fmt.align_columns else text


def usagef(
    spec: Any,
    out: TextIO,
    fmt: UsageFormat | str,
    options: Options | None = None,
    **overrides: Any,
) -> None:
    """
    Write usage information for ``spec`` to ``out`` using ``fmt``.

    A plain string is used as the per-variable item template.

    Raises:
        InvalidSpecificationError: If ``spec`` is not a dataclass instance.
        UsageFormatError: If the template references unknown fields.
    """
    opts = resolve_options(options, **overrides)
    out.write(render(gather_variables(spec, opts), fmt))


def build_table(variables: list[Variable]) -> Table:
    """Build a rich table with one row per variable."""
    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
    for column in TABLE_COLUMNS:
        table.add_column(column, no_wrap=column != "DESCRIPTION")
    for variable in variables:
        fields = _fields(variable)
        table.add_row(*(Text(fields[column.lower()]) for column in TABLE_COLUMNS))
    return table


def usage(
    spec: Any,
    options: Options | None = None,
    *,
    console: Console | None = None,
    **overrides: Any,
) -> None:
    """Print usage information for ``spec`` as a table on the shared console."""
    opts = resolve_options(options, **overrides)
    variables = gather_variables(spec, opts)
    table = build_table(variables)

    console = console or get_console()
    console.print(Text(USAGE_HEADER))
    console.print(table)
    logger.debug("Printed usage for %d variables", len(variables))
