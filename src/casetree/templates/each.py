"""
Parameterized case expansion for `.each`.

Cases are either a sequence of values or a `|`-separated table whose first
line names the fields. Every case registers one child declaration with a
title computed from the user's title template:

    %#          zero-based case index
    %s %d ...   printf-like directives consuming the case's values
    $a.b        attribute of a keyed case, rendered with `obj_display`
"""

import ast
import dataclasses
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from casetree.exceptions import DeclarationError
from casetree.templates.formatting import format_printf, obj_display, object_attr

ESCAPED_PERCENT = "\x00casetree_escaped_percent\x00"
PLACEHOLDER_PATTERN = re.compile(r"\$([A-Za-z_]\w*(?:\.\w+)*)")
HORIZONTAL_SPACE_PATTERN = re.compile(r"[ \t]")
# A `|` followed only by unquoted text and complete quoted strings.
CELL_SEPARATOR_PATTERN = re.compile(r"""\|(?=(?:[^'"]|'[^']*'|"[^"]*")*$)""")


def is_keyed(value: Any) -> bool:
    """Whether `$name` placeholders can be resolved against `value`."""
    if isinstance(value, (Mapping, BaseModel)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def format_title(template: str, items: list[Any], idx: int) -> str:
    """Build the title of one parameterized case.

    Params:
        template: User title template
        items: Case values (a non-sequence case is passed as `[case]`)
        idx: Zero-based case index

    Returns:
        The formatted title
    """
    if "%#" in template:
        template = (
            template.replace("%%", ESCAPED_PERCENT)
            .replace("%#", str(idx))
            .replace(ESCAPED_PERCENT, "%%")
        )
    count = template.replace("%%", "").count("%")
    formatted = format_printf(template, *items[:count])
    if items and is_keyed(items[0]):
        formatted = PLACEHOLDER_PATTERN.sub(
            lambda match: obj_display(object_attr(items[0], match.group(1))),
            formatted,
        )
    return formatted


def table_header(table: str) -> list[str]:
    """Field names from the first line of a table string."""
    first_line = table.strip().split("\n")[0]
    return HORIZONTAL_SPACE_PATTERN.sub("", first_line).split("|")


def format_template_string(cases: list[str], args: Iterable[Any]) -> list[dict[str, Any]]:
    """Group flat `args` into one record per table row.

    A trailing partial row is dropped.
    """
    header = table_header("".join(cases))
    values = list(args)
    width = len(header)
    return [
        {header[j]: values[i * width + j] for j in range(width)}
        for i in range(len(values) // width)
    ]


def _parse_cell(text: str) -> Any:
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text


def parse_table(table: str) -> list[dict[str, Any]]:
    """Records from a table string that carries its own data rows.

    Each line after the header is one record. Cells are read as Python
    literals where possible (`1`, `'a|b'`, `None`), otherwise kept as
    stripped strings. A `|` inside a quoted cell does not split it.

    Raises:
        DeclarationError: If a row's cell count differs from the header's
    """
    lines = [line for line in table.strip().split("\n") if line.strip()]
    if not lines:
        return []
    header = table_header(lines[0])
    records = []
    for number, line in enumerate(lines[1:], start=1):
        cells = CELL_SEPARATOR_PATTERN.split(line)
        if len(cells) != len(header):
            raise DeclarationError(
                "each",
                f"table row {number} has {len(cells)} cells, header has {len(header)}",
            )
        records.append({key: _parse_cell(cell.strip()) for key, cell in zip(header, cells)})
    return records


def normalize_cases(cases: Iterable[Any] | str, args: tuple[Any, ...]) -> list[Any]:
    """Turn the `.each` arguments into a list of case values."""
    if isinstance(cases, str):
        return format_template_string([cases], args) if args else parse_table(cases)
    if isinstance(cases, (bytes, Mapping)) or not isinstance(cases, Iterable):
        raise DeclarationError(
            "each", f"cases must be a sequence or a table string, got {type(cases).__name__}"
        )
    cases = list(cases)
    if args:
        if not all(isinstance(piece, str) for piece in cases):
            raise DeclarationError("each", "table templates must be made of strings")
        return format_template_string(cases, args)
    return cases


def _bind(fn: Callable[..., Any], args: list[Any]) -> Callable[[], Any]:
    def thunk() -> Any:
        return fn(*args)

    return thunk


def expand_cases(
    declare: Callable[..., Any], cases: Iterable[Any] | str, args: tuple[Any, ...]
) -> Callable[..., None]:
    """Return the registration function produced by `.each(cases, *args)`.

    Params:
        declare: Declaration chain each case is registered through
        cases: Case values or table string
        args: Flat table values

    Returns:
        Function `(name, fn, options=None)` declaring one child per case
    """
    resolved = normalize_cases(cases, args)

    def register(name: str, fn: Callable[..., Any], options: Any = None) -> None:
        spread = all(isinstance(case, (list, tuple)) for case in resolved)
        for idx, case in enumerate(resolved):
            items = list(case) if isinstance(case, (list, tuple)) else [case]
            title = format_title(name, items, idx)
            body = _bind(fn, items) if spread else _bind(fn, [case])
            declare(title, body, options)

    return register
