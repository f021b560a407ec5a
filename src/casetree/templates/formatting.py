"""
Value rendering helpers for test titles.

`format_printf` implements the printf-like directives accepted in titles,
`obj_display` renders a value compactly for `$name` placeholders, and
`object_attr` resolves dotted attribute paths on case values.
"""

import json
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

FORMAT_DIRECTIVE_PATTERN = re.compile(r"%[sdjifoOc%]")
INDEX_ACCESS_PATTERN = re.compile(r"\[(\d+)\]")

DISPLAY_TRUNCATE = 40

_MISSING = object()


def _number_to_str(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _format_number(value: Any) -> str:
    if isinstance(value, int):
        return str(int(value))
    try:
        return _number_to_str(float(value))
    except (TypeError, ValueError):
        return "NaN"


def _format_integer(value: Any) -> str:
    if isinstance(value, int):
        return str(int(value))
    try:
        return str(int(float(value)))
    except (TypeError, ValueError, OverflowError):
        return "NaN"


def _format_json(value: Any) -> str:
    try:
        return json.dumps(value)
    except ValueError:
        return "[Circular]"
    except TypeError:
        return repr(value)


def format_printf(template: str, *args: Any) -> str:
    """Substitute printf-like directives in `template` with `args`.

    Supported directives: `%s` (str), `%d` (number), `%i` (integer),
    `%f` (float), `%j` (JSON), `%o`/`%O` (repr), `%c` (consumes a value,
    renders nothing) and `%%` (literal percent). Directives without a
    matching value are left as they are; leftover values are appended,
    separated by spaces.

    Params:
        template: Format string
        args: Values consumed left to right

    Returns:
        The formatted string
    """
    position = 0

    def substitute(match: re.Match[str]) -> str:
        nonlocal position
        directive = match.group(0)
        if directive == "%%":
            return "%"
        if position >= len(args):
            return directive
        value = args[position]
        position += 1
        if directive == "%s":
            return str(value)
        if directive == "%d":
            return _format_number(value)
        if directive == "%i":
            return _format_integer(value)
        if directive == "%f":
            try:
                return _number_to_str(float(value))
            except (TypeError, ValueError):
                return "NaN"
        if directive == "%j":
            return _format_json(value)
        if directive in ("%o", "%O"):
            return repr(value)
        # %c
        return ""

    formatted = FORMAT_DIRECTIVE_PATTERN.sub(substitute, template)
    for extra in args[position:]:
        formatted += f" {extra}"
    return formatted


def obj_display(value: Any, truncate: int = DISPLAY_TRUNCATE) -> str:
    """Human-readable, length-capped rendering of a value.

    Short values render as their `repr`. Long containers collapse to a
    summary such as `[ list(12) ]` or `{ dict (a, b, ...) }`.
    """
    text = repr(value)
    if not truncate or len(text) < truncate:
        return text

    if callable(value) and not isinstance(value, type):
        name = getattr(value, "__name__", "")
        return f"[Function: {name}]" if name else "[Function]"
    if isinstance(value, (list, tuple)):
        return f"[ {type(value).__name__}({len(value)}) ]"
    if isinstance(value, Mapping):
        keys = [str(key) for key in value]
        shown = ", ".join(keys[:2]) + (", ..." if len(keys) > 2 else "")
        return f"{{ {type(value).__name__} ({shown}) }}"
    return text


def object_attr(source: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted path (`a.b.0`, `a.items[1]`) on nested data.

    Mapping keys, sequence indices and object attributes are all accepted.
    Returns `default` as soon as a segment cannot be resolved.
    """
    segments = INDEX_ACCESS_PATTERN.sub(r".\1", path).split(".")
    result = source
    for segment in segments:
        if isinstance(result, Mapping):
            result = result.get(segment, _MISSING)
        elif (
            isinstance(result, Sequence)
            and not isinstance(result, str)
            and segment.isdigit()
        ):
            index = int(segment)
            result = result[index] if index < len(result) else _MISSING
        else:
            result = getattr(result, segment, _MISSING)
        if result is _MISSING:
            return default
    return result
