"""
casetree title templating components.

This package provides the printf-like title formatter and the case
expansion used by `.each`.
"""

from casetree.templates.each import (
    expand_cases,
    format_template_string,
    format_title,
    normalize_cases,
    parse_table,
)
from casetree.templates.formatting import format_printf, obj_display, object_attr

__all__ = [
    "expand_cases",
    "format_printf",
    "format_template_string",
    "format_title",
    "normalize_cases",
    "obj_display",
    "object_attr",
    "parse_table",
]
