"""
fns - Value printer
Formats runtime values as fns source text.
"""

import math
from typing import Any

from .values import ObjectValue, is_number


def format_number(value: float) -> str:
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return repr(float(value))


def format_value(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        # No escapes exist in fns strings
        return f'"{value}"'
    if isinstance(value, ObjectValue):
        if not value:
            return "{}"
        items = ", ".join(f"{key}: {format_value(val)}" for key, val in value.items())
        return "{ " + items + " }"
    return repr(value)
