"""
Display-Value Detection

With sysparm_display_value=true/all the ServiceNow Table API returns reference
and choice fields as objects carrying both the raw value and its label:

    "priority": {"display_value": "1 - Critical", "value": "1"}

This module recognizes that shape and converts field values to the string form
stored in destination records.
"""

import json
from enum import Enum
from typing import Any, Optional

DISPLAY_VALUE_KEY = "display_value"
VALUE_KEY = "value"


class ValueShape(Enum):
    """Shape of a single source field value."""

    NULL = "null"
    SCALAR = "scalar"
    DISPLAY_VALUE = "display_value"


def is_display_value_object(value: Any) -> bool:
    """
    Check whether a value is a display-value object.

    Both keys must be present (their values may be null). Extra keys are
    tolerated but never read.
    """
    return isinstance(value, dict) and DISPLAY_VALUE_KEY in value and VALUE_KEY in value


def classify_value(value: Any) -> ValueShape:
    """
    Classify a source field value.

    Objects missing one of the two recognized keys, arrays, numbers and
    booleans are all scalars.

    Examples:
        >>> classify_value(None)
        <ValueShape.NULL: 'null'>
        >>> classify_value({"display_value": "High", "value": "1"})
        <ValueShape.DISPLAY_VALUE: 'display_value'>
        >>> classify_value({"value": "1"})
        <ValueShape.SCALAR: 'scalar'>
    """
    if value is None:
        return ValueShape.NULL
    if is_display_value_object(value):
        return ValueShape.DISPLAY_VALUE
    return ValueShape.SCALAR


def stringify(value: Any) -> Optional[str]:
    """
    Convert a JSON value to its destination string form.

    Strings pass through unchanged. Numbers and booleans use their JSON
    spelling ("42", "1.5", "true") and objects/arrays become compact JSON text.

    Args:
        value: Decoded JSON value

    Returns:
        String form, or None for null
    """
    if value is None:
        return None

    if isinstance(value, str):
        return value

    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def display_value_part(obj: dict[str, Any], key: str) -> Optional[str]:
    """Return the stringified sub-field of a display-value object, or None if absent/null."""
    return stringify(obj.get(key))
