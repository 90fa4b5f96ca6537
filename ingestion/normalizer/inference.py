"""
Schema Inference

Derives a destination schema from the first record seen for a table. Field
types are never inferred from native JSON types: every scalar (including
numbers, booleans and nulls) becomes an optional string, and display-value
objects become either a nested struct or two flattened string fields.
"""

import logging
from typing import Any

from .display_values import ValueShape, classify_value
from .errors import InvalidArgumentError
from .identifiers import is_blank, sanitize_field_name
from .policy import FlatteningPolicy, display_value_field_name
from .schema import DISPLAY_VALUE_SCHEMA, OPTIONAL_STRING_SCHEMA, FieldSchema, SchemaBuilder

logger = logging.getLogger(__name__)


def infer_schema(record: dict[str, Any], policy: FlatteningPolicy) -> FieldSchema:
    """
    Build a destination schema from a source record.

    Fields are declared in the record's key order. Blank keys are skipped and
    dotted keys are sanitized ("a.b" -> "a__b").

    Args:
        record: Decoded JSON object for one source record
        policy: How display-value objects are laid out

    Returns:
        Immutable struct schema

    Raises:
        InvalidArgumentError: If record is not a JSON object

    Examples:
        >>> schema = infer_schema(
        ...     {"number": "INC001", "priority": {"display_value": "High", "value": "1"}},
        ...     FlatteningPolicy.FLATTENED,
        ... )
        >>> schema.field_names()
        ['number', 'priority', 'priority_display_value']
    """
    if not isinstance(record, dict):
        raise InvalidArgumentError(
            f"record must be a JSON object, got {type(record).__name__}"
        )

    builder = SchemaBuilder()

    for key, value in record.items():
        if is_blank(key):
            continue

        field_name = sanitize_field_name(key)

        if classify_value(value) is not ValueShape.DISPLAY_VALUE:
            # Nulls carry no type information, default to string like scalars
            builder.field(field_name, OPTIONAL_STRING_SCHEMA)
        elif policy is FlatteningPolicy.FLATTENED:
            builder.field(field_name, OPTIONAL_STRING_SCHEMA)
            builder.field(display_value_field_name(field_name), OPTIONAL_STRING_SCHEMA)
        else:
            builder.field(field_name, DISPLAY_VALUE_SCHEMA)

    schema = builder.build()

    logger.debug(
        "Inferred schema from record",
        extra={
            'policy': policy.value,
            'source_fields': len(record),
            'schema_fields': len(schema.fields),
        }
    )

    return schema
