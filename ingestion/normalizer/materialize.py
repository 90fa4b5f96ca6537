"""
Record Materialization

Builds a destination Record for a source record against a schema produced by
infer_schema(). The record is walked in the same key order used for
inference, with the same field-name sanitizing, so every source key must map
to a declared field. A key or shape the schema does not account for is a
SchemaMismatchError rather than being dropped.
"""

import logging
from typing import Any

from .display_values import (
    DISPLAY_VALUE_KEY,
    VALUE_KEY,
    ValueShape,
    classify_value,
    display_value_part,
    stringify,
)
from .errors import InvalidArgumentError, SchemaMismatchError
from .identifiers import is_blank, sanitize_field_name
from .policy import FlatteningPolicy, display_value_field_name
from .schema import FieldSchema, FieldType, Record

logger = logging.getLogger(__name__)


def materialize_record(
    schema: FieldSchema,
    record: dict[str, Any],
    policy: FlatteningPolicy
) -> Record:
    """
    Materialize a typed record from a source record.

    - null values leave the field null
    - scalars are stored as strings ("42", "true", compact JSON for objects)
    - display-value objects become a nested struct (NONE) or the raw value
      plus a "<name>_display_value" label when that field is declared
      (FLATTENED)

    Declared fields missing from the source record stay null, so absent keys
    and null keys produce the same result.

    Args:
        schema: Schema inferred with the same policy
        record: Decoded JSON object for one source record
        policy: Flattening policy the schema was built with

    Returns:
        Record conforming to schema

    Raises:
        InvalidArgumentError: If schema or record is missing or not an object
        SchemaMismatchError: If a source key is not declared in schema, or its
            shape disagrees with the declared field type
    """
    if schema is None:
        raise InvalidArgumentError("schema is required")
    if not isinstance(record, dict):
        raise InvalidArgumentError(
            f"record must be a JSON object, got {type(record).__name__}"
        )

    struct = Record(schema)

    for key, value in record.items():
        if is_blank(key):
            continue

        field_name = sanitize_field_name(key)
        declared = schema.field(field_name)
        if declared is None:
            raise SchemaMismatchError(
                f"Source field '{key}' has no declared field '{field_name}' in schema"
            )

        shape = classify_value(value)

        if shape is ValueShape.NULL:
            struct.put(field_name, None)

        elif shape is ValueShape.SCALAR:
            if declared.schema.type is FieldType.STRUCT:
                raise SchemaMismatchError(
                    f"Field '{field_name}' is declared as a display-value struct "
                    f"but source value is a scalar"
                )
            struct.put(field_name, stringify(value))

        elif policy is FlatteningPolicy.FLATTENED:
            if declared.schema.type is not FieldType.STRING:
                raise SchemaMismatchError(
                    f"Field '{field_name}' is not a flattened string field"
                )
            struct.put(field_name, display_value_part(value, VALUE_KEY))

            companion = display_value_field_name(field_name)
            if schema.field(companion) is not None:
                struct.put(companion, display_value_part(value, DISPLAY_VALUE_KEY))

        else:
            if declared.schema.type is not FieldType.STRUCT:
                raise SchemaMismatchError(
                    f"Field '{field_name}' is declared as a string "
                    f"but source value is a display-value object"
                )
            struct.put(field_name, _display_value_struct(declared.schema, value))

    logger.debug(
        "Materialized record",
        extra={'policy': policy.value, 'fields': len(schema.fields)}
    )

    return struct


def _display_value_struct(schema: FieldSchema, obj: dict[str, Any]) -> Record:
    nested = Record(schema)
    nested.put(DISPLAY_VALUE_KEY, display_value_part(obj, DISPLAY_VALUE_KEY))
    nested.put(VALUE_KEY, display_value_part(obj, VALUE_KEY))
    return nested
