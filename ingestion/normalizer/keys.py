"""
Key Records

Message keys are built from a configured, ordered list of source fields. Key
fields are always optional strings; for display-value objects the raw "value"
is used and the label is discarded, whatever the flattening policy.
"""

from typing import Any, Sequence

from .display_values import VALUE_KEY, ValueShape, classify_value, display_value_part, stringify
from .errors import InvalidArgumentError
from .identifiers import is_blank, sanitize_field_name
from .schema import OPTIONAL_STRING_SCHEMA, FieldSchema, Record, SchemaBuilder


def build_key_schema(fields: Sequence[str]) -> FieldSchema:
    """
    Build the key schema for the configured key fields.

    Args:
        fields: Ordered source field names (blank entries are skipped)

    Returns:
        Struct schema with one optional string field per key field, in the
        given order

    Example:
        >>> build_key_schema(["sys_id", "parent.number"]).field_names()
        ['sys_id', 'parent__number']
    """
    builder = SchemaBuilder()
    for field in fields:
        if not is_blank(field):
            builder.field(sanitize_field_name(field), OPTIONAL_STRING_SCHEMA)
    return builder.build()


def build_key_record(
    key_schema: FieldSchema,
    fields: Sequence[str],
    record: dict[str, Any]
) -> Record:
    """
    Build the key record for a source record.

    Absent and null source fields both produce a null key field.

    Args:
        key_schema: Schema from build_key_schema(fields)
        fields: The same ordered field names used for the schema
        record: Decoded JSON object for one source record

    Returns:
        Record conforming to key_schema

    Raises:
        InvalidArgumentError: If record is not a JSON object
        SchemaMismatchError: If a field is not declared in key_schema
    """
    if not isinstance(record, dict):
        raise InvalidArgumentError(
            f"record must be a JSON object, got {type(record).__name__}"
        )

    key = Record(key_schema)

    for field in fields:
        if is_blank(field):
            continue

        value = record.get(field)
        shape = classify_value(value)

        if shape is ValueShape.DISPLAY_VALUE:
            key_value = display_value_part(value, VALUE_KEY)
        else:
            key_value = stringify(value)

        key.put(sanitize_field_name(field), key_value)

    return key
