"""
Normalizer Service

This service turns raw ServiceNow Table API records, whose field shapes are not
known in advance, into typed records ready for delivery.

Key responsibilities:
- Infer a destination schema per table from the first record seen
- Materialize typed value records against that schema
- Build key records from the configured key fields
- Parse ServiceNow timestamps in internal or display format
"""

from .display_values import ValueShape, classify_value
from .errors import (
    InvalidArgumentError,
    NormalizationError,
    SchemaMismatchError,
    TimestampParseError,
)
from .identifiers import comma_delimited_to_list, sanitize_field_name
from .inference import infer_schema
from .keys import build_key_record, build_key_schema
from .materialize import materialize_record
from .normalize import NormalizedRecord, SchemaCache, normalize_record
from .policy import FlatteningPolicy
from .schema import (
    DISPLAY_VALUE_SCHEMA,
    OPTIONAL_STRING_SCHEMA,
    Field,
    FieldSchema,
    FieldType,
    Record,
    SchemaBuilder,
)
from .timestamps import parse_servicenow_datetime_utc

__all__ = [
    "DISPLAY_VALUE_SCHEMA",
    "OPTIONAL_STRING_SCHEMA",
    "Field",
    "FieldSchema",
    "FieldType",
    "FlatteningPolicy",
    "InvalidArgumentError",
    "NormalizationError",
    "NormalizedRecord",
    "Record",
    "SchemaBuilder",
    "SchemaCache",
    "SchemaMismatchError",
    "TimestampParseError",
    "ValueShape",
    "build_key_record",
    "build_key_schema",
    "classify_value",
    "comma_delimited_to_list",
    "infer_schema",
    "materialize_record",
    "normalize_record",
    "parse_servicenow_datetime_utc",
    "sanitize_field_name",
]
__version__ = "0.1.0"
