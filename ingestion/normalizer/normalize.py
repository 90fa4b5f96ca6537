"""
Record Normalization

Entry point used by the connector for each source record: infer (or reuse) the
table's schema, materialize the value record, and build the key record.

Key Responsibilities:
- Keep one schema per table, inferred from the first record seen
- Apply the same flattening policy to schema and record
- Produce the (schema, record) and (key schema, key record) pairs handed to
  the delivery layer
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .inference import infer_schema
from .keys import build_key_record, build_key_schema
from .materialize import materialize_record
from .policy import FlatteningPolicy
from .schema import FieldSchema, Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedRecord:
    """Typed value and key for one source record."""

    schema: FieldSchema
    value: Record
    key_schema: FieldSchema
    key: Record


def normalize_record(
    record: dict[str, Any],
    policy: FlatteningPolicy,
    key_fields: Sequence[str],
    schema: Optional[FieldSchema] = None
) -> NormalizedRecord:
    """
    Normalize one source record.

    Args:
        record: Decoded JSON object from the Table API
        policy: Flattening policy for display-value objects
        key_fields: Ordered source field names forming the message key
        schema: Previously inferred schema for the record's table. When
            omitted, the schema is inferred from this record.

    Returns:
        NormalizedRecord with value and key schemas and records

    Raises:
        InvalidArgumentError: If record is not a JSON object
        SchemaMismatchError: If record does not fit the supplied schema
    """
    if schema is None:
        schema = infer_schema(record, policy)

    value = materialize_record(schema, record, policy)

    key_schema = build_key_schema(key_fields)
    key = build_key_record(key_schema, key_fields, record)

    return NormalizedRecord(schema=schema, value=value, key_schema=key_schema, key=key)


class SchemaCache:
    """
    Per-table schema cache.

    The first record seen for a table determines its schema; later records are
    materialized against it. Safe to share between worker threads.

    Example:
        cache = SchemaCache()
        schema = cache.schema_for("incident", record, FlatteningPolicy.NONE)
    """

    def __init__(self):
        self._schemas: dict[tuple[str, FlatteningPolicy], FieldSchema] = {}
        self._lock = threading.Lock()

    def schema_for(
        self,
        table: str,
        record: dict[str, Any],
        policy: FlatteningPolicy
    ) -> FieldSchema:
        """Return the cached schema for table, inferring it from record on first use."""
        cache_key = (table, policy)
        with self._lock:
            schema = self._schemas.get(cache_key)
            if schema is None:
                schema = infer_schema(record, policy)
                self._schemas[cache_key] = schema
                logger.info(
                    "Cached schema for table",
                    extra={
                        'table': table,
                        'policy': policy.value,
                        'fields': schema.field_names(),
                    }
                )
        return schema

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)
