"""
Destination Schema and Records

Typed, comparable representation of normalized records, modelled on the
Kafka Connect data API (struct schemas with named, optional fields) so the
delivery layer can cache schemas by equality and serialize records directly.

Schemas are immutable once built and may be shared between threads. Records
are created fresh for every source record.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any, Optional

from .errors import InvalidArgumentError, SchemaMismatchError


class FieldType(Enum):
    """Destination field types. Only strings and structs are ever inferred."""

    STRING = "string"
    STRUCT = "struct"


@dataclass(frozen=True)
class FieldSchema:
    """Schema of a single value: a string or a struct of named fields."""

    type: FieldType
    optional: bool = True
    name: Optional[str] = None
    fields: tuple[Field, ...] = ()

    @cached_property
    def _index(self) -> dict[str, Field]:
        return {f.name: f for f in self.fields}

    def field(self, name: str) -> Optional[Field]:
        """Return the declared field with this name, or None."""
        return self._index.get(name)

    def field_names(self) -> list[str]:
        """Return declared field names in declaration order."""
        return [f.name for f in self.fields]

    def to_dict(self) -> dict[str, Any]:
        """
        Render the schema in the Kafka Connect JSON converter layout.

        Example:
            {'type': 'struct', 'optional': False, 'fields': [
                {'type': 'string', 'optional': True, 'field': 'number'}]}
        """
        result: dict[str, Any] = {'type': self.type.value, 'optional': self.optional}
        if self.name:
            result['name'] = self.name
        if self.type is FieldType.STRUCT:
            result['fields'] = [
                {**f.schema.to_dict(), 'field': f.name} for f in self.fields
            ]
        return result


@dataclass(frozen=True)
class Field:
    """A named field inside a struct schema."""

    name: str
    schema: FieldSchema


OPTIONAL_STRING_SCHEMA = FieldSchema(type=FieldType.STRING)

DISPLAY_VALUE_SCHEMA = FieldSchema(
    type=FieldType.STRUCT,
    name="servicenow.DisplayValue",
    fields=(
        Field("display_value", OPTIONAL_STRING_SCHEMA),
        Field("value", OPTIONAL_STRING_SCHEMA),
    ),
)


class SchemaBuilder:
    """
    Collect fields in declaration order and build an immutable struct schema.

    Declaring a name twice replaces the earlier type but keeps its position
    (last write wins).

    Example:
        schema = (
            SchemaBuilder()
            .field("number", OPTIONAL_STRING_SCHEMA)
            .field("priority", DISPLAY_VALUE_SCHEMA)
            .build()
        )
    """

    def __init__(self):
        self._fields: OrderedDict[str, FieldSchema] = OrderedDict()

    def field(self, name: str, schema: FieldSchema) -> SchemaBuilder:
        self._fields[name] = schema
        return self

    def build(self) -> FieldSchema:
        return FieldSchema(
            type=FieldType.STRUCT,
            optional=False,
            fields=tuple(Field(name, schema) for name, schema in self._fields.items()),
        )


class Record:
    """
    A value conforming to a struct schema.

    Every declared field exists from construction (initially None) and no
    undeclared field can be set.
    """

    def __init__(self, schema: FieldSchema):
        if schema is None or schema.type is not FieldType.STRUCT:
            raise InvalidArgumentError("Record requires a struct schema")

        self.schema = schema
        self._values: dict[str, Any] = {name: None for name in schema.field_names()}

    def put(self, name: str, value: Any) -> Record:
        """
        Set a field value.

        Raises:
            SchemaMismatchError: If the field is not declared or the value does
                not match the declared field type
        """
        declared = self.schema.field(name)
        if declared is None:
            raise SchemaMismatchError(
                f"Field '{name}' is not declared in schema (declared: {self.schema.field_names()})"
            )

        if value is not None:
            _check_value(declared, value)

        self._values[name] = value
        return self

    def get(self, name: str) -> Any:
        if self.schema.field(name) is None:
            raise SchemaMismatchError(f"Field '{name}' is not declared in schema")
        return self._values[name]

    def to_dict(self) -> dict[str, Any]:
        """Return field values in schema order, nested records as dicts."""
        return {
            name: value.to_dict() if isinstance(value, Record) else value
            for name, value in self._values.items()
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.schema == other.schema and self._values == other._values

    def __repr__(self) -> str:
        return f"Record({self._values!r})"


def _check_value(declared: Field, value: Any) -> None:
    expected = declared.schema
    if expected.type is FieldType.STRING and not isinstance(value, str):
        raise SchemaMismatchError(
            f"Field '{declared.name}' expects a string, got {type(value).__name__}"
        )
    if expected.type is FieldType.STRUCT and (
        not isinstance(value, Record) or value.schema != expected
    ):
        raise SchemaMismatchError(
            f"Field '{declared.name}' expects a struct of schema {expected.name!r}"
        )
