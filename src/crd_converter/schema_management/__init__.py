"""Schema management exports."""

from .schema_models import FieldDefinition, FieldStatus, KindDefinition, RecordSchema
from .schema_projection import (
    SchemaError,
    describe_version_schema,
    field_status,
    fields_for_version,
    is_present,
    load_kind_definition,
)

__all__ = [
    "FieldDefinition",
    "FieldStatus",
    "KindDefinition",
    "RecordSchema",
    "SchemaError",
    "describe_version_schema",
    "field_status",
    "fields_for_version",
    "is_present",
    "load_kind_definition",
]
