"""Declaration validation, field coercion, and declaration documents."""

from array_model.schema.coercion import check_required, coerce, is_present, set_field
from array_model.schema.declaration import (
    MISSING,
    FieldDescriptor,
    FieldType,
    Limits,
    SchemaDeclaration,
    resolve_reference,
    validate_schema,
)

__all__ = [
    "MISSING",
    "FieldDescriptor",
    "FieldType",
    "Limits",
    "SchemaDeclaration",
    "check_required",
    "coerce",
    "is_present",
    "resolve_reference",
    "set_field",
    "validate_schema",
]
