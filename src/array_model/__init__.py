"""
array-model — declarative field validation and coercion for mapping data.

Subclass :class:`BaseArrayModel`, declare ``fields``, and construct instances
from a mapping or JSON text. Values are validated and coerced per field and can
be read back with ``to_mapping()`` / ``to_text()``.

Importing the package has no side effects: settings are loaded lazily and no
logging handlers are installed.
"""

from array_model.errors import (
    ArrayModelError,
    ConfigLoadError,
    DeclarationFileError,
    FieldError,
    InputTypeError,
    InvalidTypeError,
    RequiredFieldMissingError,
    SchemaDeclarationError,
    SerializationError,
    UnknownFieldError,
)
from array_model.model import BaseArrayModel, SupportsToMapping, define_model, model_from_file
from array_model.schema import FieldDescriptor, FieldType, Limits, SchemaDeclaration, validate_schema

__version__ = "0.3.0"

__all__ = [
    "ArrayModelError",
    "BaseArrayModel",
    "ConfigLoadError",
    "DeclarationFileError",
    "FieldDescriptor",
    "FieldError",
    "FieldType",
    "InputTypeError",
    "InvalidTypeError",
    "Limits",
    "RequiredFieldMissingError",
    "SchemaDeclaration",
    "SchemaDeclarationError",
    "SerializationError",
    "SupportsToMapping",
    "UnknownFieldError",
    "__version__",
    "define_model",
    "model_from_file",
    "validate_schema",
]
