"""Exception hierarchy for array-model.

Every error raised by the package derives from :class:`ArrayModelError`. Errors
about a single field derive from :class:`FieldError` and receive the field name
as a constructor argument; it is exposed read-only as ``field``.
"""

from __future__ import annotations

from typing import Final

_VALUE_PREVIEW_LIMIT: Final[int] = 80


class ArrayModelError(ValueError):
    """Base exception for array-model."""

    code: str = "ARRAY_MODEL_ERROR"


class FieldError(ArrayModelError):
    """Failure tied to one declared (or referenced) field."""

    code: str = "FIELD_ERROR"

    def __init__(self, field: str, message: str) -> None:
        self._field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    @property
    def field(self) -> str:
        return self._field


class SchemaDeclarationError(FieldError):
    """Raised when a model's field declaration is malformed."""

    code: str = "SCHEMA_DECLARATION_ERROR"

    def __init__(self, field: str, message: str, *, property_name: str | None = None) -> None:
        self._property_name = property_name
        super().__init__(field, message)

    @property
    def property_name(self) -> str | None:
        return self._property_name


class UnknownFieldError(FieldError):
    """Raised when data references a field the declaration does not know."""

    code: str = "UNKNOWN_FIELD"

    def __init__(self, field: str) -> None:
        super().__init__(field, "field is not declared")


class InvalidTypeError(FieldError):
    """Raised when a value fails type coercion or a validity check."""

    code: str = "INVALID_TYPE"

    def __init__(self, field: str, value: object, message: str | None = None) -> None:
        self._value = value
        if message is None:
            message = f"wrong type, {_preview(value)} ({type(value).__name__}) has been given"
        super().__init__(field, message)

    @property
    def value(self) -> object:
        return self._value


class RequiredFieldMissingError(FieldError):
    """Raised when a required field is empty after processing."""

    code: str = "REQUIRED_FIELD_MISSING"

    def __init__(self, field: str) -> None:
        super().__init__(field, "required field is missing or empty")


class InputTypeError(ArrayModelError):
    """Raised when model input is neither a mapping nor JSON object text."""

    code: str = "INPUT_TYPE_ERROR"


class SerializationError(ArrayModelError):
    """Raised when stored values cannot be rendered as JSON text."""

    code: str = "SERIALIZATION_ERROR"


class DeclarationFileError(ArrayModelError):
    """Raised when a declaration document cannot be read or parsed."""

    code: str = "DECLARATION_FILE_ERROR"


class ConfigLoadError(ArrayModelError):
    """Raised when settings cannot be loaded or overrides cannot be coerced."""

    code: str = "CONFIG_LOAD_ERROR"


def _preview(value: object) -> str:
    try:
        rendered = repr(value)
    except ValueError:
        return f"<{type(value).__name__} too large to display>"
    if len(rendered) > _VALUE_PREVIEW_LIMIT:
        return rendered[: _VALUE_PREVIEW_LIMIT - 3] + "..."
    return rendered


__all__ = [
    "ArrayModelError",
    "ConfigLoadError",
    "DeclarationFileError",
    "FieldError",
    "InputTypeError",
    "InvalidTypeError",
    "RequiredFieldMissingError",
    "SchemaDeclarationError",
    "SerializationError",
    "UnknownFieldError",
]
