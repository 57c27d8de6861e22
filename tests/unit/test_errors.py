"""
array-model — unit tests for the exception taxonomy

Purpose
- Keep the error hierarchy and its field-carrying contract stable for callers.
"""

from __future__ import annotations

import pytest

import array_model
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

_ALL_ERRORS = (
    ArrayModelError,
    FieldError,
    SchemaDeclarationError,
    UnknownFieldError,
    InvalidTypeError,
    RequiredFieldMissingError,
    InputTypeError,
    SerializationError,
    DeclarationFileError,
    ConfigLoadError,
)


@pytest.mark.parametrize("error_type", _ALL_ERRORS)
def test_every_error_derives_from_the_base_and_has_a_unique_code(
    error_type: type[ArrayModelError],
) -> None:
    assert issubclass(error_type, ArrayModelError)
    assert issubclass(error_type, ValueError)
    assert error_type.code
    assert getattr(array_model, error_type.__name__) is error_type


def test_codes_are_unique() -> None:
    codes = [error_type.code for error_type in _ALL_ERRORS]

    assert len(codes) == len(set(codes))


def test_field_errors_carry_a_read_only_field_name() -> None:
    error = RequiredFieldMissingError("id")

    assert isinstance(error, FieldError)
    assert error.field == "id"
    assert str(error) == "id: required field is missing or empty"
    with pytest.raises(AttributeError):
        error.field = "other"  # type: ignore[misc]


def test_invalid_type_error_previews_long_values() -> None:
    error = InvalidTypeError("blob", "x" * 500)

    assert error.value == "x" * 500
    assert "..." in error.message
    assert len(error.message) < 200
    assert InvalidTypeError("n", "abc", "must be finite").message == "must be finite"


def test_schema_declaration_error_names_the_property() -> None:
    error = SchemaDeclarationError("title", "bad limits", property_name="limits")

    assert error.field == "title"
    assert error.property_name == "limits"
    assert SchemaDeclarationError("title", "bad").property_name is None


def test_unknown_field_error_message() -> None:
    assert str(UnknownFieldError("b")) == "b: field is not declared"


def test_invalid_type_error_preview_survives_unprintable_integers() -> None:
    error = InvalidTypeError("reading", 10**5000)

    assert "<int too large to display> (int)" in error.message
