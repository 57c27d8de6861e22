"""
array-model — unit tests for declaration validation

Purpose
- Validate that malformed field declarations are rejected before any data is processed.

What this test file should cover
- Required descriptor properties, object-only properties, and limits placement.
- Class and initial-function resolution from objects and dotted references.
- Normalized descriptor output and declaration ordering.
- Memoization on model classes.
"""

from __future__ import annotations

import decimal
import fractions

import pytest

from array_model import BaseArrayModel, SchemaDeclarationError
from array_model.schema.declaration import (
    MISSING,
    FieldType,
    Limits,
    resolve_reference,
    validate_schema,
)


class Settings:
    def __init__(self, theme: str = "light") -> None:
        self.theme = theme


def _settings_factory(raw: object) -> Settings:
    return Settings(str(raw))


def test_well_formed_declaration_is_normalized_in_order() -> None:
    declaration = validate_schema(
        {
            "id": {"type": "int", "required": True, "limits": {"min": 0, "max": 1000}},
            "name": {"type": "string", "required": False, "default": "anonymous"},
            "settings": {
                "type": "object",
                "required": False,
                "class": Settings,
                "initial_function": _settings_factory,
            },
        },
        owner="User",
    )

    assert list(declaration) == ["id", "name", "settings"]
    assert declaration.owner == "User"

    ident = declaration["id"]
    assert ident.type is FieldType.INT
    assert ident.required is True
    assert ident.limits == Limits(min=0, max=1000)
    assert ident.default is MISSING
    assert not ident.has_default

    name = declaration["name"]
    assert name.has_default
    assert name.default == "anonymous"

    settings = declaration["settings"]
    assert settings.target is Settings
    assert settings.initial_function is _settings_factory
    assert [item.name for item in declaration.required_fields()] == ["id"]


@pytest.mark.parametrize("missing", ["type", "required"])
def test_missing_required_property_names_field_and_property(missing: str) -> None:
    descriptor = {"type": "int", "required": True}
    del descriptor[missing]

    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema({"id": descriptor})

    assert excinfo.value.field == "id"
    assert excinfo.value.property_name == missing
    assert "missing required property" in str(excinfo.value)


def test_limits_on_string_field_are_rejected_without_any_data() -> None:
    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema({"title": {"type": "string", "required": False, "limits": {"max": 10}}})

    assert excinfo.value.field == "title"
    assert excinfo.value.property_name == "limits"


def test_empty_limits_are_ignored_for_any_type() -> None:
    declaration = validate_schema({"title": {"type": "string", "required": False, "limits": {}}})

    assert declaration["title"].limits is None


@pytest.mark.parametrize("property_name", ["class", "initial_function"])
def test_only_object_fields_may_declare_class_or_factory(property_name: str) -> None:
    descriptor: dict[str, object] = {"type": "array", "required": False}
    descriptor[property_name] = Settings if property_name == "class" else _settings_factory

    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema({"tags": descriptor})

    assert excinfo.value.property_name == property_name
    assert "only object types" in excinfo.value.message


@pytest.mark.parametrize("target", [None, "", 42])
def test_object_field_requires_a_class(target: object) -> None:
    descriptor: dict[str, object] = {"type": "object", "required": True}
    if target is not None:
        descriptor["class"] = target

    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema({"settings": descriptor})

    assert excinfo.value.property_name == "class"


def test_object_field_with_unknown_class_name_is_rejected() -> None:
    with pytest.raises(SchemaDeclarationError, match="does not exist"):
        validate_schema(
            {"settings": {"type": "object", "required": True, "class": "no_such_pkg.Settings"}}
        )


def test_object_field_with_non_callable_factory_is_rejected() -> None:
    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema(
            {
                "settings": {
                    "type": "object",
                    "required": True,
                    "class": Settings,
                    "initial_function": "not-a-callable",
                }
            }
        )

    assert excinfo.value.property_name == "initial_function"


def test_dotted_references_resolve_class_and_factory() -> None:
    declaration = validate_schema(
        {
            "amount": {
                "type": "object",
                "required": True,
                "class": "decimal.Decimal",
                "initial_function": "decimal:Decimal",
            },
            "ratio": {"type": "object", "required": False, "class": "fractions:Fraction"},
        }
    )

    assert declaration["amount"].target is decimal.Decimal
    assert declaration["amount"].initial_function is decimal.Decimal
    assert declaration["ratio"].target is fractions.Fraction


def test_resolve_reference_handles_nested_attributes_and_misses() -> None:
    assert resolve_reference("decimal:Decimal.from_float") == decimal.Decimal.from_float
    assert resolve_reference("collections.abc.Mapping") is not None
    assert resolve_reference("decimal.NoSuchName") is None
    assert resolve_reference("   ") is None
    assert resolve_reference("no_such_pkg:Thing") is None


@pytest.mark.parametrize(
    ("descriptor", "property_name"),
    [
        ({"type": "varchar", "required": True}, "type"),
        ({"type": "int", "required": "yes"}, "required"),
        ({"type": "int", "required": True, "nullable": True}, "nullable"),
        ({"type": "int", "required": True, "limits": {"min": 5, "max": 1}}, "limits"),
        ({"type": "int", "required": True, "limits": {"min": True}}, "limits"),
        ({"type": "int", "required": True, "limits": {"lower": 1}}, "limits"),
        ({"type": "numeric", "required": True, "limits": {"max": float("inf")}}, "limits"),
        ({"type": "numeric", "required": True, "limits": [0, 1]}, "limits"),
    ],
)
def test_malformed_descriptor_properties_are_rejected(
    descriptor: dict[str, object], property_name: str
) -> None:
    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema({"value": descriptor})

    assert excinfo.value.field == "value"
    assert excinfo.value.property_name == property_name


def test_non_mapping_declarations_are_rejected() -> None:
    with pytest.raises(SchemaDeclarationError):
        validate_schema(["id"])
    with pytest.raises(SchemaDeclarationError):
        validate_schema({"id": "int"})
    with pytest.raises(SchemaDeclarationError):
        validate_schema({"": {"type": "int", "required": True}})


def test_validation_is_repeatable_and_does_not_mutate_input() -> None:
    fields = {"id": {"type": "int", "required": True, "limits": {"min": 1}}}
    snapshot = {"id": {"type": "int", "required": True, "limits": {"min": 1}}}

    first = validate_schema(fields)
    second = validate_schema(fields)

    assert fields == snapshot
    assert first["id"] == second["id"]


def test_model_declaration_is_memoized_per_class() -> None:
    class Parent(BaseArrayModel):
        fields = {"id": {"type": "int", "required": True}}

    class Child(Parent):
        pass

    assert Parent.declaration() is Parent.declaration()
    assert Child.declaration() is not Parent.declaration()
    assert Child.declaration().owner.endswith("Child")
    assert list(Child.declaration()) == ["id"]


def test_malformed_model_declaration_fails_before_data_is_touched() -> None:
    class Broken(BaseArrayModel):
        fields = {"title": {"type": "string", "required": True, "limits": {"max": 3}}}

    with pytest.raises(SchemaDeclarationError):
        Broken.declaration()
    with pytest.raises(SchemaDeclarationError):
        Broken({"title": "ok"})


def test_ordered_checks_are_reported_before_unknown_properties() -> None:
    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema(
            {"title": {"type": "string", "required": False, "limits": {"max": 3}, "nullable": True}}
        )
    assert excinfo.value.property_name == "limits"

    with pytest.raises(SchemaDeclarationError) as excinfo:
        validate_schema({"tags": {"type": "array", "required": False, "class": "x", "extra": 1}})
    assert excinfo.value.property_name == "class"
