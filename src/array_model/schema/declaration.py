"""Field declaration types and the declaration validator.

A declaration is the ``fields`` mapping of a model class: field name to a
descriptor mapping using the keys from :mod:`array_model.constants`::

    fields = {
        "id": {"type": "int", "required": True, "limits": {"min": 0, "max": 1000}},
        "settings": {
            "type": "object",
            "required": True,
            "class": "myapp.user.Settings",
            "initial_function": "myapp.user:settings_from_json",
        },
    }

:func:`validate_schema` checks the whole mapping and returns an immutable
:class:`SchemaDeclaration`. It is a pure function of its input, so repeated or
concurrent calls need no coordination.
"""

from __future__ import annotations

import importlib
import math
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from array_model.constants import (
    KNOWN_PROPERTIES,
    LIMIT_KEYS,
    LIMIT_MAX,
    LIMIT_MIN,
    OBJECT_ONLY_PROPERTIES,
    PROPERTY_CLASS,
    PROPERTY_DEFAULT,
    PROPERTY_INITIAL_FUNCTION,
    PROPERTY_LIMITS,
    PROPERTY_REQUIRED,
    PROPERTY_TYPE,
    REQUIRED_PROPERTIES,
    TYPE_ARRAY,
    TYPE_BOOL,
    TYPE_INT,
    TYPE_NUMERIC,
    TYPE_OBJECT,
    TYPE_STRING,
)
from array_model.errors import SchemaDeclarationError
from array_model.observability.logging import get_logger

_logger = get_logger(__name__)

InitialFunction = Callable[[Any], Any]


class FieldType(StrEnum):
    INT = TYPE_INT
    NUMERIC = TYPE_NUMERIC
    STRING = TYPE_STRING
    BOOL = TYPE_BOOL
    ARRAY = TYPE_ARRAY
    OBJECT = TYPE_OBJECT


TYPES_WITH_LIMITS: Final[frozenset[FieldType]] = frozenset({FieldType.INT, FieldType.NUMERIC})


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final[Any] = _Missing()


@dataclass(frozen=True, slots=True)
class Limits:
    """Inclusive numeric bounds for ``int`` and ``numeric`` fields."""

    min: float | None = None
    max: float | None = None

    def violation(self, value: float) -> str | None:
        if self.min is not None and value < self.min:
            return f"must be >= {self.min}"
        if self.max is not None and value > self.max:
            return f"must be <= {self.max}"
        return None


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One validated declaration entry."""

    name: str
    type: FieldType
    required: bool
    limits: Limits | None = None
    target: type | None = None
    initial_function: InitialFunction | None = None
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


class SchemaDeclaration(Mapping[str, FieldDescriptor]):
    """Ordered, read-only collection of field descriptors."""

    __slots__ = ("_descriptors", "owner")

    def __init__(self, descriptors: tuple[FieldDescriptor, ...], *, owner: str) -> None:
        self._descriptors = {item.name: item for item in descriptors}
        self.owner = owner

    def __getitem__(self, name: str) -> FieldDescriptor:
        return self._descriptors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"SchemaDeclaration(owner={self.owner!r}, fields={list(self._descriptors)!r})"

    def required_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(item for item in self._descriptors.values() if item.required)


def validate_schema(
    fields: Mapping[str, Mapping[str, object]] | object,
    *,
    owner: str = "<schema>",
) -> SchemaDeclaration:
    """Validate a declaration mapping and return its normalized form.

    Raises :class:`SchemaDeclarationError` on the first violation, naming the
    offending field and property.
    """

    if not isinstance(fields, Mapping):
        raise SchemaDeclarationError(
            owner, f"fields must be a mapping, got {type(fields).__name__}"
        )

    descriptors: list[FieldDescriptor] = []
    for name, props in fields.items():
        descriptors.append(_validate_descriptor(name, props))

    declaration = SchemaDeclaration(tuple(descriptors), owner=owner)
    _logger.debug(
        "schema_declaration_validated",
        owner=owner,
        field_count=len(declaration),
        required=[item.name for item in declaration.required_fields()],
    )
    return declaration


def resolve_reference(reference: str) -> object | None:
    """Resolve ``package.module.Name`` or ``package.module:Name.attr``.

    Returns ``None`` when nothing importable matches.
    """

    text = reference.strip()
    if not text:
        return None

    if ":" in text:
        module_name, _, attr_path = text.partition(":")
        module = _import_module(module_name)
        if module is None or not attr_path:
            return None
        return _walk_attributes(module, attr_path.split("."))

    parts = text.split(".")
    for split_at in range(len(parts) - 1, 0, -1):
        module = _import_module(".".join(parts[:split_at]))
        if module is None:
            continue
        resolved = _walk_attributes(module, parts[split_at:])
        if resolved is not None:
            return resolved
    return None


def _validate_descriptor(name: object, props: object) -> FieldDescriptor:
    if not isinstance(name, str) or not name.strip():
        raise SchemaDeclarationError(repr(name), "field names must be non-empty strings")
    if not isinstance(props, Mapping):
        raise SchemaDeclarationError(
            name, f"descriptor must be a mapping, got {type(props).__name__}"
        )

    for property_name in REQUIRED_PROPERTIES:
        if property_name not in props:
            raise SchemaDeclarationError(
                name,
                f"missing required property {property_name!r}",
                property_name=property_name,
            )

    field_type = _parse_type(name, props[PROPERTY_TYPE])
    required = props[PROPERTY_REQUIRED]
    if not isinstance(required, bool):
        raise SchemaDeclarationError(
            name,
            f"'required' must be a boolean, got {type(required).__name__}",
            property_name=PROPERTY_REQUIRED,
        )

    target: type | None = None
    initial_function: InitialFunction | None = None
    if field_type is FieldType.OBJECT:
        target = _parse_target_class(name, props.get(PROPERTY_CLASS))
        initial_function = _parse_initial_function(name, props.get(PROPERTY_INITIAL_FUNCTION))
    else:
        for property_name in OBJECT_ONLY_PROPERTIES:
            if property_name in props:
                raise SchemaDeclarationError(
                    name,
                    f"only object types may declare the {property_name!r} property",
                    property_name=property_name,
                )

    limits: Limits | None = None
    raw_limits = props.get(PROPERTY_LIMITS)
    if raw_limits:
        if field_type not in TYPES_WITH_LIMITS:
            raise SchemaDeclarationError(
                name,
                f"limits are not available for type {field_type.value!r}",
                property_name=PROPERTY_LIMITS,
            )
        limits = _parse_limits(name, raw_limits)

    unknown = sorted(str(key) for key in props if key not in KNOWN_PROPERTIES)
    if unknown:
        raise SchemaDeclarationError(
            name, f"unknown descriptor properties: {unknown}", property_name=unknown[0]
        )

    return FieldDescriptor(
        name=name,
        type=field_type,
        required=required,
        limits=limits,
        target=target,
        initial_function=initial_function,
        default=props[PROPERTY_DEFAULT] if PROPERTY_DEFAULT in props else MISSING,
    )


def _parse_type(name: str, value: object) -> FieldType:
    if isinstance(value, FieldType):
        return value
    if isinstance(value, str):
        try:
            return FieldType(value)
        except ValueError:
            pass
    allowed = ", ".join(item.value for item in FieldType)
    raise SchemaDeclarationError(
        name,
        f"unsupported type {value!r}; expected one of: {allowed}",
        property_name=PROPERTY_TYPE,
    )


def _parse_target_class(name: str, value: object) -> type:
    if not value:
        raise SchemaDeclarationError(
            name, "object fields must declare a class", property_name=PROPERTY_CLASS
        )
    if isinstance(value, type):
        return value
    if isinstance(value, str):
        resolved = resolve_reference(value)
        if isinstance(resolved, type):
            return resolved
        raise SchemaDeclarationError(
            name, f"class {value!r} does not exist", property_name=PROPERTY_CLASS
        )
    raise SchemaDeclarationError(
        name,
        f"class must be a type or a dotted name, got {type(value).__name__}",
        property_name=PROPERTY_CLASS,
    )


def _parse_initial_function(name: str, value: object) -> InitialFunction | None:
    if value is None:
        return None
    resolved = resolve_reference(value) if isinstance(value, str) else value
    if not callable(resolved):
        raise SchemaDeclarationError(
            name,
            f"initial function must be callable, got {value!r}",
            property_name=PROPERTY_INITIAL_FUNCTION,
        )
    return resolved


def _parse_limits(name: str, value: object) -> Limits:
    if not isinstance(value, Mapping):
        raise SchemaDeclarationError(
            name,
            f"limits must be a mapping, got {type(value).__name__}",
            property_name=PROPERTY_LIMITS,
        )
    unknown = sorted(str(key) for key in value if key not in LIMIT_KEYS)
    if unknown:
        raise SchemaDeclarationError(
            name, f"unknown limit keys: {unknown}", property_name=PROPERTY_LIMITS
        )

    lower = _parse_bound(name, value.get(LIMIT_MIN), LIMIT_MIN)
    upper = _parse_bound(name, value.get(LIMIT_MAX), LIMIT_MAX)
    if lower is not None and upper is not None and lower > upper:
        raise SchemaDeclarationError(
            name,
            f"limit min {lower} is greater than max {upper}",
            property_name=PROPERTY_LIMITS,
        )
    return Limits(min=lower, max=upper)


def _parse_bound(name: str, value: object, key: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaDeclarationError(
            name,
            f"limit {key!r} must be a number, got {type(value).__name__}",
            property_name=PROPERTY_LIMITS,
        )
    if not math.isfinite(value):
        raise SchemaDeclarationError(
            name, f"limit {key!r} must be finite", property_name=PROPERTY_LIMITS
        )
    return value


def _import_module(module_name: str) -> object | None:
    try:
        return importlib.import_module(module_name)
    except ImportError:
        return None


def _walk_attributes(root: object, path: list[str]) -> object | None:
    current = root
    for part in path:
        if not part:
            return None
        current = getattr(current, part, None)
        if current is None:
            return None
    return current


__all__ = [
    "MISSING",
    "TYPES_WITH_LIMITS",
    "FieldDescriptor",
    "FieldType",
    "InitialFunction",
    "Limits",
    "SchemaDeclaration",
    "resolve_reference",
    "validate_schema",
]
