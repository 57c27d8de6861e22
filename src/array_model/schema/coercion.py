"""Field coercion engine: defaults, required checks, and type coercion.

The functions here are pure with respect to storage: :func:`set_field` returns a
new storage dict and never mutates the one it was given.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Final

from array_model.errors import InvalidTypeError, RequiredFieldMissingError, UnknownFieldError
from array_model.observability.logging import get_logger
from array_model.schema.declaration import FieldDescriptor, FieldType, SchemaDeclaration

_logger = get_logger(__name__)

_INT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?(?:0|[1-9][0-9]*)")
_NUMERIC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)

_BUILTIN_EMPTY_CANDIDATES: Final[frozenset[type]] = frozenset(
    {bool, int, float, str, bytes, list, tuple, dict, set, frozenset}
)

Storage = dict[str, Any]


def is_present(value: object, field_type: FieldType | str | None = None) -> bool:
    """Return whether ``value`` counts as set for a field of ``field_type``.

    Numeric zero is present for ``int``/``numeric`` fields and ``False`` is
    present for ``bool`` fields. For ``object`` fields only ``None`` and empty
    builtin scalars or containers are empty, so an instance that defines its
    own falsiness still counts as set. Everything else uses plain truthiness,
    so ``None``, ``False``, ``0``, ``""`` and empty containers are empty.
    """

    if field_type in (FieldType.INT, FieldType.NUMERIC) and _is_number(value) and value == 0:
        return True
    if field_type == FieldType.BOOL and value is False:
        return True
    if field_type == FieldType.OBJECT and type(value) not in _BUILTIN_EMPTY_CANDIDATES:
        return value is not None
    return bool(value)


def set_field(
    declaration: SchemaDeclaration,
    storage: Mapping[str, Any],
    key: str,
    raw_value: object,
    *,
    enforce_limits: bool = True,
) -> Storage:
    """Return a copy of ``storage`` with ``key`` set from ``raw_value``."""

    descriptor = declaration.get(key)
    if descriptor is None:
        raise UnknownFieldError(key)

    updated = dict(storage)
    value = raw_value
    if not is_present(value, descriptor.type):
        value = initial_default(descriptor)

    if not is_present(value, descriptor.type):
        updated.pop(key, None)
        return updated

    updated[key] = coerce(descriptor, value, enforce_limits=enforce_limits)
    return updated


def initial_default(descriptor: FieldDescriptor) -> Any:
    """Return the declared default when it is itself present, else ``None``."""

    if not descriptor.has_default:
        return None
    if not is_present(descriptor.default, descriptor.type):
        return None
    _logger.debug("field_default_applied", field=descriptor.name, field_type=descriptor.type.value)
    return descriptor.default


def check_required(declaration: SchemaDeclaration, storage: Mapping[str, Any]) -> None:
    """Raise for the first required field whose stored value is not present."""

    for descriptor in declaration.required_fields():
        if not is_present(storage.get(descriptor.name), descriptor.type):
            raise RequiredFieldMissingError(descriptor.name)


def coerce(descriptor: FieldDescriptor, value: object, *, enforce_limits: bool = True) -> Any:
    """Coerce ``value`` to the descriptor's type or raise ``InvalidTypeError``."""

    field_type = descriptor.type
    if field_type is FieldType.INT:
        result: Any = _as_int(descriptor.name, value)
    elif field_type is FieldType.NUMERIC:
        result = _as_numeric(descriptor.name, value)
    elif field_type is FieldType.STRING:
        if not isinstance(value, str):
            raise InvalidTypeError(descriptor.name, value)
        result = value
    elif field_type is FieldType.BOOL:
        if value is not True and value is not False:
            raise InvalidTypeError(descriptor.name, value)
        result = value
    elif field_type is FieldType.ARRAY:
        if not isinstance(value, (list, tuple, Mapping)):
            raise InvalidTypeError(descriptor.name, value)
        result = value
    elif field_type is FieldType.OBJECT:
        result = _as_object(descriptor, value)
    else:
        # Declared models never get here: validate_schema rejects unknown tags.
        raise InvalidTypeError(descriptor.name, value, f"unsupported type {field_type!r}")

    if enforce_limits and descriptor.limits is not None:
        violation = descriptor.limits.violation(result)
        if violation is not None:
            raise InvalidTypeError(descriptor.name, value, violation)
    return result


def _as_int(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise InvalidTypeError(name, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value.strip()):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise InvalidTypeError(name, value, "integer string is too long") from exc
    raise InvalidTypeError(name, value)


def _as_numeric(name: str, value: object) -> float:
    try:
        if _is_number(value):
            parsed = float(value)
        elif isinstance(value, str) and _NUMERIC_PATTERN.fullmatch(value.strip()):
            parsed = float(value.strip())
        else:
            raise InvalidTypeError(name, value)
    except OverflowError as exc:
        raise InvalidTypeError(name, value, "must be finite") from exc
    if not math.isfinite(parsed):
        raise InvalidTypeError(name, value, "must be finite")
    return parsed


def _as_object(descriptor: FieldDescriptor, value: object) -> Any:
    target = descriptor.target
    if target is None:
        raise InvalidTypeError(descriptor.name, value, "object field has no target class")
    if isinstance(value, target):
        return value
    if descriptor.initial_function is None:
        raise InvalidTypeError(descriptor.name, value)

    hydrated = descriptor.initial_function(value)
    if not isinstance(hydrated, target):
        raise InvalidTypeError(
            descriptor.name,
            value,
            f"initial function returned {type(hydrated).__name__}, expected {target.__name__}",
        )
    _logger.debug("field_hydrated", field=descriptor.name, target=target.__qualname__)
    return hydrated


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


__all__ = [
    "Storage",
    "check_required",
    "coerce",
    "initial_default",
    "is_present",
    "set_field",
]
