"""Stable descriptor keys and type tags shared across the package."""

from __future__ import annotations

from typing import Final

# Descriptor property names.
PROPERTY_TYPE: Final[str] = "type"
PROPERTY_REQUIRED: Final[str] = "required"
PROPERTY_LIMITS: Final[str] = "limits"
PROPERTY_CLASS: Final[str] = "class"
PROPERTY_INITIAL_FUNCTION: Final[str] = "initial_function"
PROPERTY_DEFAULT: Final[str] = "default"

# Field type tags.
TYPE_INT: Final[str] = "int"
TYPE_NUMERIC: Final[str] = "numeric"
TYPE_STRING: Final[str] = "string"
TYPE_BOOL: Final[str] = "bool"
TYPE_ARRAY: Final[str] = "array"
TYPE_OBJECT: Final[str] = "object"

# Limit bounds.
LIMIT_MIN: Final[str] = "min"
LIMIT_MAX: Final[str] = "max"

REQUIRED_PROPERTIES: Final[tuple[str, ...]] = (PROPERTY_TYPE, PROPERTY_REQUIRED)
OBJECT_ONLY_PROPERTIES: Final[tuple[str, ...]] = (PROPERTY_CLASS, PROPERTY_INITIAL_FUNCTION)
KNOWN_PROPERTIES: Final[frozenset[str]] = frozenset(
    {
        PROPERTY_TYPE,
        PROPERTY_REQUIRED,
        PROPERTY_LIMITS,
        PROPERTY_CLASS,
        PROPERTY_INITIAL_FUNCTION,
        PROPERTY_DEFAULT,
    }
)
LIMIT_KEYS: Final[frozenset[str]] = frozenset({LIMIT_MIN, LIMIT_MAX})

# Config file and environment variable names.
DEFAULT_CONFIG_FILE: Final[str] = "array-model.toml"
CONFIG_TABLE: Final[str] = "array_model"
ENV_PREFIX: Final[str] = "ARRAY_MODEL_"

__all__ = [
    "CONFIG_TABLE",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "KNOWN_PROPERTIES",
    "LIMIT_KEYS",
    "LIMIT_MAX",
    "LIMIT_MIN",
    "OBJECT_ONLY_PROPERTIES",
    "PROPERTY_CLASS",
    "PROPERTY_DEFAULT",
    "PROPERTY_INITIAL_FUNCTION",
    "PROPERTY_LIMITS",
    "PROPERTY_REQUIRED",
    "PROPERTY_TYPE",
    "REQUIRED_PROPERTIES",
    "TYPE_ARRAY",
    "TYPE_BOOL",
    "TYPE_INT",
    "TYPE_NUMERIC",
    "TYPE_OBJECT",
    "TYPE_STRING",
]
