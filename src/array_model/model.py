"""Base class for declaratively validated mapping models."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable

from array_model.config import get_settings
from array_model.errors import InputTypeError, SerializationError, UnknownFieldError
from array_model.observability.logging import get_logger
from array_model.schema import coercion
from array_model.schema.declaration import SchemaDeclaration, validate_schema
from array_model.schema.loader import load_declaration_file

_logger = get_logger(__name__)

TModel = TypeVar("TModel", bound="BaseArrayModel")

ModelInput = Mapping[str, object] | str | bytes | None


@runtime_checkable
class SupportsToMapping(Protocol):
    def to_mapping(self) -> dict[str, Any]: ...


class BaseArrayModel:
    """Validate, coerce, and store mapping data against a field declaration.

    Subclasses declare ``fields``; see :mod:`array_model.schema.declaration`
    for the descriptor format. The declaration is validated on first use and
    cached per class.

    Construction walks the declared fields in order, processes the ones found
    in the input (an omitted field with a default counts as given empty), and
    ignores undeclared input keys. :meth:`set_field` is the
    only mutator and, unlike construction, rejects undeclared keys. Both are
    all-or-nothing: on failure the instance keeps its previous state.
    """

    fields: ClassVar[Mapping[str, Mapping[str, object]]] = {}
    init_from_text: ClassVar[bool] = True

    _declaration: ClassVar[SchemaDeclaration | None] = None

    def __init__(self, data: ModelInput = None) -> None:
        cls = type(self)
        declaration = cls.declaration()
        payload = cls._coerce_input(data)
        enforce_limits = get_settings().enforce_limits

        storage: coercion.Storage = {}
        for key, descriptor in declaration.items():
            if key in payload or descriptor.has_default:
                storage = coercion.set_field(
                    declaration, storage, key, payload.get(key), enforce_limits=enforce_limits
                )

        ignored = [key for key in payload if key not in declaration]
        if ignored:
            _logger.debug(
                "input_keys_ignored",
                model=cls.__qualname__,
                keys=sorted(str(key) for key in ignored),
            )

        coercion.check_required(declaration, storage)
        self._storage = storage

    @classmethod
    def declaration(cls) -> SchemaDeclaration:
        """Return the validated declaration, validating it on first call."""

        cached = cls.__dict__.get("_declaration")
        if cached is None:
            cached = validate_schema(cls.fields, owner=cls.__qualname__)
            cls._declaration = cached
        return cached

    @classmethod
    def from_text(cls: type[TModel], raw: str | bytes) -> TModel:
        return cls(_decode_text(raw, cls.__qualname__))

    def set_field(self, key: str, value: object) -> None:
        declaration = type(self).declaration()
        updated = coercion.set_field(
            declaration,
            self._storage,
            key,
            value,
            enforce_limits=get_settings().enforce_limits,
        )
        coercion.check_required(declaration, updated)
        self._storage = updated

    def get(self, key: str, default: Any = None) -> Any:
        return self._storage.get(key, default)

    def __getitem__(self, key: str) -> Any:
        if key not in type(self).declaration():
            raise UnknownFieldError(key)
        return self._storage[key]

    def __contains__(self, key: object) -> bool:
        return key in self._storage

    def __iter__(self) -> Iterator[str]:
        return (key for key in type(self).declaration() if key in self._storage)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseArrayModel):
            return NotImplemented
        return type(self) is type(other) and self.to_mapping() == other.to_mapping()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({self.to_mapping()!r})"

    def to_mapping(self) -> dict[str, Any]:
        """Return stored values in declaration order, nested models expanded."""

        return {key: _serialize_value(self._storage[key]) for key in self}

    def to_text(self) -> str:
        settings = get_settings()
        try:
            return json.dumps(
                self.to_mapping(),
                separators=(",", ":"),
                ensure_ascii=settings.text_ensure_ascii,
                sort_keys=settings.text_sort_keys,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"{type(self).__qualname__}: {exc}") from exc

    @classmethod
    def _coerce_input(cls, data: object) -> Mapping[Any, object]:
        if data is None:
            return {}
        if isinstance(data, Mapping):
            return data
        if isinstance(data, (str, bytes)):
            if not cls.init_from_text:
                raise InputTypeError(f"{cls.__qualname__}: text input is disabled for this model")
            return _decode_text(data, cls.__qualname__)
        raise InputTypeError(
            f"{cls.__qualname__}: expected a mapping or JSON object text, got {type(data).__name__}"
        )


def define_model(
    name: str,
    fields: Mapping[str, Mapping[str, object]],
    *,
    base: type[BaseArrayModel] = BaseArrayModel,
    init_from_text: bool = True,
    module: str | None = None,
) -> type[BaseArrayModel]:
    """Create a model class at runtime and validate its declaration now."""

    if not name.isidentifier():
        raise ValueError(f"model name must be a Python identifier, got {name!r}")
    namespace: dict[str, object] = {
        "fields": dict(fields),
        "init_from_text": init_from_text,
        "__module__": module or __name__,
    }
    model_cls = type(name, (base,), namespace)
    model_cls.declaration()
    return model_cls


def model_from_file(path: str | Path) -> type[BaseArrayModel]:
    """Build a model class from a YAML/JSON declaration document."""

    document = load_declaration_file(path)
    return define_model(document.name, document.fields)


def _decode_text(raw: str | bytes, owner: str) -> dict[str, object]:
    if not isinstance(raw, (str, bytes)):
        raise InputTypeError(f"{owner}: expected JSON text, got {type(raw).__name__}")
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise InputTypeError(f"{owner}: input is not valid JSON ({exc})") from exc
    if not isinstance(parsed, dict):
        raise InputTypeError(f"{owner}: JSON root must be an object, got {type(parsed).__name__}")
    return parsed


def _serialize_value(value: object) -> Any:
    if isinstance(value, SupportsToMapping) and not isinstance(value, type):
        return value.to_mapping()
    if isinstance(value, Mapping):
        return {key: _serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    return value


__all__ = [
    "BaseArrayModel",
    "ModelInput",
    "SupportsToMapping",
    "define_model",
    "model_from_file",
]
