"""Declaration documents: field declarations stored as YAML or JSON files.

A document is either the field mapping itself or a mapping with a ``fields``
entry and an optional ``name``::

    name: UserProfile
    fields:
      id: {type: int, required: true, limits: {min: 1}}
      nickname: {type: string, required: false, default: anonymous}
      settings:
        type: object
        required: false
        class: myapp.settings.Settings
        initial_function: myapp.settings:Settings.from_raw
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import yaml

from array_model.errors import DeclarationFileError

_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
_JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})
_WORD_SPLIT: Final[re.Pattern[str]] = re.compile(r"[^0-9A-Za-z]+")


@dataclass(frozen=True, slots=True)
class DeclarationDocument:
    """Parsed declaration document; ``fields`` is not validated yet."""

    name: str
    fields: dict[str, Any]
    source: Path


def load_declaration_file(path: str | Path) -> DeclarationDocument:
    """Read a YAML/JSON declaration document from ``path``."""

    resolved = Path(path).expanduser()
    suffix = resolved.suffix.lower()
    if suffix not in _YAML_SUFFIXES | _JSON_SUFFIXES:
        raise DeclarationFileError(
            f"unsupported declaration file type {suffix or '<none>'!r}: {resolved.as_posix()}"
        )

    try:
        with resolved.open("r", encoding="utf-8") as handle:
            if suffix in _YAML_SUFFIXES:
                payload = yaml.safe_load(handle)
            else:
                payload = json.load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        raise DeclarationFileError(f"failed to read {resolved.as_posix()}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise DeclarationFileError(f"invalid YAML in {resolved.as_posix()}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DeclarationFileError(f"invalid JSON in {resolved.as_posix()}: {exc}") from exc

    return parse_declaration_document(payload, source=resolved)


def parse_declaration_document(payload: object, *, source: Path) -> DeclarationDocument:
    if not isinstance(payload, Mapping):
        raise DeclarationFileError(f"{source.as_posix()} must contain a mapping")

    name: object = None
    fields: object = payload
    if "fields" in payload and isinstance(payload["fields"], Mapping):
        fields = payload["fields"]
        name = payload.get("name")
        extra = sorted(str(key) for key in payload if key not in {"fields", "name"})
        if extra:
            raise DeclarationFileError(f"{source.as_posix()}: unexpected top-level keys {extra}")

    if name is None:
        name = model_name_from_stem(source.stem)
    if not isinstance(name, str) or not name.isidentifier():
        raise DeclarationFileError(
            f"{source.as_posix()}: model name must be a Python identifier, got {name!r}"
        )
    return DeclarationDocument(name=name, fields=dict(fields), source=source)


def model_name_from_stem(stem: str) -> str:
    """``user-profile.schema`` -> ``UserProfileSchema``."""

    words = [word for word in _WORD_SPLIT.split(stem) if word]
    rendered = "".join(word[:1].upper() + word[1:] for word in words)
    if not rendered or rendered[0].isdigit():
        rendered = f"Model{rendered}"
    return rendered


__all__ = [
    "DeclarationDocument",
    "load_declaration_file",
    "model_name_from_stem",
    "parse_declaration_document",
]
