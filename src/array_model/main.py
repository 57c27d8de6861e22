"""Executable CLI entrypoint for ``array_model``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

from array_model.errors import (
    ConfigLoadError,
    DeclarationFileError,
    InputTypeError,
    InvalidTypeError,
    RequiredFieldMissingError,
    SchemaDeclarationError,
    SerializationError,
    UnknownFieldError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

_DATA_ERRORS: tuple[type[BaseException], ...] = (
    InputTypeError,
    InvalidTypeError,
    RequiredFieldMissingError,
    SerializationError,
    UnknownFieldError,
)
_DECLARATION_ERRORS: tuple[type[BaseException], ...] = (
    ConfigLoadError,
    DeclarationFileError,
    SchemaDeclarationError,
)


class ExitCode(IntEnum):
    """Deterministic process exit-code contract."""

    SUCCESS = 0
    DATA_REJECTED = 1
    DECLARATION_ERROR = 2
    INTERNAL_ERROR = 3


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m array_model`` and the console script."""

    try:
        from array_model.cli import run_cli

        return _normalize_exit_code(run_cli(argv))
    except SystemExit as exc:
        return _normalize_exit_code(exc.code)
    except Exception as exc:  # noqa: BLE001 - CLI boundary normalization.
        exit_code = _route_exception(exc)
        _emit_failure(exc, exit_code)
        return int(exit_code)


def _normalize_exit_code(raw_code: object) -> int:
    if raw_code is None:
        return int(ExitCode.SUCCESS)
    if isinstance(raw_code, int) and raw_code in set(ExitCode):
        return raw_code
    return int(ExitCode.INTERNAL_ERROR)


def _route_exception(exc: BaseException) -> ExitCode:
    """Map the first library error found along the cause chain to an exit code."""

    for item in _causes(exc):
        if isinstance(item, _DECLARATION_ERRORS):
            return ExitCode.DECLARATION_ERROR
        if isinstance(item, _DATA_ERRORS):
            return ExitCode.DATA_REJECTED
    return ExitCode.INTERNAL_ERROR


def _causes(exc: BaseException) -> Iterator[BaseException]:
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        yield current
        if current.__cause__ is not None or current.__suppress_context__:
            current = current.__cause__
        else:
            current = current.__context__


def _emit_failure(exc: BaseException, exit_code: ExitCode) -> None:
    if exit_code is ExitCode.INTERNAL_ERROR:
        traceback.print_exception(exc, file=sys.stderr)
        return
    message = str(exc).strip() or type(exc).__name__
    sys.stderr.write(f"array-model: {message}\n")


__all__ = ["ExitCode", "cli_entrypoint"]
