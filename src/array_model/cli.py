"""Command-line interface router for array-model."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import IO

from array_model.config import configure, load_settings
from array_model.errors import InputTypeError
from array_model.model import model_from_file
from array_model.observability.logging import get_logger, setup_logging

_logger = get_logger(__name__)

CommandHandler = Callable[[argparse.Namespace, IO[str], IO[str]], int]


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="array-model",
        description=(
            "array-model — validate data against declarative field declarations.\n\n"
            "Common workflows:\n"
            "  array-model check user.yaml              Validate a declaration file\n"
            "  array-model validate user.yaml in.json   Load a JSON document into the model\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to array-model TOML settings (default: ./array-model.toml if present).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Emit debug logs as JSON lines on stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate a declaration file.")
    check.add_argument("declaration", help="YAML or JSON declaration document.")

    validate = subparsers.add_parser(
        "validate", help="Validate a JSON document against a declaration file."
    )
    validate.add_argument("declaration", help="YAML or JSON declaration document.")
    validate.add_argument(
        "data",
        nargs="?",
        default="-",
        help="JSON document to validate (default: read stdin).",
    )
    return parser


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(args.config_path)
    configure(settings)
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    handler = _COMMANDS[args.command]
    return handler(
        args,
        stdin if stdin is not None else sys.stdin,
        stdout if stdout is not None else sys.stdout,
    )


def _cmd_check(args: argparse.Namespace, stdin: IO[str], stdout: IO[str]) -> int:
    model_cls = model_from_file(args.declaration)
    declaration = model_cls.declaration()
    _logger.info("declaration_checked", model=model_cls.__name__, field_count=len(declaration))

    stdout.write(f"{model_cls.__name__}: {len(declaration)} field(s)\n")
    for descriptor in declaration.values():
        requirement = "required" if descriptor.required else "optional"
        stdout.write(f"  {descriptor.name}\t{descriptor.type.value}\t{requirement}\n")
    return 0


def _cmd_validate(args: argparse.Namespace, stdin: IO[str], stdout: IO[str]) -> int:
    model_cls = model_from_file(args.declaration)
    text = _read_data(args.data, stdin)
    instance = model_cls.from_text(text)
    stdout.write(instance.to_text() + "\n")
    return 0


def _read_data(source: str, stdin: IO[str]) -> str:
    try:
        if source == "-":
            return stdin.read()
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputTypeError(f"unable to read data file {source}: {exc}") from exc


_COMMANDS: dict[str, CommandHandler] = {
    "check": _cmd_check,
    "validate": _cmd_validate,
}


__all__ = ["build_parser", "run_cli"]
