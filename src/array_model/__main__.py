"""Module entrypoint for ``python -m array_model``."""

from __future__ import annotations

from array_model.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
