"""Shared fixtures: isolate process-wide settings and logging between tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from array_model.config import Settings, configure
from array_model.observability.logging import shutdown_logging

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _default_settings() -> Iterator[None]:
    configure(Settings())
    yield
    configure(None)
    shutdown_logging()
