"""Public observability primitives: structured logging."""

from array_model.observability.logging import (
    JsonLineFormatter,
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "JsonLineFormatter",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
]
