"""Runtime settings for array-model.

``get_settings()`` loads the process-wide settings lazily from the current
working directory and environment; ``configure()`` replaces them explicitly.
"""

from __future__ import annotations

import threading

from array_model.config.loader import Settings, load_settings, settings_as_dict

_ACTIVE_LOCK = threading.Lock()
_ACTIVE: Settings | None = None


def get_settings() -> Settings:
    global _ACTIVE
    with _ACTIVE_LOCK:
        if _ACTIVE is None:
            _ACTIVE = load_settings()
        return _ACTIVE


def configure(settings: Settings | None) -> None:
    """Install ``settings`` process-wide; ``None`` resets to lazy loading."""

    global _ACTIVE
    with _ACTIVE_LOCK:
        _ACTIVE = settings


__all__ = [
    "Settings",
    "configure",
    "get_settings",
    "load_settings",
    "settings_as_dict",
]
