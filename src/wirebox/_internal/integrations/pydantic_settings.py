from __future__ import annotations

import importlib
from typing import Any

from wirebox._internal.type_checks import is_runtime_class


def _load_settings_base() -> type[Any] | None:
    try:
        module = importlib.import_module("pydantic_settings")
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


SETTINGS_BASE: type[Any] | None = _load_settings_base()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a ``pydantic_settings.BaseSettings`` model.

    Settings models read their fields from the environment, so the container
    builds them with no constructor arguments instead of autowiring each field,
    and caches the result as a singleton. When ``pydantic-settings`` is not
    installed this returns ``False`` for every candidate.

    Args:
        candidate: Object to test.

    """
    if SETTINGS_BASE is None or not is_runtime_class(candidate):
        return False
    try:
        return issubclass(candidate, SETTINGS_BASE) and candidate is not SETTINGS_BASE
    except TypeError:
        return False


__all__ = [
    "SETTINGS_BASE",
    "is_pydantic_settings_subclass",
]
