from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for registration and singleton caching.

    Pass one of these values as ``Container(lock_mode=...)``. Thread locks keep
    the "one instance per singleton" guarantee when several threads resolve the
    same singleton for the first time.
    """

    THREAD = "thread"
    """Guard registrations and singleton caches with ``threading`` locks."""

    NONE = "none"
    """Disable locking for hosts that resolve from a single thread."""
