from __future__ import annotations

import inspect
import logging
import threading
import types
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from wirebox._internal.type_checks import is_runtime_class
from wirebox.exceptions import WireboxBindingError
from wirebox.lock_mode import LockMode

logger = logging.getLogger(__name__)

MISSING = object()
_UNSUPPORTED_VALUE_TYPES: tuple[type[Any], ...] = (
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
)


class Lifetime(Enum):
    """Define cache behavior for binding results."""

    TRANSIENT = auto()
    """Disable caching and produce a new value for every ``get`` call."""

    SINGLETON = auto()
    """Cache the first produced value for the container lifetime."""


class BindingKind(Enum):
    """Tag describing how a binding produces its value."""

    FACTORY = auto()
    """Call a user-supplied factory."""

    VALUE = auto()
    """Return a literal value registered as-is."""

    AUTOWIRE = auto()
    """Construct a class by autowiring its constructor."""


@dataclass(frozen=True, kw_only=True, slots=True)
class Binding:
    """Describe how a single canonical identifier is produced and cached.

    The kind is decided once at registration time, so resolution never has to
    inspect the registered object again.
    """

    key: str
    """Canonical identifier this binding is registered under."""
    kind: BindingKind
    """Which production strategy the binding uses."""
    lifetime: Lifetime
    """Whether produced values are cached."""

    factory: Callable[..., Any] | None = None
    """Factory for ``BindingKind.FACTORY`` bindings."""
    takes_container: bool = True
    """Whether the factory receives the container as its only argument."""
    value: Any = None
    """Literal value for ``BindingKind.VALUE`` bindings."""
    concrete_type: type[Any] | None = None
    """Class constructed for ``BindingKind.AUTOWIRE`` bindings."""


def build_binding(
    key: str,
    factory_or_value: Any,
    *,
    lifetime: Lifetime,
    key_type: type[Any] | None,
) -> Binding:
    """Normalize a registration argument into a binding.

    Args:
        key: Canonical identifier being registered.
        factory_or_value: A callable factory, a class to autowire, ``None`` to
            autowire the class named by ``key``, or a literal value.
        lifetime: Cache behavior of the binding.
        key_type: Class named by ``key``, when it names one.

    Raises:
        WireboxBindingError: If ``factory_or_value`` is ``None`` and ``key``
            names no class, or if the literal value has an unsupported kind.

    """
    if factory_or_value is None:
        if key_type is None:
            msg = f"Cannot autowire '{key}': it does not name a known class."
            raise WireboxBindingError(msg)
        return Binding(
            key=key,
            kind=BindingKind.AUTOWIRE,
            lifetime=lifetime,
            concrete_type=key_type,
        )

    if is_runtime_class(factory_or_value):
        return Binding(
            key=key,
            kind=BindingKind.AUTOWIRE,
            lifetime=lifetime,
            concrete_type=factory_or_value,
        )

    if callable(factory_or_value):
        return Binding(
            key=key,
            kind=BindingKind.FACTORY,
            lifetime=lifetime,
            factory=factory_or_value,
            takes_container=_takes_container(factory_or_value),
        )

    if (
        factory_or_value is Ellipsis
        or factory_or_value is NotImplemented
        or isinstance(factory_or_value, _UNSUPPORTED_VALUE_TYPES)
    ):
        msg = (
            f"Invalid factory provided for binding '{key}': "
            f"{type(factory_or_value).__name__} values cannot be bound."
        )
        raise WireboxBindingError(msg)

    return Binding(key=key, kind=BindingKind.VALUE, lifetime=lifetime, value=factory_or_value)


def _takes_container(factory: Callable[..., Any]) -> bool:
    """Return true when the factory declares a required positional parameter."""
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        return True
    return any(
        parameter.kind
        in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        and parameter.default is inspect.Parameter.empty
        for parameter in signature.parameters.values()
    )


class BindingRegistry:
    """Store bindings and cached singleton instances by canonical identifier.

    Registration keys are unique: adding a binding for an existing identifier
    replaces it and evicts the singleton cached for that identifier. Each
    singleton identifier gets its own re-entrant lock, so first resolutions of
    different singletons never wait on each other while the same singleton is
    built at most once. Writes to the binding table and the singleton cache
    share one registry lock, which the container also holds while registering.
    """

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        lock: AbstractContextManager[Any] | None = None,
    ) -> None:
        self._lock_mode = lock_mode
        if lock is None:
            lock = threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        self._lock = lock
        self._bindings: dict[str, Binding] = {}
        self._singletons: dict[str, Any] = {}
        self._singleton_locks: dict[str, threading.RLock] = {}
        self._singleton_locks_lock = threading.Lock()

    def add(self, binding: Binding) -> None:
        with self._lock:
            self._bindings[binding.key] = binding
            self._singletons.pop(binding.key, None)
        logger.debug(
            "Registered %s binding for '%s' (%s)",
            binding.kind.name.lower(),
            binding.key,
            binding.lifetime.name.lower(),
        )

    def find(self, key: str) -> Binding | None:
        return self._bindings.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._bindings

    def cached_instance(self, key: str) -> Any:
        """Return the cached singleton for ``key`` or the ``MISSING`` sentinel."""
        return self._singletons.get(key, MISSING)

    def store_instance(self, binding: Binding, instance: Any) -> bool:
        """Cache ``instance`` unless ``binding`` was replaced while it was being built."""
        with self._lock:
            if self._bindings.get(binding.key) is not binding:
                return False
            self._singletons[binding.key] = instance
            return True

    def singleton_lock(self, key: str) -> AbstractContextManager[Any]:
        if self._lock_mode is LockMode.NONE:
            return nullcontext()
        lock = self._singleton_locks.get(key)
        if lock is not None:
            return lock
        with self._singleton_locks_lock:
            return self._singleton_locks.setdefault(key, threading.RLock())

    def forget(self, key: str) -> bool:
        with self._lock:
            removed_binding = self._bindings.pop(key, None) is not None
            removed_instance = self._singletons.pop(key, MISSING) is not MISSING
        with self._singleton_locks_lock:
            self._singleton_locks.pop(key, None)
        return removed_binding or removed_instance

    def forget_instance(self, key: str) -> bool:
        with self._lock:
            return self._singletons.pop(key, MISSING) is not MISSING

    def clear(self) -> None:
        with self._lock:
            self._bindings.clear()
            self._singletons.clear()
        with self._singleton_locks_lock:
            self._singleton_locks.clear()


__all__ = [
    "MISSING",
    "Binding",
    "BindingKind",
    "BindingRegistry",
    "Lifetime",
    "build_binding",
]
