from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, overload

from wirebox._internal.aliases import AliasResolver
from wirebox._internal.autowiring import AutowiringResolver
from wirebox._internal.bindings import (
    MISSING,
    Binding,
    BindingKind,
    BindingRegistry,
    Lifetime,
    build_binding,
)
from wirebox._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from wirebox._internal.introspection import TypeIntrospector
from wirebox._internal.invoker import Invoker
from wirebox._internal.resolution_context import get_resolution_context
from wirebox._internal.type_checks import is_runtime_class
from wirebox.container_interface import IContainer, Identifier
from wirebox.exceptions import (
    WireboxBindingError,
    WireboxFactoryError,
    WireboxNotFoundError,
)
from wirebox.lock_mode import LockMode

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container(IContainer):
    """Register bindings and resolve object graphs on demand.

    Identifiers are classes or strings. A string names either a class the
    container has already seen (by its ``"<module>.<qualname>"`` name), an
    importable dotted path to a class, or an arbitrary binding key such as
    ``"port"``.

    ``get`` follows aliases to the canonical identifier, calls the registered
    binding when there is one, and otherwise autowires the class named by the
    identifier by resolving its constructor parameters recursively. Circular
    dependencies are detected per top-level call and reported with the full
    chain.

    Examples:
        .. code-block:: python

            container = Container()
            container.set("port", 8080)
            container.singleton(Database, lambda c: Database(c.get("dsn")))
            container.set_alias("db", Database)

            server = container.get(Server)

    """

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        autowire: bool = True,
        introspector: TypeIntrospector | None = None,
    ) -> None:
        """Initialize an empty container.

        Args:
            lock_mode: ``LockMode.THREAD`` serializes registrations and
                singleton first-resolution; ``LockMode.NONE`` disables locking
                for single-threaded hosts.
            autowire: Autowire classes that have no explicit binding. Disable
                for strict mode where every dependency must be registered.
            introspector: Reflection capability used to inspect classes and
                callables. Defaults to a fresh ``TypeIntrospector``.

        """
        self._autowire = autowire
        self._introspector = introspector or TypeIntrospector()
        self._aliases = AliasResolver()
        self._registration_lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )
        self._registry = BindingRegistry(lock_mode=lock_mode, lock=self._registration_lock)
        self._autowiring = AutowiringResolver(
            introspector=self._introspector,
            canonicalize=self._canonicalize,
            has_binding=self._registry.__contains__,
            resolve_key=self._resolve,
            autowire=autowire,
        )
        self._invoker = Invoker(
            introspector=self._introspector,
            autowiring=self._autowiring,
            lookup_class=self._lookup_class,
        )

    @overload
    def get(self, identifier: type[T]) -> T: ...

    @overload
    def get(self, identifier: str) -> Any: ...

    def get(self, identifier: Identifier) -> Any:
        """Resolve an identifier to a value.

        Args:
            identifier: Class or string identifier, possibly an alias.

        Raises:
            WireboxNotFoundError: If the identifier has no binding and does not
                name a class that can be autowired.
            WireboxAliasCycleError: If the alias chain revisits an identifier.
            WireboxFactoryError: If a registered factory raised.
            WireboxResolutionError: If autowiring failed; see its subclasses
                for cycles, non-instantiable classes, unresolvable parameters,
                and constructor failures.

        """
        key = self._canonicalize(identifier, strict=False)
        if key is None:
            raise WireboxNotFoundError(repr(identifier))
        return self._resolve(key)

    def has(self, identifier: Identifier) -> bool:
        """Return whether ``get`` can produce a value without registering anything.

        True for explicit bindings and, unless autowiring is disabled, for
        identifiers naming an instantiable class.
        """
        key = self._canonicalize(identifier, strict=False)
        if key is None:
            return False
        if key in self._registry:
            return True
        if not self._autowire:
            return False
        cls = self._lookup_class(key)
        return cls is not None and self._introspector.is_instantiable(cls)

    def has_binding(self, identifier: Identifier) -> bool:
        """Return whether an explicit binding is registered for the identifier."""
        key = self._canonicalize(identifier, strict=False)
        return key is not None and key in self._registry

    def __contains__(self, identifier: object) -> bool:
        return self.has(identifier)  # type: ignore[arg-type]

    def set(self, identifier: Identifier, factory_or_value: Any = None) -> None:
        """Register a transient binding, replacing any previous one.

        ``factory_or_value`` may be:

        - a callable, called on every ``get``. It receives the container when
          it declares a required positional parameter and no arguments
          otherwise;
        - a class, autowired on every ``get`` (binds an interface or key to an
          implementation);
        - ``None``, to autowire the class named by ``identifier``;
        - any other value, returned as-is.

        Raises:
            WireboxBindingError: If ``identifier`` is invalid, ``None`` is given
                for an identifier naming no class, or the value cannot be bound.

        """
        self._register(identifier, factory_or_value, Lifetime.TRANSIENT)

    def singleton(self, identifier: Identifier, factory_or_value: Any = None) -> None:
        """Register a binding whose first produced value is reused afterwards.

        Accepts the same arguments as ``set``. The underlying factory runs at
        most once per registration, even when several threads resolve the
        identifier for the first time concurrently.
        """
        self._register(identifier, factory_or_value, Lifetime.SINGLETON)

    def set_alias(self, alias: Identifier, identifier: Identifier) -> None:
        """Make ``alias`` resolve to whatever ``identifier`` resolves to.

        The target does not need to be bound yet. Cycles among chained aliases
        are reported when an alias is resolved.

        Raises:
            WireboxAliasError: If ``alias`` and ``identifier`` are the same.

        """
        alias_key = self._key_of(alias)
        target_key = self._key_of(identifier)
        with self._registration_lock:
            self._aliases.set_alias(alias_key, target_key)

    def forget(self, identifier: Identifier) -> None:
        """Drop an alias, or the binding and cached singleton of an identifier."""
        key = self._key_of(identifier)
        with self._registration_lock:
            if self._aliases.remove(key):
                logger.debug("Forgot alias '%s'", key)
                return
            canonical = self._aliases.canonicalize(key)
            if self._registry.forget(canonical):
                logger.debug("Forgot binding for '%s'", canonical)

    def forget_instance(self, identifier: Identifier) -> None:
        """Drop the cached singleton of an identifier while keeping its binding."""
        key = self._canonicalize(identifier)
        with self._registration_lock:
            if self._registry.forget_instance(key):
                logger.debug("Forgot cached singleton for '%s'", key)

    def clear(self) -> None:
        """Drop every binding, cached singleton, and alias."""
        with self._registration_lock:
            self._registry.clear()
            self._aliases.clear()
        logger.debug("Cleared container")

    def invoke_method(
        self,
        target: object,
        method: str,
        named_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        """Call ``target.method`` with its parameters resolved by the container.

        Args:
            target: An instance, a class, or an identifier naming a class. A
                receiver for a class is built with no constructor arguments.
            method: Name of the method to call.
            named_overrides: Values passed verbatim to parameters of the same
                name, bypassing resolution.

        Raises:
            WireboxContainerError: If the class or the method does not exist.
            WireboxParameterResolutionError: If a parameter cannot be resolved.

        """
        return self._invoker.invoke_method(target, method, named_overrides)

    def invoke_function(
        self,
        func: Callable[..., T],
        named_overrides: Mapping[str, Any] | None = None,
    ) -> T:
        """Call ``func`` with its parameters resolved by the container.

        Examples:
            .. code-block:: python

                def handler(repo: UserRepository, limit: int = 10) -> list[User]: ...


                users = container.invoke_function(handler, {"limit": 50})

        """
        return self._invoker.invoke_function(func, named_overrides)

    def _register(self, identifier: Identifier, factory_or_value: Any, lifetime: Lifetime) -> None:
        with self._registration_lock:
            key = self._canonicalize(identifier)
            key_type = self._lookup_class(key) if factory_or_value is None else None
            self._registry.add(
                build_binding(key, factory_or_value, lifetime=lifetime, key_type=key_type),
            )

    def _resolve(self, key: str) -> Any:
        binding = self._registry.find(key)
        if binding is None:
            cls = self._lookup_class(key) if self._autowire else None
            if cls is None:
                raise WireboxNotFoundError(key)
            if not is_pydantic_settings_subclass(cls):
                return self._autowiring.resolve(key, cls)
            with self._registration_lock:
                binding = self._registry.find(key)
                if binding is None:
                    binding = build_binding(
                        key,
                        cls,
                        lifetime=Lifetime.SINGLETON,
                        key_type=cls,
                    )
                    self._registry.add(binding)
        return self._produce(binding)

    def _produce(self, binding: Binding) -> Any:
        if binding.lifetime is Lifetime.TRANSIENT:
            return self._build(binding)

        instance = self._registry.cached_instance(binding.key)
        if instance is not MISSING:
            return instance
        with self._registry.singleton_lock(binding.key):
            instance = self._registry.cached_instance(binding.key)
            if instance is not MISSING:
                return instance
            instance = self._build(binding)
            if self._registry.store_instance(binding, instance):
                logger.debug("Cached singleton instance for '%s'", binding.key)
            return instance

    def _build(self, binding: Binding) -> Any:
        if binding.kind is BindingKind.VALUE:
            return binding.value
        if binding.kind is BindingKind.AUTOWIRE:
            return self._autowiring.resolve(
                binding.key,
                binding.concrete_type,  # type: ignore[arg-type]
            )

        factory = binding.factory
        if factory is None:  # pragma: no cover - guaranteed by build_binding
            msg = f"Binding for '{binding.key}' has no factory."
            raise WireboxBindingError(msg)
        with get_resolution_context().frame(binding.key, self._introspector.label(binding.key)):
            try:
                return factory(self) if binding.takes_container else factory()
            except Exception as exc:
                raise WireboxFactoryError(binding.key, exc) from exc

    @overload
    def _canonicalize(self, identifier: Identifier) -> str: ...

    @overload
    def _canonicalize(self, identifier: object, *, strict: bool) -> str | None: ...

    def _canonicalize(self, identifier: object, *, strict: bool = True) -> str | None:
        if not strict and not (isinstance(identifier, str) or is_runtime_class(identifier)):
            return None
        return self._aliases.canonicalize(self._key_of(identifier))

    def _key_of(self, identifier: object) -> str:
        if is_runtime_class(identifier):
            return self._introspector.remember(identifier)
        if isinstance(identifier, str):
            return identifier
        msg = f"Identifiers must be strings or classes, got {type(identifier).__name__}."
        raise WireboxBindingError(msg)

    def _lookup_class(self, identifier: str) -> type[Any] | None:
        return self._introspector.lookup(self._aliases.canonicalize(identifier))


__all__ = ["Container"]
