from __future__ import annotations

from collections.abc import Callable
from typing import Any

from wirebox._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from wirebox._internal.introspection import ParameterInfo, TypeIntrospector
from wirebox._internal.resolution_context import get_resolution_context
from wirebox._internal.type_checks import is_runtime_class
from wirebox.exceptions import (
    WireboxConstructionError,
    WireboxNotInstantiableError,
    WireboxParameterResolutionError,
    WireboxResolutionError,
)


class AutowiringResolver:
    """Construct classes by resolving their constructor parameters.

    The resolver owns the parameter decision table shared by constructor
    autowiring and callable invocation. Lookups that leave the table (named
    bindings, class bindings, recursive autowiring) go back through the
    container callbacks so aliases, singletons, and cycle detection apply to
    every nested dependency.
    """

    def __init__(
        self,
        *,
        introspector: TypeIntrospector,
        canonicalize: Callable[[str | type[Any]], str],
        has_binding: Callable[[str], bool],
        resolve_key: Callable[[str], Any],
        autowire: bool,
    ) -> None:
        self._introspector = introspector
        self._canonicalize = canonicalize
        self._has_binding = has_binding
        self._resolve_key = resolve_key
        self._autowire = autowire

    def resolve(self, key: str, cls: type[Any]) -> Any:
        """Build an instance of ``cls`` for the canonical identifier ``key``.

        Raises:
            WireboxCircularDependencyError: If ``key`` is already being resolved.
            WireboxNotInstantiableError: If ``cls`` is a protocol or abstract class.
            WireboxParameterResolutionError: If a constructor parameter cannot
                be resolved.
            WireboxConstructionError: If the constructor itself raises.

        """
        label = self._introspector.label(key, cls)

        context = get_resolution_context()
        with context.frame(key, label):
            reason = self._introspector.non_instantiable_reason(cls)
            if reason is not None:
                raise WireboxNotInstantiableError(label, reason, context.chain())

            if is_pydantic_settings_subclass(cls):
                parameters: tuple[ParameterInfo, ...] = ()
            else:
                parameters = self.inspect_parameters(cls, owner=label, constructor=True)
            values = [self.resolve_parameter(parameter, owner=label) for parameter in parameters]

            try:
                return self._introspector.call(cls, parameters, values)
            except Exception as exc:
                raise WireboxConstructionError(label, exc, context.chain()) from exc

    def inspect_parameters(
        self,
        target: Callable[..., Any],
        *,
        owner: str,
        constructor: bool = False,
    ) -> tuple[ParameterInfo, ...]:
        """Read parameters through the introspector, rewrapping its failures."""
        try:
            if constructor:
                return self._introspector.constructor_parameters(target)  # type: ignore[arg-type]
            return self._introspector.callable_parameters(target)
        except Exception as exc:
            chain = get_resolution_context().chain()
            msg = f"Cannot inspect the parameters of '{owner}': {exc}"
            raise WireboxResolutionError(msg, chain) from exc

    def resolve_parameter(self, parameter: ParameterInfo, *, owner: str) -> Any:  # noqa: PLR0911
        """Produce a value for one parameter.

        Builtin types are looked up by the parameter's name, since they carry no
        identity a binding could be keyed by. Classes are looked up by their
        canonical name and autowired when no binding exists; an unbound
        protocol or abstract class fails as not instantiable unless the
        parameter is optional with a ``None`` default.
        """
        if parameter.is_union:
            raise self._unresolvable(
                parameter,
                owner,
                "union types are not supported, it is ambiguous which alternative to build",
            )

        if parameter.annotation is None:
            if parameter.has_default:
                return parameter.default
            raise self._unresolvable(
                parameter,
                owner,
                "it has no type annotation and no default value",
            )

        if parameter.is_builtin:
            named_key = self._canonicalize(parameter.name)
            if self._has_binding(named_key):
                return self._resolve_key(named_key)
            if parameter.has_default:
                return parameter.default
            raise self._unresolvable(
                parameter,
                owner,
                f"no binding named '{parameter.name}' exists for builtin type "
                f"{_annotation_name(parameter.annotation)} and it has no default value",
            )

        if is_runtime_class(parameter.annotation):
            key = self._canonicalize(parameter.annotation)
            if self._has_binding(key):
                return self._resolve_key(key)
            target = self._introspector.lookup(key) if self._autowire else None
            if target is not None:
                if (
                    parameter.is_nullable
                    and parameter.has_default
                    and parameter.default is None
                    and not self._introspector.is_instantiable(target)
                ):
                    return None
                return self._resolve_key(key)

        if parameter.has_default:
            return parameter.default
        raise self._unresolvable(
            parameter,
            owner,
            f"{_annotation_name(parameter.annotation)} is not bound and cannot be autowired",
        )

    def _unresolvable(
        self,
        parameter: ParameterInfo,
        owner: str,
        reason: str,
    ) -> WireboxParameterResolutionError:
        return WireboxParameterResolutionError(
            owner,
            parameter.name,
            reason,
            get_resolution_context().chain(),
        )


def _annotation_name(annotation: Any) -> str:
    if is_runtime_class(annotation):
        return annotation.__name__
    return repr(annotation)


__all__ = ["AutowiringResolver"]
