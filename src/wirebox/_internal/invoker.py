from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from wirebox._internal.autowiring import AutowiringResolver
from wirebox._internal.introspection import TypeIntrospector
from wirebox._internal.resolution_context import get_resolution_context
from wirebox._internal.type_checks import is_runtime_class
from wirebox.exceptions import WireboxConstructionError, WireboxContainerError


class Invoker:
    """Call methods and functions with their parameters resolved by the container.

    ``named_overrides`` entries win over any resolution and are passed through
    unchecked. Every other parameter follows the same decision table as
    constructor autowiring.
    """

    def __init__(
        self,
        *,
        introspector: TypeIntrospector,
        autowiring: AutowiringResolver,
        lookup_class: Callable[[str], type[Any] | None],
    ) -> None:
        self._introspector = introspector
        self._autowiring = autowiring
        self._lookup_class = lookup_class

    def invoke_function(
        self,
        func: Callable[..., Any],
        named_overrides: Mapping[str, Any] | None = None,
        *,
        owner: str | None = None,
    ) -> Any:
        owner = owner or getattr(func, "__qualname__", repr(func))
        overrides = named_overrides or {}
        parameters = self._autowiring.inspect_parameters(func, owner=owner)
        values = [
            overrides[parameter.name]
            if parameter.name in overrides
            else self._autowiring.resolve_parameter(parameter, owner=owner)
            for parameter in parameters
        ]
        return self._introspector.call(func, parameters, values)

    def invoke_method(
        self,
        target: object,
        method: str,
        named_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        """Call ``method`` on ``target`` with resolved parameters.

        ``target`` may be an instance, a class, or an identifier naming a
        class. Classes get a receiver built with no constructor arguments; the
        receiver's own dependencies are not autowired. Static and class methods
        are called without building a receiver.

        Raises:
            WireboxContainerError: If the class cannot be found or does not
                define a callable ``method``.
            WireboxConstructionError: If building the receiver raises.

        """
        cls = self._target_class(target)
        if cls is None:
            bound = getattr(target, method, None)
            owner = f"{type(target).__qualname__}.{method}"
        else:
            owner = f"{cls.__qualname__}.{method}"
            try:
                attribute = inspect.getattr_static(cls, method)
            except AttributeError:
                attribute = None
            if attribute is None:
                msg = f"Method '{method}' does not exist in class '{cls.__qualname__}'."
                raise WireboxContainerError(msg)
            if isinstance(attribute, staticmethod | classmethod):
                bound = getattr(cls, method)
            else:
                bound = getattr(self._build_receiver(cls), method, None)

        if not callable(bound):
            msg = f"Method '{method}' does not exist in '{owner.rsplit('.', 1)[0]}'."
            raise WireboxContainerError(msg)
        return self.invoke_function(bound, named_overrides, owner=owner)

    def _target_class(self, target: object) -> type[Any] | None:
        if isinstance(target, str):
            cls = self._lookup_class(target)
            if cls is None:
                msg = f"Class '{target}' does not exist."
                raise WireboxContainerError(msg)
            return cls
        if is_runtime_class(target):
            return target
        return None

    def _build_receiver(self, cls: type[Any]) -> Any:
        try:
            return cls()
        except Exception as exc:
            raise WireboxConstructionError(
                cls.__qualname__,
                exc,
                get_resolution_context().chain(),
            ) from exc


__all__ = ["Invoker"]
