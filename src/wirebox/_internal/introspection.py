from __future__ import annotations

import inspect
import pkgutil
import threading
import types
from collections.abc import Callable, Sequence
from contextlib import suppress
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from typing_extensions import is_protocol

from wirebox._internal.type_checks import is_runtime_class, is_scalar_annotation
from wirebox.exceptions import WireboxResolutionError

_NONE_TYPE = type(None)
_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Describe one constructor/function parameter for the resolvers.

    ``annotation`` is ``None`` when the parameter is undeclared (or declared as
    ``Any``). ``Optional[X]`` is reported as ``annotation=X`` with
    ``is_nullable=True``; any other union sets ``is_union``.
    """

    name: str
    annotation: Any
    is_union: bool
    is_builtin: bool
    has_default: bool
    default: Any
    is_nullable: bool
    kind: inspect._ParameterKind

    @property
    def is_positional_only(self) -> bool:
        return self.kind is inspect.Parameter.POSITIONAL_ONLY


class TypeIntrospector:
    """Inspect classes and callables on behalf of the container.

    The introspector also keeps the table of known types: every class that
    flows through the container is remembered under its canonical name, so a
    string identifier can later refer to it. Names that are not in the table
    are looked up as importable dotted paths.
    """

    def __init__(self) -> None:
        self._known_types: dict[str, type[Any]] = {}
        self._known_types_lock = threading.Lock()
        # Cache for parameter extraction results
        self._parameters_cache: dict[Any, tuple[ParameterInfo, ...]] = {}

    def canonical_name(self, cls: type[Any]) -> str:
        """Return ``"<module>.<qualname>"`` for a class."""
        return f"{cls.__module__}.{cls.__qualname__}"

    def display_name(self, cls: type[Any]) -> str:
        return cls.__name__

    def label(self, key: str, cls: type[Any] | None = None) -> str:
        """Return a short human-readable name for an identifier in error chains.

        Class identifiers show their class name; keys bound to a class they
        do not name show both, for example ``"mailer (SmtpMailer)"``.
        """
        if cls is None:
            cls = self._known_types.get(key)
            if cls is None:
                return key
        if self.canonical_name(cls) == key:
            return self.display_name(cls)
        return f"{key} ({self.display_name(cls)})"

    def remember(self, cls: type[Any]) -> str:
        """Record a class in the known-type table and return its canonical name."""
        name = self.canonical_name(cls)
        if self._known_types.get(name) is not cls:
            with self._known_types_lock:
                self._known_types[name] = cls
        return name

    def lookup(self, identifier: str) -> type[Any] | None:
        """Return the class named by ``identifier``, or ``None`` for plain keys.

        Raises:
            WireboxResolutionError: If importing the dotted path raised
                something other than an import or attribute error.

        """
        known = self._known_types.get(identifier)
        if known is not None:
            return known

        if "." not in identifier or any(char.isspace() for char in identifier):
            return None
        try:
            candidate = pkgutil.resolve_name(identifier)
        except (ImportError, AttributeError, ValueError):
            return None
        except Exception as exc:
            msg = f"Cannot look up '{identifier}': importing it raised {exc!r}"
            raise WireboxResolutionError(msg) from exc
        if not is_runtime_class(candidate):
            return None
        self.remember(candidate)
        return candidate

    def non_instantiable_reason(self, cls: type[Any]) -> str | None:
        """Return ``"interface"``, ``"abstract"``, or ``None`` when instantiable."""
        if is_protocol(cls):
            return "interface"
        if inspect.isabstract(cls):
            return "abstract"
        return None

    def is_instantiable(self, cls: type[Any]) -> bool:
        return is_runtime_class(cls) and self.non_instantiable_reason(cls) is None

    def constructor_parameters(self, cls: type[Any]) -> tuple[ParameterInfo, ...]:
        """Return the constructor parameters of ``cls`` in declaration order.

        Classes that inherit both ``object.__init__`` and ``object.__new__``
        have no constructor and report no parameters.

        Raises:
            NameError: If a string annotation cannot be evaluated.
            ValueError: If no signature can be read for the class.

        """
        if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
            return ()
        return self.callable_parameters(cls)

    def callable_parameters(self, func: Callable[..., Any]) -> tuple[ParameterInfo, ...]:
        """Return the parameters of a function, bound method, or class."""
        cache_key = func.__func__ if isinstance(func, types.MethodType) else func
        try:
            cached = self._parameters_cache.get(cache_key)
        except TypeError:
            cached = None
        if cached is not None:
            return cached[1:] if cache_key is not func else cached

        signature = inspect.signature(cache_key, eval_str=True)
        result = tuple(
            self._describe(parameter)
            for parameter in signature.parameters.values()
            if parameter.kind not in _SKIPPED_KINDS
        )
        with suppress(TypeError):
            self._parameters_cache[cache_key] = result
        # A bound method receives its first parameter implicitly.
        return result[1:] if cache_key is not func else result

    def call(
        self,
        target: Callable[..., Any],
        parameters: Sequence[ParameterInfo],
        values: Sequence[Any],
    ) -> Any:
        """Call ``target`` with ``values`` matched to ``parameters`` in order."""
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter, value in zip(parameters, values, strict=True):
            if parameter.is_positional_only:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        return target(*args, **kwargs)

    def _describe(self, parameter: inspect.Parameter) -> ParameterInfo:
        annotation = parameter.annotation
        if get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        if annotation is inspect.Parameter.empty or annotation is Any:
            annotation = None

        is_union = False
        is_nullable = False
        if get_origin(annotation) in (Union, types.UnionType):
            members = get_args(annotation)
            is_nullable = _NONE_TYPE in members
            alternatives = [member for member in members if member is not _NONE_TYPE]
            if len(alternatives) == 1:
                annotation = alternatives[0]
            else:
                is_union = True

        has_default = parameter.default is not inspect.Parameter.empty
        return ParameterInfo(
            name=parameter.name,
            annotation=annotation,
            is_union=is_union,
            is_builtin=(
                annotation is not None and not is_union and is_scalar_annotation(annotation)
            ),
            has_default=has_default,
            default=parameter.default if has_default else None,
            is_nullable=is_nullable,
            kind=parameter.kind,
        )


__all__ = ["ParameterInfo", "TypeIntrospector"]
