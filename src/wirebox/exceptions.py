from __future__ import annotations

from collections.abc import Sequence


class WireboxError(Exception):
    """Represent a base class for all wirebox-specific failures.

    Catch this type when you want to handle any wirebox error path without
    matching each concrete exception class individually. The triggering
    error, when there is one, is available as ``__cause__``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class WireboxContainerError(WireboxError):
    """Signal a structural problem detected by the invoker.

    Raised by ``Container.invoke_method`` when the target class cannot be
    found or does not define the requested method.
    """


class WireboxNotFoundError(WireboxError):
    """Signal that an identifier has no binding and names no resolvable class.

    Typical fixes include registering the identifier with ``Container.set`` or
    ``Container.singleton``, or passing the class object instead of a name the
    container has never seen.
    """

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Binding for '{identifier}' not found and '{identifier}' is not an "
            "instantiable class.",
        )
        self.identifier = identifier


class WireboxBindingError(WireboxError):
    """Signal an invalid factory, value, or alias supplied at registration time."""


class WireboxAliasError(WireboxBindingError):
    """Signal alias misuse, such as an alias pointing at itself."""


class WireboxAliasCycleError(WireboxAliasError):
    """Signal that following an alias chain revisits an identifier."""

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__(f"Alias cycle detected: {' -> '.join(chain)}")
        self.chain = tuple(chain)


class WireboxFactoryError(WireboxError):
    """Signal that a registered factory raised while producing its value.

    The original exception is chained as ``__cause__``. Nested factories
    produce nested ``WireboxFactoryError`` instances, one per binding.
    """

    def __init__(self, binding_id: str, cause: BaseException) -> None:
        super().__init__(f"Factory for '{binding_id}' threw: {cause}")
        self.binding_id = binding_id


class WireboxResolutionError(WireboxError):
    """Represent a failure detected while autowiring a class.

    ``chain`` holds the names of the identifiers under construction when the
    failure happened, outermost first.
    """

    def __init__(self, message: str, chain: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.chain = tuple(chain)


class WireboxCircularDependencyError(WireboxResolutionError):
    """Signal that autowiring revisited an identifier already under construction."""

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__(f"Circular dependency detected: {' -> '.join(chain)}", chain)


class WireboxNotInstantiableError(WireboxResolutionError):
    """Signal that the target class is a protocol or an abstract class.

    ``reason`` is ``"interface"`` for protocols and ``"abstract"`` for classes
    with unimplemented abstract methods.
    """

    def __init__(self, identifier: str, reason: str, chain: Sequence[str] = ()) -> None:
        super().__init__(
            f"Class '{identifier}' is not instantiable: it is {_REASONS.get(reason, reason)} "
            f"(while resolving {_breadcrumb(chain)}).",
            chain,
        )
        self.identifier = identifier
        self.reason = reason


class WireboxParameterResolutionError(WireboxResolutionError):
    """Signal that a constructor, method, or function parameter cannot be resolved.

    Typical fixes include annotating the parameter, giving it a default,
    binding a value under the parameter's name (for builtin types), or
    binding the parameter's class.
    """

    def __init__(
        self,
        owner: str,
        parameter: str,
        reason: str,
        chain: Sequence[str] = (),
    ) -> None:
        super().__init__(
            f"Cannot resolve parameter '{parameter}' of '{owner}': {reason} "
            f"(while resolving {_breadcrumb(chain)}).",
            chain,
        )
        self.owner = owner
        self.parameter = parameter


class WireboxConstructionError(WireboxResolutionError):
    """Signal that calling a class constructor raised.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, identifier: str, cause: BaseException, chain: Sequence[str] = ()) -> None:
        super().__init__(
            f"Failed to create an instance of '{identifier}': {cause} "
            f"(while resolving {_breadcrumb(chain)}).",
            chain,
        )
        self.identifier = identifier


def explain(error: BaseException) -> list[tuple[str, str]]:
    """Flatten an error and its causes into ``(kind, message)`` pairs.

    The first pair describes ``error`` itself and the last one the root
    failure. Explicit causes (``raise ... from``) are followed first; an
    implicit ``__context__`` is used only when no cause was set.

    Examples:
        .. code-block:: python

            try:
                container.get("mailer")
            except WireboxError as error:
                for kind, message in explain(error):
                    print(f"{kind}: {message}")

    """
    explained: list[tuple[str, str]] = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        explained.append((type(current).__name__, str(current)))
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__
    return explained


_REASONS = {"interface": "an interface", "abstract": "an abstract class"}


def _breadcrumb(chain: Sequence[str]) -> str:
    return " -> ".join(chain) if chain else "(root)"
