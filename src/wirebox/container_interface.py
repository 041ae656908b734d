from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, overload

T = TypeVar("T")

Identifier = str | type[Any]
"""A class, or a string naming a class or an arbitrary binding key."""


class IContainer(ABC):
    """Interface for container-like objects.

    Factories registered on a container receive an ``IContainer``, so they
    can be annotated against this interface instead of the concrete class.
    """

    @overload
    @abstractmethod
    def get(self, identifier: type[T]) -> T: ...

    @overload
    @abstractmethod
    def get(self, identifier: str) -> Any: ...

    @abstractmethod
    def get(self, identifier: Identifier) -> Any: ...

    @abstractmethod
    def has(self, identifier: Identifier) -> bool: ...

    @abstractmethod
    def has_binding(self, identifier: Identifier) -> bool: ...

    @abstractmethod
    def set(self, identifier: Identifier, factory_or_value: Any = None) -> None: ...

    @abstractmethod
    def singleton(self, identifier: Identifier, factory_or_value: Any = None) -> None: ...

    @abstractmethod
    def set_alias(self, alias: Identifier, identifier: Identifier) -> None: ...

    @abstractmethod
    def forget(self, identifier: Identifier) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def invoke_method(
        self,
        target: object,
        method: str,
        named_overrides: Mapping[str, Any] | None = None,
    ) -> Any: ...

    @abstractmethod
    def invoke_function(
        self,
        func: Callable[..., T],
        named_overrides: Mapping[str, Any] | None = None,
    ) -> T: ...
