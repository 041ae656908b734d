"""Module-level classes shared by tests that refer to them by name."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class IExample(Protocol):
    def run(self) -> None: ...


class AbstractExample(ABC):
    @abstractmethod
    def run(self) -> None: ...


class Simple:
    pass


class OtherSimple:
    pass


class NeedsScalarNoDefault:
    def __init__(self, port: int) -> None:
        self.port = port


class NeedsUnion:
    def __init__(self, x: Simple | OtherSimple) -> None:
        self.x = x


class NeedsUntypedNoDefault:
    def __init__(self, something) -> None:  # noqa: ANN001
        self.something = something


class BoomCtor:
    def __init__(self) -> None:
        msg = "boom"
        raise RuntimeError(msg)


class A:
    def __init__(self, b: B) -> None:
        self.b = b


class B:
    def __init__(self, a: A) -> None:
        self.a = a


class ConfigService:
    pass


class NeedsMissingForwardRef:
    def __init__(self, ghost: Ghost) -> None:  # type: ignore[name-defined]  # noqa: F821
        self.ghost = ghost


class NeedsAbstract:
    def __init__(self, dep: AbstractExample) -> None:
        self.dep = dep
