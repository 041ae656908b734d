import collections
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Optional, Protocol

import pytest

from wirebox._internal.introspection import TypeIntrospector


class Service:
    pass


class Other:
    pass


class Port(Protocol):
    def send(self) -> None: ...


class Base(ABC):
    @abstractmethod
    def run(self) -> None: ...


class Partial(Base):
    pass


class Complete(Base):
    def run(self) -> None:
        pass


@pytest.fixture()
def introspector() -> TypeIntrospector:
    return TypeIntrospector()


class TestNames:
    def test_canonical_name(self, introspector: TypeIntrospector) -> None:
        assert introspector.canonical_name(Service) == f"{__name__}.Service"

    def test_label_for_class_key(self, introspector: TypeIntrospector) -> None:
        key = introspector.remember(Service)

        assert introspector.label(key) == "Service"

    def test_label_for_named_key(self, introspector: TypeIntrospector) -> None:
        assert introspector.label("mailer", Service) == "mailer (Service)"

    def test_label_for_plain_key(self, introspector: TypeIntrospector) -> None:
        assert introspector.label("port") == "port"


class TestLookup:
    def test_remembered_class(self, introspector: TypeIntrospector) -> None:
        key = introspector.remember(Service)

        assert introspector.lookup(key) is Service

    def test_importable_dotted_path(self, introspector: TypeIntrospector) -> None:
        assert introspector.lookup("collections.OrderedDict") is collections.OrderedDict

    @pytest.mark.parametrize(
        "identifier",
        ["port", "no_such_module.Thing", "collections.no_such_name", "os.path.join", "has space.x"],
    )
    def test_plain_keys_and_non_classes(
        self,
        introspector: TypeIntrospector,
        identifier: str,
    ) -> None:
        assert introspector.lookup(identifier) is None


class TestInstantiability:
    def test_protocol_is_an_interface(self, introspector: TypeIntrospector) -> None:
        assert introspector.non_instantiable_reason(Port) == "interface"
        assert not introspector.is_instantiable(Port)

    def test_abstract_class(self, introspector: TypeIntrospector) -> None:
        assert introspector.non_instantiable_reason(Base) == "abstract"
        assert introspector.non_instantiable_reason(Partial) == "abstract"

    def test_concrete_class(self, introspector: TypeIntrospector) -> None:
        assert introspector.non_instantiable_reason(Complete) is None
        assert introspector.is_instantiable(Complete)


class TestParameters:
    def test_class_without_constructor(self, introspector: TypeIntrospector) -> None:
        assert introspector.constructor_parameters(Service) == ()

    def test_describes_each_parameter(self, introspector: TypeIntrospector) -> None:
        class Target:
            def __init__(
                self,
                service: Service,
                maybe: Optional[Service],  # noqa: UP045
                either: Service | Other,
                port: int,
                mode: Literal["a", "b"],
                untyped,  # noqa: ANN001
                anything: Any,
                tagged: Annotated[Service, "meta"],
                retries: int = 3,
            ) -> None:
                pass

        parameters = {p.name: p for p in introspector.constructor_parameters(Target)}

        assert list(parameters) == [
            "service",
            "maybe",
            "either",
            "port",
            "mode",
            "untyped",
            "anything",
            "tagged",
            "retries",
        ]
        assert parameters["service"].annotation is Service
        assert not parameters["service"].is_builtin
        assert parameters["maybe"].annotation is Service
        assert parameters["maybe"].is_nullable
        assert parameters["either"].is_union
        assert parameters["port"].is_builtin
        assert parameters["mode"].is_builtin
        assert parameters["untyped"].annotation is None
        assert parameters["anything"].annotation is None
        assert parameters["tagged"].annotation is Service
        assert parameters["retries"].has_default
        assert parameters["retries"].default == 3
        assert not parameters["port"].has_default

    def test_string_annotations_are_evaluated(self, introspector: TypeIntrospector) -> None:
        def handler(service: "Service") -> None:
            pass

        (parameter,) = introspector.callable_parameters(handler)

        assert parameter.annotation is Service

    def test_bound_method_drops_receiver(self, introspector: TypeIntrospector) -> None:
        class Handler:
            def handle(self, service: Service) -> None:
                pass

        unbound = introspector.callable_parameters(Handler.handle)
        bound = introspector.callable_parameters(Handler().handle)

        assert [p.name for p in unbound] == ["self", "service"]
        assert [p.name for p in bound] == ["service"]
        assert [p.name for p in introspector.callable_parameters(Handler().handle)] == ["service"]

    def test_var_parameters_are_skipped(self, introspector: TypeIntrospector) -> None:
        def handler(service: Service, *args: Any, **kwargs: Any) -> None:
            pass

        assert [p.name for p in introspector.callable_parameters(handler)] == ["service"]

    def test_parameter_kinds(self, introspector: TypeIntrospector) -> None:
        def handler(a: int, /, b: int, *, c: int) -> None:
            pass

        a, b, c = introspector.callable_parameters(handler)

        assert a.is_positional_only
        assert b.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
        assert c.kind is inspect.Parameter.KEYWORD_ONLY

    def test_dataclass_fields(self, introspector: TypeIntrospector) -> None:
        @dataclass
        class Settings:
            service: Service
            name: str = "app"

        service, name = introspector.constructor_parameters(Settings)

        assert service.annotation is Service
        assert name.default == "app"

    def test_unknown_forward_reference_raises(self, introspector: TypeIntrospector) -> None:
        def handler(service: "Missing") -> None:  # type: ignore[name-defined]  # noqa: F821
            pass

        with pytest.raises(NameError):
            introspector.callable_parameters(handler)


def test_call_passes_positional_only_arguments(introspector: TypeIntrospector) -> None:
    def handler(a: int, /, b: int, *, c: int) -> tuple[int, int, int]:
        return a, b, c

    parameters = introspector.callable_parameters(handler)

    assert introspector.call(handler, parameters, [1, 2, 3]) == (1, 2, 3)
