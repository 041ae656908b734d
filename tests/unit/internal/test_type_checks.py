from typing import Literal, Optional

import pytest

from wirebox._internal.type_checks import is_runtime_class, is_scalar_annotation


class Service:
    pass


@pytest.mark.parametrize(
    "annotation",
    [int, str, bool, float, bytes, list, dict, list[int], dict[str, int], tuple[int, ...],
     Literal["a"]],
)
def test_scalar_annotations(annotation: object) -> None:
    assert is_scalar_annotation(annotation)


_NON_SCALARS = [Service, Optional[Service], object, type(None)]  # noqa: UP045


@pytest.mark.parametrize("annotation", _NON_SCALARS)
def test_non_scalar_annotations(annotation: object) -> None:
    assert not is_scalar_annotation(annotation)


def test_runtime_class() -> None:
    assert is_runtime_class(Service)
    assert not is_runtime_class(Service())
    assert not is_runtime_class(list[int])
    assert not is_runtime_class("Service")
