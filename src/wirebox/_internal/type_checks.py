from __future__ import annotations

import types
from typing import Any, Literal, TypeGuard, get_origin

SCALAR_TYPES: frozenset[type[Any]] = frozenset(
    {
        bool,
        int,
        float,
        complex,
        str,
        bytes,
        bytearray,
        list,
        dict,
        tuple,
        set,
        frozenset,
    },
)


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_scalar_annotation(annotation: object) -> bool:
    """Return true when an annotation names a builtin scalar or collection type.

    Parameterized builtins such as ``list[int]`` and ``Literal`` annotations
    count as scalars: they carry no identity a binding could be keyed by.

    Args:
        annotation: Parameter annotation with ``Optional`` already stripped.

    """
    origin = get_origin(annotation)
    if origin is Literal:
        return True
    if origin is not None:
        return origin in SCALAR_TYPES
    return annotation in SCALAR_TYPES


__all__ = ["SCALAR_TYPES", "is_runtime_class", "is_scalar_annotation"]
