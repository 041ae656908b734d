from wirebox.container import Container
from wirebox.container_interface import IContainer
from wirebox.exceptions import (
    WireboxAliasCycleError,
    WireboxAliasError,
    WireboxBindingError,
    WireboxCircularDependencyError,
    WireboxConstructionError,
    WireboxContainerError,
    WireboxError,
    WireboxFactoryError,
    WireboxNotFoundError,
    WireboxNotInstantiableError,
    WireboxParameterResolutionError,
    WireboxResolutionError,
    explain,
)
from wirebox.lock_mode import LockMode

__all__ = [
    "Container",
    "IContainer",
    "LockMode",
    "WireboxAliasCycleError",
    "WireboxAliasError",
    "WireboxBindingError",
    "WireboxCircularDependencyError",
    "WireboxConstructionError",
    "WireboxContainerError",
    "WireboxError",
    "WireboxFactoryError",
    "WireboxNotFoundError",
    "WireboxNotInstantiableError",
    "WireboxParameterResolutionError",
    "WireboxResolutionError",
    "explain",
]
