"""Shared pytest fixtures for wirebox tests."""

import pytest

from wirebox.container import Container
from wirebox.lock_mode import LockMode


@pytest.fixture()
def container() -> Container:
    """Default container with autowiring enabled."""
    return Container()


@pytest.fixture()
def strict_container() -> Container:
    """Container that only resolves explicit bindings."""
    return Container(autowire=False)


@pytest.fixture()
def unlocked_container() -> Container:
    """Container without thread locks."""
    return Container(lock_mode=LockMode.NONE)
