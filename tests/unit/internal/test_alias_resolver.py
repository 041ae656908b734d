import pytest

from wirebox._internal.aliases import AliasResolver
from wirebox.exceptions import WireboxAliasCycleError, WireboxAliasError


def test_non_alias_is_its_own_canonical_form() -> None:
    assert AliasResolver().canonicalize("key") == "key"


def test_chained_aliases() -> None:
    resolver = AliasResolver()
    resolver.set_alias("a", "b")
    resolver.set_alias("b", "c")

    assert resolver.canonicalize("a") == "c"
    assert resolver.is_alias("a")
    assert not resolver.is_alias("c")


def test_self_alias_is_rejected() -> None:
    with pytest.raises(WireboxAliasError, match="to itself"):
        AliasResolver().set_alias("a", "a")


def test_cycle_reports_the_walked_chain() -> None:
    resolver = AliasResolver()
    resolver.set_alias("a", "b")
    resolver.set_alias("b", "a")

    with pytest.raises(WireboxAliasCycleError) as exc_info:
        resolver.canonicalize("a")

    assert exc_info.value.chain == ("a", "b", "a")


def test_remove_and_clear() -> None:
    resolver = AliasResolver()
    resolver.set_alias("a", "b")
    resolver.set_alias("c", "d")

    assert resolver.remove("a")
    assert not resolver.remove("a")
    assert resolver.canonicalize("a") == "a"

    resolver.clear()
    assert resolver.canonicalize("c") == "c"
