from __future__ import annotations

import logging

from wirebox.exceptions import WireboxAliasCycleError, WireboxAliasError

logger = logging.getLogger(__name__)


class AliasResolver:
    """Map alias names to canonical identifiers.

    Targets may themselves be aliases or may not be bound yet, so cycles among
    chained aliases are detected lazily by ``canonicalize``. Only
    self-aliasing is rejected when the alias is declared.
    """

    def __init__(self) -> None:
        self._aliases: dict[str, str] = {}

    def set_alias(self, alias: str, target: str) -> None:
        if alias == target:
            msg = f"Cannot alias '{alias}' to itself."
            raise WireboxAliasError(msg)
        self._aliases[alias] = target
        logger.debug("Aliased '%s' to '%s'", alias, target)

    def is_alias(self, identifier: str) -> bool:
        return identifier in self._aliases

    def canonicalize(self, identifier: str) -> str:
        """Follow alias links until reaching an identifier that is not an alias."""
        seen = {identifier}
        chain = [identifier]
        current = identifier
        while current in self._aliases:
            current = self._aliases[current]
            chain.append(current)
            if current in seen:
                raise WireboxAliasCycleError(chain)
            seen.add(current)
        return current

    def remove(self, alias: str) -> bool:
        return self._aliases.pop(alias, None) is not None

    def clear(self) -> None:
        self._aliases.clear()


__all__ = ["AliasResolver"]
