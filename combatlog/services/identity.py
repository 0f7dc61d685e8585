from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

"""Identity resolution for narrative health rows.

The narrative log often omits a unit's display name and only carries a numeric
``uid`` token. The resolver remembers uid -> name bindings seen earlier in the
same file and, as a last resort, recognises a known actor name embedded in one
of the row's cells.
"""

__all__ = [
    "IdentityResolver",
]

logger = logging.getLogger(__name__)


class IdentityResolver:
    """uid -> display name table owned by one ingestion run."""

    def __init__(self) -> None:
        self._names: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._names

    def lookup(self, identifier: str) -> str | None:
        return self._names.get(identifier)

    def bind(self, identifier: str, name: str) -> None:
        previous = self._names.get(identifier)
        if previous is not None and previous != name:
            logger.debug(f"uid={identifier} rebound: {previous} -> {name}")
        self._names[identifier] = name

    def resolve(
        self,
        name: str,
        identifier: str,
        cells: Sequence[str],
        *,
        health_found: bool,
        known_actors: Iterable[str],
    ) -> str:
        """Return the display name for a row, or "" if it stays unresolved.

        Order:
        1. bind identifier -> name when the row carries both
        2. an empty name takes the name bound to the identifier
        3. otherwise, for rows with a health value only, the first known actor
           (discovery order) contained in any cell
        """
        if name and identifier:
            self.bind(identifier, name)
        if name:
            return name
        if identifier:
            bound = self._names.get(identifier)
            if bound:
                return bound
        if health_found:
            for actor in known_actors:
                if any(actor in cell for cell in cells):
                    return actor
        return ""
