from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from patron_registry.domain.patron import Patron
from patron_registry.errors import DuplicateIdError, NotFoundError


class PatronDirectory:
    """In-memory, insertion-ordered collection of patrons, unique by id.

    Not thread-safe: callers sharing a directory across threads must hold
    their own lock around every call.
    """

    def __init__(self) -> None:
        self._patrons: List[Patron] = []
        self._index: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._patrons)

    def __iter__(self) -> Iterator[Patron]:
        return iter(list(self._patrons))

    def __contains__(self, patron_id: object) -> bool:
        return patron_id in self._index

    def add(self, patron: Patron) -> None:
        if patron.id in self._index:
            raise DuplicateIdError(patron.id)
        self._index[patron.id] = len(self._patrons)
        self._patrons.append(patron)

    def remove(self, patron_id: str) -> Patron:
        pos = self._index.get(patron_id)
        if pos is None:
            raise NotFoundError(patron_id)
        removed = self._patrons.pop(pos)
        self._reindex()
        return removed

    def find(self, patron_id: str) -> Optional[Patron]:
        pos = self._index.get(patron_id)
        return None if pos is None else self._patrons[pos]

    def update(self, original_id: str, patron: Patron) -> None:
        """Replace the patron stored under original_id, keeping its position.

        The new patron may carry a different id, as long as no other patron
        already uses it.
        """
        pos = self._index.get(original_id)
        if pos is None:
            raise NotFoundError(original_id)
        if patron.id != original_id and patron.id in self._index:
            raise DuplicateIdError(patron.id)

        self._patrons[pos] = patron
        if patron.id != original_id:
            del self._index[original_id]
            self._index[patron.id] = pos

    def list(self) -> List[Patron]:
        return list(self._patrons)

    def clear(self) -> None:
        self._patrons.clear()
        self._index.clear()

    def _reindex(self) -> None:
        self._index = {p.id: i for i, p in enumerate(self._patrons)}
