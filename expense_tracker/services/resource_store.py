"""
Resource Store Base.

Holds one in-memory, insertion-ordered collection of server entities and
the bookkeeping that keeps it consistent under concurrent loads.

Local state only changes after the server confirmed an operation, so a
failed call never needs a rollback.  Every load is tagged with a
monotonically increasing sequence number; when loads overlap, only the
most recently issued one may replace the collection and older
completions are discarded.  Mutations confirmed while that latest load
is in flight are journaled and replayed onto its result, since the
server may have answered the load before or after applying them.
"""

from __future__ import annotations

from typing import Generic, Literal, Optional, Protocol, TypeVar, Union

from expense_tracker.logger import StructuredLogger
from expense_tracker.services.base_service import BaseService


class _Identified(Protocol):
    @property
    def id(self) -> str: ...


E = TypeVar("E", bound=_Identified)

# ("insert", entity, prepend) | ("replace", entity) | ("remove", entity_id)
_Change = Union[
    tuple[Literal["insert"], E, bool],
    tuple[Literal["replace"], E],
    tuple[Literal["remove"], str],
]


class BaseResourceStore(BaseService, Generic[E]):
    """Owner of one entity collection; the only code that mutates it."""

    ENTITY_NAME: str = "entity"

    def __init__(self, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._items: list[E] = []
        self._issued_seq: int = 0
        # None while no load is in flight.
        self._journal: Optional[list[_Change]] = None
        self.last_message: Optional[str] = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[E, ...]:
        """Immutable snapshot of the collection."""
        return tuple(self._items)

    def get(self, entity_id: str) -> Optional[E]:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    # ------------------------------------------------------------------
    # Load sequencing
    # ------------------------------------------------------------------

    def _next_load_seq(self) -> int:
        self._issued_seq += 1
        self._journal = []
        return self._issued_seq

    def _replace_all_if_current(self, seq: int, items: list[E]) -> tuple[E, ...]:
        """Install *items* as the collection unless a newer load was issued.

        Mutations confirmed since *seq* was issued are applied on top.
        Returns the collection as it stands afterwards.
        """
        if seq != self._issued_seq:
            self._logger.info(
                "Discarded stale %s load #%d (latest is #%d).",
                self.ENTITY_NAME,
                seq,
                self._issued_seq,
                extra={"event": "STALE_LOAD_DISCARDED"},
            )
            return self.items
        journal, self._journal = self._journal or [], None
        self._items = list(items)
        for change in journal:
            self._apply(change)
        self._logger.debug(
            "Loaded %d %s item(s), %d change(s) replayed.",
            len(self._items), self.ENTITY_NAME, len(journal),
        )
        return self.items

    def _abandon_load(self, seq: int) -> None:
        """Stop journaling for a failed load if it is still the latest."""
        if seq == self._issued_seq:
            self._journal = None

    # ------------------------------------------------------------------
    # Post-success mutations
    # ------------------------------------------------------------------

    def _record(self, change: _Change) -> bool:
        if self._journal is not None:
            self._journal.append(change)
        return self._apply(change)

    def _apply(self, change: _Change) -> bool:
        kind = change[0]
        if kind == "insert":
            _, entity, prepend = change
            if any(item.id == entity.id for item in self._items):
                # The load already saw it.
                return False
            if prepend:
                self._items.insert(0, entity)
            else:
                self._items.append(entity)
            return True
        if kind == "replace":
            entity = change[1]
            for index, item in enumerate(self._items):
                if item.id == entity.id:
                    self._items[index] = entity
                    return True
            return False
        entity_id = change[1]
        before = len(self._items)
        self._items = [item for item in self._items if item.id != entity_id]
        return len(self._items) != before

    def _insert(self, entity: E, prepend: bool = False) -> None:
        self._record(("insert", entity, prepend))

    def _replace(self, entity: E) -> bool:
        """Swap in *entity* for the item with the same id.

        An id that is not held locally leaves the collection unchanged.
        """
        return self._record(("replace", entity))

    def clear(self) -> None:
        """Drop the collection; loads still in flight will be discarded."""
        self._next_load_seq()
        self._journal = None
        self._items = []
        self.last_message = None

    def _remove(self, entity_id: str) -> bool:
        return self._record(("remove", entity_id))
