"""
Point-in-time copies of a record store.

``InMemoryRecordStore.snapshot()`` captures one of these after a save or
delete; ``JsonFileStore.write_snapshot()`` persists it as a JSON file named
after its revision. Both adapters import it from here, so the file adapter
does not depend on the in-memory one.

The timestamp is stored as an ISO string and ``data`` holds JSON-safe
documents only, so a snapshot dumps to JSON without a custom encoder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """
    Store content at one revision.

    Attributes
    ----------
    timestamp : str
        Capture time, ISO-8601 UTC with a trailing ``Z``.
    revision : int
        Store revision when captured; each save and delete bumps it.
    note : str | None
        Caller label, e.g. ``"after submit CR-1a2b"``.
    data : dict[str, Any]
        ``collection -> record id -> document``.
    """

    timestamp: str
    revision: int
    note: str | None
    data: dict[str, Any] = field(default_factory=dict)

    def count(self, collection: str) -> int:
        """Number of records ``collection`` held at capture time."""
        return len(self.data.get(collection, {}))

    def collections(self) -> tuple[str, ...]:
        """Collections present in the snapshot, sorted."""
        return tuple(sorted(self.data))


__all__ = ["StoreSnapshot"]
