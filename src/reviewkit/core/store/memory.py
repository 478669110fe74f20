"""
In-memory record store with a revision counter and snapshots.

This is the default persistence collaborator for tests, scripts and
single-process callers. It provides:

- ``save(record)``: upsert by ``id`` and bump the revision counter.
- ``load_all(collection)``: return fresh copies of every record, in first-save order.
- ``delete_by_id(collection, id)``: remove a record and bump the revision.
- ``snapshot(note=None)``: capture the whole store at the current revision.

Design Goals
------------
- **Caller-owned data**: records are stored as JSON-safe dicts and handed
  back as deep copies, so no caller can mutate another caller's view.
- **Observability**: every mutation bumps a revision; every snapshot
  captures the full content at that revision.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

from reviewkit.core.settings import get_logger

from .base import Record, to_document
from .trace import StoreSnapshot

logger = get_logger(__name__)


class InMemoryRecordStore:
    """
    Dictionary-backed store keyed by collection, then by record id.

    Attributes
    ----------
    _collections : dict[str, dict[str, dict[str, Any]]]
        The stored documents.
    _rev : int
        Monotonically increasing revision counter (bumps on every mutation).
    _snapshots : list[StoreSnapshot]
        History of captured snapshots.
    """

    __slots__ = ("_collections", "_rev", "_snapshots")

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._rev: int = 0
        self._snapshots: list[StoreSnapshot] = []

    # ------------------------------ Store API --------------------------------

    def save(self, record: Record, *, collection: str | None = None) -> str:
        """Insert or replace ``record`` and return its id."""
        target, doc = to_document(record, collection)
        self._collections.setdefault(target, {})[doc["id"]] = doc
        self._rev += 1
        logger.debug("saved %s/%s (rev %d)", target, doc["id"], self._rev)
        return str(doc["id"])

    def load_all(self, collection: str) -> list[dict[str, Any]]:
        """Return deep copies of every record in ``collection``."""
        return [copy.deepcopy(doc) for doc in self._collections.get(collection, {}).values()]

    def delete_by_id(self, collection: str, record_id: str) -> None:
        """Remove ``record_id`` from ``collection``; absent ids are ignored."""
        docs = self._collections.get(collection, {})
        if docs.pop(record_id, None) is None:
            logger.debug("delete of missing %s/%s ignored", collection, record_id)
            return
        self._rev += 1
        logger.debug("deleted %s/%s (rev %d)", collection, record_id, self._rev)

    def collections(self) -> tuple[str, ...]:
        """Return the collection names as a sorted tuple (stable for tests)."""
        return tuple(sorted(self._collections))

    @property
    def revision(self) -> int:
        return self._rev

    def __len__(self) -> int:
        return sum(len(docs) for docs in self._collections.values())

    # ----------------------------- Snapshot API ------------------------------

    def snapshot(self, note: str | None = None) -> StoreSnapshot:
        """
        Capture an immutable snapshot of the current store state.

        Parameters
        ----------
        note : str | None
            Optional human-readable label explaining *why* the snapshot was taken.
        """
        ts_str = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        snap = StoreSnapshot(
            timestamp=ts_str,
            revision=self._rev,
            note=note,
            data=copy.deepcopy(self._collections),
        )
        self._snapshots.append(snap)
        return snap

    def snapshots(self) -> tuple[StoreSnapshot, ...]:
        """Return all recorded snapshots (immutable tuple)."""
        return tuple(self._snapshots)


__all__ = ["InMemoryRecordStore"]
