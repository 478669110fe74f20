"""Disk-backed JSON record store.

One JSON document per collection:

- Default directory: ``REVIEWKIT_STORE_DIR`` setting or ``artifacts/store/``
- Filename pattern:  ``{collection}.json``
- Content:           ``{"<id>": {...record...}, ...}`` in first-save order

Every call reads the file afresh, so two stores pointed at the same
directory see each other's writes. There is no locking and no atomic
rename; callers needing durability bring their own persistence.

Usage
-----
>>> store = JsonFileStore()              # uses default dir
>>> store.save(scored_review)            # -> "CR-1a2b3c4d5e6f"
>>> store.load_all("scored_reviews")
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from reviewkit.core.settings import get_logger, load_settings

from .base import Record, to_document
from .trace import StoreSnapshot

logger = get_logger(__name__)


def _default_dir() -> Path:
    """Return the configured base directory for store files."""
    return load_settings().store_dir


class JsonFileStore:
    """Persist records as JSON files, one per collection."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else _default_dir()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        return self.base_dir / f"{collection}.json"

    def _read(self, collection: str) -> dict[str, dict[str, Any]]:
        path = self._path(collection)
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as f:
            data: dict[str, dict[str, Any]] = json.load(f)
        return data

    def _write(self, collection: str, docs: dict[str, dict[str, Any]]) -> Path:
        path = self._path(collection)
        with path.open("w", encoding="utf-8") as f:
            json.dump(docs, f, ensure_ascii=False, indent=2)
            f.write("\n")
        return path

    def save(self, record: Record, *, collection: str | None = None) -> str:
        """Upsert ``record`` into its collection file and return its id."""
        target, doc = to_document(record, collection)
        docs = self._read(target)
        docs[doc["id"]] = doc
        path = self._write(target, docs)
        logger.debug("saved %s/%s to %s", target, doc["id"], path)
        return str(doc["id"])

    def load_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every record stored in ``collection``."""
        return list(self._read(collection).values())

    def delete_by_id(self, collection: str, record_id: str) -> None:
        """Remove ``record_id`` from the collection file; absent ids are ignored."""
        docs = self._read(collection)
        if docs.pop(record_id, None) is None:
            return
        self._write(collection, docs)
        logger.debug("deleted %s/%s", collection, record_id)

    def write_snapshot(self, snap: StoreSnapshot) -> Path:
        """Write an in-memory store snapshot next to the collection files.

        Filenames include the UTC timestamp and the revision, e.g.
        ``snapshot_20240115T100000123456Z_rev000012.json``.
        """
        safe_ts = snap.timestamp.replace("-", "").replace(":", "").replace(".", "")
        path = self.base_dir / f"snapshot_{safe_ts}_rev{snap.revision:06d}.json"
        payload = {
            "timestamp": snap.timestamp,
            "revision": snap.revision,
            "note": snap.note,
            "data": snap.data,
        }
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write("\n")
        return path


__all__ = ["JsonFileStore"]
