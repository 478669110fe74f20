"""Persistence collaborator contract.

The engine only needs three operations from a store:

- ``save(record)``: upsert a record keyed by its ``id`` and return the id.
- ``load_all(collection)``: return every record of a collection as JSON-safe dicts.
- ``delete_by_id(collection, record_id)``: remove a record (no-op if absent).

Records are pydantic models (their ``COLLECTION`` class attribute names the
collection) or plain mappings (collection ``"records"`` unless given). The
engine performs no deduplication beyond upsert-by-id; ``save`` may be
delivered more than once.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, TypeAdapter

DEFAULT_COLLECTION = "records"

_RECORD_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])

Record = BaseModel | Mapping[str, Any]


@runtime_checkable
class RecordStore(Protocol):
    """Structural interface implemented by every store adapter."""

    def save(self, record: Record, *, collection: str | None = None) -> str: ...

    def load_all(self, collection: str) -> list[dict[str, Any]]: ...

    def delete_by_id(self, collection: str, record_id: str) -> None: ...


def to_document(record: Record, collection: str | None = None) -> tuple[str, dict[str, Any]]:
    """Return ``(collection, json_safe_dict)`` for a record.

    Raises
    ------
    ValueError
        If the record has no non-empty ``id``.
    """
    if isinstance(record, BaseModel):
        doc = record.model_dump(mode="json")
        target = collection or getattr(type(record), "COLLECTION", DEFAULT_COLLECTION)
    else:
        doc = _RECORD_ADAPTER.dump_python(dict(record), mode="json")
        target = collection or DEFAULT_COLLECTION

    record_id = doc.get("id")
    if record_id is None or str(record_id) == "":
        raise ValueError("records must carry a non-empty 'id' field")
    doc["id"] = str(record_id)
    return target, doc


__all__ = ["DEFAULT_COLLECTION", "Record", "RecordStore", "to_document"]
