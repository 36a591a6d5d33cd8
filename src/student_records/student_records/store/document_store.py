from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Document:
    doc_id: str
    data: dict


@dataclass(frozen=True)
class WriteOp:
    """One write inside an atomic :meth:`DocumentStore.commit` batch."""

    collection: str
    doc_id: str
    data: Optional[dict] = field(default=None)

    @property
    def is_delete(self) -> bool:
        return self.data is None


def collection_path(*segments: str) -> str:
    """Join path segments into a collection path like ``students/<id>/grades``."""
    for segment in segments:
        if not segment or "/" in segment:
            raise ValidationError(f"Invalid path segment {segment!r}")
    return "/".join(segments)


class DocumentStore(Protocol):
    """Interface of the hierarchical document store.

    Note (DIP): the record layer depends on this interface, not on a concrete backend.
    Implementations raise the ``StoreError`` family from ``core.exceptions``.
    """

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        """Create or replace the whole document."""

        raise NotImplementedError

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        """Merge ``fields`` into an existing document; fails when it does not exist."""

        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def list(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Sequence[Document]:
        """All documents of a collection; with ``order_by`` only those having that field."""

        raise NotImplementedError

    def commit(self, writes: Sequence[WriteOp]) -> None:
        """Apply all writes or none of them."""

        raise NotImplementedError
