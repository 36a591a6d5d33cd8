from __future__ import annotations

import copy
from typing import Dict, Optional, Sequence

from ..core.exceptions import StoreWriteFailure
from .document_store import Document, DocumentStore, WriteOp


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store used by the testing settings and the test suite."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        data = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        current = self._collections.get(collection, {}).get(doc_id)
        if current is None:
            raise StoreWriteFailure(f"No document to update at {collection}/{doc_id}")
        current.update(copy.deepcopy(fields))

    def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)

    def list(self, collection: str, *, order_by: Optional[str] = None, descending: bool = False) -> Sequence[Document]:
        items = [Document(doc_id=k, data=copy.deepcopy(v)) for k, v in self._collections.get(collection, {}).items()]
        if order_by:
            items = [d for d in items if d.data.get(order_by) is not None]
            items.sort(key=lambda d: d.data[order_by], reverse=descending)
        return items

    def commit(self, writes: Sequence[WriteOp]) -> None:
        staged = copy.deepcopy(self._collections)
        for op in writes:
            docs = staged.setdefault(op.collection, {})
            if op.is_delete:
                docs.pop(op.doc_id, None)
            else:
                docs[op.doc_id] = copy.deepcopy(op.data)
        self._collections = staged
