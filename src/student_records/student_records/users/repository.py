from __future__ import annotations

from typing import Optional

from ..core.constants import USERS_COLLECTION
from ..store.document_store import DocumentStore, collection_path
from ..records.model import Principal


class PrincipalRepository:
    """Principal documents (users/{id}) on top of the document store."""

    def __init__(self, store: DocumentStore):
        self._store = store
        self._collection = collection_path(USERS_COLLECTION)

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        data = self._store.get(self._collection, principal_id)
        if data is None:
            return None
        return Principal.from_document(principal_id, data)

    def save(self, principal: Principal) -> None:
        self._store.set(self._collection, principal.principal_id, principal.to_document())
