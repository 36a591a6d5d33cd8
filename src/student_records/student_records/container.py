from __future__ import annotations

from dataclasses import dataclass
from typing import MutableMapping, Optional

from .auth.credentials import CredentialStore, InMemoryCredentialStore, MySQLCredentialStore
from .auth.gate import AccessGate
from .auth.provider import AuthProvider
from .core.enums import SubjectPolicy
from .database.connection import DBConfig, DatabaseConnection
from .records.repository import RecordStore
from .records.service import RecordService
from .store.document_store import DocumentStore
from .store.memory import InMemoryDocumentStore
from .store.mysql_document_store import MySQLDocumentStore
from .users.repository import PrincipalRepository
from .users.service import ProvisioningService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    store: DocumentStore
    credentials: CredentialStore
    principals_repo: PrincipalRepository
    records_repo: RecordStore

    record_service: RecordService
    provisioning_service: ProvisioningService

    def auth_for(self, session: MutableMapping) -> AuthProvider:
        return AuthProvider(self.credentials, session)

    def gate_for(self, session: MutableMapping) -> AccessGate:
        return AccessGate(auth=self.auth_for(session), principals=self.principals_repo)


def build_container(
    *,
    backend: str = "mysql",
    db_config: Optional[dict] = None,
    subject_policy: str = SubjectPolicy.SELF_HEAL.value,
    store: Optional[DocumentStore] = None,
    credentials: Optional[CredentialStore] = None,
) -> Container:
    """Wire repositories and services.

    ``store``/``credentials`` override the backend, e.g. to inject test doubles.
    """
    conn = None
    if backend == "mysql":
        if db_config is None:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        store = store or MySQLDocumentStore(conn)
        credentials = credentials or MySQLCredentialStore(conn)
    elif backend == "memory":
        store = store or InMemoryDocumentStore()
        credentials = credentials or InMemoryCredentialStore()
    else:
        raise ValueError(f"Unknown store backend: {backend!r}")

    principals_repo = PrincipalRepository(store)
    records_repo = RecordStore(store)

    record_service = RecordService(records_repo, subject_policy=SubjectPolicy(subject_policy))
    provisioning_service = ProvisioningService(principals_repo, records_repo)

    return Container(
        conn=conn,
        store=store,
        credentials=credentials,
        principals_repo=principals_repo,
        records_repo=records_repo,
        record_service=record_service,
        provisioning_service=provisioning_service,
    )
