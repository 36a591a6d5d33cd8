from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import AuthFailure, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..store.mysql_document_store import translate_error


@dataclass(frozen=True)
class Credential:
    principal_id: str
    email: str
    password_hash: str


def normalize_email(email: str) -> str:
    if email is None:
        return ""
    if not isinstance(email, str):
        raise ValidationError("Email must be text")
    return email.strip().lower()


class CredentialStore(Protocol):
    """Storage for email/password-hash pairs behind the auth provider."""

    def get_by_email(self, email: str) -> Optional[Credential]:
        raise NotImplementedError

    def create(self, *, email: str, password_hash: str) -> str:
        """Store a new credential and return its principal id; duplicate email -> AuthFailure."""

        raise NotImplementedError


class InMemoryCredentialStore(CredentialStore):
    def __init__(self):
        self._by_email: Dict[str, Credential] = {}

    def get_by_email(self, email: str) -> Optional[Credential]:
        return self._by_email.get(normalize_email(email))

    def create(self, *, email: str, password_hash: str) -> str:
        email = normalize_email(email)
        if email in self._by_email:
            raise AuthFailure("This email is already used by another account")
        principal_id = uuid.uuid4().hex
        self._by_email[email] = Credential(principal_id=principal_id, email=email, password_hash=password_hash)
        return principal_id


class MySQLCredentialStore(CredentialStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[Credential]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT principal_id, email, password_hash FROM credentials WHERE email=%s",
                    (normalize_email(email),),
                )
                r = fetchone(cur)
        except mysql.connector.Error as exc:
            raise translate_error(exc, writing=False) from exc
        if not r:
            return None
        return Credential(principal_id=str(r["principal_id"]), email=str(r["email"]), password_hash=str(r["password_hash"]))

    def create(self, *, email: str, password_hash: str) -> str:
        principal_id = uuid.uuid4().hex
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO credentials(principal_id, email, password_hash) VALUES(%s,%s,%s)",
                    (principal_id, normalize_email(email), password_hash),
                )
        except mysql.connector.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise AuthFailure("This email is already used by another account") from exc
            raise translate_error(exc, writing=True) from exc
        except mysql.connector.Error as exc:
            raise translate_error(exc, writing=True) from exc
        return principal_id
