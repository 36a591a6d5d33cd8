from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import IndexRequired, PermissionDenied, StoreError, StoreReadFailure, StoreWriteFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .document_store import Document, DocumentStore, WriteOp

logger = logging.getLogger(__name__)

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_ACCESS_DENIED = {
    errorcode.ER_ACCESS_DENIED_ERROR,
    errorcode.ER_DBACCESS_DENIED_ERROR,
    errorcode.ER_TABLEACCESS_DENIED_ERROR,
    errorcode.ER_COLUMNACCESS_DENIED_ERROR,
}
_SETUP_REQUIRED = {
    errorcode.ER_NO_SUCH_TABLE,
    errorcode.ER_BAD_DB_ERROR,
    errorcode.ER_BAD_FIELD_ERROR,
}


def translate_error(exc: mysql.connector.Error, *, writing: bool) -> StoreError:
    errno = getattr(exc, "errno", None)
    if errno in _ACCESS_DENIED:
        return PermissionDenied(f"Database denied access: {exc}")
    if errno in _SETUP_REQUIRED:
        return IndexRequired(f"Database schema is missing; run scripts/init_db.py ({exc})")
    if writing:
        return StoreWriteFailure(f"Database write failed: {exc}")
    return StoreReadFailure(f"Database read failed: {exc}")


class MySQLDocumentStore(DocumentStore):
    """Documents kept as JSON rows keyed by (collection, doc_id)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT data FROM documents WHERE collection=%s AND doc_id=%s",
                    (collection, doc_id),
                )
                r = fetchone(cur)
                return load_json(r["data"]) if r else None
        except mysql.connector.Error as exc:
            raise translate_error(exc, writing=False) from exc

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        self.commit([WriteOp(collection=collection, doc_id=doc_id, data=data)])

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT data FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                    (collection, doc_id),
                )
                r = fetchone(cur)
                if not r:
                    raise StoreWriteFailure(f"No document to update at {collection}/{doc_id}")
                merged = load_json(r["data"])
                merged.update(fields)
                cur.execute(
                    "UPDATE documents SET data=%s WHERE collection=%s AND doc_id=%s",
                    (dump_json(merged), collection, doc_id),
                )
        except mysql.connector.Error as exc:
            raise translate_error(exc, writing=True) from exc

    def delete(self, collection: str, doc_id: str) -> None:
        self.commit([WriteOp(collection=collection, doc_id=doc_id)])

    def list(self, collection: str, *, order_by: Optional[str] = None, descending: bool = False) -> Sequence[Document]:
        sql = "SELECT doc_id, data FROM documents WHERE collection=%s"
        params: list = [collection]
        if order_by:
            if not _FIELD_NAME.match(order_by):
                raise ValueError(f"Invalid order_by field: {order_by!r}")
            path = f"$.{order_by}"
            sql += " AND JSON_EXTRACT(data, %s) IS NOT NULL AND JSON_TYPE(JSON_EXTRACT(data, %s)) <> 'NULL'"
            sql += f" ORDER BY JSON_UNQUOTE(JSON_EXTRACT(data, %s)) {'DESC' if descending else 'ASC'}"
            params += [path, path, path]

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                rows = fetchall(cur)
        except mysql.connector.Error as exc:
            raise translate_error(exc, writing=False) from exc

        return [Document(doc_id=str(r["doc_id"]), data=load_json(r["data"])) for r in rows]

    def commit(self, writes: Sequence[WriteOp]) -> None:
        if not writes:
            return
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for op in writes:
                    if op.is_delete:
                        cur.execute(
                            "DELETE FROM documents WHERE collection=%s AND doc_id=%s",
                            (op.collection, op.doc_id),
                        )
                    else:
                        cur.execute(
                            """
                            INSERT INTO documents(collection, doc_id, data)
                            VALUES(%s,%s,%s)
                            ON DUPLICATE KEY UPDATE data=VALUES(data)
                            """,
                            (op.collection, op.doc_id, dump_json(op.data)),
                        )
        except mysql.connector.Error as exc:
            logger.error("Batch of %d write(s) rolled back: %s", len(writes), exc)
            raise translate_error(exc, writing=True) from exc
