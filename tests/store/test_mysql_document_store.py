from __future__ import annotations

import json

import pytest
from mysql.connector import errorcode, errors

from student_records.core.exceptions import IndexRequired, PermissionDenied, StoreError, StoreReadFailure, StoreWriteFailure
from student_records.store.document_store import WriteOp
from student_records.store.mysql_document_store import MySQLDocumentStore


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.fail_with is not None:
            raise self._conn.fail_with

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=None, fail_with=None):
        self.rows = rows or []
        self.fail_with = fail_with
        self.executed = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self):
        return self.conn


def _store(**kwargs):
    conn = FakeConnection(**kwargs)
    return MySQLDocumentStore(FakeConnFactory(conn)), conn


def test_get_decodes_json_column():
    store, _ = _store(rows=[{"data": json.dumps({"name": "Ada"})}])
    assert store.get("students", "s1") == {"name": "Ada"}


def test_list_orders_by_json_field():
    store, conn = _store(rows=[{"doc_id": "2024-01-02", "data": b'{"date": "2024-01-02", "status": "late"}'}])

    docs = store.list("students/s1/attendance", order_by="date", descending=True)

    assert docs[0].data["status"] == "late"
    sql, params = conn.executed[0]
    assert "ORDER BY JSON_UNQUOTE(JSON_EXTRACT(data, %s)) DESC" in sql
    assert "JSON_TYPE(JSON_EXTRACT(data, %s)) <> 'NULL'" in sql
    assert params == ("students/s1/attendance", "$.date", "$.date", "$.date")


def test_list_rejects_unsafe_order_field():
    store, _ = _store()
    with pytest.raises(ValueError):
        store.list("c", order_by="date; DROP TABLE documents")


def test_commit_runs_batch_in_one_transaction():
    store, conn = _store()

    store.commit(
        [
            WriteOp(collection="students/s1/subjects", doc_id="math", data={"name": "Math"}),
            WriteOp(collection="students/s1/grades", doc_id="math_2024-01-01"),
        ]
    )

    assert conn.committed
    assert conn.executed[0][0].startswith("INSERT INTO documents")
    assert conn.executed[1][0].startswith("DELETE FROM documents")


def test_missing_table_maps_to_index_required():
    store, _ = _store(fail_with=errors.ProgrammingError(msg="no table", errno=errorcode.ER_NO_SUCH_TABLE))
    with pytest.raises(IndexRequired):
        store.list("c", order_by="date")


def test_access_denied_maps_to_permission_denied():
    store, _ = _store(fail_with=errors.ProgrammingError(msg="denied", errno=errorcode.ER_TABLEACCESS_DENIED_ERROR))
    with pytest.raises(PermissionDenied):
        store.get("students", "s1")


def test_failed_write_rolls_back_and_raises_write_failure():
    store, conn = _store(fail_with=errors.OperationalError(msg="gone away", errno=errorcode.CR_SERVER_GONE_ERROR))

    with pytest.raises(StoreWriteFailure):
        store.set("students", "s1", {"name": "Ada"})
    assert conn.rolled_back


def test_failed_read_raises_retryable_read_failure():
    store, _ = _store(fail_with=errors.OperationalError(msg="gone away", errno=errorcode.CR_SERVER_GONE_ERROR))
    with pytest.raises(StoreError):
        store.get("students", "s1")
    with pytest.raises(StoreReadFailure) as excinfo:
        store.list("students")
    assert excinfo.value.retryable


def test_update_of_missing_document_fails():
    store, conn = _store(rows=[])
    with pytest.raises(StoreWriteFailure):
        store.update("students", "s1", {"subjects": []})
    assert conn.rolled_back
