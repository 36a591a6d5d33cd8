from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from ..core.constants import DATE_FIELD, STUDENTS_COLLECTION, SUBJECTS_CACHE_FIELD
from ..core.enums import Partition, Role
from ..core.exceptions import PermissionDenied, StoreError, ValidationError
from ..identity.slug import slugify
from ..store.document_store import Document, DocumentStore, WriteOp, collection_path
from .model import AttendanceRecord, GradeRecord, Principal, StudentProfile, Subject

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_all(docs: Sequence[Document], parse: Callable[[str, dict], T], where: str) -> List[T]:
    out: List[T] = []
    for d in docs:
        try:
            out.append(parse(d.doc_id, d.data))
        except ValidationError as exc:
            logger.warning("Skipping malformed document %s/%s: %s", where, d.doc_id, exc)
    return out


class StudentScope:
    """Record access for one student, on behalf of one principal.

    Teachers may read and write any student; a student may only read their own
    records. Writes are last-write-wins on the document key.
    """

    def __init__(self, store: DocumentStore, *, actor: Principal, student_id: str):
        self._store = store
        self._actor = actor
        self.student_id = student_id
        self._profile_collection = collection_path(STUDENTS_COLLECTION)

    @property
    def can_write(self) -> bool:
        return self._actor.role == Role.TEACHER

    def _require_write(self) -> None:
        if not self.can_write:
            raise PermissionDenied("Only teachers can change student records")

    def _collection(self, partition: Partition) -> str:
        return collection_path(STUDENTS_COLLECTION, self.student_id, Partition(partition).value)

    def write_op(self, partition: Partition, key: str, value: Optional[dict] = None) -> WriteOp:
        """Build a write for :meth:`commit`; ``value=None`` means delete."""
        return WriteOp(collection=self._collection(partition), doc_id=key, data=value)

    # ----- generic partition operations -----
    def upsert(self, partition: Partition, key: str, value: dict) -> None:
        self._require_write()
        partition = Partition(partition)
        try:
            self._store.set(self._collection(partition), key, value)
        except StoreError:
            logger.error("Upsert %s/%s for student %s failed", partition.value, key, self.student_id)
            raise

    def delete(self, partition: Partition, key: str) -> None:
        self._require_write()
        partition = Partition(partition)
        try:
            self._store.delete(self._collection(partition), key)
        except StoreError:
            logger.error("Delete %s/%s for student %s failed", partition.value, key, self.student_id)
            raise

    def list(self, partition: Partition, *, order_by: Optional[str] = None, descending: bool = False) -> Sequence[Document]:
        return self._store.list(self._collection(partition), order_by=order_by, descending=descending)

    def commit(self, writes: Sequence[WriteOp]) -> None:
        self._require_write()
        try:
            self._store.commit(writes)
        except StoreError:
            logger.error("Batch of %d write(s) for student %s failed", len(writes), self.student_id)
            raise

    # ----- typed reads -----
    def get_profile(self) -> Optional[StudentProfile]:
        data = self._store.get(self._profile_collection, self.student_id)
        if data is None:
            return None
        return StudentProfile.from_document(self.student_id, data)

    def get_subject(self, slug: str) -> Optional[Subject]:
        data = self._store.get(self._collection(Partition.SUBJECTS), slug)
        return Subject.from_document(slug, data) if data is not None else None

    def subjects(self) -> List[Subject]:
        docs = self.list(Partition.SUBJECTS)
        return _parse_all(docs, Subject.from_document, self._collection(Partition.SUBJECTS))

    def attendance(self) -> List[AttendanceRecord]:
        docs = self.list(Partition.ATTENDANCE, order_by=DATE_FIELD, descending=True)
        return _parse_all(docs, AttendanceRecord.from_document, self._collection(Partition.ATTENDANCE))

    def grades(self) -> List[GradeRecord]:
        docs = self.list(Partition.GRADES, order_by=DATE_FIELD, descending=True)
        return _parse_all(docs, GradeRecord.from_document, self._collection(Partition.GRADES))

    # ----- denormalised subject cache on the profile -----
    def refresh_subject_cache(self, *, add: Optional[str] = None, remove_slug: Optional[str] = None) -> bool:
        """Best-effort update of ``students/{id}.subjects``.

        Failures are logged and reported as ``False``; the subjects partition
        stays authoritative either way.
        """
        try:
            profile = self.get_profile()
            if profile is None:
                logger.warning("No profile for student %s; subject cache not updated", self.student_id)
                return False
            labels = list(profile.subjects)
            if add is not None and add not in labels:
                labels.append(add)
            if remove_slug is not None:
                labels = [s for s in labels if slugify(s) != remove_slug]
            if labels == list(profile.subjects):
                return True
            self._store.update(self._profile_collection, self.student_id, {SUBJECTS_CACHE_FIELD: labels})
            return True
        except (StoreError, ValidationError) as exc:
            logger.warning("Subject cache update for student %s failed: %s", self.student_id, exc)
            return False


class RecordStore:
    """Entry point of the record layer: hands out per-student scopes."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def scope(self, actor: Principal, student_id: str) -> StudentScope:
        if actor.role != Role.TEACHER and actor.principal_id != student_id:
            raise PermissionDenied("Students can only access their own records")
        return StudentScope(self._store, actor=actor, student_id=student_id)

    def list_profiles(self, actor: Principal) -> List[StudentProfile]:
        if actor.role != Role.TEACHER:
            raise PermissionDenied("Only teachers can list students")
        docs = self._store.list(collection_path(STUDENTS_COLLECTION))
        profiles = _parse_all(docs, StudentProfile.from_document, STUDENTS_COLLECTION)
        profiles.sort(key=lambda p: (p.name.lower(), p.student_id))
        return profiles

    def save_profile(self, actor: Principal, profile: StudentProfile) -> None:
        if actor.role != Role.TEACHER:
            raise PermissionDenied("Only teachers can create student profiles")
        self._store.set(collection_path(STUDENTS_COLLECTION), profile.student_id, profile.to_document())
