from __future__ import annotations

import pytest

from student_records.core.enums import Partition, Role
from student_records.core.exceptions import IndexRequired, PermissionDenied
from student_records.records.model import GradeRecord, Principal
from student_records.records.repository import RecordStore
from student_records.store.memory import InMemoryDocumentStore


class IndexlessStore(InMemoryDocumentStore):
    """Store that cannot run ordered queries, like a backend missing an index."""

    def list(self, collection, *, order_by=None, descending=False):
        if order_by:
            raise IndexRequired(f"Ordering {collection} by {order_by} needs an index")
        return super().list(collection)


def _grade(grade: float) -> GradeRecord:
    return GradeRecord(subject="Math", subject_slug="math", date="2024-01-01", grade=grade)


def test_grade_upsert_overwrites_same_subject_and_date(store, teacher):
    scope = RecordStore(store).scope(teacher, "s1")

    scope.upsert(Partition.GRADES, _grade(88).key, _grade(88).to_document())
    grades = scope.grades()
    assert len(grades) == 1
    assert grades[0].grade == 88

    scope.upsert(Partition.GRADES, _grade(92).key, _grade(92).to_document())
    grades = scope.grades()
    assert len(grades) == 1
    assert grades[0].grade == 92


def test_grades_on_different_dates_coexist(store, teacher):
    scope = RecordStore(store).scope(teacher, "s1")
    later = GradeRecord(subject="Math", subject_slug="math", date="2024-02-01", grade=70)

    scope.upsert(Partition.GRADES, _grade(88).key, _grade(88).to_document())
    scope.upsert(Partition.GRADES, later.key, later.to_document())

    assert [g.date for g in scope.grades()] == ["2024-02-01", "2024-01-01"]


def test_attendance_listed_by_date_descending(store, teacher):
    scope = RecordStore(store).scope(teacher, "s1")
    for d in ["2024-01-02", "2024-01-10", "2024-01-05"]:
        scope.upsert(Partition.ATTENDANCE, d, {"date": d, "status": "present"})

    assert [a.date for a in scope.attendance()] == ["2024-01-10", "2024-01-05", "2024-01-02"]


def test_delete_missing_attendance_is_a_no_op(store, teacher):
    scope = RecordStore(store).scope(teacher, "s1")

    scope.delete(Partition.ATTENDANCE, "2024-03-03")

    assert scope.attendance() == []


def test_student_reads_own_scope_but_cannot_write(store, student):
    scope = RecordStore(store).scope(student, "s1")

    assert scope.attendance() == []
    with pytest.raises(PermissionDenied):
        scope.upsert(Partition.ATTENDANCE, "2024-01-01", {"date": "2024-01-01", "status": "present"})
    with pytest.raises(PermissionDenied):
        scope.delete(Partition.ATTENDANCE, "2024-01-01")


def test_student_cannot_open_another_students_scope(store, student):
    with pytest.raises(PermissionDenied):
        RecordStore(store).scope(student, "someone-else")


def test_student_cannot_list_profiles(store, student):
    with pytest.raises(PermissionDenied):
        RecordStore(store).list_profiles(student)


def test_missing_profile_is_none(store, teacher):
    assert RecordStore(store).scope(teacher, "nobody").get_profile() is None


def test_ordered_list_surfaces_index_required(teacher):
    scope = RecordStore(IndexlessStore()).scope(teacher, "s1")

    with pytest.raises(IndexRequired) as exc_info:
        scope.attendance()
    assert exc_info.value.retryable is True

    assert scope.subjects() == []


def test_malformed_documents_are_skipped(store, teacher):
    scope = RecordStore(store).scope(teacher, "s1")
    scope.upsert(Partition.ATTENDANCE, "2024-01-01", {"date": "2024-01-01", "status": "present"})
    scope.upsert(Partition.ATTENDANCE, "2024-01-02", {"date": "2024-01-02", "status": "sleeping"})

    assert [a.date for a in scope.attendance()] == ["2024-01-01"]


def test_subject_cache_tracks_adds_and_removes(store, teacher, student_profile):
    scope = RecordStore(store).scope(teacher, student_profile.student_id)

    assert scope.refresh_subject_cache(add="Math") is True
    assert scope.refresh_subject_cache(add="Science") is True
    assert scope.get_profile().subjects == ("Math", "Science")

    assert scope.refresh_subject_cache(remove_slug="math") is True
    assert scope.get_profile().subjects == ("Science",)


def test_subject_cache_without_profile_reports_false(store, teacher):
    scope = RecordStore(store).scope(teacher, "nobody")
    assert scope.refresh_subject_cache(add="Math") is False


def test_teacher_can_write_any_student(store):
    other_teacher = Principal(principal_id="t2", role=Role.TEACHER)
    scope = RecordStore(store).scope(other_teacher, "s9")

    scope.upsert(Partition.SUBJECTS, "math", {"name": "Math"})

    assert [s.slug for s in scope.subjects()] == ["math"]
