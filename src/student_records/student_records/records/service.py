from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..common.validators import require_grade, require_iso_date, require_non_empty
from ..core.enums import AttendanceStatus, Partition, SubjectPolicy
from ..core.exceptions import ProfileNotFound, ValidationError
from ..identity.slug import grade_key, require_slug
from ..reports.summary import AttendanceSummary, GradeSummary, attendance_summary, grade_summary
from .model import AttendanceRecord, GradeRecord, Principal, StudentProfile, Subject, as_payload
from .repository import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentDashboard:
    """Read-model for one student's page (teacher or student view)."""

    profile: StudentProfile
    subjects: List[Subject]
    attendance: List[AttendanceRecord]
    grades: List[GradeRecord]
    attendance_summary: AttendanceSummary
    grade_summary: GradeSummary

    def to_dict(self) -> dict:
        return {
            "profile": as_payload(self.profile),
            "subjects": [as_payload(s) for s in self.subjects],
            "attendance": [as_payload(a) for a in self.attendance],
            "grades": [as_payload(g) for g in self.grades],
            "attendanceSummary": self.attendance_summary.to_dict(),
            "gradeSummary": self.grade_summary.to_dict(),
        }


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Status must be one of present, absent, late (got {value!r})") from None


class RecordService:
    """Use cases over a student's subjects, attendance and grades.

    Every write failure is raised to the caller; only the subject label cache
    on the profile is updated on a best-effort basis.
    """

    def __init__(self, records: RecordStore, *, subject_policy: SubjectPolicy = SubjectPolicy.SELF_HEAL):
        self._records = records
        self._subject_policy = SubjectPolicy(subject_policy)

    def list_students(self, actor: Principal) -> List[StudentProfile]:
        return self._records.list_profiles(actor)

    def load_dashboard(self, actor: Principal, student_id: str) -> StudentDashboard:
        scope = self._records.scope(actor, student_id)
        profile = scope.get_profile()
        if profile is None:
            raise ProfileNotFound("Student profile not found")

        attendance = scope.attendance()
        grades = scope.grades()
        return StudentDashboard(
            profile=profile,
            subjects=scope.subjects(),
            attendance=attendance,
            grades=grades,
            attendance_summary=attendance_summary(attendance),
            grade_summary=grade_summary(grades, group_by="slug"),
        )

    # ----- subjects -----
    def add_subject(self, actor: Principal, student_id: str, label: str) -> Subject:
        name = require_non_empty(label, "Subject")
        subject = Subject(slug=require_slug(name), name=name)

        scope = self._records.scope(actor, student_id)
        scope.upsert(Partition.SUBJECTS, subject.slug, subject.to_document())
        scope.refresh_subject_cache(add=subject.name)
        return subject

    def delete_subject(self, actor: Principal, student_id: str, label: str) -> None:
        slug = require_slug(label)
        scope = self._records.scope(actor, student_id)
        scope.delete(Partition.SUBJECTS, slug)
        scope.refresh_subject_cache(remove_slug=slug)

    # ----- attendance -----
    def mark_attendance(self, actor: Principal, student_id: str, *, date: str, status) -> AttendanceRecord:
        record = AttendanceRecord(date=require_iso_date(date), status=parse_status(status))
        scope = self._records.scope(actor, student_id)
        scope.upsert(Partition.ATTENDANCE, record.key, record.to_document())
        return record

    def delete_attendance(self, actor: Principal, student_id: str, date: str) -> None:
        scope = self._records.scope(actor, student_id)
        scope.delete(Partition.ATTENDANCE, require_iso_date(date))

    # ----- grades -----
    def record_grade(self, actor: Principal, student_id: str, *, subject: str, grade, date: str) -> GradeRecord:
        """Create or correct the grade for (subject, date).

        A missing subject is created in the same atomic batch as the grade
        (``self_heal``) or the grade is rejected (``require``).
        """
        label = require_non_empty(subject, "Subject")
        slug = require_slug(label)
        date = require_iso_date(date)
        value = require_grade(grade)

        scope = self._records.scope(actor, student_id)
        existing: Optional[Subject] = scope.get_subject(slug)

        if existing is not None:
            record = GradeRecord(subject=existing.name, subject_slug=slug, date=date, grade=value)
            scope.upsert(Partition.GRADES, record.key, record.to_document())
            return record

        if self._subject_policy == SubjectPolicy.REQUIRE:
            raise ValidationError(f"Subject {label!r} does not exist for this student")

        new_subject = Subject(slug=slug, name=label)
        record = GradeRecord(subject=label, subject_slug=slug, date=date, grade=value)
        scope.commit(
            [
                scope.write_op(Partition.SUBJECTS, new_subject.slug, new_subject.to_document()),
                scope.write_op(Partition.GRADES, record.key, record.to_document()),
            ]
        )
        logger.info("Created subject %s for student %s while recording a grade", slug, student_id)
        scope.refresh_subject_cache(add=new_subject.name)
        return record

    def delete_grade(self, actor: Principal, student_id: str, *, subject: str, date: str) -> None:
        key = grade_key(require_slug(subject), date)
        scope = self._records.scope(actor, student_id)
        scope.delete(Partition.GRADES, key)
