from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from ..common.validators import require_grade, require_iso_date
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..identity.slug import grade_key, slugify


def _str_field(data: dict, name: str, *, default: Optional[str] = None) -> str:
    value = data.get(name, default)
    if not isinstance(value, str):
        raise ValidationError(f"Field {name!r} must be a string")
    return value


@dataclass(frozen=True)
class Principal:
    """Domain entity: an authenticated identity and its role (users/{id})."""

    principal_id: str
    role: Role
    name: str = ""
    email: str = ""

    @classmethod
    def from_document(cls, principal_id: str, data: dict) -> "Principal":
        try:
            role = Role(data.get("role"))
        except ValueError:
            raise ValidationError(f"Unknown role {data.get('role')!r} for principal {principal_id}") from None
        return cls(
            principal_id=principal_id,
            role=role,
            name=_str_field(data, "name", default=""),
            email=_str_field(data, "email", default=""),
        )

    def to_document(self) -> dict:
        return {"role": self.role.value, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class StudentProfile:
    """Domain entity: students/{id}.

    ``subjects`` is a denormalised label cache; the subjects partition is the
    source of truth and may differ from it.
    """

    student_id: str
    name: str
    class_name: str = ""
    email: str = ""
    subjects: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_document(cls, student_id: str, data: dict) -> "StudentProfile":
        # Older documents carry "className" instead of "class".
        class_name = data.get("class", data.get("className", ""))
        if class_name is None:
            class_name = ""
        if not isinstance(class_name, str):
            raise ValidationError(f"Field 'class' must be a string for student {student_id}")

        subjects = data.get("subjects") or []
        if not isinstance(subjects, list) or not all(isinstance(s, str) for s in subjects):
            raise ValidationError(f"Field 'subjects' must be a list of strings for student {student_id}")

        return cls(
            student_id=student_id,
            name=_str_field(data, "name"),
            class_name=class_name,
            email=_str_field(data, "email", default=""),
            subjects=tuple(subjects),
        )

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "class": self.class_name,
            "email": self.email,
            "subjects": list(self.subjects),
        }


@dataclass(frozen=True)
class Subject:
    slug: str
    name: str

    @classmethod
    def from_document(cls, slug: str, data: dict) -> "Subject":
        return cls(slug=slug, name=_str_field(data, "name"))

    def to_document(self) -> dict:
        return {"name": self.name}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark, keyed by its date."""

    date: str
    status: AttendanceStatus

    @property
    def key(self) -> str:
        return self.date

    @classmethod
    def from_document(cls, key: str, data: dict) -> "AttendanceRecord":
        date = require_iso_date(data.get("date", key))
        if date != key:
            raise ValidationError(f"Attendance document {key} carries date {date}")
        try:
            status = AttendanceStatus(data.get("status"))
        except ValueError:
            raise ValidationError(f"Unknown attendance status {data.get('status')!r}") from None
        return cls(date=date, status=status)

    def to_document(self) -> dict:
        return {"date": self.date, "status": self.status.value}


@dataclass(frozen=True)
class GradeRecord:
    """Domain entity: one graded assessment, keyed by subject slug and date."""

    subject: str
    subject_slug: str
    date: str
    grade: float

    @property
    def key(self) -> str:
        return grade_key(self.subject_slug, self.date)

    @classmethod
    def from_document(cls, key: str, data: dict) -> "GradeRecord":
        subject = _str_field(data, "subject")
        slug = _str_field(data, "subjectSlug", default="") or slugify(subject)
        if not slug:
            raise ValidationError(f"Grade document {key} has no usable subject")
        date = require_iso_date(data.get("date"))
        if grade_key(slug, date) != key:
            raise ValidationError(f"Grade document {key} carries subject {slug!r} and date {date}")
        return cls(subject=subject, subject_slug=slug, date=date, grade=require_grade(data.get("grade")))

    def to_document(self) -> dict:
        return {
            "subject": self.subject,
            "subjectSlug": self.subject_slug,
            "grade": self.grade,
            "date": self.date,
        }


def as_payload(record: Any) -> dict:
    """JSON-friendly dict for any record dataclass."""
    if isinstance(record, StudentProfile):
        return {"id": record.student_id, **record.to_document()}
    if isinstance(record, Subject):
        return {"slug": record.slug, **record.to_document()}
    return record.to_document()
