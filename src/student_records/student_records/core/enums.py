from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored on the principal document, used for access checks."""

    STUDENT = "student"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Attendance status as stored on the attendance document."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class Partition(str, Enum):
    """Per-student record partitions (sub-collections under students/{id})."""

    SUBJECTS = "subjects"
    ATTENDANCE = "attendance"
    GRADES = "grades"


class SubjectPolicy(str, Enum):
    """How a grade write treats a subject that does not exist yet."""

    SELF_HEAL = "self_heal"
    REQUIRE = "require"
