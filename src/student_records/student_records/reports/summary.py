from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from ..core.enums import AttendanceStatus
from ..identity.slug import slugify
from ..records.model import AttendanceRecord, GradeRecord


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero (``round()`` would round 2.5 to 2)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class AttendanceSummary:
    total: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    percent_present: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "percentPresent": self.percent_present,
        }


@dataclass(frozen=True)
class SubjectAverage:
    subject: str
    avg: float
    count: int


@dataclass(frozen=True)
class GradeSummary:
    per_subject: List[SubjectAverage] = field(default_factory=list)
    overall_avg: float = 0

    def to_dict(self) -> dict:
        return {
            "perSubject": [{"subject": s.subject, "avg": s.avg, "count": s.count} for s in self.per_subject],
            "overallAvg": self.overall_avg,
        }


def attendance_summary(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    counts = {status: 0 for status in AttendanceStatus}
    for r in records:
        counts[AttendanceStatus(r.status)] += 1

    total = sum(counts.values())
    present = counts[AttendanceStatus.PRESENT]
    percent = int(round_half_up(100 * present / total)) if total else 0
    return AttendanceSummary(
        total=total,
        present=present,
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        percent_present=percent,
    )


def grade_summary(records: Iterable[GradeRecord], *, group_by: str = "label") -> GradeSummary:
    """Per-subject and overall grade averages.

    ``group_by="label"`` groups on the subject label stored on each record, so
    "Math" and "math" form two groups. ``group_by="slug"`` groups on the
    canonical slug and names each group after the first label seen.
    The overall average is taken over every grade, not over subject averages.
    """
    if group_by not in ("label", "slug"):
        raise ValueError(f"group_by must be 'label' or 'slug', got {group_by!r}")

    labels: Dict[str, str] = {}
    groups: Dict[str, List[float]] = {}
    all_grades: List[float] = []

    for r in records:
        key = r.subject if group_by == "label" else (r.subject_slug or slugify(r.subject))
        labels.setdefault(key, r.subject)
        groups.setdefault(key, []).append(r.grade)
        all_grades.append(r.grade)

    per_subject = [
        SubjectAverage(subject=labels[key], avg=round_half_up(sum(values) / len(values), 2), count=len(values))
        for key, values in groups.items()
    ]
    overall = round_half_up(sum(all_grades) / len(all_grades), 2) if all_grades else 0
    return GradeSummary(per_subject=per_subject, overall_avg=overall)
