from __future__ import annotations

import pytest

from student_records.core.enums import AttendanceStatus
from student_records.identity.slug import slugify
from student_records.records.model import AttendanceRecord, GradeRecord
from student_records.reports.summary import attendance_summary, grade_summary, round_half_up


def _att(date: str, status: str) -> AttendanceRecord:
    return AttendanceRecord(date=date, status=AttendanceStatus(status))


def _grade(subject: str, grade: float, date: str = "2024-01-01") -> GradeRecord:
    return GradeRecord(subject=subject, subject_slug=slugify(subject), date=date, grade=grade)


def test_attendance_summary_empty():
    assert attendance_summary([]).to_dict() == {"total": 0, "present": 0, "absent": 0, "late": 0, "percentPresent": 0}


def test_attendance_summary_counts_partition_total():
    records = [
        _att("2024-01-01", "present"),
        _att("2024-01-02", "present"),
        _att("2024-01-03", "absent"),
        _att("2024-01-04", "late"),
    ]
    s = attendance_summary(records)

    assert (s.total, s.present, s.absent, s.late) == (4, 2, 1, 1)
    assert s.present + s.absent + s.late == s.total
    assert s.percent_present == 50


def test_attendance_percent_rounds_half_up():
    # 1/8 = 12.5% -> 13 (round() would give 12)
    records = [_att("2024-01-01", "present")] + [_att(f"2024-01-0{i}", "absent") for i in range(2, 9)]
    assert attendance_summary(records).percent_present == 13


def test_attendance_percent_bounds():
    assert attendance_summary([_att("2024-01-01", "absent")]).percent_present == 0
    assert attendance_summary([_att("2024-01-01", "present")]).percent_present == 100


def test_overall_average_is_weighted_over_all_grades():
    s = grade_summary([_grade("Math", 80), _grade("Math", 90, "2024-01-02"), _grade("Science", 100)])

    assert s.overall_avg == 90
    assert [(g.subject, g.avg, g.count) for g in s.per_subject] == [("Math", 85, 2), ("Science", 100, 1)]


def test_grade_summary_empty():
    s = grade_summary([])
    assert s.per_subject == []
    assert s.overall_avg == 0


def test_grade_averages_round_to_two_places():
    s = grade_summary([_grade("Math", 70), _grade("Math", 70, "2024-01-02"), _grade("Math", 71, "2024-01-03")])
    assert s.per_subject[0].avg == 70.33
    assert s.overall_avg == 70.33


def test_label_grouping_splits_differently_cased_labels():
    records = [_grade("Math", 80), _grade("math", 90, "2024-01-02")]

    by_label = grade_summary(records)
    by_slug = grade_summary(records, group_by="slug")

    assert [g.subject for g in by_label.per_subject] == ["Math", "math"]
    assert [(g.subject, g.avg, g.count) for g in by_slug.per_subject] == [("Math", 85, 2)]


def test_grade_summary_rejects_unknown_grouping():
    with pytest.raises(ValueError):
        grade_summary([], group_by="teacher")


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(84.445, 2) == 84.45
