"""Example: use the service layer directly (no Flask).

Runs against the in-memory backend, so no database is needed.
"""

from student_records.container import build_container
from student_records.database.bootstrap import DEMO_TEACHER, ensure_demo_teacher


def main():
    container = build_container(backend="memory")
    ensure_demo_teacher(container)

    session: dict = {}
    gate = container.gate_for(session)
    teacher = gate.sign_in(DEMO_TEACHER["email"], DEMO_TEACHER["password"], "teacher")

    student = container.provisioning_service.create_student(
        container.auth_for({}), teacher, name="Ada", email="ada@example.com", password="secret1", class_name="7B"
    )
    sid = student.profile.student_id

    records = container.record_service
    records.mark_attendance(teacher, sid, date="2024-01-01", status="present")
    records.mark_attendance(teacher, sid, date="2024-01-02", status="late")
    records.record_grade(teacher, sid, subject="Math", grade=80, date="2024-01-01")
    records.record_grade(teacher, sid, subject="math", grade=90, date="2024-01-02")
    records.record_grade(teacher, sid, subject="Science", grade=100, date="2024-01-02")

    print(records.load_dashboard(teacher, sid).to_dict())


if __name__ == "__main__":
    main()
