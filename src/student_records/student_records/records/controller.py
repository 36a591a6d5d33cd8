from __future__ import annotations

from flask import Flask

from ..common.web import ok, payload, role_required
from ..container import Container
from ..core.enums import Role
from .model import as_payload


def register(app: Flask, container: Container) -> None:
    records = container.record_service

    @app.route("/student", methods=["GET"], endpoint="student_dashboard")
    @role_required(Role.STUDENT)
    def student_dashboard(actor):
        return ok(records.load_dashboard(actor, actor.principal_id).to_dict())

    @app.route("/teacher/students/<student_id>", methods=["GET"], endpoint="teacher_student_dashboard")
    @role_required(Role.TEACHER)
    def teacher_student_dashboard(actor, student_id: str):
        return ok(records.load_dashboard(actor, student_id).to_dict())

    @app.route("/teacher/students/<student_id>/subjects", methods=["POST"], endpoint="add_subject")
    @role_required(Role.TEACHER)
    def add_subject(actor, student_id: str):
        subject = records.add_subject(actor, student_id, payload().get("name", ""))
        return ok(as_payload(subject), 201)

    @app.route("/teacher/students/<student_id>/subjects/<label>", methods=["DELETE"], endpoint="delete_subject")
    @role_required(Role.TEACHER)
    def delete_subject(actor, student_id: str, label: str):
        records.delete_subject(actor, student_id, label)
        return ok()

    @app.route("/teacher/students/<student_id>/attendance/<date>", methods=["PUT"], endpoint="mark_attendance")
    @role_required(Role.TEACHER)
    def mark_attendance(actor, student_id: str, date: str):
        record = records.mark_attendance(actor, student_id, date=date, status=payload().get("status"))
        return ok(as_payload(record))

    @app.route("/teacher/students/<student_id>/attendance/<date>", methods=["DELETE"], endpoint="delete_attendance")
    @role_required(Role.TEACHER)
    def delete_attendance(actor, student_id: str, date: str):
        records.delete_attendance(actor, student_id, date)
        return ok()

    @app.route("/teacher/students/<student_id>/grades", methods=["POST"], endpoint="record_grade")
    @role_required(Role.TEACHER)
    def record_grade(actor, student_id: str):
        data = payload()
        record = records.record_grade(
            actor,
            student_id,
            subject=data.get("subject", ""),
            grade=data.get("grade"),
            date=data.get("date", ""),
        )
        return ok(as_payload(record), 201)

    @app.route("/teacher/students/<student_id>/grades/<subject>/<date>", methods=["DELETE"], endpoint="delete_grade")
    @role_required(Role.TEACHER)
    def delete_grade(actor, student_id: str, subject: str, date: str):
        records.delete_grade(actor, student_id, subject=subject, date=date)
        return ok()
