from __future__ import annotations

from flask import Flask, request, session

from ..common.web import fail, forget_principal, ok, payload, remember_principal, role_required
from ..container import Container
from ..core.enums import Role
from ..records.model import as_payload


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        requested_role = request.args.get("role") or payload().get("role")
        if not requested_role:
            return fail("Choose whether you sign in as a student or a teacher", 400)

        data = payload()
        gate = container.gate_for(session)
        principal = gate.sign_in(data.get("email", ""), data.get("password", ""), requested_role)
        remember_principal(principal)
        return ok({"id": principal.principal_id, "role": principal.role.value, "name": principal.name}, redirect=gate.destination())

    @app.route("/session", methods=["GET"], endpoint="session_restore")
    def session_restore():
        requested_role = request.args.get("role", "")
        gate = container.gate_for(session)
        principal = gate.restore(requested_role)
        if principal is None:
            forget_principal()
            return fail("Not signed in", 401)
        remember_principal(principal)
        return ok({"id": principal.principal_id, "role": principal.role.value, "name": principal.name}, redirect=gate.destination())

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.gate_for(session).sign_out()
        forget_principal()
        return ok(redirect="/")

    @app.route("/teacher/students", methods=["GET"], endpoint="teacher_students")
    @role_required(Role.TEACHER)
    def teacher_students(actor):
        students = container.record_service.list_students(actor)
        return ok([as_payload(s) for s in students])

    @app.route("/teacher/students", methods=["POST"], endpoint="teacher_create_student")
    @role_required(Role.TEACHER)
    def teacher_create_student(actor):
        data = payload()
        created = container.provisioning_service.create_student(
            container.auth_for(session),
            actor,
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            class_name=data.get("className", data.get("class", "")),
        )
        return ok(as_payload(created.profile), 201)
