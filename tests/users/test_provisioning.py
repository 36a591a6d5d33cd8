from __future__ import annotations

import pytest

from student_records.core.enums import Role
from student_records.core.exceptions import AuthFailure, OrphanedCredential, PermissionDenied, ValidationError


def test_create_student_writes_user_and_profile(container, teacher):
    created = container.provisioning_service.create_student(
        container.auth_for({}), teacher, name="Ada", email="ada@example.com", password="secret1", class_name=" 7B "
    )
    sid = created.profile.student_id

    assert container.principals_repo.get_by_id(sid).role == Role.STUDENT
    profile = container.records_repo.scope(teacher, sid).get_profile()
    assert (profile.name, profile.class_name, profile.email) == ("Ada", "7B", "ada@example.com")

    gate = container.gate_for({})
    assert gate.sign_in("ada@example.com", "secret1", "student").principal_id == sid


def test_duplicate_email_is_an_auth_failure(container, teacher):
    svc = container.provisioning_service
    svc.create_student(container.auth_for({}), teacher, name="Ada", email="ada@example.com", password="secret1")

    with pytest.raises(AuthFailure):
        svc.create_student(container.auth_for({}), teacher, name="Ada 2", email="ADA@example.com", password="secret2")


def test_only_teachers_create_students(container, student):
    with pytest.raises(PermissionDenied):
        container.provisioning_service.create_student(
            container.auth_for({}), student, name="Bob", email="bob@example.com", password="secret1"
        )


@pytest.mark.parametrize(
    "name,email,password",
    [
        ("", "a@example.com", "secret1"),
        ("Ada", "", "secret1"),
        ("Ada", "a@example.com", "123"),
        ("Ada", "a@example.com", 1234567),
        ("Ada", 42, "secret1"),
    ],
)
def test_required_fields(container, teacher, name, email, password):
    with pytest.raises(ValidationError):
        container.provisioning_service.create_student(
            container.auth_for({}), teacher, name=name, email=email, password=password
        )


def test_credential_without_documents_is_orphaned(container):
    container.auth_for({}).register("lost@example.com", "secret1")

    with pytest.raises(OrphanedCredential):
        container.gate_for({}).sign_in("lost@example.com", "secret1", "student")


def test_class_name_must_be_text(container, teacher):
    with pytest.raises(ValidationError):
        container.provisioning_service.create_student(
            container.auth_for({}), teacher, name="Ada", email="ada@example.com", password="secret1", class_name=7
        )
    assert container.credentials.get_by_email("ada@example.com") is None
