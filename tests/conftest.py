from __future__ import annotations

import pytest

from student_records.container import build_container
from student_records.core.enums import Role
from student_records.records.model import Principal, StudentProfile
from student_records.store.memory import InMemoryDocumentStore


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def container(store):
    return build_container(backend="memory", store=store)


@pytest.fixture
def teacher():
    return Principal(principal_id="t1", role=Role.TEACHER, name="Teacher", email="t@example.com")


@pytest.fixture
def student():
    return Principal(principal_id="s1", role=Role.STUDENT, name="Ada", email="ada@example.com")


@pytest.fixture
def student_profile(container, teacher, student):
    profile = StudentProfile(student_id=student.principal_id, name=student.name, class_name="7B", email=student.email)
    container.records_repo.save_profile(teacher, profile)
    return profile
