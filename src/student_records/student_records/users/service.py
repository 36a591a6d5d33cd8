from __future__ import annotations

import logging
from dataclasses import dataclass

from ..auth.provider import AuthProvider
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import PermissionDenied, StoreError
from ..records.model import Principal, StudentProfile
from ..records.repository import RecordStore
from .repository import PrincipalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionedStudent:
    principal: Principal
    profile: StudentProfile


class ProvisioningService:
    """Use case: a teacher creates a student account (credential + user doc + profile)."""

    def __init__(self, principals: PrincipalRepository, records: RecordStore):
        self._principals = principals
        self._records = records

    def create_student(
        self,
        auth: AuthProvider,
        actor: Principal,
        *,
        name: str,
        email: str,
        password: str,
        class_name: str = "",
    ) -> ProvisionedStudent:
        if actor.role != Role.TEACHER:
            raise PermissionDenied("Only teachers can create student accounts")

        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email")
        class_name = optional_text(class_name, "Class")
        principal_id = auth.register(email, password)

        principal = Principal(principal_id=principal_id, role=Role.STUDENT, name=name, email=email)
        profile = StudentProfile(
            student_id=principal_id,
            name=name,
            class_name=class_name,
            email=email,
        )
        try:
            self._principals.save(principal)
            self._records.save_profile(actor, profile)
        except StoreError:
            # The credential exists now; signing in with it reports an orphaned credential
            # until the documents are written.
            logger.exception("Provisioning documents for principal %s failed", principal_id)
            raise

        logger.info("Provisioned student %s", principal_id)
        return ProvisionedStudent(principal=principal, profile=profile)

    def create_teacher(self, auth: AuthProvider, *, name: str, email: str, password: str) -> Principal:
        """Used by the seed script; teachers have no profile document."""
        name = require_non_empty(name, "Name")
        principal_id = auth.register(email, password)
        principal = Principal(principal_id=principal_id, role=Role.TEACHER, name=name, email=email.strip())
        self._principals.save(principal)
        return principal
