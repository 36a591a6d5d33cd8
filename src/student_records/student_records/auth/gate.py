from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.constants import ROLE_DESTINATIONS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, OrphanedCredential, RoleMismatch, StoreError, ValidationError
from ..records.model import Principal
from ..users.repository import PrincipalRepository
from .provider import AuthProvider

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Unknown role {value!r}; expected 'student' or 'teacher'") from None


@dataclass
class AccessGate:
    """Per-session sign-in gate.

    ``Unauthenticated -> Authenticated(principal)`` only when the provider
    accepts the credential *and* the stored role equals the requested one.
    Otherwise the provider session is signed out again and the failure raised.
    """

    auth: AuthProvider
    principals: PrincipalRepository
    principal: Optional[Principal] = None

    @property
    def state(self) -> GateState:
        return GateState.AUTHENTICATED if self.principal else GateState.UNAUTHENTICATED

    def sign_in(self, email: str, password: str, requested_role) -> Principal:
        role = parse_role(requested_role)
        self.sign_out()
        principal_id = self.auth.sign_in(email, password)
        return self._admit(principal_id, role)

    def restore(self, requested_role) -> Optional[Principal]:
        """Re-admit the principal the provider still holds a session for, if any."""
        role = parse_role(requested_role)
        principal_id = self.auth.current_principal()
        if not principal_id:
            self.principal = None
            return None
        return self._admit(principal_id, role)

    def sign_out(self) -> None:
        self.auth.sign_out()
        self.principal = None

    def destination(self) -> str:
        if not self.principal:
            raise AuthorizationError("Not signed in")
        return ROLE_DESTINATIONS[self.principal.role.value]

    def _admit(self, principal_id: str, role: Role) -> Principal:
        try:
            principal = self.principals.get_by_id(principal_id)
        except (StoreError, ValidationError) as exc:
            self.sign_out()
            logger.warning("Could not load principal %s: %s", principal_id, exc)
            raise

        if principal is None:
            self.sign_out()
            logger.warning("Credential %s has no user document", principal_id)
            raise OrphanedCredential("User not found")

        if principal.role != role:
            self.sign_out()
            logger.info("Principal %s (%s) refused at %s sign-in", principal_id, principal.role.value, role.value)
            raise RoleMismatch("Wrong role selected")

        self.principal = principal
        logger.info("Principal %s signed in as %s", principal_id, role.value)
        return principal
