from __future__ import annotations

import logging
from typing import MutableMapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.exceptions import AuthFailure
from .credentials import CredentialStore

logger = logging.getLogger(__name__)

SESSION_KEY = "principal_id"


class AuthProvider:
    """Email/password authentication.

    The signed-in principal id is kept in ``session`` (Flask's session in the
    web layer, a plain dict elsewhere).
    """

    def __init__(self, credentials: CredentialStore, session: MutableMapping):
        self._credentials = credentials
        self._session = session

    def sign_in(self, email: str, password: str) -> str:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthFailure("Invalid email or password")
        credential = self._credentials.get_by_email(email)
        if not credential:
            raise AuthFailure("Invalid email or password")

        try:
            ok = check_password_hash(credential.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthFailure("Invalid email or password")

        self._session[SESSION_KEY] = credential.principal_id
        return credential.principal_id

    def sign_out(self) -> None:
        self._session.pop(SESSION_KEY, None)

    def current_principal(self) -> Optional[str]:
        return self._session.get(SESSION_KEY)

    def register(self, email: str, password: str) -> str:
        """Create a credential without signing in; returns the new principal id."""
        email = require_non_empty(email, "Email")
        require_min_length(password, "Password", 6)
        principal_id = self._credentials.create(email=email, password_hash=generate_password_hash(password))
        logger.info("Registered credential for principal %s", principal_id)
        return principal_id
