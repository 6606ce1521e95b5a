from __future__ import annotations

import logging

from ldap3 import SIMPLE
from ldap3.core.exceptions import LDAPException

from .errors import ADConnectionError, BindError
from .models import AuthResult, AuthStatus, ClientConfig
from .session import Session

log = logging.getLogger(__name__)


class Authenticator:
    """Bind operations on the session's live connection."""

    def __init__(self, cfg: ClientConfig, session: Session) -> None:
        self.cfg = cfg
        self.session = session

    def _bind(self, user: str, password: str) -> tuple[bool, dict]:
        conn = self.session.connection
        try:
            ok = bool(conn.rebind(user=user, password=password, authentication=SIMPLE))
        except LDAPException as e:
            raise ADConnectionError(f"bind as {user} failed: {e}") from e
        return ok, dict(conn.result or {})

    def bind_service(self) -> None:
        """Bind as the service identity; no-op (anonymous access) when none is set."""
        if not self.cfg.has_service_identity:
            return
        ok, res = self._bind(self.cfg.bind_dn, self.cfg.bind_password)
        if not ok:
            raise BindError(
                f"service bind as {self.cfg.bind_dn} rejected: {res.get('description', 'unknown error')}",
                code=res.get("result"),
            )
        log.debug("Bound as service identity %s", self.cfg.bind_dn)

    def verify_credential(self, user_dn: str, password: str) -> AuthResult:
        """Check ``password`` by binding as ``user_dn``.

        The connection is rebound to the service identity afterwards whatever
        the outcome. A failed rebind is reported in ``rebind_error`` next to
        the verification outcome instead of replacing it.
        """
        if not password:
            # An empty password is an unauthenticated bind and always "succeeds".
            status = AuthStatus.INVALID_CREDENTIAL
        else:
            ok, res = self._bind(user_dn, password)
            status = AuthStatus.SUCCESS if ok else AuthStatus.INVALID_CREDENTIAL
            log.debug("Bind as %s: %s (%s)", user_dn, status.value, res.get("description", ""))

        result = AuthResult(status=status)
        if self.cfg.has_service_identity:
            try:
                self.bind_service()
            except (BindError, ADConnectionError) as e:
                result.rebind_error = e
        return result
