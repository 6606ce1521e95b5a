from __future__ import annotations

import logging
from typing import Optional, Sequence

from .auth import Authenticator
from .errors import AmbiguousResultError, NotFoundError
from .models import (
    COMPUTERS_FILTER,
    ENABLED_USERS_FILTER,
    AuthResult,
    AuthStatus,
    ClientConfig,
    DirectoryEntry,
    Record,
)
from .normalize import normalize
from .query import DirectoryQuery
from .session import Session
from .utils import render_filter

log = logging.getLogger(__name__)


class ADClient:
    """Active Directory client over a single lazily opened LDAP connection.

    Every operation (re)connects when needed, binds as the service identity,
    searches and returns normalized records. Call ``close()`` when done, or
    use the client as a context manager.
    """

    def __init__(self, cfg: ClientConfig) -> None:
        self.cfg = cfg
        self.session = Session(cfg)
        self.authenticator = Authenticator(cfg, self.session)
        self.query = DirectoryQuery(cfg, self.session)

    def __enter__(self) -> "ADClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def connect(self) -> None:
        self.session.ensure_connected()

    def close(self) -> None:
        self.session.close()

    def _search(
        self,
        search_filter: str,
        base_dn: Optional[str] = None,
        attributes: Optional[Sequence[str]] = None,
    ) -> list[DirectoryEntry]:
        self.session.ensure_connected()
        self.authenticator.bind_service()
        return self.query.search(base_dn or self.cfg.base_dn, search_filter, attributes)

    def _find_one(self, username: str) -> DirectoryEntry:
        flt = render_filter(self.cfg.user_filter, username)
        entries = self._search(flt)
        if len(entries) < 1:
            raise NotFoundError(f"user {username} does not exist")
        if len(entries) > 1:
            raise AmbiguousResultError(f"too many entries returned for {username}: {len(entries)}")
        return entries[0]

    def fetch_all(
        self,
        search_filter: str = "",
        base_dn: Optional[str] = None,
        attributes: Optional[Sequence[str]] = None,
    ) -> list[Record]:
        """All entries matching ``search_filter`` (enabled users when empty)."""
        entries = self._search(search_filter or ENABLED_USERS_FILTER, base_dn, attributes)
        return [normalize(e) for e in entries]

    def get_all_users(self, base_dn: Optional[str] = None) -> list[Record]:
        return self.fetch_all(ENABLED_USERS_FILTER, base_dn)

    def get_all_computers(self, base_dn: Optional[str] = None) -> list[Record]:
        return self.fetch_all(COMPUTERS_FILTER, base_dn)

    def get_group_members(self, group: str) -> list[Record]:
        return self.fetch_all(render_filter(self.cfg.group_filter, group))

    def get_user_info(self, username: str) -> Record:
        """Exactly one entry matching the user filter.

        Raises NotFoundError for no match and AmbiguousResultError for more
        than one.
        """
        return normalize(self._find_one(username))

    def authenticate(self, username: str, password: str) -> AuthResult:
        try:
            entry = self._find_one(username)
        except NotFoundError:
            log.debug("Authentication for %s: no such user", username)
            return AuthResult(status=AuthStatus.NOT_FOUND)

        result = self.authenticator.verify_credential(entry.dn, password)
        result.record = normalize(entry)
        return result
