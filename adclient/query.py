from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ldap3 import SUBTREE, DEREF_NEVER, ALL_ATTRIBUTES
from ldap3.core.exceptions import LDAPException

from .errors import QueryError
from .models import ClientConfig, DirectoryEntry
from .session import Session

log = logging.getLogger(__name__)

PAGED_RESULTS_OID = "1.2.840.113556.1.4.319"


def _decode_attributes(raw: dict) -> dict[str, list[str]]:
    attrs: dict[str, list[str]] = {}
    for name, values in (raw or {}).items():
        try:
            attrs[name] = [v.decode("utf-8") if isinstance(v, bytes) else str(v) for v in values]
        except UnicodeDecodeError:
            # Binary attributes (objectGUID, objectSid, photos) are not text.
            continue
    return attrs


def _entries(response: Iterable[dict]) -> list[DirectoryEntry]:
    out: list[DirectoryEntry] = []
    for item in response or []:
        if item.get("type") != "searchResEntry":
            continue
        out.append(DirectoryEntry(dn=str(item.get("dn", "")), attributes=_decode_attributes(item.get("raw_attributes", {}))))
    return out


class DirectoryQuery:
    def __init__(self, cfg: ClientConfig, session: Session) -> None:
        self.cfg = cfg
        self.session = session

    def _requested(self, attributes: Optional[Sequence[str]]) -> list[str] | str:
        if attributes:
            return list(attributes)
        if self.cfg.attributes:
            return list(self.cfg.attributes)
        return ALL_ATTRIBUTES

    def search(
        self,
        base_dn: str,
        search_filter: str,
        attributes: Optional[Sequence[str]] = None,
    ) -> list[DirectoryEntry]:
        """Whole-subtree search, aliases never dereferenced, no size or time limit.

        Follows the paged results cookie when ``page_size`` is set, so large
        domains are not cut at the server's MaxPageSize.
        """
        conn = self.session.connection
        attrs = self._requested(attributes)
        paged_size = self.cfg.page_size if self.cfg.page_size > 0 else None

        entries: list[DirectoryEntry] = []
        cookie = None
        while True:
            try:
                conn.search(
                    search_base=base_dn,
                    search_filter=search_filter,
                    search_scope=SUBTREE,
                    dereference_aliases=DEREF_NEVER,
                    attributes=attrs,
                    size_limit=0,
                    time_limit=0,
                    paged_size=paged_size,
                    paged_cookie=cookie,
                )
            except LDAPException as e:
                raise QueryError(f"search {search_filter} under {base_dn} failed: {e}") from e

            res = dict(conn.result or {})
            if res.get("result", 0) != 0:
                raise QueryError(
                    f"search {search_filter} under {base_dn} failed: {res.get('description', 'unknown error')}",
                    code=res.get("result"),
                )
            entries.extend(_entries(conn.response))

            if not paged_size:
                break
            cookie = (
                (res.get("controls") or {}).get(PAGED_RESULTS_OID, {}).get("value", {}).get("cookie")
            )
            if not cookie:
                break

        log.debug("Search %s under %s returned %d entries", search_filter, base_dn, len(entries))
        return entries
