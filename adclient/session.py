from __future__ import annotations

import logging
import ssl
from typing import Any, Optional

from ldap3 import Server, Connection, Tls, NONE
from ldap3.core.exceptions import LDAPException

from .errors import ADConnectionError
from .models import ClientConfig

log = logging.getLogger(__name__)


class Session:
    """Single owned connection to the directory server.

    The handle is either absent or connected. ``ensure_connected`` replaces a
    handle that ldap3 reports as closed; ``close`` drops it. Not thread-safe:
    one session per caller, or serialize access.

    Certificates are verified for StartTLS as well as LDAPS. Set
    ``insecure_skip_verify`` to talk StartTLS to a DC with a self-signed
    certificate.
    """

    def __init__(self, cfg: ClientConfig) -> None:
        self.cfg = cfg
        self._conn: Optional[Connection] = None

    def _tls(self) -> Tls:
        tls_kwargs: dict[str, Any] = {
            "validate": ssl.CERT_NONE if self.cfg.insecure_skip_verify else ssl.CERT_REQUIRED,
        }
        if self.cfg.server_name:
            tls_kwargs["valid_names"] = [self.cfg.server_name]
            tls_kwargs["sni"] = self.cfg.server_name
        if self.cfg.ca_certs_file:
            tls_kwargs["ca_certs_file"] = self.cfg.ca_certs_file
        if self.cfg.client_cert_file:
            tls_kwargs["local_certificate_file"] = self.cfg.client_cert_file
            # Key may live in the same PEM as the certificate.
            tls_kwargs["local_private_key_file"] = self.cfg.client_key_file or None
        return Tls(**tls_kwargs)

    def _server(self) -> Server:
        return Server(
            host=self.cfg.host,
            port=self.cfg.port,
            use_ssl=self.cfg.use_ssl,
            get_info=NONE,
            tls=self._tls(),
            connect_timeout=self.cfg.connect_timeout,
        )

    @property
    def connected(self) -> bool:
        return self._conn is not None and not self._conn.closed

    @property
    def connection(self) -> Connection:
        if not self.connected:
            raise ADConnectionError(f"not connected to {self.cfg.address}")
        return self._conn

    def ensure_connected(self) -> Connection:
        if self.connected:
            return self._conn

        # A closed handle is discarded before dialing again.
        self._conn = None
        conn: Optional[Connection] = None
        try:
            # Tls validates certificate files here, before any network I/O.
            conn = Connection(self._server(), auto_bind=False)
            conn.open()
            if self.cfg.use_ssl:
                log.debug("Connected to %s over LDAPS", self.cfg.address)
            elif self.cfg.skip_tls:
                log.debug("Connected to %s without TLS", self.cfg.address)
            else:
                if not conn.start_tls():
                    res = dict(conn.result or {})
                    raise ADConnectionError(
                        f"StartTLS refused by {self.cfg.address}: {res.get('description', 'unknown error')}",
                        code=res.get("result"),
                    )
                log.debug("Connected to %s with StartTLS", self.cfg.address)
        except LDAPException as e:
            if conn is not None:
                self._discard(conn)
            raise ADConnectionError(f"cannot connect to {self.cfg.address}: {e}") from e
        except ADConnectionError:
            self._discard(conn)
            raise

        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        self._discard(conn)
        log.debug("Closed connection to %s", self.cfg.address)

    @staticmethod
    def _discard(conn: Connection) -> None:
        try:
            conn.unbind()
        except LDAPException as e:
            log.debug("unbind failed: %s", e)
