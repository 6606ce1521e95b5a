from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .errors import ADClientError


DEFAULT_USER_FILTER = "(userPrincipalName=%s)"
DEFAULT_GROUP_FILTER = "(memberOf=%s)"

# Enabled accounts of people, excluding computers and groups.
ENABLED_USERS_FILTER = (
    "(&(|(objectClass=user)(objectClass=person))"
    "(!(userAccountControl:1.2.840.113556.1.4.803:=2))"
    "(!(objectClass=computer))(!(objectClass=group)))"
)
COMPUTERS_FILTER = "(objectClass=computer)"

MULTI_VALUED_ATTRIBUTES = frozenset({"memberOf", "url", "otherTelephone", "proxyAddresses"})

Record = Dict[str, Union[str, List[str]]]


@dataclass(frozen=True)
class ClientConfig:
    host: str
    base_dn: str
    port: int = 389
    bind_dn: str = ""
    bind_password: str = field(default="", repr=False)
    user_filter: str = DEFAULT_USER_FILTER
    group_filter: str = DEFAULT_GROUP_FILTER
    attributes: Tuple[str, ...] = ()
    use_ssl: bool = False
    skip_tls: bool = False
    insecure_skip_verify: bool = False
    server_name: str = ""
    client_cert_file: str = ""
    client_key_file: str = ""
    ca_certs_file: str = ""
    connect_timeout: Optional[float] = None
    page_size: int = 500

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def has_service_identity(self) -> bool:
        return bool(self.bind_dn) and bool(self.bind_password)


@dataclass
class DirectoryEntry:
    dn: str
    attributes: Dict[str, List[str]] = field(default_factory=dict)


class AuthStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIAL = "invalid_credential"


@dataclass
class AuthResult:
    """Outcome of a credential check.

    ``record`` is filled for SUCCESS and INVALID_CREDENTIAL, so callers can tell
    who failed without another lookup. ``rebind_error`` is set when the
    connection could not be returned to the service identity afterwards.
    """
    status: AuthStatus
    record: Optional[Record] = None
    rebind_error: Optional[ADClientError] = None

    @property
    def success(self) -> bool:
        return self.status is AuthStatus.SUCCESS
