"""Active Directory (LDAP) client.

Public API:
    - ClientConfig
    - ADClient
    - AuthResult / AuthStatus
    - error classes
"""

from .models import (
    MULTI_VALUED_ATTRIBUTES,
    AuthResult,
    AuthStatus,
    ClientConfig,
    DirectoryEntry,
    Record,
)
from .errors import (
    ADClientError,
    ADConnectionError,
    AmbiguousResultError,
    BindError,
    FilterTemplateError,
    NotFoundError,
    QueryError,
)
from .client import ADClient
from .normalize import normalize

__all__ = [
    "ADClient",
    "ClientConfig",
    "DirectoryEntry",
    "Record",
    "AuthResult",
    "AuthStatus",
    "MULTI_VALUED_ATTRIBUTES",
    "normalize",
    "ADClientError",
    "ADConnectionError",
    "BindError",
    "QueryError",
    "FilterTemplateError",
    "NotFoundError",
    "AmbiguousResultError",
]
