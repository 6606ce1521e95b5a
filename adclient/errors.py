from __future__ import annotations

from typing import Optional


class ADClientError(Exception):
    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ADConnectionError(ADClientError):
    """Network or TLS negotiation failure; the session must be re-established."""


class BindError(ADClientError):
    """The server rejected a service bind."""


class QueryError(ADClientError):
    """The server rejected a search (bad base DN, malformed filter, ...)."""


class NotFoundError(ADClientError):
    pass


class AmbiguousResultError(ADClientError):
    pass


class FilterTemplateError(ADClientError, ValueError):
    """A configured filter template has no ``%s`` slot."""
