"""Error kinds raised by the proxy core and translated by the API layer."""

from __future__ import annotations

from typing import Any


class ValidationError(Exception):
    """Bad or missing caller input. Maps to HTTP 400 and is never retried."""


class UpstreamAuthError(Exception):
    """Raised when the OAuth client-credentials exchange fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class UpstreamSearchError(Exception):
    """Raised when a search cannot be served by the upstream Browse API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
        kind: str = "search_error",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
        self.kind = kind

    @property
    def http_status(self) -> int:
        return self.status_code or 500
