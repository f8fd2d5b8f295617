import json
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    TLS_HANDSHAKE = "tls_handshake"
    CONNECTION_RESET = "connection_reset"
    NETWORK = "network"
    HTTP_STATUS = "http_status"


TRANSIENT_KINDS = frozenset({
    ErrorKind.TIMEOUT,
    ErrorKind.TLS_HANDSHAKE,
    ErrorKind.CONNECTION_RESET,
    ErrorKind.NETWORK,
})


class DAAdminError(Exception):
    pass

class TransportError(DAAdminError):
    """The request never produced a response: timeout, TLS, reset, unreachable host."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def transient(self) -> bool:
        return self.kind in TRANSIENT_KINDS

class HTTPStatusError(DAAdminError):
    """The remote answered with a non-2xx status. Never retried."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status_code: int, body: Any = None, url: Optional[str] = None):
        text = body if isinstance(body, str) else _dump(body)
        super().__init__(f"{status_code}: {text}")
        self.status_code = status_code
        self.body = body
        self.url = url

class AssetReadError(DAAdminError):
    """Local asset could not be read."""
    pass

class AssetUploadError(DAAdminError):
    """Upload step of the publish workflow failed; preview/publish were not attempted."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _dump(body: Any) -> str:
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return str(body)
