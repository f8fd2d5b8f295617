import contextvars
import uuid
from typing import Optional

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)

def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    cid = correlation_id or uuid.uuid4().hex
    _correlation_id.set(cid)
    return cid

def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()
