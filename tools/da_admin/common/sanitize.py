# common/sanitize.py
import hashlib
from typing import Any

SAFE_KEYS = {
    "org", "repo", "path", "ext", "name", "url", "method",
    "file_path", "content_type",
}
SENSITIVE_KEYS = {
    "authorization", "token", "da_admin_api_token", "api_key", "password",
    "headers", "content", "body", "data",
}

def hash_preview(s: str, n: int = 12) -> str:
    if not isinstance(s, str):
        s = str(s)
    return f"sha256={hashlib.sha256(s.encode('utf-8')).hexdigest()[:n]},len={len(s)}"

def sanitize_value(key: str, value: Any) -> Any:
    k = (key or "").lower()
    if k in SAFE_KEYS:
        return value
    if k in SENSITIVE_KEYS:
        # Never log raw; return only hash/length
        return hash_preview(str(value))
    if hasattr(value, "model_dump"):
        # pydantic tool arguments / results
        return sanitize_value(key, value.model_dump())
    if isinstance(value, (bytes, bytearray)):
        return f"bytes:{len(value)}"
    if isinstance(value, str):
        return value if len(value) <= 120 else hash_preview(value)
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    if isinstance(value, dict):
        return {k: sanitize_value(k, v) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize_value("", v) for v in value]
    return str(value)
