# common/log_calls.py
import inspect
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from ..src.logging import jlog
from .sanitize import sanitize_value

SKIP_ARGS = {"client"}

def _bind_args(func: Callable, *args, **kwargs) -> Dict[str, Any]:
    sig = inspect.signature(func)
    bound = sig.bind_partial(*args, **kwargs)
    bound.apply_defaults()
    return {k: v for k, v in bound.arguments.items() if k not in SKIP_ARGS}

def log_calls(name: Optional[str] = None):
    """
    Structured call logger for async tool handlers.
    - Logs start/end/error with sanitized args and duration_ms.
    """
    def decorator(func: Callable):
        func_name = name or func.__name__

        @wraps(func)
        async def wrapper(*args, **kwargs):
            start = time.time()
            san_args = {k: sanitize_value(k, v) for k, v in _bind_args(func, *args, **kwargs).items()}
            jlog(event="call_start", fn=func_name, args=san_args)

            try:
                result = await func(*args, **kwargs)
                dur = int((time.time() - start) * 1000)
                jlog(event="call_end", fn=func_name, duration_ms=dur,
                     ret=sanitize_value("return", result))
                return result
            except Exception as e:
                dur = int((time.time() - start) * 1000)
                jlog(event="call_error", fn=func_name, duration_ms=dur, error=str(e), severity="ERROR")
                raise

        return wrapper
    return decorator
