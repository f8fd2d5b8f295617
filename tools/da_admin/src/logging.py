import json
import logging
import os
import time

from opentelemetry import trace

from ..common.context import get_correlation_id

SERVICE_NAME = os.getenv("SERVICE_NAME", "da-admin-mcp")
ENV = os.getenv("ENVIRONMENT", "local")

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
_logger = logging.getLogger(SERVICE_NAME)

def _trace_ids():
    ctx = trace.get_current_span().get_span_context()
    if not ctx or not ctx.is_valid:
        return None, None
    return f"{ctx.trace_id:032x}", f"{ctx.span_id:016x}"

def jlog(event: str = "", severity: str = "INFO", **fields):
    """
    Emit one JSON log line.

    Every line carries the service, environment, current trace/span ids and the
    correlation id of the tool call being served (explicit fields win).
    """
    trace_id, span_id = _trace_ids()
    record = {
        "event": event,
        "severity": severity,
        "service": SERVICE_NAME,
        "env": ENV,
        "ts": time.time(),
        "trace_id": trace_id,
        "span_id": span_id,
        "correlation_id": get_correlation_id(),
    }
    record.update(fields)
    _logger.log(getattr(logging, severity, logging.INFO), json.dumps(record, ensure_ascii=False, default=str))
