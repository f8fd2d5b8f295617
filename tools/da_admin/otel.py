# otel.py
import os
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.starlette import StarletteInstrumentor

# console | gcp | none
TRACE_EXPORTER = os.getenv("TRACE_EXPORTER", "none").lower()

def _exporter():
    if TRACE_EXPORTER == "gcp":
        # pip install da-admin-mcp[gcp]
        from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter
        return CloudTraceSpanExporter()
    if TRACE_EXPORTER == "console":
        return ConsoleSpanExporter()
    return None

def init_tracing(app, service_name: str, service_version: str = "v1"):
    """Install a tracer provider and instrument the SSE app plus outbound httpx calls."""
    provider = TracerProvider(resource=Resource.create({
        "service.name": service_name,
        "service.version": service_version,
        "deployment.environment": os.getenv("ENVIRONMENT", "dev"),
    }))
    exporter = _exporter()
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    StarletteInstrumentor.instrument_app(app)
    HTTPXClientInstrumentor().instrument()

    return trace.get_tracer(service_name)
