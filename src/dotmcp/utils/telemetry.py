"""OpenTelemetry tracing for dotmcp.

Modules trace through :func:`get_tracer`, which goes through the API only.
Until :func:`configure_telemetry` installs an SDK provider every span is a
no-op::

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("dotmcp.tool.call") as span:
        span.set_attribute(ATTR_TOOL_NAME, "wofi_apply")

``dotmcp serve --telemetry`` calls :func:`configure_telemetry`, which needs
the ``otel`` extra (``pip install dotmcp[otel]``).
"""

from __future__ import annotations

import sys

from opentelemetry import trace

# Span attribute keys
ATTR_SERVER = "dotmcp.server"
ATTR_RPC_METHOD = "dotmcp.rpc.method"
ATTR_RPC_ID = "dotmcp.rpc.id"
ATTR_RPC_NOTIFICATION = "dotmcp.rpc.notification"
ATTR_ERROR_CODE = "dotmcp.rpc.error_code"
ATTR_TOOL_NAME = "dotmcp.tool.name"
ATTR_MUTATION_PATH = "dotmcp.mutation.path"
ATTR_MUTATION_DRY_RUN = "dotmcp.mutation.dry_run"
ATTR_MUTATION_SUCCESS = "dotmcp.mutation.success"
ATTR_MUTATION_BACKUP = "dotmcp.mutation.backup_created"

_INSTRUMENTATION_NAME = "dotmcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(*, service_name: str = _INSTRUMENTATION_NAME) -> None:
    """Install an SDK tracer provider that prints finished spans to stderr.

    Stdout carries protocol lines only, so spans never go there.

    Raises:
        ImportError: ``opentelemetry-sdk`` is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = "opentelemetry-sdk is required for tracing. Install it with: pip install dotmcp[otel]"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    trace.set_tracer_provider(provider)
