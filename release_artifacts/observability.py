"""
Logging, tracing and pipeline events.

Pipeline stages report progress through emit_event(), which records the event
on the current span, logs it, and forwards it to an optional hook so callers
can observe the pipeline without parsing log output.
"""

import functools
import inspect
import logging
from enum import StrEnum
from typing import Any, Callable, Dict, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

SERVICE = "release-artifacts"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

tracer = trace.get_tracer(SERVICE)


class PipelineEvent(StrEnum):
    RUN_LOCATED = "run-located"
    RUN_WAITING = "run-waiting"
    RUN_COMPLETED = "run-completed"
    ARTIFACT_FETCHED = "artifact-fetched"
    ARTIFACT_STAGED = "artifact-staged"


EventHook = Callable[[PipelineEvent, Dict[str, Any]], None]


def setup_telemetry(log_level: str = "INFO", console_spans: bool = False) -> None:
    """
    Configure root logging and, optionally, console span export.

    Args:
        log_level: Root logger level name
        console_spans: Install an SDK tracer provider printing finished spans
    """
    logging.basicConfig(level=log_level, format=LOG_FORMAT, force=True)

    if console_spans:
        provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: SERVICE}))
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(provider)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


logger = get_logger(__name__)


def _span_value(value: Any) -> Any:
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


def emit_event(
    event: PipelineEvent,
    attributes: Optional[Dict[str, Any]] = None,
    hook: Optional[EventHook] = None,
) -> None:
    """
    Record a pipeline event on the current span, in the log, and on the hook.

    Args:
        event: Pipeline stage that was reached
        attributes: Event details (run id, artifact name, paths)
        hook: Optional observer called with (event, attributes)
    """
    attributes = attributes or {}

    current_span = trace.get_current_span()
    if current_span.is_recording():
        current_span.add_event(
            event.value,
            attributes={key: _span_value(value) for key, value in attributes.items()},
        )

    details = " ".join(f"{key}={value}" for key, value in attributes.items())
    logger.info(f"{event.value} {details}".rstrip())

    if hook is not None:
        hook(event, attributes)


def trace_span(func):
    """Decorator that wraps a sync or async function in a span named after it."""

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        with tracer.start_as_current_span(func.__qualname__):
            return func(*args, **kwargs)

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        with tracer.start_as_current_span(func.__qualname__):
            return await func(*args, **kwargs)

    # Return appropriate wrapper based on function type
    if inspect.iscoroutinefunction(func):
        return async_wrapper
    else:
        return sync_wrapper
