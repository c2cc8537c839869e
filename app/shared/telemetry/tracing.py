"""Span helpers for service-level tracing."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Only these kwarg names are copied onto spans; everything else (titles,
# note content, file bytes) stays out of trace backends.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "case_id", "owner_id", "note_id", "section", "status", "page",
    "page_size", "ref",
})


def _record_kwargs(span: trace.Span, kwargs: dict[str, Any]) -> None:
    for key, value in kwargs.items():
        if key in _SAFE_SPAN_ATTR_KEYS and value is not None:
            span.set_attribute(f"arg.{key}", str(getattr(value, "value", value)))


def _mark_error(span: trace.Span, exc: BaseException) -> None:
    span.set_status(Status(StatusCode.ERROR, str(exc)))
    span.record_exception(exc)


def traced(operation_name: str | None = None) -> Callable:
    """Wrap a function (sync or async) in a span.

    The span is named ``operation_name`` or ``module.qualname``; allowlisted
    keyword arguments become ``arg.*`` attributes and exceptions mark the
    span as failed before propagating.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(func.__module__)
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _record_kwargs(span, kwargs)
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    _mark_error(span, exc)
                    raise

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _record_kwargs(span, kwargs)
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    _mark_error(span, exc)
                    raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span when one is recording."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
