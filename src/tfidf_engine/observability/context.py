"""Per-context trace ids shared by log records and spans."""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from opentelemetry.trace import Span

trace_context: ContextVar[dict | None] = ContextVar("tfidf_trace_context", default=None)


def get_trace_context() -> dict:
    """Return the active ``trace_id``/``span_id`` pair, minting one if unset."""
    ctx = trace_context.get()
    if not ctx or not ctx.get("trace_id"):
        ctx = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def bind_span(span: Span) -> None:
    """Point the log context at ``span``; invalid (no-op) spans are ignored."""
    span_ctx = span.get_span_context()
    if not span_ctx.is_valid:
        return
    trace_context.set(
        {
            **get_trace_context(),
            "trace_id": format(span_ctx.trace_id, "032x"),
            "span_id": format(span_ctx.span_id, "016x"),
        }
    )
