"""Request context for correlating log records with a single tool call.

Each tool invocation runs inside :func:`request_context`, which sets the
context variables read by :class:`runrunit_mcp.core.logging_config.ContextFilter`.

Usage:
    from runrunit_mcp.core.context import request_context, get_correlation_id

    with request_context(tool_name="get_task") as ctx:
        print(ctx.correlation_id)  # e.g., "tool_a1b2c3d4e5f6"
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Generator, Optional

__all__ = [
    "correlation_id_var",
    "tool_name_var",
    "start_time_var",
    "RequestContext",
    "generate_correlation_id",
    "request_context",
    "get_correlation_id",
    "get_tool_name",
    "get_start_time",
]

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
"""Correlation ID for the tool call currently being handled."""

tool_name_var: ContextVar[str] = ContextVar("tool_name", default="")
"""Name of the tool currently being handled."""

start_time_var: ContextVar[float] = ContextVar("start_time", default=0.0)
"""Call start time as Unix timestamp."""


def generate_correlation_id(prefix: str = "req") -> str:
    """Generate a unique correlation ID with optional prefix.

    Format: {prefix}_{12_hex_chars}
    Example: "req_a1b2c3d4e5f6"
    """
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass
class RequestContext:
    """Snapshot of the current call context."""

    correlation_id: str = ""
    tool_name: str = ""
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed_ms(self) -> float:
        return round((time.time() - self.start_time) * 1000, 2)


@contextmanager
def request_context(
    *,
    correlation_id: Optional[str] = None,
    tool_name: Optional[str] = None,
) -> Generator[RequestContext, None, None]:
    """Set context variables for the duration of the with block.

    contextvars propagate into coroutines awaited inside the block, so the
    same manager serves async handlers.

    Args:
        correlation_id: Call ID (auto-generated if None)
        tool_name: Name of the tool being invoked

    Yields:
        RequestContext snapshot
    """
    corr_id = correlation_id or generate_correlation_id(prefix="tool")
    name = tool_name or ""
    start = time.time()

    token_corr = correlation_id_var.set(corr_id)
    token_tool = tool_name_var.set(name)
    token_start = start_time_var.set(start)

    try:
        yield RequestContext(correlation_id=corr_id, tool_name=name, start_time=start)
    finally:
        correlation_id_var.reset(token_corr)
        tool_name_var.reset(token_tool)
        start_time_var.reset(token_start)


def get_correlation_id() -> str:
    """Current correlation ID, or empty string outside a call."""
    return correlation_id_var.get()


def get_tool_name() -> str:
    return tool_name_var.get()


def get_start_time() -> float:
    return start_time_var.get()
