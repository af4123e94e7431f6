"""
Result envelopes for MCP tool calls.

Every tool call produces exactly one CallToolResult:

    Success:  content=[TextContent(text=<JSON, indent=2>)], isError=False
    Failure:  content=[TextContent(text="Error: <message>")], isError=True

Failures are never raised to the transport; the client always receives a
well-formed result and distinguishes outcomes by `isError`.
"""

import json
from typing import Any

from mcp.types import CallToolResult, TextContent

ERROR_PREFIX = "Error: "


def to_json_text(data: Any) -> str:
    """Pretty-print data as JSON, keeping non-ASCII text readable."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def success_result(data: Any) -> CallToolResult:
    """Wrap a JSON-serializable payload as a successful tool result."""
    return CallToolResult(
        content=[TextContent(type="text", text=to_json_text(data))],
        isError=False,
    )


def error_result(message: str) -> CallToolResult:
    """Wrap an error message as an error-flagged tool result."""
    return CallToolResult(
        content=[TextContent(type="text", text=f"{ERROR_PREFIX}{message}")],
        isError=True,
    )


def exception_message(exc: BaseException) -> str:
    """Human-readable message for an exception, never empty."""
    message = str(exc)
    return message if message else type(exc).__name__


def result_text(result: CallToolResult) -> str:
    """Concatenate the text content blocks of a result."""
    return "".join(
        block.text for block in result.content if isinstance(block, TextContent)
    )
