"""Tool registry and dispatcher.

Tools are declared as ToolDefinition records and registered once at startup.
`ToolRegistry.dispatch` is the single error boundary for tool calls: every
outcome, including unknown tools, invalid arguments, upstream HTTP failures
and unexpected exceptions, comes back as a CallToolResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional

from mcp.types import CallToolResult, Tool

from runrunit_mcp.core.context import request_context
from runrunit_mcp.core.errors import (
    RunrunitAPIError,
    ToolValidationError,
    UnknownToolError,
)
from runrunit_mcp.core.responses import error_result, exception_message, success_result

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


def object_schema(
    properties: Optional[Dict[str, Dict[str, Any]]] = None,
    required: Iterable[str] = (),
) -> Dict[str, Any]:
    """Build a JSON-Schema object describing tool arguments."""
    schema: Dict[str, Any] = {"type": "object", "properties": dict(properties or {})}
    required = list(required)
    if required:
        schema["required"] = required
    return schema


@dataclass(frozen=True)
class ToolDefinition:
    """A callable tool: name, description, argument schema and handler.

    The handler receives the validated argument dict and returns any
    JSON-serializable payload; raising marks the call as failed.
    """

    name: str
    description: str
    handler: ToolHandler = field(compare=False, repr=False)
    input_schema: Dict[str, Any] = field(default_factory=object_schema)

    @property
    def required(self) -> List[str]:
        return list(self.input_schema.get("required", []))

    def to_mcp_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


def validate_required(definition: ToolDefinition, arguments: Mapping[str, Any]) -> None:
    """Reject calls whose required parameters are absent or falsy.

    Raises:
        ToolValidationError: Naming the first missing parameter
    """
    for param in definition.required:
        if not arguments.get(param):
            raise ToolValidationError(
                f"Missing required parameter: {param}", parameter=param
            )


class ToolRegistry:
    """Registry for tools. Provides lookup, listing and dispatch."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> None:
        """Register a tool. Raises ValueError if name already registered."""
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = definition
        logger.debug("Registered tool: %s", definition.name)

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[ToolDefinition]:
        """Return all tool definitions in registration order."""
        return list(self._tools.values())

    def to_mcp_tools(self) -> List[Tool]:
        return [definition.to_mcp_tool() for definition in self._tools.values()]

    async def dispatch(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> CallToolResult:
        """Route a call to its handler and wrap the outcome.

        Args:
            name: Tool name
            arguments: Call arguments (None is treated as empty)

        Returns:
            Success result with the pretty-printed payload, or an
            error-flagged result carrying the failure message
        """
        args: Dict[str, Any] = dict(arguments or {})

        with request_context(tool_name=name) as ctx:
            try:
                definition = self._tools.get(name)
                if definition is None:
                    raise UnknownToolError(name)
                validate_required(definition, args)
                payload = await definition.handler(args)
            except (ToolValidationError, UnknownToolError) as exc:
                logger.warning("Rejected tool call %s: %s", name, exc)
                return error_result(exception_message(exc))
            except RunrunitAPIError as exc:
                logger.warning(
                    "Tool %s failed with upstream status %s",
                    name,
                    exc.status_code,
                )
                return error_result(exception_message(exc))
            except Exception as exc:
                logger.exception("Unexpected error in tool %s", name)
                return error_result(exception_message(exc))

            logger.info(
                "Tool call completed: %s in %.2fms", name, ctx.elapsed_ms
            )
            return success_result(payload)
