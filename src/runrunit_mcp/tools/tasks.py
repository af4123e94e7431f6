"""Task tools: get_task, get_task_details and list_tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping

from runrunit_mcp.core.client import RunrunitClient
from runrunit_mcp.core.errors import ToolValidationError
from runrunit_mcp.core.responses import exception_message
from runrunit_mcp.core.shaping import simplify_task
from runrunit_mcp.tools.registry import ToolDefinition, ToolRegistry, object_schema

logger = logging.getLogger(__name__)

DESCRIPTION_UNAVAILABLE = "Description unavailable"

_TASK_ID_PROPERTY = {
    "type": "number",
    "description": "The ID of the task to retrieve",
}


def coerce_task_id(value: Any) -> int:
    """Normalize a task id argument to int.

    Accepts ints, integral floats and digit strings.

    Raises:
        ToolValidationError: If the value is not a whole number
    """
    if isinstance(value, bool):
        raise ToolValidationError("Parameter 'id' must be a number", parameter="id")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ToolValidationError("Parameter 'id' must be a number", parameter="id")


def flag_argument(arguments: Mapping[str, Any], name: str, default: bool) -> bool:
    """Read an optional boolean argument; null means the default.

    Raises:
        ToolValidationError: If the value is present but not a boolean
    """
    value = arguments.get(name)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ToolValidationError(
            f"Parameter '{name}' must be a boolean", parameter=name
        )
    return value


def stringify_query_value(value: Any) -> str:
    """Render an argument the way it should appear in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_list_params(arguments: Mapping[str, Any]) -> Dict[str, str]:
    """Query parameters from every provided, non-null argument."""
    return {
        key: stringify_query_value(value)
        for key, value in arguments.items()
        if value is not None
    }


async def fetch_task_with_description(
    client: RunrunitClient, task_id: int
) -> Dict[str, Any]:
    """Fetch a task and its long-form description concurrently.

    A failed description fetch falls back to a placeholder; a failed task
    fetch is raised.
    """
    task, description = await asyncio.gather(
        client.get_task(task_id),
        client.get_task_description(task_id),
        return_exceptions=True,
    )
    if isinstance(task, BaseException):
        raise task
    if not isinstance(task, Mapping):
        raise ValueError(f"Unexpected payload for task {task_id}")

    merged = dict(task)
    if isinstance(description, BaseException):
        logger.warning(
            "Description fetch failed for task %s: %s",
            task_id,
            exception_message(description),
        )
        merged["description"] = DESCRIPTION_UNAVAILABLE
    elif isinstance(description, Mapping) and description.get("description"):
        merged["description"] = description["description"]
    return merged


def build_task_tools(client: RunrunitClient) -> List[ToolDefinition]:
    """Create the task tool definitions bound to a client."""

    async def get_task(arguments: Dict[str, Any]) -> Dict[str, Any]:
        task_id = coerce_task_id(arguments["id"])
        if flag_argument(arguments, "include_description", True):
            task = await fetch_task_with_description(client, task_id)
        else:
            task = await client.get_task(task_id)
            if not isinstance(task, Mapping):
                raise ValueError(f"Unexpected payload for task {task_id}")
        return simplify_task(task)

    async def get_task_details(arguments: Dict[str, Any]) -> Any:
        task_id = coerce_task_id(arguments["id"])
        return await client.get_task(task_id)

    async def list_tasks(arguments: Dict[str, Any]) -> List[Dict[str, Any]]:
        tasks = await client.list_tasks(build_list_params(arguments))
        if not isinstance(tasks, list):
            logger.debug("list_tasks received %s; using []", type(tasks).__name__)
            return []
        return [simplify_task(task) for task in tasks if isinstance(task, Mapping)]

    return [
        ToolDefinition(
            name="get_task",
            description=(
                "Get a simplified view of a specific task by its ID, "
                "including its description, status and hour totals"
            ),
            handler=get_task,
            input_schema=object_schema(
                {
                    "id": _TASK_ID_PROPERTY,
                    "include_description": {
                        "type": "boolean",
                        "description": "Fetch the long-form description (default: true)",
                    },
                },
                required=["id"],
            ),
        ),
        ToolDefinition(
            name="get_task_details",
            description="Get the raw, unmodified task record by its ID",
            handler=get_task_details,
            input_schema=object_schema({"id": _TASK_ID_PROPERTY}, required=["id"]),
        ),
        ToolDefinition(
            name="list_tasks",
            description="List tasks with optional filters",
            handler=list_tasks,
            input_schema=object_schema(
                {
                    "responsible_id": {
                        "type": "string",
                        "description": "ID of user responsible for the task",
                    },
                    "project_id": {
                        "type": "number",
                        "description": "ID of the project the task belongs to",
                    },
                    "is_closed": {
                        "type": "boolean",
                        "description": "Filter by closed status",
                    },
                    "limit": {
                        "type": "number",
                        "description": "Number of tasks to return (max 100)",
                    },
                }
            ),
        ),
    ]


def register_task_tools(registry: ToolRegistry, client: RunrunitClient) -> None:
    """Register the task tools."""
    for definition in build_task_tools(client):
        registry.register(definition)
