"""User tools."""

from typing import Any, Dict, List

from runrunit_mcp.core.client import RunrunitClient
from runrunit_mcp.tools.registry import ToolDefinition, ToolRegistry


def build_user_tools(client: RunrunitClient) -> List[ToolDefinition]:
    async def get_me(arguments: Dict[str, Any]) -> Any:
        return await client.get_me()

    return [
        ToolDefinition(
            name="get_me",
            description="Get the profile of the user the credentials belong to",
            handler=get_me,
        ),
    ]


def register_user_tools(registry: ToolRegistry, client: RunrunitClient) -> None:
    for definition in build_user_tools(client):
        registry.register(definition)
