"""MCP tool surface for Runrun.it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from runrunit_mcp.core.client import RunrunitClient
from runrunit_mcp.tools.environment import register_environment_tools
from runrunit_mcp.tools.registry import ToolDefinition, ToolRegistry
from runrunit_mcp.tools.tasks import register_task_tools
from runrunit_mcp.tools.users import register_user_tools

if TYPE_CHECKING:  # pragma: no cover - import-time typing only
    import httpx

    from runrunit_mcp.config import ServerConfig


def build_registry(
    config: "ServerConfig",
    *,
    transport: Optional["httpx.AsyncBaseTransport"] = None,
) -> ToolRegistry:
    """Validate credentials and register every tool.

    Raises:
        ConfigurationError: If credentials are missing or empty
    """
    credentials = config.credentials()
    settings = config.runrunit
    client = RunrunitClient(
        credentials,
        base_url=settings.base_url,
        timeout=settings.timeout,
        transport=transport,
    )

    registry = ToolRegistry()
    register_task_tools(registry, client)
    register_user_tools(registry, client)
    register_environment_tools(
        registry, credentials, base_url=settings.base_url, timeout=settings.timeout
    )
    return registry


__all__ = [
    "ToolDefinition",
    "ToolRegistry",
    "build_registry",
]
