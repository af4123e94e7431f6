"""Environment tool: get_config_status.

Reports whether credentials were loaded without revealing them. Only
presence flags and character lengths leave the process.
"""

import os
import platform
from typing import Any, Dict, List

from runrunit_mcp.config import Credentials
from runrunit_mcp.tools.registry import ToolDefinition, ToolRegistry


def build_config_status(credentials: Credentials, *, base_url: str, timeout: float) -> Dict[str, Any]:
    """Masked configuration report."""
    status = credentials.status()
    status.update(
        {
            "baseUrl": base_url,
            "timeoutSeconds": timeout,
            "pythonVersion": platform.python_version(),
            "cwd": os.getcwd(),
        }
    )
    return status


def build_environment_tools(
    credentials: Credentials, *, base_url: str, timeout: float
) -> List[ToolDefinition]:
    async def get_config_status(arguments: Dict[str, Any]) -> Dict[str, Any]:
        return build_config_status(credentials, base_url=base_url, timeout=timeout)

    return [
        ToolDefinition(
            name="get_config_status",
            description="Check if credentials are correctly loaded (MASKED)",
            handler=get_config_status,
        ),
    ]


def register_environment_tools(
    registry: ToolRegistry, credentials: Credentials, *, base_url: str, timeout: float
) -> None:
    for definition in build_environment_tools(
        credentials, base_url=base_url, timeout=timeout
    ):
        registry.register(definition)
