"""Smoke tests for MCP server wiring.

Verifies that the server registers list/call handlers backed by the tool
registry and that calls come back as CallToolResult envelopes.
"""

from __future__ import annotations

import json

import pytest
from mcp import types

from runrunit_mcp.core.errors import ConfigurationError
from runrunit_mcp.server import create_server

pytestmark = pytest.mark.integration

_TOOL_NAMES = {
    "get_task",
    "get_task_details",
    "list_tasks",
    "get_me",
    "get_config_status",
}


@pytest.fixture
def mcp_server(server_config, fake_api):
    api = fake_api({"/users/me": {"id": "ana"}})
    return create_server(server_config, transport=api.transport)


def test_server_name_matches_config(mcp_server, server_config):
    assert mcp_server.name == server_config.server_name


def test_protocol_handlers_registered(mcp_server):
    assert types.ListToolsRequest in mcp_server.request_handlers
    assert types.CallToolRequest in mcp_server.request_handlers


def test_server_refuses_to_start_without_credentials(server_config):
    server_config.runrunit.app_key = ""

    with pytest.raises(ConfigurationError):
        create_server(server_config)


@pytest.mark.asyncio
async def test_list_tools_returns_catalogue(mcp_server):
    handler = mcp_server.request_handlers[types.ListToolsRequest]

    response = await handler(types.ListToolsRequest(method="tools/list"))

    tools = response.root.tools
    assert {tool.name for tool in tools} == _TOOL_NAMES


@pytest.mark.asyncio
async def test_call_tool_passes_result_through(mcp_server):
    handler = mcp_server.request_handlers[types.CallToolRequest]

    response = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="get_me", arguments={}),
        )
    )

    result = response.root
    assert result.isError is False
    assert json.loads(result.content[0].text) == {"id": "ana"}


@pytest.mark.asyncio
async def test_call_tool_error_is_a_result_not_a_fault(mcp_server):
    handler = mcp_server.request_handlers[types.CallToolRequest]

    response = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="get_task", arguments={}),
        )
    )

    result = response.root
    assert result.isError is True
    assert result.content[0].text == "Error: Missing required parameter: id"
