"""Command-line helpers for inspecting and calling tools without an MCP client."""

from runrunit_mcp.cli.main import cli

__all__ = ["cli"]
