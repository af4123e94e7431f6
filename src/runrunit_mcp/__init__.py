"""Runrun.it MCP - MCP server for the Runrun.it task-management API."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("runrunit-mcp")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "1.0.0"

from runrunit_mcp.server import create_server, main

__all__ = ["__version__", "create_server", "main"]
