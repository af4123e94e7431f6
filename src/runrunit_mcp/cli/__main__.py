"""CLI module entry point.

Enables running the CLI via: python -m runrunit_mcp.cli
"""

from runrunit_mcp.cli.main import cli

if __name__ == "__main__":
    cli()
