"""Runrun.it CLI entry point.

Lists the tool catalogue and invokes single tools from a shell, using the
same registry the MCP server serves. Tool output is printed exactly as an
MCP client would receive it.
"""

import asyncio
import json
import sys
from typing import Any, Dict, Optional

import click

from runrunit_mcp.config import ServerConfig
from runrunit_mcp.core.errors import ConfigurationError
from runrunit_mcp.core.responses import result_text
from runrunit_mcp.tools import ToolRegistry, build_registry


def _load_registry(ctx: click.Context) -> ToolRegistry:
    config: ServerConfig = ctx.obj["config"]
    try:
        return build_registry(config, transport=ctx.obj.get("transport"))
    except ConfigurationError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--config-file",
    envvar="RUNRUNIT_MCP_CONFIG_FILE",
    type=click.Path(exists=False),
    help="Path to a runrunit-mcp TOML config file",
)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    help="Log level for diagnostics written to stderr",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: str) -> None:
    """Runrun.it MCP tools from the command line."""
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        try:
            config = ServerConfig.from_env(config_file)
        except ConfigurationError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        config.log_level = log_level.upper()
        config.structured_logging = False
        ctx.obj["config"] = config
    ctx.obj["config"].setup_logging()


@cli.command("tools")
@click.pass_context
def list_tools_cmd(ctx: click.Context) -> None:
    """Print the tool catalogue as JSON."""
    registry = _load_registry(ctx)
    catalogue = [
        {
            "name": definition.name,
            "description": definition.description,
            "inputSchema": definition.input_schema,
        }
        for definition in registry.list_tools()
    ]
    click.echo(json.dumps(catalogue, indent=2))


@cli.command("call")
@click.argument("name")
@click.option(
    "--args",
    "raw_args",
    default="{}",
    show_default=True,
    help="Tool arguments as a JSON object",
)
@click.pass_context
def call_cmd(ctx: click.Context, name: str, raw_args: str) -> None:
    """Call tool NAME once and print its result.

    Exits with status 1 when the tool reports an error.
    """
    try:
        arguments: Dict[str, Any] = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"invalid JSON: {exc}", param_hint="--args")
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    registry = _load_registry(ctx)
    result = asyncio.run(registry.dispatch(name, arguments))

    if result.isError:
        click.echo(result_text(result), err=True)
        sys.exit(1)
    click.echo(result_text(result))


if __name__ == "__main__":
    cli()
