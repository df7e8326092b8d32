"""CLI entry point for mcpt."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click

from mcpt import __version__
from mcpt._types import (
    DEFAULT_HOST,
    DEFAULT_PROTOCOL_VERSION,
    DEFAULT_TIMEOUT,
    ClientConfig,
    FeatureKind,
    OutputFormat,
)
from mcpt.client import McpClient
from mcpt.errors import McptError
from mcpt.render import render_features


@click.group()
@click.version_option(version=__version__, prog_name="mcpt")
@click.option(
    "--host",
    default=DEFAULT_HOST,
    show_default=True,
    envvar="MCPT_HOST",
    help="MCP server URL.",
)
@click.option(
    "--protocol-version",
    default=DEFAULT_PROTOCOL_VERSION,
    show_default=True,
    envvar="MCPT_PROTOCOL_VERSION",
    help="MCP protocol version sent in initialize.",
)
@click.option(
    "--output",
    default=OutputFormat.JSON.value,
    show_default=True,
    type=click.Choice([f.value for f in OutputFormat]),
    help="How `list` renders its result.",
)
@click.option(
    "--timeout",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    type=click.FloatRange(min=0, min_open=True),
    help="Deadline in seconds for the whole run.",
)
@click.option("--verbose", is_flag=True, help="Log requests and responses to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    host: str,
    protocol_version: str,
    output: str,
    timeout: float,
    verbose: bool,
) -> None:
    """Probe and call MCP servers over HTTP."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    ctx.obj = ClientConfig(
        host=host,
        protocol_version=protocol_version,
        output=OutputFormat(output),
        timeout=timeout,
    )


@contextmanager
def _client(config: ClientConfig) -> Iterator[McpClient]:
    """Yield a client; any McptError ends the run with a diagnostic and exit 1."""
    try:
        with McpClient(config) as client:
            yield client
    except McptError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


pass_config = click.make_pass_decorator(ClientConfig)


@main.command()
@pass_config
def ping(config: ClientConfig) -> None:
    """Check that the server completes the handshake and answers ping."""
    with _client(config) as client:
        client.ping()
    click.echo("Ping OK")


@main.command(name="list")
@click.argument("feature", type=click.Choice([k.value for k in FeatureKind]))
@pass_config
def list_(config: ClientConfig, feature: str) -> None:
    """List the server's tools, prompts or resources."""
    with _client(config) as client:
        features = client.list_feature(feature)
        click.echo(render_features(features, config.output, config.host))


@main.command()
@click.option("--tool", required=True, help="Tool name.")
@click.option(
    "--arguments",
    default="{}",
    show_default=True,
    help="Tool arguments as a JSON string.",
)
@pass_config
def call(config: ClientConfig, tool: str, arguments: str) -> None:
    """Call a tool and print the server's response."""
    with _client(config) as client:
        response = client.call_tool(tool, arguments)
    click.echo(json.dumps(response, indent=2, ensure_ascii=False))
