"""CLI entry point for prrecall.

Commands:
  fetch-prs: build a corpus file from a repository's pull request history
  serve: serve PR semantic search over MCP (stdio or streamable HTTP)
  search: run one semantic search from the terminal
  inspect: summarise a corpus file
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prrecall_cli.commands.fetch_prs import fetch_prs_cmd
from prrecall_cli.commands.inspect import inspect_cmd
from prrecall_cli.commands.search import search_cmd
from prrecall_cli.commands.serve import serve_cmd

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _configure_logging(level: str) -> None:
    # stderr only: under `serve --transport stdio` stdout carries the protocol.
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prrecall"),
    prog_name="prrecall",
)
@click.option(
    "--config",
    "config_path",
    default=".prrecall.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRRECALL_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity (written to stderr).",
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str):
    """Semantic search over a repository's pull request history."""
    _configure_logging(log_level.upper())
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(fetch_prs_cmd)
main.add_command(serve_cmd)
main.add_command(search_cmd)
main.add_command(inspect_cmd)
