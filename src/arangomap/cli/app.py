"""Main Typer application for the arangomap CLI.

This module defines the main Typer application and subcommands, providing a
command-line interface to collection provisioning, raw AQL queries and the
identifier helpers.

Links to third-party documentation:
- Typer: https://typer.tiangolo.com/
- Rich: https://rich.readthedocs.io/
"""

import sys

import typer
from loguru import logger
from rich.console import Console

from arangomap.config import CONFIG
from arangomap.cli.commands.database import app as database_app
from arangomap.cli.commands.graph import app as graph_app

app = typer.Typer(
    name="arangomap",
    help="Typed records and edges on ArangoDB",
    rich_markup_mode="rich",
)
console = Console()

app.add_typer(database_app, name="db", help="Collection and query operations")
app.add_typer(graph_app, name="graph", help="Identifier and edge helpers")


@app.callback()
def main(
    log_level: str = typer.Option(
        CONFIG["logging"]["level"], "--log-level", "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
):
    """arangomap CLI for collections, queries and graph helpers."""
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper())


if __name__ == "__main__":
    app()
