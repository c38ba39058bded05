"""
CLI commands for collection and query operations.

This module provides Typer CLI commands for:
- Checking whether a collection exists with a given type
- Creating a missing collection (honouring the static-schema flag)
- Running raw AQL with bind variables

These commands use the core functionality and add CLI-specific formatting.
"""

import json
from typing import Any, List, Optional, Tuple

import typer
from rich.console import Console
from rich.syntax import Syntax

from arangomap.core.collections import CollectionType, collection_exists, ensure_collection
from arangomap.core.errors import ArangoMapError
from arangomap.core.query import aql_query
from arangomap.core.utils.connection import Store, connect_store
from arangomap.cli.formatters import display_document, display_results, format_error

app = typer.Typer(
    help="Collection and query operations",
    rich_markup_mode="rich",
)

console = Console()


def get_store(
    host: Optional[str],
    username: Optional[str],
    password: Optional[str],
    database: Optional[str],
    static: Optional[bool] = None,
) -> Store:
    """Connect using CLI options, falling back to the environment configuration."""
    return connect_store(
        hosts=host, database=database, username=username, password=password, static=static
    )


def parse_var(raw: str) -> Tuple[str, Any]:
    """'name=value' with value parsed as JSON when possible."""
    if "=" not in raw:
        raise typer.BadParameter(f"Expected name=value, got {raw!r}")
    name, _, value = raw.partition("=")
    try:
        return name, json.loads(value)
    except json.JSONDecodeError:
        return name, value


@app.command("exists")
def exists_cli(
    name: str = typer.Argument(..., help="Collection name"),
    edge: bool = typer.Option(False, "--edge", help="Require an edge collection"),
    host: Optional[str] = typer.Option(None, "--host", help="ArangoDB host URL"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="ArangoDB username"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="ArangoDB password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="ArangoDB database name"),
):
    """
    Check that a collection exists with the expected type.

    Exits with code 1 when it does not.

    Example:
        $ arangomap db exists users
        $ arangomap db exists user_posts --edge
    """
    kind = CollectionType.EDGE if edge else CollectionType.DOCUMENT
    try:
        store = get_store(host, username, password, database)
        found = collection_exists(store, name, kind)
    except (ArangoMapError, RuntimeError, ConnectionError) as e:
        console.print(format_error(f"Collection check failed: {str(e)}"))
        raise typer.Exit(code=1)

    if found:
        console.print(f"[green]{kind.name.lower()} collection '{name}' exists[/green]")
    else:
        console.print(f"[yellow]{kind.name.lower()} collection '{name}' does not exist[/yellow]")
        raise typer.Exit(code=1)


@app.command("ensure")
def ensure_cli(
    name: str = typer.Argument(..., help="Collection name"),
    edge: bool = typer.Option(False, "--edge", help="Create an edge collection"),
    static: Optional[bool] = typer.Option(
        None, "--static/--no-static", help="Treat a missing collection as an error"
    ),
    host: Optional[str] = typer.Option(None, "--host", help="ArangoDB host URL"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="ArangoDB username"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="ArangoDB password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="ArangoDB database name"),
):
    """
    Create a collection if it does not exist.

    Example:
        $ arangomap db ensure users
        $ arangomap db ensure user_posts --edge
    """
    kind = CollectionType.EDGE if edge else CollectionType.DOCUMENT
    try:
        store = get_store(host, username, password, database, static)
        existed = ensure_collection(store, name, kind)
    except (ArangoMapError, RuntimeError, ConnectionError) as e:
        console.print(format_error(f"Ensuring collection failed: {str(e)}"))
        raise typer.Exit(code=1)

    state = "already exists" if existed else "created"
    console.print(f"[green]{kind.name.lower()} collection '{name}' {state}[/green]")


@app.command("query")
def query_cli(
    query: str = typer.Argument(..., help="AQL query text"),
    var: List[str] = typer.Option([], "--var", "-v", help="Bind variable as name=value (JSON)"),
    raw: bool = typer.Option(False, "--raw", help="Print raw JSON instead of a table"),
    host: Optional[str] = typer.Option(None, "--host", help="ArangoDB host URL"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="ArangoDB username"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="ArangoDB password"),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="ArangoDB database name"),
):
    """
    Run a raw AQL query.

    A single document result is shown as a tree, several rows as a table.

    Example:
        $ arangomap db query "FOR u IN users FILTER u.age > @age RETURN u" --var age=30
    """
    variables = [parse_var(v) for v in var]
    try:
        store = get_store(host, username, password, database)
        rows = aql_query(store, query, variables)
    except (ArangoMapError, RuntimeError, ConnectionError) as e:
        console.print(format_error(f"Query failed: {str(e)}"))
        raise typer.Exit(code=1)

    if raw:
        console.print(Syntax(json.dumps(rows, indent=2, default=str), "json", theme="monokai"))
    elif len(rows) == 1 and isinstance(rows[0], dict):
        display_document(rows[0], "Query Result")
    else:
        display_results(rows, "Query Results")
