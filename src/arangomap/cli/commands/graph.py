"""
CLI commands for document identifiers and edge names.

These commands need no database connection:
- parse-id: validate a `collection/key` identifier
- edge-name: the edge collection name derived for two record types
"""

import typer
from rich.console import Console
from rich.table import Table

from arangomap.core.edges import camelize, derive_collection_name
from arangomap.core.errors import InvalidIdentifierError
from arangomap.core.identifiers import parse_id
from arangomap.cli.formatters import format_error

app = typer.Typer(
    help="Identifier and edge helpers",
    rich_markup_mode="rich",
)

console = Console()


@app.command("parse-id")
def parse_id_cli(value: str = typer.Argument(..., help="Document identifier (collection/key)")):
    """
    Validate a document identifier and show its parts.

    Example:
        $ arangomap graph parse-id users/12345
    """
    try:
        document_id = parse_id(value)
    except InvalidIdentifierError as e:
        console.print(format_error(e.reason))
        raise typer.Exit(code=1)

    table = Table(show_header=False)
    table.add_row("collection", document_id.collection)
    table.add_row("key", document_id.key)
    console.print(table)


@app.command("edge-name")
def edge_name_cli(
    type_a: str = typer.Argument(..., help="First record type name, e.g. myapp.User"),
    type_b: str = typer.Argument(..., help="Second record type name, e.g. myapp.Post"),
):
    """
    Show the edge collection and type names derived for two record types.

    The result does not depend on argument order.

    Example:
        $ arangomap graph edge-name User Post
    """
    name = derive_collection_name(type_a, type_b)
    console.print(f"collection: [cyan]{name}[/cyan]")
    console.print(f"edge type:  [cyan]{camelize(name)}[/cyan]")
