"""Rich formatting utilities for the arangomap CLI.

This module provides formatting functions for displaying ArangoDB data
in the command line interface: query result tables, single documents and
error panels.

Links to third-party documentation:
- Rich: https://rich.readthedocs.io/
- Rich Table: https://rich.readthedocs.io/en/stable/tables.html
- Rich Tree: https://rich.readthedocs.io/en/stable/tree.html

Sample input:
    display_results([
        {"_key": "123", "_id": "users/123", "first_name": "John"},
        {"_key": "456", "_id": "users/456", "first_name": "Jane"},
    ], "Users")

Expected output:
    A table with one row per document and one column per field.
"""

import json
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from arangomap.core.identifiers import IDENTITY_KEYS

console = Console()

MAX_COLUMNS = 8


def truncate_string(s: Any, max_length: int = 80) -> str:
    """Truncate a value's string form to a maximum length, adding ellipsis if needed."""
    if s is None:
        return ""

    s = s if isinstance(s, str) else json.dumps(s, default=str)
    if len(s) <= max_length:
        return s

    return s[:max_length - 3] + "..."


def format_error(message: str) -> Panel:
    """Red panel for an error message."""
    return Panel(f"[red]{message}[/red]", title="[bold red]Error[/bold red]", border_style="red")


def display_document(document: Dict[str, Any], title: str = "Document") -> None:
    """Display a single document: identity keys first, then its fields."""
    if not document:
        console.print("[yellow]No document data to display.[/yellow]")
        return

    tree = Tree(f"[bold]{title}[/bold]")

    meta_branch = tree.add("[bold cyan]Metadata[/bold cyan]")
    for key in IDENTITY_KEYS:
        if key in document:
            meta_branch.add(f"[dim]{key}:[/dim] [cyan]{document[key]}[/cyan]")
    for key in ("_from", "_to"):
        if key in document:
            meta_branch.add(f"[dim]{key}:[/dim] [green]{document[key]}[/green]")

    fields_branch = tree.add("[bold green]Fields[/bold green]")
    for key, value in document.items():
        if key in IDENTITY_KEYS or key in ("_from", "_to"):
            continue
        fields_branch.add(f"[bold]{key}:[/bold] {truncate_string(value, 100)}")

    console.print(tree)


def display_results(rows: List[Any], title: str = "Results") -> None:
    """Display query rows as a table, or one per line when they are not documents."""
    if not rows:
        console.print("[yellow]No results.[/yellow]")
        return

    if not all(isinstance(row, dict) for row in rows):
        for row in rows:
            console.print(truncate_string(row, 120))
        console.print(f"[dim]{len(rows)} rows[/dim]")
        return

    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in columns and key not in ("_id", "_rev"):
                columns.append(key)
    columns = columns[:MAX_COLUMNS]

    table = Table(title=title, show_lines=False)
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(*(truncate_string(row.get(column), 40) for column in columns))

    console.print(table)
    console.print(f"[dim]{len(rows)} rows[/dim]")
