"""
Data Commands.

Import legacy JSON exports into a user's account.
"""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(help="Data import commands")
console = Console()


async def _import(payload, email: str):
    from viny.backend.core.database import dispose_engine, get_session_factory
    from viny.backend.repositories.user import UserRepository
    from viny.backend.services.migration import MigrationService

    try:
        async with get_session_factory()() as session:
            user = await UserRepository(session).get_by_email(email.lower())
            if user is None:
                return None
            result = await MigrationService(session, user.id).import_data(payload)
            await session.commit()
            return result
    finally:
        await dispose_engine()


@app.command("import")
def import_file(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Legacy JSON export"),
    email: str = typer.Option(..., "--email", "-e", help="Account that will own the data"),
) -> None:
    """
    Import a legacy JSON export ({"notes": [...], "notebooks": [...]}).

    Examples:
        cli.py data import backup.json --email me@example.com
    """
    from pydantic import ValidationError

    from viny.backend.schemas.migration import ImportRequest

    try:
        payload = ImportRequest.model_validate(json.loads(file.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Error: not a valid export ({file}): {escape(str(e))}[/red]")
        raise typer.Exit(1)

    result = asyncio.run(_import(payload, email))
    if result is None:
        console.print(f"[red]Error: no user with email {email}[/red]")
        raise typer.Exit(1)

    table = Table(title="Import Results", show_header=True)
    table.add_column("Item", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Notes imported", str(result.imported_notes))
    table.add_row("Notebooks imported", str(result.imported_notebooks))
    table.add_row("Tags created", str(result.imported_tags))
    table.add_row("Skipped", str(result.skipped))
    table.add_row("Errors", str(len(result.errors)))
    console.print(table)

    for issue in result.errors:
        console.print(f"[yellow]{issue.kind} #{issue.index}: {issue.message}[/yellow]")
