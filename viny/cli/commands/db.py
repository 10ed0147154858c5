"""
Database Commands.

Create or drop the schema directly from the models, or run Alembic
migrations.
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console

app = typer.Typer(help="Database commands")
console = Console()

PROJECT_ROOT = Path(__file__).resolve().parents[3]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


async def _create() -> None:
    from viny.backend.core.database import create_tables, dispose_engine

    try:
        await create_tables()
    finally:
        await dispose_engine()


async def _drop() -> None:
    from viny.backend.core.database import dispose_engine, drop_tables

    try:
        await drop_tables()
    finally:
        await dispose_engine()


@app.command()
def create() -> None:
    """
    Create all tables that do not exist yet.

    Examples:
        cli.py db create
    """
    asyncio.run(_create())
    console.print("[green]Tables created[/green]")


@app.command()
def drop(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """
    Drop every table. All data is lost.

    Examples:
        cli.py db drop --yes
    """
    if not yes:
        typer.confirm("Drop all tables and delete every record?", abort=True)
    asyncio.run(_drop())
    console.print("[yellow]Tables dropped[/yellow]")


@app.command()
def upgrade(
    revision: str = typer.Option("head", "--revision", "-r", help="Target revision"),
) -> None:
    """
    Upgrade database to a revision with Alembic.

    Examples:
        cli.py db upgrade
        cli.py db upgrade -r 0001
    """
    if not ALEMBIC_INI.exists():
        console.print("[red]Error: alembic.ini not found[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Upgrading database to revision: {revision}[/bold]\n")
    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), "upgrade", revision]
    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        raise typer.Exit(result.returncode)
    console.print("\n[green]Upgrade completed[/green]")
