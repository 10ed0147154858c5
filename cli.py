#!/usr/bin/env python3
"""
Viny CLI.

Command-line tooling for the Viny notes backend.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                                  # Show help

    # Server management
    python cli.py server start                            # Start the API server
    python cli.py server start --reload                   # Start with auto-reload

    # Database
    python cli.py db create                               # Create tables from models
    python cli.py db drop --yes                           # Drop all tables
    python cli.py db upgrade                              # Run Alembic migrations

    # Data
    python cli.py data import backup.json --email me@example.com

    # System info
    python cli.py system info                             # Show app info
    python cli.py system config                           # Show configuration
    python cli.py system health                           # Check a running server

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from viny.cli.commands import data_app, db_app, server_app, system_app  # noqa: E402

app = typer.Typer(
    name="cli",
    help="Viny notes backend CLI - server, database, data import and system info.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(server_app, name="server")
app.add_typer(db_app, name="db")
app.add_typer(data_app, name="data")
app.add_typer(system_app, name="system")


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Viny notes backend CLI.
    """
    _validate_project_root()

    if debug:
        from viny.backend.core.logging import setup_logging
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        from viny.backend.core.logging import setup_logging
        setup_logging(level="INFO", format_type="console")


if __name__ == "__main__":
    app()
