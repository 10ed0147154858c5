"""
System Commands.

Commands for system information and configuration.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

app = typer.Typer(help="System information commands")
console = Console()


@app.command()
def info() -> None:
    """
    Display application information.

    Shows app name, version, environment and database location.
    """
    try:
        from viny.backend.core.config import get_app_config

        app_config = get_app_config()
        application = app_config.application
        database = app_config.database
        location = database.path if database.driver == "sqlite" else f"{database.host}:{database.port}/{database.name}"

        console.print(Panel(
            f"[bold]{application.name}[/bold]\n"
            f"Version: {application.version}\n"
            f"Environment: {application.environment}\n"
            f"Description: {application.description}\n"
            f"Database: {database.driver} ({location})",
            title="Application Info",
        ))

    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    section: Optional[str] = typer.Argument(
        None,
        help="Config section to show (application, database, logging, features, security)",
    ),
) -> None:
    """
    Display configuration settings.

    Shows all configuration or a specific section. Secrets live in
    config/.env and are never shown.
    """
    try:
        from viny.backend.core.config import get_app_config

        app_config = get_app_config()
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    sections = {
        "application": app_config.application,
        "database": app_config.database,
        "logging": app_config.logging,
        "features": app_config.features,
        "security": app_config.security,
    }

    if section:
        if section not in sections:
            console.print(f"[red]Unknown section: {section}[/red]")
            console.print(f"Available sections: {', '.join(sections.keys())}")
            raise typer.Exit(1)
        _display_config_section(section, sections[section].model_dump())
    else:
        for name, data in sections.items():
            _display_config_section(name, data.model_dump())
            console.print()


def _display_config_section(name: str, data: dict) -> None:
    """Display a configuration section as a tree."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    console.print(tree)


@app.command()
def health(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Server base URL"),
    timeout: float = typer.Option(5.0, "--timeout", "-t", help="Request timeout in seconds"),
) -> None:
    """
    Check a running server's readiness.

    Examples:
        cli.py system health
        cli.py system health --url http://127.0.0.1:3001
    """
    import httpx

    from viny.backend.core.config import get_server_base_url

    base_url = url or get_server_base_url()
    try:
        response = httpx.get(
            f"{base_url}/health/ready",
            headers={"X-Frontend-ID": "cli"},
            timeout=timeout,
        )
    except httpx.HTTPError as e:
        console.print(f"[red]✗ Backend is not reachable at {base_url}: {e}[/red]")
        raise typer.Exit(1)

    healthy = response.status_code == 200
    color = "green" if healthy else "red"
    console.print(Panel(
        f"[{color}]{'HEALTHY' if healthy else 'UNHEALTHY'}[/{color}] ({response.status_code})",
        title=f"Backend Status: {base_url}",
    ))
    if not healthy:
        raise typer.Exit(1)
