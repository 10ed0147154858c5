"""
CLI Commands.

Organized by domain/feature area.
"""

from viny.cli.commands.data import app as data_app
from viny.cli.commands.db import app as db_app
from viny.cli.commands.server import app as server_app
from viny.cli.commands.system import app as system_app

__all__ = [
    "data_app",
    "db_app",
    "server_app",
    "system_app",
]
