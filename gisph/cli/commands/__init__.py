"""
CLI Commands.

Organized by domain/feature area.
"""

from gisph.cli.commands.config import app as config_app
from gisph.cli.commands.regions import app as regions_app
from gisph.cli.commands.update import update

__all__ = [
    "config_app",
    "regions_app",
    "update",
]
