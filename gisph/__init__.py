"""
gisph - command-line client for the GIS.ph API.

- core/: configuration, logging, exceptions, per-user config store
- cli/: Typer application, HTTP client, output formatting, commands
- update/: version checks, install directory discovery, self-update
"""

__version__ = "1.0.0"
__app_name__ = "gis.ph"
