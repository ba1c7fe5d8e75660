"""
CLI Module.

Command-line client built with Typer for the GIS.ph API.

Architecture:
- CLI is a thin presentation layer
- API access goes through gisph.cli.client (httpx)
- Collaborators are built once per invocation in gisph.cli.context
- Tables and JSON are rendered by gisph.cli.formatter

Usage:
    gisph --help
    gisph regions list --format json
    gisph config set apiKey <key>
    gisph update --check
"""
