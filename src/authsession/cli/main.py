"""
Top-level CLI commands: config.
"""

import json

import typer

from authsession.config import CONFIG


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from authsession.logger import setup_logging

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level, log_file=CONFIG.log_file)


def register_commands(app: typer.Typer):
    @app.command("config")
    def show_config():
        """Show the effective configuration."""
        typer.echo(json.dumps(CONFIG.model_dump(mode="json"), indent=2))
