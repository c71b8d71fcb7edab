"""
authsession CLI: inspect and manage a persisted session record.

- main:  logging setup, `config`
- store: show, clear, watch
"""

import typer

from authsession.cli.main import configure_logging, register_commands
from authsession.cli.store import store_app

app = typer.Typer(help="authsession - inspect and manage persisted sessions")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    authsession - inspect and manage persisted sessions.
    """
    configure_logging(verbose)


register_commands(app)
app.add_typer(store_app, name="store")

if __name__ == "__main__":
    app()
