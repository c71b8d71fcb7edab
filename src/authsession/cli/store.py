"""
CLI subcommands for the persisted session record.

Usage:
    authsession store show [--path PATH] [--values] [--json]
    authsession store clear [--path PATH] [--yes]
    authsession store watch [--path PATH] [--count N] [--interval S]
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from authsession.config import CONFIG
from authsession.events import SESSION_UPDATED
from authsession.models import AUTHENTICATOR_KEY, SessionRecord
from authsession.stores.file import FileStore

store_app = typer.Typer(help="Inspect and manage the persisted session record")

PathOption = typer.Option(
    None, "--path", "-p", help="Session file (defaults to AUTHSESSION_STORE_PATH)"
)


def _open_store(path: Optional[Path]) -> FileStore:
    if path is None and CONFIG.store_backend != "file":
        typer.echo(
            f"❌ Configured store backend is '{CONFIG.store_backend}'; pass --path to use a file"
        )
        raise typer.Exit(code=1)
    return FileStore(path or CONFIG.store_path, poll_interval=CONFIG.poll_interval)


def _describe(data: dict, show_values: bool) -> list[str]:
    record = SessionRecord.from_data(data)
    if record is None:
        if data:
            return ["⚠️  Record has no valid authenticator and will be discarded on restore"]
        return ["No session persisted."]

    content = record.content()
    lines = [f"🔐 Authenticator: {record.authenticator}"]
    if not content:
        lines.append("   Properties: none")
        return lines

    lines.append(f"   Properties ({len(content)}):")
    for key in sorted(content):
        if show_values:
            lines.append(f"     • {key}: {json.dumps(content[key], ensure_ascii=False)}")
        else:
            lines.append(f"     • {key}")
    return lines


@store_app.command("show")
def store_show(
    path: Optional[Path] = PathOption,
    values: bool = typer.Option(
        False, "--values", help="Print property values (may include secrets)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw record"),
):
    """Show the persisted session record."""
    store = _open_store(path)
    data = store.restore()

    if as_json:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    typer.echo(f"📁 {store.path}")
    for line in _describe(data, values):
        typer.echo(line)


@store_app.command("clear")
def store_clear(
    path: Optional[Path] = PathOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Remove the persisted session record (logs out every process sharing it)."""
    store = _open_store(path)
    data = store.restore()
    if not data:
        typer.echo("No session persisted.")
        return

    if not yes and not typer.confirm(
        f"Clear session of '{data.get(AUTHENTICATOR_KEY, 'unknown')}' at {store.path}?"
    ):
        typer.echo("Aborted.")
        raise typer.Exit(code=1)

    store.clear()
    typer.echo("✅ Session cleared")


@store_app.command("watch")
def store_watch(
    path: Optional[Path] = PathOption,
    count: int = typer.Option(
        0, "--count", "-n", help="Exit after this many changes (0 = run until interrupted)"
    ),
    values: bool = typer.Option(False, "--values", help="Print property values"),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", min=0.01, help="Seconds between checks"
    ),
):
    """Print every change made to the session record by other processes."""
    store = _open_store(path)
    if interval:
        store.poll_interval = interval
    typer.echo(f"👀 Watching {store.path} (Ctrl+C to stop)")

    async def _watch():
        seen = 0
        done = asyncio.Event()

        def on_change(data: dict):
            nonlocal seen
            seen += 1
            typer.echo(f"\n🔄 Change #{seen}")
            for line in _describe(data, values):
                typer.echo(line)
            if count and seen >= count:
                done.set()

        store.on(SESSION_UPDATED, on_change)
        await store.start()
        try:
            await done.wait()
        finally:
            await store.stop()

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        typer.echo("\nStopped.")
