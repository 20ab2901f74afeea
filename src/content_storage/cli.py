# src/content_storage/cli.py
"""content-storage Command Line Interface.

Entry point for the content-storage CLI tool.
"""

import shutil
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from content_storage import __version__
from content_storage.contracts.errors import PathTraversalError
from content_storage.core.config import StorageSettings, load_settings
from content_storage.core.logging import configure_logging
from content_storage.core.storage import ContentStorage, create_storage

app = typer.Typer(
    name="content-storage",
    help="Content-addressable blob storage.",
    no_args_is_help=True,
)

_SETTINGS_OPTION = typer.Option(
    ...,
    "--settings",
    "-s",
    help="Path to settings YAML file.",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"content-storage version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Content-addressable blob storage."""
    pass


def _load_config(settings: str) -> StorageSettings:
    try:
        return load_settings(Path(settings))
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


def _open_storage(settings: str) -> ContentStorage:
    config = _load_config(settings)
    configure_logging(config.logging.level, json_output=config.logging.json_output)
    return create_storage(config)


@app.command()
def put(
    file_id: str = typer.Argument(..., help="Id to store the content under."),
    source: Path = typer.Argument(..., help="File to read the content from."),
    settings: str = _SETTINGS_OPTION,
    compress: bool = typer.Option(
        False,
        "--compress",
        "-c",
        help="Compress the stored copy when it saves enough space.",
    ),
) -> None:
    """Store a file under an id."""
    storage = _open_storage(settings)
    if not source.is_file():
        typer.echo(f"Error: Source file not found: {source}", err=True)
        raise typer.Exit(1)

    try:
        with source.open("rb") as content:
            if compress:
                storage.store_stream_and_compress(file_id, content)
            else:
                storage.store_stream(file_id, content)
    except PathTraversalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    stored = storage.file_info(file_id)
    if stored is not None:
        encoding = stored.encoding.value if stored.encoding else "none"
        typer.echo(f"Stored {file_id} ({stored.size} bytes, encoding: {encoding})")


@app.command()
def get(
    file_id: str = typer.Argument(..., help="Id to retrieve."),
    settings: str = _SETTINGS_OPTION,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write content to this file instead of stdout.",
    ),
    raw: bool = typer.Option(
        False,
        "--raw",
        help="Output the bytes as stored, without decompressing.",
    ),
) -> None:
    """Retrieve the content stored under an id."""
    storage = _open_storage(settings)
    item = storage.retrieve(file_id)
    if item is None:
        typer.echo(f"Not found: {file_id}", err=True)
        raise typer.Exit(1)

    stream = item.as_raw_stream() if raw else item.as_stream()
    with stream:
        if output is not None:
            with output.open("wb") as destination:
                shutil.copyfileobj(stream, destination)
        else:
            shutil.copyfileobj(stream, sys.stdout.buffer)
            sys.stdout.flush()


@app.command()
def info(
    file_id: str = typer.Argument(..., help="Id to describe."),
    settings: str = _SETTINGS_OPTION,
) -> None:
    """Show size and encoding of a stored record."""
    storage = _open_storage(settings)
    file_info = storage.file_info(file_id)
    if file_info is None:
        typer.echo(f"Not found: {file_id}", err=True)
        raise typer.Exit(1)

    typer.echo(f"id: {file_id}")
    typer.echo(f"size: {file_info.size}")
    typer.echo(f"encoding: {file_info.encoding.value if file_info.encoding else 'none'}")
    typer.echo(f"compressed: {'yes' if file_info.is_compressed else 'no'}")


@app.command(name="ls")
def list_ids(
    settings: str = _SETTINGS_OPTION,
    prefix: str | None = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Only list ids starting with this prefix.",
    ),
) -> None:
    """List stored ids."""
    storage = _open_storage(settings)
    for file_id in storage.all_file_ids(prefix):
        typer.echo(file_id)


@app.command(name="rm")
def remove(
    file_ids: list[str] = typer.Argument(..., help="Ids to delete."),
    settings: str = _SETTINGS_OPTION,
) -> None:
    """Delete stored records."""
    storage = _open_storage(settings)
    try:
        storage.delete(file_ids)
    except PathTraversalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Deleted {len(file_ids)} id(s)")


if __name__ == "__main__":
    app()
