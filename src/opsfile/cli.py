"""Command-line interface for opsfile."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from opsfile import __version__
from opsfile.cli_mcp_server import serve
from opsfile.config import ConfigError, get_settings
from opsfile.tools.filesystem import operations as ops
from opsfile.tools.filesystem.errors import FileOperationError
from opsfile.tools.filesystem.models import Permission

app = typer.Typer(
    name="opsfile",
    help="Small, stateless filesystem operations",
    no_args_is_help=True,
)

console = Console()

app.command(name="serve")(serve)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"opsfile version {__version__}")
        raise typer.Exit()


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Report a failed operation and exit with status 1."""
    try:
        yield
    except FileOperationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _parse_mode(value: str) -> Permission:
    try:
        return Permission.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every operation."),
    ] = False,
    config_file: Annotated[
        str | None,
        typer.Option(
            "--config",
            "-f",
            help="Path to a YAML config file (overrides default config locations).",
        ),
    ] = None,
) -> None:
    """opsfile - small, stateless filesystem operations."""
    try:
        settings = get_settings(config_file=config_file)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=True, show_path=False)],
    )


@app.command()
def touch(path: Annotated[str, typer.Argument(help="File to create")]) -> None:
    """Create an empty file (truncates an existing one)."""
    with _handle_errors():
        ops.create_empty_file(path)


@app.command()
def write(
    path: Annotated[str, typer.Argument(help="File to write")],
    content: Annotated[str, typer.Argument(help="Content to store")],
) -> None:
    """Create or overwrite a file with CONTENT."""
    with _handle_errors():
        ops.create_file_with_content(path, content)


@app.command()
def append(
    path: Annotated[str, typer.Argument(help="File to append to")],
    content: Annotated[str, typer.Argument(help="Content to append")],
) -> None:
    """Append CONTENT to a file, creating it when absent."""
    with _handle_errors():
        ops.append_to_file(path, content)


@app.command()
def clear(path: Annotated[str, typer.Argument(help="File to truncate")]) -> None:
    """Truncate a file to zero length."""
    with _handle_errors():
        ops.clear_file(path)


@app.command()
def rm(path: Annotated[str, typer.Argument(help="File to delete")]) -> None:
    """Delete a file."""
    with _handle_errors():
        ops.delete_file(path)


@app.command()
def rename(
    old_path: Annotated[str, typer.Argument(help="Current path")],
    new_path: Annotated[str, typer.Argument(help="New path")],
) -> None:
    """Rename a file."""
    with _handle_errors():
        ops.rename_file(old_path, new_path)


@app.command()
def mv(
    src: Annotated[str, typer.Argument(help="Source file")],
    dst: Annotated[str, typer.Argument(help="Destination path")],
) -> None:
    """Move a file, creating missing destination directories."""
    with _handle_errors():
        ops.move_file(src, dst)


@app.command()
def cp(
    src: Annotated[str, typer.Argument(help="Source file")],
    dst: Annotated[str, typer.Argument(help="Destination path")],
) -> None:
    """Copy a file and its permission bits."""
    with _handle_errors():
        ops.copy_file(src, dst)


@app.command()
def ls(
    directory: Annotated[str, typer.Argument(help="Directory to list")] = ".",
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="List every file in the subtree"),
    ] = False,
) -> None:
    """List a directory, one path per line."""
    with _handle_errors():
        if recursive:
            paths = ops.list_files_recursive(directory)
        else:
            paths = ops.list_files(directory)
    for path in paths:
        typer.echo(path)


@app.command()
def cat(path: Annotated[str, typer.Argument(help="File to print")]) -> None:
    """Print a file's content."""
    with _handle_errors():
        data = ops.read_file(path)
    typer.echo(data.decode("utf-8", errors="replace"), nl=False)


@app.command()
def info(
    path: Annotated[str, typer.Argument(help="Path to inspect")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the metadata as JSON"),
    ] = False,
) -> None:
    """Show metadata of a path."""
    with _handle_errors():
        file_info = ops.get_file_info(path)

    if as_json:
        typer.echo(file_info.model_dump_json())
        return

    table = Table(title=escape(file_info.path), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Size", str(file_info.size))
    table.add_row("Mode", f"{file_info.mode_string} ({oct(file_info.permissions)})")
    table.add_row("Modified", file_info.mod_time.isoformat())
    table.add_row("Directory", "yes" if file_info.is_dir else "no")
    table.add_row("Owner", str(file_info.owner))
    table.add_row("Group", str(file_info.group))
    console.print(table)


@app.command()
def exists(path: Annotated[str, typer.Argument(help="Path to check")]) -> None:
    """Check whether a path exists (exit status 1 when it does not)."""
    with _handle_errors():
        found = ops.file_exists(path)
    typer.echo("true" if found else "false")
    if not found:
        raise typer.Exit(1)


@app.command()
def chmod(
    mode: Annotated[str, typer.Argument(help="Octal mode, e.g. 644 or 0o755")],
    path: Annotated[str, typer.Argument(help="Path to change")],
) -> None:
    """Change permission bits."""
    permissions = _parse_mode(mode)
    with _handle_errors():
        ops.set_file_permissions(path, permissions)


@app.command()
def chown(
    uid: Annotated[int, typer.Argument(help="User id (-1 keeps the current one)")],
    gid: Annotated[int, typer.Argument(help="Group id (-1 keeps the current one)")],
    path: Annotated[str, typer.Argument(help="Path to change")],
) -> None:
    """Change owning user and group (pass -- before negative ids)."""
    with _handle_errors():
        ops.set_file_owner_group(path, uid, gid)


if __name__ == "__main__":
    app()
