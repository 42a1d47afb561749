"""MCP server command for opsfile."""

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from opsfile.config import get_settings

console = Console()


def serve(
    root: Annotated[
        str | None,
        typer.Option(
            "--root",
            "-r",
            help="Directory exposed to MCP clients (defaults to the mcp_root setting).",
        ),
    ] = None,
) -> None:
    """Start the opsfile MCP server.

    Runs an MCP (Model Context Protocol) server over stdin/stdout that exposes
    the filesystem operations as tools. Every tool path is resolved inside the
    served root; paths escaping it are rejected.

    Available tools:
        create_file, append_file, clear_file, read_file, delete_file,
        move_file, copy_file, list_files, file_exists, get_file_info

    Examples:
        opsfile serve
        opsfile serve --root ./workspace

    MCP config for Cline (cline_mcp_settings.json):
        {
          "mcpServers": {
            "opsfile": {
              "command": "opsfile",
              "args": ["serve", "--root", "/path/to/workspace"]
            }
          }
        }
    """
    settings = get_settings()

    from opsfile.tools.filesystem.server import run_server

    try:
        run_server(root or settings.mcp_root)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
