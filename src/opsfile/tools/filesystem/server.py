"""MCP server for filesystem operations."""

import logging
import os
import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from opsfile.tools.filesystem import operations as ops

logger = logging.getLogger(__name__)

mcp = FastMCP("opsfile")
_root: Path | None = None


def _get_root() -> Path:
    """Get the served root directory, raising if not initialized."""
    if _root is None:
        raise RuntimeError("Filesystem root not initialized")
    return _root


def set_root(root: str | Path) -> Path:
    """Set the directory all tool paths are resolved against.

    Raises:
        ValueError: If root does not exist or is not a directory
    """
    global _root
    resolved = Path(root).expanduser().resolve()
    if not resolved.exists():
        raise ValueError(f"Root directory does not exist: {resolved}")
    if not resolved.is_dir():
        raise ValueError(f"Root is not a directory: {resolved}")
    _root = resolved
    return resolved


def _resolve_path(path: str) -> Path:
    """Resolve a path relative to root, with security checks.

    Raises:
        ValueError: If path escapes root directory
    """
    root = _get_root()
    if not path or path == ".":
        return root

    resolved = (root / path).resolve()

    try:
        resolved.relative_to(root)
    except ValueError:
        raise ValueError(f"Path escapes root directory: {path}")

    return resolved


def _relative(paths: list[str]) -> list[str]:
    root = _get_root()
    return [Path(os.path.relpath(p, root)).as_posix() for p in paths]


@mcp.tool()
def create_file(path: str, content: str = "") -> str:
    """Create or overwrite a file.

    Args:
        path: Relative path to file
        content: Text content (empty creates an empty file)
    """
    resolved = _resolve_path(path)
    logger.info(f"[FS] create_file: {resolved}")
    if content:
        ops.create_file_with_content(resolved, content)
    else:
        ops.create_empty_file(resolved)
    return f"Created {path}"


@mcp.tool()
def append_file(path: str, content: str) -> str:
    """Append text to a file, creating it when absent.

    Args:
        path: Relative path to file
        content: Text to append
    """
    resolved = _resolve_path(path)
    logger.info(f"[FS] append_file: {resolved}")
    ops.append_to_file(resolved, content)
    return f"Appended to {path}"


@mcp.tool()
def clear_file(path: str) -> str:
    """Truncate a file to zero length."""
    resolved = _resolve_path(path)
    logger.info(f"[FS] clear_file: {resolved}")
    ops.clear_file(resolved)
    return f"Cleared {path}"


@mcp.tool()
def read_file(path: str) -> str:
    """Read a file as UTF-8 text (undecodable bytes are replaced)."""
    resolved = _resolve_path(path)
    logger.info(f"[FS] read_file: {resolved}")
    return ops.read_file(resolved).decode("utf-8", errors="replace")


@mcp.tool()
def delete_file(path: str) -> str:
    """Delete a file."""
    resolved = _resolve_path(path)
    logger.info(f"[FS] delete_file: {resolved}")
    ops.delete_file(resolved)
    return f"Deleted {path}"


@mcp.tool()
def move_file(src: str, dst: str) -> str:
    """Move a file, creating missing destination directories.

    Args:
        src: Relative source path
        dst: Relative destination path
    """
    src_resolved = _resolve_path(src)
    dst_resolved = _resolve_path(dst)
    logger.info(f"[FS] move_file: {src_resolved} -> {dst_resolved}")
    ops.move_file(src_resolved, dst_resolved)
    return f"Moved {src} -> {dst}"


@mcp.tool()
def copy_file(src: str, dst: str) -> str:
    """Copy a file and its permission bits.

    Args:
        src: Relative source path
        dst: Relative destination path
    """
    src_resolved = _resolve_path(src)
    dst_resolved = _resolve_path(dst)
    logger.info(f"[FS] copy_file: {src_resolved} -> {dst_resolved}")
    ops.copy_file(src_resolved, dst_resolved)
    return f"Copied {src} -> {dst}"


@mcp.tool()
def list_files(path: str = "", recursive: bool = False) -> list[str]:
    """List files in a directory.

    Args:
        path: Relative path to directory
        recursive: Walk the whole subtree and return files only

    Returns:
        Paths relative to the served root
    """
    resolved = _resolve_path(path)
    logger.info(f"[FS] list_files: {resolved} (recursive={recursive})")
    if recursive:
        return _relative(ops.list_files_recursive(resolved))
    return _relative(ops.list_files(resolved))


@mcp.tool()
def file_exists(path: str = "") -> bool:
    """Check if a path exists."""
    resolved = _resolve_path(path)
    logger.info(f"[FS] file_exists: {resolved}")
    return ops.file_exists(resolved)


@mcp.tool()
def get_file_info(path: str = "") -> dict:
    """Get metadata of a file or directory.

    Returns:
        Dict with path, size, mode, mod_time, is_dir, owner, group and mode_string
    """
    resolved = _resolve_path(path)
    logger.info(f"[FS] get_file_info: {resolved}")
    info = ops.get_file_info(resolved)
    data = info.model_dump(mode="json")
    data["path"] = path or "."
    data["mode_string"] = info.mode_string
    return data


def run_server(root: str | Path) -> None:
    """Serve the filesystem tools over stdio."""
    # Suppress noisy MCP server "Processing request" logs
    logging.getLogger("mcp.server").setLevel(logging.WARNING)
    logging.getLogger("mcp.server.lowlevel").setLevel(logging.WARNING)

    set_root(root)
    mcp.run()


if __name__ == "__main__":
    run_server(sys.argv[1] if len(sys.argv) > 1 else ".")
