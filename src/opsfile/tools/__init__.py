"""Tools for filesystem operations."""

from opsfile.tools.filesystem import FileInfo, FileOperationError, Permission

__all__ = [
    "FileInfo",
    "FileOperationError",
    "Permission",
]
