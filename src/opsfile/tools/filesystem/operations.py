"""Stateless filesystem operations.

Each function wraps a single host primitive. Nothing is cached between calls
and no locking is done: concurrent calls on the same path race exactly as the
underlying primitives do. Failures are raised as FileOperationError
subclasses (see ``errors``); the only operation that can leave a partial
effect behind is ``copy_file``.
"""

import logging
import os
import shutil
import stat
from datetime import datetime
from typing import TYPE_CHECKING

from opsfile.tools.filesystem.errors import InvalidArgumentError, NotFoundError, os_errors
from opsfile.tools.filesystem.models import FileInfo, Permission

if TYPE_CHECKING:
    from opsfile.config import Settings

logger = logging.getLogger(__name__)

StrPath = str | os.PathLike[str]

_WRITE_FLAGS = os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0)

# stat results only carry meaningful uid/gid on POSIX
_HAS_OWNERSHIP = os.name == "posix"


def _settings() -> "Settings":
    from opsfile.config import get_settings

    return get_settings()


def _as_bytes(content: bytes | str) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


def _write(path: StrPath, flags: int, content: bytes) -> None:
    fd = os.open(path, flags, _settings().file_mode)
    with os.fdopen(fd, "wb") as f:
        f.write(content)


def _ensure_parent_dir(path: StrPath) -> None:
    parent = os.path.dirname(os.fspath(path))
    # A bare file name lives in the current directory
    if parent:
        os.makedirs(parent, mode=_settings().dir_mode, exist_ok=True)


def create_empty_file(path: StrPath) -> None:
    """Create an empty file, truncating it if it already exists."""
    with os_errors("create", path):
        _write(path, _WRITE_FLAGS | os.O_TRUNC, b"")
    logger.debug(f"Created empty file {path}")


def create_file_with_content(path: StrPath, content: bytes | str) -> None:
    """Create or overwrite a file with exactly the given content.

    Args:
        path: File to write
        content: Bytes to store; str is encoded as UTF-8
    """
    data = _as_bytes(content)
    with os_errors("create", path):
        _write(path, _WRITE_FLAGS | os.O_TRUNC, data)
    logger.debug(f"Wrote {len(data)} bytes to {path}")


def append_to_file(path: StrPath, content: bytes | str) -> None:
    """Append content to the end of a file, creating it when absent."""
    data = _as_bytes(content)
    with os_errors("append", path):
        _write(path, _WRITE_FLAGS | os.O_APPEND, data)
    logger.debug(f"Appended {len(data)} bytes to {path}")


def clear_file(path: StrPath) -> None:
    """Truncate an existing file to zero length."""
    with os_errors("clear", path):
        os.truncate(path, 0)
    logger.debug(f"Cleared {path}")


def read_file(path: StrPath) -> bytes:
    """Read a whole file."""
    with os_errors("read", path):
        with open(path, "rb") as f:
            return f.read()


def delete_file(path: StrPath) -> None:
    """Remove a file. A missing file is an error."""
    with os_errors("delete", path):
        os.remove(path)
    logger.debug(f"Deleted {path}")


def rename_file(old_path: StrPath, new_path: StrPath) -> None:
    """Rename a file with the atomic rename primitive.

    An existing file at ``new_path`` is replaced.
    """
    with os_errors("rename", old_path, new_path):
        os.replace(old_path, new_path)
    logger.debug(f"Renamed {old_path} -> {new_path}")


def move_file(src_path: StrPath, dst_path: StrPath) -> None:
    """Move a file, creating the destination's parent directories first.

    Only what the rename primitive supports is supported: moving across
    devices fails.
    """
    with os_errors("move", src_path, dst_path):
        _ensure_parent_dir(dst_path)
        os.replace(src_path, dst_path)
    logger.debug(f"Moved {src_path} -> {dst_path}")


def copy_file(src_path: StrPath, dst_path: StrPath) -> None:
    """Copy a file's content and permission bits.

    Missing destination directories are created with the default directory
    mode. There is no rollback: a failure while streaming leaves a partial
    destination file behind.
    """
    with os_errors("copy", src_path, dst_path):
        with open(src_path, "rb") as src:
            _ensure_parent_dir(dst_path)
            with open(dst_path, "wb") as dst:
                shutil.copyfileobj(src, dst, _settings().copy_buffer_size)
            mode = os.fstat(src.fileno()).st_mode
        os.chmod(dst_path, stat.S_IMODE(mode))
    logger.debug(f"Copied {src_path} -> {dst_path}")


def list_files(directory: StrPath) -> list[str]:
    """Return the full paths of a directory's immediate children.

    Directories are included. The order is not part of the contract.
    """
    with os_errors("list", directory):
        names = os.listdir(directory)
    return sorted(os.path.join(os.fspath(directory), name) for name in names)


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def list_files_recursive(directory: StrPath) -> list[str]:
    """Return the full paths of every non-directory entry below a directory.

    A path that is not a directory is its own single entry. The walk stops at
    the first error, which is raised.
    """
    files: list[str] = []
    with os_errors("list", directory):
        if not stat.S_ISDIR(os.lstat(directory).st_mode):
            return [os.fspath(directory)]
        for dirpath, dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
            files.extend(os.path.join(dirpath, name) for name in filenames)
            # Links to directories are not followed and count as entries
            files.extend(
                os.path.join(dirpath, name)
                for name in dirnames
                if os.path.islink(os.path.join(dirpath, name))
            )
    return files


def get_file_info(path: StrPath) -> FileInfo:
    """Return a metadata snapshot of a path.

    Raises:
        InvalidArgumentError: On platforms without POSIX owner/group metadata
    """
    with os_errors("stat", path):
        st = os.stat(path)
    if not _HAS_OWNERSHIP:
        raise InvalidArgumentError(
            "stat",
            os.fspath(path),
            strerror="owner and group are not available on this platform",
        )
    return FileInfo.from_stat(os.fspath(path), st)


def get_file_mod_time(path: StrPath) -> datetime:
    """Return the last modification time of a path."""
    with os_errors("stat", path):
        st = os.stat(path)
    return datetime.fromtimestamp(st.st_mtime).astimezone()


def file_exists(path: StrPath) -> bool:
    """Check whether a path exists.

    Only "not found" means False; any other stat failure (e.g. permission
    denied on a parent directory) is raised.
    """
    try:
        with os_errors("stat", path):
            os.stat(path)
    except NotFoundError:
        return False
    return True


def set_file_permissions(path: StrPath, mode: int | Permission) -> None:
    """Change the permission bits of a path."""
    with os_errors("chmod", path):
        os.chmod(path, int(mode))
    logger.debug(f"Set mode of {path} to {oct(int(mode))}")


def set_file_owner_group(path: StrPath, uid: int, gid: int) -> None:
    """Change the owning user and group of a path (-1 keeps the current id)."""
    with os_errors("chown", path):
        os.chown(path, uid, gid)
    logger.debug(f"Set owner of {path} to {uid}:{gid}")
