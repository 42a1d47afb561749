"""FileSystem module for file operations."""

from opsfile.tools.filesystem.errors import (
    AlreadyExistsError,
    ErrorKind,
    FileOperationError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from opsfile.tools.filesystem.models import FileInfo, Permission
from opsfile.tools.filesystem.operations import (
    append_to_file,
    clear_file,
    copy_file,
    create_empty_file,
    create_file_with_content,
    delete_file,
    file_exists,
    get_file_info,
    get_file_mod_time,
    list_files,
    list_files_recursive,
    move_file,
    read_file,
    rename_file,
    set_file_owner_group,
    set_file_permissions,
)

__all__ = [
    "AlreadyExistsError",
    "ErrorKind",
    "FileInfo",
    "FileOperationError",
    "InvalidArgumentError",
    "NotFoundError",
    "Permission",
    "PermissionDeniedError",
    "append_to_file",
    "clear_file",
    "copy_file",
    "create_empty_file",
    "create_file_with_content",
    "delete_file",
    "file_exists",
    "get_file_info",
    "get_file_mod_time",
    "list_files",
    "list_files_recursive",
    "move_file",
    "read_file",
    "rename_file",
    "set_file_owner_group",
    "set_file_permissions",
]
