"""Data models for filesystem operations."""

import os
import stat
from datetime import datetime
from enum import IntFlag

from pydantic import BaseModel, ConfigDict, Field


class Permission(IntFlag):
    """Permission bits of a filesystem entry."""

    NONE = 0
    OTHER_EXECUTE = stat.S_IXOTH
    OTHER_WRITE = stat.S_IWOTH
    OTHER_READ = stat.S_IROTH
    GROUP_EXECUTE = stat.S_IXGRP
    GROUP_WRITE = stat.S_IWGRP
    GROUP_READ = stat.S_IRGRP
    OWNER_EXECUTE = stat.S_IXUSR
    OWNER_WRITE = stat.S_IWUSR
    OWNER_READ = stat.S_IRUSR
    STICKY = stat.S_ISVTX
    SETGID = stat.S_ISGID
    SETUID = stat.S_ISUID

    OTHER_ALL = OTHER_READ | OTHER_WRITE | OTHER_EXECUTE
    GROUP_ALL = GROUP_READ | GROUP_WRITE | GROUP_EXECUTE
    OWNER_ALL = OWNER_READ | OWNER_WRITE | OWNER_EXECUTE

    @classmethod
    def from_mode(cls, mode: int) -> "Permission":
        """Keep only the permission bits of a full st_mode value."""
        return cls(stat.S_IMODE(mode))

    @classmethod
    def parse(cls, value: "int | str | Permission") -> "Permission":
        """Parse an octal string ("755", "0o755") or an int into permission bits.

        Raises:
            ValueError: If the value is not a valid octal mode
        """
        if isinstance(value, str):
            text = value.strip().lower()
            if text.startswith("0o"):
                text = text[2:]
            try:
                number = int(text, 8)
            except ValueError:
                raise ValueError(f"Invalid octal mode: {value!r}")
        else:
            number = int(value)
        if number < 0 or number > 0o7777:
            raise ValueError(f"Mode out of range: {oct(number)}")
        return cls(number)


class FileInfo(BaseModel):
    """Snapshot of a file's metadata."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path the snapshot was taken for")
    size: int = Field(ge=0, description="Size in bytes")
    mode: int = Field(description="Full st_mode value (type and permission bits)")
    mod_time: datetime = Field(description="Last modified time")
    is_dir: bool = Field(description="Whether the path is a directory")
    owner: int = Field(description="Owning user id")
    group: int = Field(description="Owning group id")

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "FileInfo":
        """Create FileInfo from a stat result.

        Args:
            path: The path that was stat-ed
            st: Result of os.stat

        Returns:
            FileInfo instance
        """
        return cls(
            path=path,
            size=st.st_size,
            mode=st.st_mode,
            mod_time=datetime.fromtimestamp(st.st_mtime).astimezone(),
            is_dir=stat.S_ISDIR(st.st_mode),
            owner=st.st_uid,
            group=st.st_gid,
        )

    @property
    def permissions(self) -> Permission:
        return Permission.from_mode(self.mode)

    @property
    def mode_string(self) -> str:
        """Mode rendered the way ``ls -l`` does (e.g. ``-rw-r--r--``)."""
        return stat.filemode(self.mode)
