"""Tests for filesystem data models."""

import os
import stat
from datetime import datetime

import pytest
from pydantic import ValidationError

from opsfile.tools.filesystem.models import FileInfo, Permission


def _info(**overrides) -> FileInfo:
    values = {
        "path": "/tmp/file.txt",
        "size": 10,
        "mode": stat.S_IFREG | 0o644,
        "mod_time": datetime(2024, 1, 2, 3, 4, 5),
        "is_dir": False,
        "owner": 1000,
        "group": 1000,
    }
    values.update(overrides)
    return FileInfo(**values)


class TestFileInfo:
    def test_permissions_and_mode_string(self):
        info = _info()
        assert info.permissions == Permission.OWNER_READ | Permission.OWNER_WRITE | Permission.GROUP_READ | Permission.OTHER_READ
        assert info.mode_string == "-rw-r--r--"

    def test_directory_mode_string(self):
        info = _info(mode=stat.S_IFDIR | 0o755, is_dir=True)
        assert info.mode_string == "drwxr-xr-x"

    def test_is_frozen(self):
        info = _info()
        with pytest.raises(ValidationError):
            info.size = 20

    def test_negative_size_is_rejected(self):
        with pytest.raises(ValidationError):
            _info(size=-1)

    def test_from_stat(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"abc")
        st = os.stat(path)
        info = FileInfo.from_stat(str(path), st)
        assert info.size == 3
        assert info.is_dir is False
        assert info.owner == st.st_uid


class TestPermission:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("755", 0o755), ("0o644", 0o644), ("0755", 0o755), (0o600, 0o600), ("4755", 0o4755)],
    )
    def test_parse(self, value, expected):
        assert Permission.parse(value) == expected

    @pytest.mark.parametrize("value", ["abc", "999", "0o8", "77777", -1])
    def test_parse_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            Permission.parse(value)

    def test_from_mode_strips_type_bits(self):
        assert Permission.from_mode(stat.S_IFREG | 0o4750) == Permission.SETUID | Permission.OWNER_ALL | Permission.GROUP_READ | Permission.GROUP_EXECUTE

    def test_groups(self):
        assert Permission.OWNER_ALL == 0o700
        assert Permission.GROUP_ALL == 0o070
        assert Permission.OTHER_ALL == 0o007
