"""Pytest configuration and fixtures for opsfile tests."""

import os

import pytest

from opsfile.config import reset_settings

IS_ROOT = hasattr(os, "geteuid") and os.geteuid() == 0

requires_non_root = pytest.mark.skipif(IS_ROOT, reason="root bypasses permission checks")
requires_posix = pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Start every test with default settings, unaffected by the environment."""
    for key in list(os.environ):
        if key.startswith("OPSFILE_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def locked_dir(tmp_path):
    """A directory whose permissions are removed for the duration of a test."""
    path = tmp_path / "locked"
    path.mkdir()
    (path / "inner.txt").write_text("secret")
    path.chmod(0o000)
    yield path
    path.chmod(0o755)
