"""Tests for the opsfile command-line interface."""

import json
import os
import stat

import pytest
from conftest import requires_posix
from typer.testing import CliRunner

from opsfile import __version__
from opsfile.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_write_append_cat_clear_rm(workdir):
    path = str(workdir / "a.txt")

    assert runner.invoke(app, ["write", path, "hello"]).exit_code == 0
    assert runner.invoke(app, ["append", path, " world"]).exit_code == 0

    result = runner.invoke(app, ["cat", path])
    assert result.exit_code == 0
    assert result.output == "hello world"

    assert runner.invoke(app, ["clear", path]).exit_code == 0
    assert runner.invoke(app, ["cat", path]).output == ""

    assert runner.invoke(app, ["rm", path]).exit_code == 0
    result = runner.invoke(app, ["exists", path])
    assert result.exit_code == 1
    assert result.output.strip() == "false"


def test_touch_and_exists(workdir):
    path = str(workdir / "empty.txt")
    assert runner.invoke(app, ["touch", path]).exit_code == 0
    result = runner.invoke(app, ["exists", path])
    assert result.exit_code == 0
    assert result.output.strip() == "true"


def test_missing_file_reports_error(workdir):
    result = runner.invoke(app, ["rm", "missing.txt"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_mv_rename_and_cp(workdir):
    (workdir / "src.txt").write_text("data")

    assert runner.invoke(app, ["cp", "src.txt", "backup/copy.txt"]).exit_code == 0
    assert (workdir / "backup" / "copy.txt").read_text() == "data"

    assert runner.invoke(app, ["mv", "src.txt", "moved/dst.txt"]).exit_code == 0
    assert not (workdir / "src.txt").exists()

    assert runner.invoke(app, ["rename", "moved/dst.txt", "moved/final.txt"]).exit_code == 0
    assert (workdir / "moved" / "final.txt").read_text() == "data"


def test_ls_flat_and_recursive(workdir):
    (workdir / "root").mkdir()
    (workdir / "root" / "top.txt").write_text("")
    (workdir / "root" / "sub").mkdir()
    (workdir / "root" / "sub" / "deep.txt").write_text("")

    flat = runner.invoke(app, ["ls", "root"])
    assert flat.exit_code == 0
    assert sorted(flat.output.split()) == sorted([os.path.join("root", "sub"), os.path.join("root", "top.txt")])

    recursive = runner.invoke(app, ["ls", "root", "--recursive"])
    assert recursive.exit_code == 0
    assert sorted(recursive.output.split()) == sorted(
        [os.path.join("root", "top.txt"), os.path.join("root", "sub", "deep.txt")]
    )


def test_info_json(workdir):
    (workdir / "info.txt").write_text("12345")
    result = runner.invoke(app, ["info", "info.txt", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["size"] == 5
    assert data["is_dir"] is False
    assert data["path"] == "info.txt"


def test_info_table(workdir):
    (workdir / "info.txt").write_text("12345")
    result = runner.invoke(app, ["info", "info.txt"])
    assert result.exit_code == 0
    assert "Size" in result.output


@requires_posix
def test_chmod(workdir):
    path = workdir / "file.txt"
    path.write_text("")
    result = runner.invoke(app, ["chmod", "600", str(path)])
    assert result.exit_code == 0
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_chmod_rejects_bad_mode(workdir):
    (workdir / "file.txt").write_text("")
    result = runner.invoke(app, ["chmod", "rwx", "file.txt"])
    assert result.exit_code != 0


@requires_posix
def test_chown_to_current_ids(workdir):
    (workdir / "file.txt").write_text("")
    result = runner.invoke(app, ["chown", str(os.getuid()), str(os.getgid()), "file.txt"])
    assert result.exit_code == 0


def test_missing_config_file_fails(workdir):
    result = runner.invoke(app, ["--config", "nope.yaml", "touch", "x.txt"])
    assert result.exit_code == 1
    assert not (workdir / "x.txt").exists()


def test_invalid_config_reports_error(workdir, monkeypatch):
    monkeypatch.setenv("HOME", str(workdir / "home"))
    (workdir / "opsfile.yaml").write_text("copy_buffer_size: 0\n")
    result = runner.invoke(app, ["touch", "x.txt"])
    assert result.exit_code == 1
    assert "Error" in result.output
    assert "Traceback" not in result.output
    assert not (workdir / "x.txt").exists()


def test_malformed_explicit_config_reports_error(workdir):
    (workdir / "broken.yaml").write_text("dir_mode: [unclosed\n")
    result = runner.invoke(app, ["--config", "broken.yaml", "touch", "x.txt"])
    assert result.exit_code == 1
    assert "Error" in result.output
    assert not (workdir / "x.txt").exists()


def test_null_byte_path_reports_error(workdir):
    result = runner.invoke(app, ["exists", "a\x00b"])
    assert result.exit_code == 1
    assert "Error" in result.output
