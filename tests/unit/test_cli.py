# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the command line front end."""

import hashlib
import io
import stat
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from atomicwrite import cli
from atomicwrite.logging import read_log


@pytest.fixture(autouse=True)
def quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from reconfiguring the package logger under test."""
    monkeypatch.setattr(cli.logging_setup, "configure", lambda *a, **k: None)
    for var in ("ATOMICWRITE_TMPDIR", "ATOMICWRITE_TEMPLATE", "ATOMICWRITE_EVENT_LOG"):
        monkeypatch.delenv(var, raising=False)


def _stdin(monkeypatch: pytest.MonkeyPatch, data: bytes) -> None:
    monkeypatch.setattr(sys, "stdin", SimpleNamespace(buffer=io.BytesIO(data)))


def test_stdin_to_target(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _stdin(monkeypatch, b"from stdin")
    target = tmp_path / "out"
    assert cli.run([str(target)]) == 0
    assert target.read_bytes() == b"from stdin"


def test_input_file(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.write_bytes(b"from file")
    target = tmp_path / "out"
    assert cli.run([str(target), "-i", str(src), "--mode", "640"]) == 0
    assert target.read_bytes() == b"from file"
    assert stat.S_IMODE(target.stat().st_mode) == 0o640


def test_missing_input_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.run([str(tmp_path / "out"), "-i", str(tmp_path / "nope")]) == 1
    assert "error" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_min_size_failure_exit_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, b"tiny")
    target = tmp_path / "out"
    assert cli.run([str(target), "--min-size", "100"]) == 1
    assert "min_size" in capsys.readouterr().err
    assert not target.exists()


def test_checksum_flags(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _stdin(monkeypatch, b"payload")
    target = tmp_path / "out"
    digest = hashlib.sha1(b"payload").hexdigest()
    assert cli.run([str(target), "--checksum", "--expected-checksum", digest]) == 0
    assert target.read_bytes() == b"payload"


def test_mkpath_and_template(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _stdin(monkeypatch, b"x")
    target = tmp_path / "a" / "b" / "out"
    assert cli.run([str(target), "-p", "--template", "stageXXXXXX"]) == 0
    assert target.read_bytes() == b"x"


def test_missing_parent_without_mkpath(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _stdin(monkeypatch, b"x")
    assert cli.run([str(tmp_path / "a" / "out")]) == 1


def test_event_log_flag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _stdin(monkeypatch, b"x")
    log_path = tmp_path / "events.jsonl"
    assert cli.run([str(tmp_path / "out"), "--event-log", str(log_path)]) == 0
    (entry,) = read_log(log_path)
    assert entry["event"] == "commit.result"
    assert entry["source"] == "-"
    assert entry["target"] == str(tmp_path / "out")


def test_tmpdir_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _stdin(monkeypatch, b"x")
    monkeypatch.setenv("ATOMICWRITE_TMPDIR", str(tmp_path / "missing"))
    assert cli.run([str(tmp_path / "out")]) == 1
    monkeypatch.setenv("ATOMICWRITE_TMPDIR", str(tmp_path))
    assert cli.run([str(tmp_path / "out")]) == 0


@pytest.mark.parametrize("mode", ["abc", "99", "17777"])
def test_bad_mode_is_usage_error(tmp_path: Path, mode: str) -> None:
    with pytest.raises(SystemExit) as info:
        cli.run([str(tmp_path / "out"), "--mode", mode])
    assert info.value.code == 2


def test_request_mapping(tmp_path: Path) -> None:
    args = cli.build_parser().parse_args(
        [
            str(tmp_path / "out"),
            "--text",
            "--owner",
            "root:wheel",
            "--min-size",
            "3",
            "--tmpdir",
            str(tmp_path),
        ]
    )
    request = cli.request_from_args(args, io.BytesIO(), cli.load_settings({}))
    assert request.binary_mode is False
    assert request.owner_spec == "root:wheel"
    assert request.min_size == 3
    assert request.temp_dir == tmp_path
    assert request.create_parent_dirs is False
