"""Tests for the timestamped session log."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pytest

from filecipher import crypto
from filecipher.session_log import SessionLog

LINE_RE = re.compile(r"^\d{2}:\d{2}:\d{2} \[(INFO|ERROR)\] .+$")


def test_push_formats_and_appends():
    session = SessionLog()
    line = session.push('INFO', "Read 11 bytes from input.txt")
    assert LINE_RE.match(line)
    assert line.endswith("[INFO] Read 11 bytes from input.txt")
    assert session.lines() == [line]


def test_extend_keeps_trail_order():
    session = SessionLog()
    session.extend('INFO', ["first", "second", "third"])
    assert [l.split("] ", 1)[1] for l in session.lines()] == ["first", "second", "third"]
    assert len(session) == 3


def test_lines_returns_copy():
    session = SessionLog()
    session.push('INFO', "one")
    session.lines().append("tampered")
    assert len(session) == 1


def test_push_mirrors_to_logging(caplog):
    session = SessionLog()
    with caplog.at_level(logging.INFO, logger="filecipher"):
        session.push('ERROR', "Decryption error: bad padding")
    assert any(r.levelno == logging.ERROR and "bad padding" in r.message for r in caplog.records)


def test_save_writes_lines(tmp_path: Path):
    session = SessionLog()
    session.extend('INFO', ["a", "b"])
    log_file = tmp_path / "input.log"
    session.save(log_file)
    written = log_file.read_text(encoding='utf-8').splitlines()
    assert len(written) == 2
    assert written[0].endswith("[INFO] a")
    assert session.lines()[-1].endswith(f"Logs saved to {log_file}")


def test_save_failure_raises_and_records(tmp_path: Path):
    session = SessionLog()
    with pytest.raises(crypto.IoFailure):
        session.save(tmp_path / "missing_dir" / "input.log")
    assert "[ERROR]" in session.lines()[-1]
