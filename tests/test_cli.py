"""Tests for the menu-facing helpers and config loading."""

from __future__ import annotations

from pathlib import Path

from filecipher import cli, core, utils
from filecipher.session_log import SessionLog
import main

KEY = b"an_example_very_very_secret_key!"


def test_run_file_operation_logs_trail(tmp_path: Path, capsys):
    src = tmp_path / "input.txt"
    src.write_bytes(b"hello world")
    session = SessionLog()
    ok = cli.run_file_operation(core.seal_file, src, tmp_path / "encrypted.bin", KEY, session, "Encryption error")
    assert ok
    assert len(session) == 3
    assert all("[INFO]" in line for line in session.lines())
    assert capsys.readouterr().out.count("✅") == 3


def test_run_file_operation_logs_error(tmp_path: Path, capsys):
    session = SessionLog()
    ok = cli.run_file_operation(core.open_file, tmp_path / "missing.bin", tmp_path / "out.txt", KEY, session, "Decryption error")
    assert not ok
    assert len(session) == 1
    assert "[ERROR] Decryption error:" in session.lines()[0]
    assert "❌" in capsys.readouterr().out


def test_load_config_creates_default(tmp_path: Path):
    config_path = tmp_path / "config.ini"
    settings = main.load_config(config_path)
    assert config_path.exists()
    assert settings['default_input_path'] == 'input.txt'
    assert settings['default_output_path'] == 'encrypted.bin'
    assert settings['log_file'] == 'input.log'
    assert settings['progress_bar_style'] == 'unicode'
    assert settings['log_level'] == 'WARNING'


def test_load_config_reads_existing(tmp_path: Path):
    config_path = tmp_path / "config.ini"
    config_path.write_text("[Settings]\ndebug_mode = yes\n[UI]\nprogress_bar_style = ascii\n", encoding='utf-8')
    settings = main.load_config(config_path)
    assert settings == {'debug_mode': 'yes', 'progress_bar_style': 'ascii'}


def test_unencodable_key_is_logged_without_touching_files(tmp_path: Path, monkeypatch, capsys):
    src = tmp_path / "input.txt"
    src.write_bytes(b"hello world")
    out = tmp_path / "encrypted.bin"
    answers = iter([str(src), str(out)])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    monkeypatch.setattr(utils.getpass, "getpass", lambda prompt: "é" * 16)
    session = SessionLog()
    cli._file_action('seal', {'key_encoding': 'ascii'}, session)
    assert len(session) == 1
    assert "[ERROR] Key cannot be encoded as 'ascii'" in session.lines()[0]
    assert not out.exists()
    assert "❌" in capsys.readouterr().out
