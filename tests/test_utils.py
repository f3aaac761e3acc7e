"""Tests for key input, hashing and small helpers."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from filecipher import crypto, utils

KEY_TEXT = "an_example_very_very_secret_key!"


def test_encode_key_checks_byte_length():
    assert utils.encode_key(KEY_TEXT, {}) == KEY_TEXT.encode()
    # 16 two-byte characters are 32 bytes in UTF-8.
    assert len(utils.encode_key("é" * 16, {})) == 32
    with pytest.raises(crypto.InvalidKeyLength):
        utils.encode_key("é" * 32, {})


def test_read_key_uses_getpass(monkeypatch):
    monkeypatch.setattr(utils.getpass, "getpass", lambda prompt: KEY_TEXT)
    assert utils.read_key({'warn_weak_keys': 'no'}) == KEY_TEXT.encode()


def test_read_key_rejects_short_key(monkeypatch):
    monkeypatch.setattr(utils.getpass, "getpass", lambda prompt: "too short")
    with pytest.raises(crypto.InvalidKeyLength):
        utils.read_key({})


def test_read_key_warns_on_weak_key(monkeypatch, capsys):
    monkeypatch.setattr(utils.getpass, "getpass", lambda prompt: "a" * 32)
    assert utils.read_key({'warn_weak_keys': 'yes'}) == b"a" * 32
    assert "easy to guess" in capsys.readouterr().out


def test_calculate_hash(tmp_path: Path):
    f = tmp_path / "data.bin"
    f.write_bytes(b"abc" * 1000)
    expected = hashlib.sha256(b"abc" * 1000).hexdigest()
    assert utils.calculate_hash(f, {'chunk_size_kb': '1'}, show_progress=False) == expected
    assert utils.calculate_hash(f, {}, show_progress=True) == expected
    assert utils.calculate_hash(f, {}, 'sha512', show_progress=False) == hashlib.sha512(b"abc" * 1000).hexdigest()


def test_calculate_hash_missing_file(tmp_path: Path):
    assert utils.calculate_hash(tmp_path / "nope", {}, show_progress=False) is None


@pytest.mark.parametrize("text, expected", [
    ("10", 10), ("1KB", 1024), ("1.5m", int(1.5 * 1024**2)), ("2 GB", 2 * 1024**3), ("abc", None),
])
def test_parse_size_string(text, expected):
    assert utils.parse_size_string(text) == expected


def test_format_duration():
    assert utils.format_duration(1.5) == "1.50 seconds"
    assert utils.format_duration(125) == "2 minute(s) and 5.00 seconds"


def test_prompt_path_default(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "")
    assert utils.prompt_path("Input file", "input.txt") == Path("input.txt")
    monkeypatch.setattr("builtins.input", lambda prompt: " other.txt ")
    assert utils.prompt_path("Input file", "input.txt") == Path("other.txt")


def test_title_suffix():
    assert utils.get_title_suffix({'debug_mode': 'yes'}) == " [DEBUG]"
    assert utils.get_title_suffix({}) == ""


@pytest.mark.parametrize("config", [{'key_encoding': 'ascii'}, {'key_encoding': 'no-such-codec'}])
def test_encode_key_reports_unusable_encoding(config):
    with pytest.raises(crypto.InvalidKeyEncoding) as excinfo:
        utils.encode_key("é" * 16, config)
    assert isinstance(excinfo.value, crypto.CipherError)
    assert isinstance(excinfo.value.__cause__, (UnicodeEncodeError, LookupError))
