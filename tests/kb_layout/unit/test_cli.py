"""Unit tests for the kb command line."""

import os
from unittest.mock import MagicMock, patch

import pytest

from kb_layout import __version__
from kb_layout.__main__ import main, parse_args


def fake_setxkbmap(current: str = "us", query_returncode: int = 0):
    """Build a subprocess.run replacement emulating setxkbmap."""
    calls = []

    def _run(cmd, **kwargs):
        calls.append(cmd)
        if cmd == ["setxkbmap", "-query"]:
            if query_returncode != 0:
                return MagicMock(returncode=query_returncode, stdout="", stderr="Cannot open display")
            return MagicMock(returncode=0, stdout=f"rules: evdev\nlayout:     {current}\n", stderr="")
        return MagicMock(returncode=0, stdout="", stderr="")

    return _run, calls


@pytest.fixture
def kb_env(monkeypatch, home_dir):
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("LAYOUTS", raising=False)
    monkeypatch.delenv("KEYBOARD_LAYOUT_FILE", raising=False)
    return home_dir


class TestParseArgs:
    """Argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.get is False
        assert args.set_layout is None
        assert args.next_layout is False
        assert args.quiet is False
        assert args.log_level == "WARNING"

    def test_short_flags(self):
        args = parse_args(["-s", "fr", "-q"])
        assert args.set_layout == "fr"
        assert args.quiet is True

        args = parse_args(["-n", "-g"])
        assert args.next_layout is True
        assert args.get is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """End-to-end CLI behaviour with setxkbmap mocked."""

    def test_default_prints_layout(self, kb_env, capsys):
        run, _ = fake_setxkbmap(current="fr")
        with patch("subprocess.run", side_effect=run):
            assert main([]) == 0
        assert capsys.readouterr().out == "fr\n"

    def test_get(self, kb_env, capsys):
        run, _ = fake_setxkbmap(current="de")
        with patch("subprocess.run", side_effect=run):
            assert main(["--get"]) == 0
        assert capsys.readouterr().out == "de\n"

    def test_get_takes_precedence_over_set(self, kb_env, capsys):
        run, calls = fake_setxkbmap(current="us")
        with patch("subprocess.run", side_effect=run):
            assert main(["-g", "-s", "fr"]) == 0
        assert calls == [["setxkbmap", "-query"]]
        assert capsys.readouterr().out == "us\n"

    def test_set_quiet(self, kb_env):
        run, calls = fake_setxkbmap()
        with patch("subprocess.run", side_effect=run):
            assert main(["--set", "fr", "--quiet"]) == 0
        assert calls == [["setxkbmap", "fr"]]
        assert (kb_env / ".layout").read_text() == "fr"

    def test_set_notifies(self, kb_env):
        run, calls = fake_setxkbmap()
        with patch("subprocess.run", side_effect=run):
            assert main(["--set", "fr"]) == 0
        assert calls[0] == ["setxkbmap", "fr"]
        assert calls[1][0] == "notify-send"

    def test_next_wraps(self, kb_env, monkeypatch):
        monkeypatch.setenv("LAYOUTS", "us,fr")
        run, calls = fake_setxkbmap(current="fr")
        with patch("subprocess.run", side_effect=run):
            assert main(["--next", "-q"]) == 0
        assert calls[-1] == ["setxkbmap", "us"]
        assert (kb_env / ".layout").read_text() == "us"

    def test_next_empty_layouts(self, kb_env, monkeypatch, capsys):
        monkeypatch.setenv("LAYOUTS", ",")
        run, _ = fake_setxkbmap()
        with patch("subprocess.run", side_effect=run):
            assert main(["--next"]) == 4
        assert "empty" in capsys.readouterr().err

    def test_next_unknown_current_layout(self, kb_env, monkeypatch, capsys):
        monkeypatch.setenv("LAYOUTS", "de,it")
        run, _ = fake_setxkbmap(current="us")
        with patch("subprocess.run", side_effect=run):
            assert main(["--next"]) == 5
        assert "not found" in capsys.readouterr().err

    def test_query_failure(self, kb_env, capsys):
        run, _ = fake_setxkbmap(query_returncode=1)
        with patch("subprocess.run", side_effect=run):
            assert main([]) == 2
        err = capsys.readouterr().err
        assert "Error" in err
        assert "Cannot open display" in err

    def test_setxkbmap_missing(self, kb_env, capsys):
        with patch("subprocess.run", side_effect=FileNotFoundError("setxkbmap")):
            assert main(["-g"]) == 2
        assert "setxkbmap -query" in capsys.readouterr().err

    def test_set_undecodable_argv_bytes(self, kb_env):
        layout = os.fsdecode(b"fr\xff")
        run, calls = fake_setxkbmap()
        with patch("subprocess.run", side_effect=run):
            assert main(["--set", layout, "-q"]) == 0
        assert calls == [["setxkbmap", layout]]
        assert (kb_env / ".layout").read_bytes() == b"fr\xff"

    def test_debug_logs_error_details(self, kb_env, monkeypatch, caplog):
        monkeypatch.setenv("LAYOUTS", "de,it")
        run, _ = fake_setxkbmap(current="us")
        with patch("subprocess.run", side_effect=run):
            assert main(["--next", "--log-level", "DEBUG"]) == 5
        assert "Error details" in caplog.text
        assert "'layouts': ['de', 'it']" in caplog.text
