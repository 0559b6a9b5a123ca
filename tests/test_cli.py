import io
import sys

from ledbasic.cli import main


def write(tmp_path, text):
    path = tmp_path / "prog.bas"
    path.write_text(text)
    return str(path)


def test_no_argument(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([]) == 255
    assert "CANNOT OPEN" in capsys.readouterr().out


def test_missing_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    missing = str(tmp_path / "none.bas")
    assert main([missing]) == 255
    assert f"CANNOT OPEN: {missing}" in capsys.readouterr().out


def test_runs_program(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([write(tmp_path, "> 6\n")]) == 0
    assert "6\n" in capsys.readouterr().out


def test_syntax_error_returns_one(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([write(tmp_path, "= 3\n")]) == 1
    assert "ERROR 1: BAD STATEMENT" in capsys.readouterr().out


def test_prints_statement(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([write(tmp_path, 'PRINTS "hello"\n')]) == 0
    assert "hello\n" in capsys.readouterr().out


def test_abs_function(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([write(tmp_path, "> ABS(-4)\n")]) == 0
    assert "4\n" in capsys.readouterr().out


def test_bye_in_console_stops(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("BYE\n> 9\n"))
    assert main([write(tmp_path, "X = 1\n")]) == 0
    assert "9\n" not in capsys.readouterr().out