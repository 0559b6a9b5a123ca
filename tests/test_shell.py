import io
import sys

import pytest

from ledbasic.shell import Shell, main


def make_shell(tmp_path, text=""):
    out = io.StringIO()
    return Shell(tmp_path, io.StringIO(text), out), out


def test_test_command_lists_arguments(tmp_path):
    shell, out = make_shell(tmp_path)
    assert shell.execute("test alpha beta") == 0
    text = out.getvalue()
    assert "Test function called" in text
    assert "3 Arguments" in text
    assert "Argument 1 : alpha" in text
    assert "Argument 2 : beta" in text


def test_unknown_command(tmp_path):
    shell, out = make_shell(tmp_path)
    assert shell.execute("nosuch") == -1
    assert "nosuch" in out.getvalue()


def test_empty_line_does_nothing(tmp_path):
    shell, out = make_shell(tmp_path)
    assert shell.execute("   \n") == 0
    assert out.getvalue() == ""


@pytest.mark.parametrize("line", ["del", "ren a", "list", "dir x", "load", "run a b"])
def test_wrong_argument_count(tmp_path, line):
    shell, out = make_shell(tmp_path)
    assert shell.execute(line) == 1
    assert "Wrong argument count" in out.getvalue()


def test_delete_existing_and_missing(tmp_path):
    (tmp_path / "x.bas").write_text("> 1\n")
    shell, out = make_shell(tmp_path)
    shell.execute("del /x.bas")
    assert not (tmp_path / "x.bas").exists()
    assert "- file deleted" in out.getvalue()
    shell.execute("del /x.bas")
    assert "- delete failed" in out.getvalue()


def test_rename(tmp_path):
    (tmp_path / "a.bas").write_text("content")
    shell, out = make_shell(tmp_path)
    shell.execute("ren /a.bas /b.bas")
    assert (tmp_path / "b.bas").read_text() == "content"
    assert not (tmp_path / "a.bas").exists()
    assert "- file renamed" in out.getvalue()


def test_rename_missing(tmp_path):
    shell, out = make_shell(tmp_path)
    shell.execute("ren /a.bas /b.bas")
    assert "- rename failed" in out.getvalue()


def test_list_file(tmp_path):
    (tmp_path / "p.bas").write_text("> 1\n> 2\n")
    shell, out = make_shell(tmp_path)
    shell.execute("list /p.bas")
    assert out.getvalue().endswith("> 1\n> 2\n")
    assert "Listing file: /p.bas" in out.getvalue()


def test_list_missing_file(tmp_path):
    shell, out = make_shell(tmp_path)
    shell.execute("list /none.bas")
    assert "- failed to open file for reading" in out.getvalue()


def test_dir_lists_files_and_subdirectories(tmp_path):
    content = "hello"
    (tmp_path / "a.txt").write_text(content)
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "inner.txt").write_text(content)
    shell, out = make_shell(tmp_path)
    assert shell.execute("dir") == 0
    text = out.getvalue()
    assert "Listing directory: /\n" in text
    assert f"  FILE: a.txt\tSIZE: {len(content)}" in text
    assert "  DIR : sub" in text
    assert "Listing directory: /sub" in text
    assert "  FILE: inner.txt" in text


def test_load_writes_lines_until_break(tmp_path):
    shell, out = make_shell(tmp_path, "load /prog.bas\n> 1\n> 2\n\x1a\n")
    shell.loop()
    assert (tmp_path / "prog.bas").read_text() == "> 1\n> 2\n"
    assert "2 Lines written to file" in out.getvalue()


def test_load_rejects_long_line(tmp_path):
    long_line = "x" * 300 + "\n"
    shell, out = make_shell(tmp_path, "load /prog.bas\n> 1\n" + long_line)
    shell.loop()
    assert (tmp_path / "prog.bas").read_text() == "> 1\n"
    assert "Line 2 too long" in out.getvalue()


def test_run_file(tmp_path):
    (tmp_path / "p.bas").write_text("> 7\n")
    shell, out = make_shell(tmp_path)
    assert shell.execute("run /p.bas") == 0
    text = out.getvalue()
    assert "RUNNING /p.bas" in text
    assert "File Opened" in text
    assert "7\n" in text
    assert text.endswith("DONE\n")


def test_run_missing_file(tmp_path):
    shell, out = make_shell(tmp_path)
    shell.execute("run /none.bas")
    assert "File does not exists" in out.getvalue()
    assert out.getvalue().endswith("DONE\n")


def test_run_file_with_syntax_error(tmp_path):
    (tmp_path / "p.bas").write_text("= 3\n")
    shell, out = make_shell(tmp_path)
    shell.execute("run /p.bas")
    text = out.getvalue()
    assert "ERROR 1: BAD STATEMENT" in text
    assert "Error Exit Code: 1" in text


def test_run_sets_led_colour(tmp_path):
    (tmp_path / "p.bas").write_text("SETLEDCOL 300, 255, -5\n")
    shell, _ = make_shell(tmp_path)
    shell.execute("run /p.bas")
    assert len(shell.strip.displayed) == 64
    assert set(shell.strip.displayed) == {(255, 255, 0)}


def test_run_uses_lut_files_in_root(tmp_path):
    (tmp_path / "LUT_1.csv").write_text("10,20,30")
    (tmp_path / "p.bas").write_text("> LOADLUT(1)\n> LUT(2)\n")
    shell, out = make_shell(tmp_path)
    shell.execute("run /p.bas")
    assert "3\n30\n" in out.getvalue()


def test_interactive_run(tmp_path):
    shell, out = make_shell(tmp_path, "run\n> 5\n\x1a\n")
    shell.loop()
    text = out.getvalue()
    assert "RUNNING IN INTERACTIVE MODE" in text
    assert "5\n" in text
    assert "DONE" in text


def test_startup_runs_script(tmp_path):
    (tmp_path / "startup.bas").write_text("> 8\n")
    shell, out = make_shell(tmp_path)
    assert shell.startup() == 0
    assert "8\n" in out.getvalue()
    assert "STARTUP DONE" in out.getvalue()


def test_startup_without_script(tmp_path):
    shell, out = make_shell(tmp_path)
    assert shell.startup() == 0
    assert "No startup.bas found, proceeding to shell" in out.getvalue()


def test_main_reads_commands(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("test one\n"))
    assert main([str(tmp_path)]) == 0
    text = capsys.readouterr().out
    assert "Ready." in text
    assert "No startup.bas found" in text
    assert "Argument 1 : one" in text