"""A small command shell that manages script files and runs them on the LED strip."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TextIO

from .extensions import install_led_extensions
from .leds import LedStrip
from .lut import LookupTable
from .machine import Interpreter

_BREAK_CHAR = "\x1a"
_MAX_LINE = 254
_STARTUP = "/startup.bas"


class Shell:
    """Reads command lines and runs them against files kept under a root directory."""

    def __init__(self, root: str | Path, stdin: TextIO | None = None,
                 stdout: TextIO | None = None) -> None:
        self.root = Path(root)
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self._lines: Iterator[str] = iter(self.stdin)
        self.strip = LedStrip()
        self.lut = LookupTable(self.root)
        self._commands: dict[str, Callable[[list[str]], int]] = {
            "test": self._test,
            "run": self._run,
            "dir": self._dir,
            "list": self._list,
            "ren": self._rename,
            "del": self._delete,
            "load": self._load,
        }

    # -- driving ---------------------------------------------------------

    def execute(self, line: str) -> int:
        """Run one command line and return its exit code."""
        words = line.split()
        if not words:
            return 0
        handler = self._commands.get(words[0])
        if handler is None:
            self._say(f'"{words[0]}": command not found')
            return -1
        return handler(words)

    def startup(self) -> int:
        """Run startup.bas from the root when it exists."""
        if not self._path(_STARTUP).exists():
            self._say("No startup.bas found, proceeding to shell")
            return 0
        result = self._run_file(_STARTUP)
        self._report(result, "STARTUP DONE")
        return result

    def loop(self) -> None:
        """Execute command lines from the input until it runs out."""
        for line in self._lines:
            self.execute(line)

    # -- helpers ---------------------------------------------------------

    def _say(self, text: str = "") -> None:
        self.stdout.write(f"{text}\n")

    def _path(self, name: str) -> Path:
        return self.root / name.lstrip("/")

    def _wrong_count(self) -> int:
        self._say("Wrong argument count")
        return 1

    def _interpreter(self) -> Interpreter:
        interpreter = Interpreter(self.stdout)
        install_led_extensions(interpreter, self.strip, self.lut)
        return interpreter

    def _report(self, result: int, done: str) -> None:
        if result != 0:
            self._say(f"Error Exit Code: {result}")
        else:
            self._say(done)

    def _run_file(self, name: str) -> int:
        try:
            text = self._path(name).read_text()
        except OSError:
            text = ""
        if not text:
            self._say("File does not exists")
            return 0
        self._say("File Opened")
        return self._interpreter().interpret(text.splitlines(), self._lines)

    # -- commands --------------------------------------------------------

    def _test(self, args: list[str]) -> int:
        self._say("Test function called")
        self._say(f"{len(args)} Arguments")
        for position, arg in enumerate(args):
            self._say(f"Argument {position} : {arg}")
        return 0

    def _run(self, args: list[str]) -> int:
        if len(args) == 1:
            self._say("RUNNING IN INTERACTIVE MODE. Press CTRL+Z, Return to exit.")
            result = self._interpreter().interpret(self._lines, self._lines)
        elif len(args) == 2:
            self._say(f"RUNNING {args[1]}")
            result = self._run_file(args[1])
        else:
            return self._wrong_count()
        self._report(result, "DONE")
        return 0

    def _dir(self, args: list[str]) -> int:
        if len(args) != 1:
            return self._wrong_count()
        self._list_dir(self.root, "/", 1)
        return 0

    def _list_dir(self, directory: Path, shown: str, levels: int) -> None:
        self._say(f"Listing directory: {shown}")
        if not directory.exists():
            self._say("- failed to open directory")
            return
        if not directory.is_dir():
            self._say(" - not a directory")
            return
        for entry in sorted(directory.iterdir()):
            if entry.is_dir():
                self._say(f"  DIR : {entry.name}")
                if levels:
                    self._list_dir(entry, f"{shown.rstrip('/')}/{entry.name}", levels - 1)
            else:
                self._say(f"  FILE: {entry.name}\tSIZE: {entry.stat().st_size}")

    def _list(self, args: list[str]) -> int:
        if len(args) != 2:
            return self._wrong_count()
        self._say(f"Listing file: {args[1]}")
        self._say()
        path = self._path(args[1])
        try:
            if path.is_dir():
                raise IsADirectoryError(str(path))
            content = path.read_text(errors="replace")
        except OSError:
            self._say("- failed to open file for reading")
            return 0
        self.stdout.write(content)
        return 0

    def _rename(self, args: list[str]) -> int:
        if len(args) != 3:
            return self._wrong_count()
        self._say(f"Renaming file {args[1]} to {args[2]}")
        try:
            self._path(args[1]).rename(self._path(args[2]))
        except OSError:
            self._say("- rename failed")
        else:
            self._say("- file renamed")
        return 0

    def _delete(self, args: list[str]) -> int:
        if len(args) != 2:
            return self._wrong_count()
        self._say(f"Deleting file: {args[1]}")
        try:
            self._path(args[1]).unlink()
        except OSError:
            self._say("- delete failed")
        else:
            self._say("- file deleted")
        return 0

    def _load(self, args: list[str]) -> int:
        if len(args) != 2:
            return self._wrong_count()
        self._say("Ready for file. Press CTRL+Z to end transmission and save file "
                  f"{args[1]}")
        try:
            target = open(self._path(args[1]), "w", newline="")
        except OSError:
            self._say("- failed to open file for writing")
            return 1
        written = 0
        with target:
            for chunk in self._lines:
                text, stop, _ = chunk.partition(_BREAK_CHAR)
                if len(text) > _MAX_LINE:
                    self._say(f"Line {written + 1} too long")
                    break
                if stop:
                    break
                if text.endswith("\n"):
                    target.write(text)
                    written += 1
        self._say(f"{written} Lines written to file")
        return 0


def main(argv: list[str] | None = None) -> int:
    """Start the shell on a root directory, run startup.bas, then read commands."""
    parser = argparse.ArgumentParser(prog="ledbasic-shell")
    parser.add_argument("root", nargs="?", default=".",
                        help="directory that holds scripts and LUT files")
    options = parser.parse_args(argv)
    shell = Shell(options.root, sys.stdin, sys.stdout)
    shell.stdout.write("Ready.\n")
    shell.startup()
    shell.loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())