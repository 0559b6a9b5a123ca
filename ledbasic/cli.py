"""Command that compiles a BASIC file, runs it, then reads lines from standard input."""

from __future__ import annotations

import sys

from .extensions import install_basic_extensions
from .machine import Interpreter


def main(argv: list[str] | None = None) -> int:
    """Run the file named by the first argument; return the interpreter's exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("CANNOT OPEN: no file given")
        return 255
    path = args[0]
    try:
        with open(path) as handle:
            lines = handle.read().splitlines()
    except OSError:
        print(f"CANNOT OPEN: {path}")
        return 255
    interpreter = Interpreter(sys.stdout)
    install_basic_extensions(interpreter)
    return interpreter.interpret(lines, sys.stdin)


if __name__ == "__main__":
    sys.exit(main())