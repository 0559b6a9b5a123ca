"""Exceptions raised while compiling or running BASIC programs."""

from __future__ import annotations


class BasicError(Exception):
    """Base class for every error reported by the interpreter."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def with_line(self, line: int) -> "BasicError":
        """Return the same kind of error, tagged with a line number."""
        return type(self)(self.message, line)

    def __str__(self) -> str:
        if self.line is None:
            return f"ERROR: {self.message}"
        return f"ERROR {self.line}: {self.message}"


class BasicSyntaxError(BasicError):
    """A line could not be tokenized or compiled."""


class BasicRuntimeError(BasicError):
    """A fault raised while the compiled program was running."""