"""A single lookup table that can be loaded from and saved to CSV files."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

from .errors import BasicRuntimeError

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_int(text: str) -> int:
    """Parse a leading integer the lenient way; anything else counts as zero."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class LookupTable:
    """The one lookup table of the system, stored as LUT_<index>.csv files."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._values: list[int] | None = None
        self.index: int | None = None

    def _path(self, index: int) -> Path:
        return self.directory / f"LUT_{index & 0xFF}.csv"

    @staticmethod
    def _require_index(index: int, command: str) -> int:
        index = int(index)
        if index < 0:
            raise BasicRuntimeError(f"{command}: NEGATIVE INDEX")
        return index & 0xFF

    @property
    def loaded(self) -> bool:
        """True when a table loaded from a file is active."""
        return self._values is not None and self.index is not None

    def check(self, index: int) -> int | None:
        """Count the entries of a stored table; None if there is no such file.

        A file without commas counts as empty and gives 0.
        """
        try:
            data = self._path(index).read_bytes()
        except OSError:
            return None
        commas = data.count(b",")
        return commas + 1 if commas else 0

    def load(self, index: int) -> int:
        """Load a stored table and return its number of entries."""
        index = self._require_index(index, "LOADLUT")
        if self.index == index and self._values is not None:
            if not self._values:
                raise BasicRuntimeError("LOADLUT: FAILED TO LOAD LUT")
            return len(self._values)
        size = self.check(index)
        if size is None:
            raise BasicRuntimeError("LOADLUT: FAILED TO LOAD LUT")
        try:
            text = self._path(index).read_bytes().decode("latin-1")
        except OSError as error:
            raise BasicRuntimeError("LOADLUT: FAILED TO LOAD LUT") from error
        *fields, last = text.split(",")
        values = [_to_int(field) for field in fields]
        if last and len(values) < size:
            values.append(_to_int(last))
        self._values = values
        self.index = index
        if not values:
            raise BasicRuntimeError("LOADLUT: FAILED TO LOAD LUT")
        return len(values)

    def save(self, index: int) -> int:
        """Write the table to the file for this index; returns 1."""
        index = self._require_index(index, "SAVELUT")
        if not self._values:
            raise BasicRuntimeError("SAVELUT: FAILED TO SAVE LUT")
        try:
            self._path(index).write_text(",".join(str(v) for v in self._values))
        except OSError as error:
            raise BasicRuntimeError("SAVELUT: FAILED TO SAVE LUT") from error
        return 1

    def size(self, index: int) -> int:
        """Entries of the table for this index, loaded or stored."""
        index = self._require_index(index, "LUTSIZE")
        if self._values is not None and self.index == index:
            return len(self._values)
        size = self.check(index)
        if size is None:
            raise BasicRuntimeError("LUTSIZE: LUT DOES NOT EXISTS")
        return size

    def from_values(self, values: Iterable[int]) -> int:
        """Replace the table with these values; it then has no file index."""
        self._values = [int(v) for v in values]
        self.index = None
        return len(self._values)

    def value(self, position: int) -> int:
        """Return the entry at a zero-based position."""
        position = int(position)
        if position < 0:
            raise BasicRuntimeError("LUT: NEGATIVE INDEX")
        if not self.loaded:
            raise BasicRuntimeError("LUT: NO LUT LOADED")
        if position >= len(self._values):
            raise BasicRuntimeError("LUT: INDEX OUT OF BOUNDS")
        return self._values[position]

    def values(self) -> list[int]:
        """Return a copy of the entries of a table loaded from a file."""
        if not self.loaded:
            raise BasicRuntimeError("NO LUT LOADED")
        return list(self._values)