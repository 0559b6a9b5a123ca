"""Values that BASIC programs work with besides plain integers."""

from __future__ import annotations

from collections.abc import Iterator

from .errors import BasicRuntimeError


class BasicArray:
    """A one-based integer array created by DIM; elements start at zero."""

    def __init__(self, size: int) -> None:
        size = int(size)
        if size < 0:
            raise BasicRuntimeError("BAD DIMENSION")
        self._items = [0] * size

    def __len__(self) -> int:
        return len(self._items)

    def _check(self, index: int) -> int:
        index = int(index)
        if not 1 <= index <= len(self._items):
            raise BasicRuntimeError("BOUNDS")
        return index - 1

    def __getitem__(self, index: int) -> int:
        return self._items[self._check(index)]

    def __setitem__(self, index: int, value: int) -> None:
        self._items[self._check(index)] = int(value)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._items))

    def resize(self, size: int) -> None:
        """Change the size, dropping elements past the end or adding zeros."""
        size = int(size)
        if size < 0:
            raise BasicRuntimeError("BAD DIMENSION")
        current = len(self._items)
        if size <= current:
            del self._items[size:]
        else:
            self._items.extend([0] * (size - current))

    def __repr__(self) -> str:
        return f"BasicArray({self._items!r})"