"""An in-memory LED strip that the LED extensions draw on."""

from __future__ import annotations

from collections.abc import Iterable

from .colors import gamma
from .errors import BasicRuntimeError

NUM_LEDS = 64

Pixel = tuple[int, int, int]


def _constrain(value: int) -> int:
    return min(255, max(0, int(value)))


class LedStrip:
    """A strip of RGB pixels; show() publishes the current pixels as a frame."""

    def __init__(self, count: int = NUM_LEDS) -> None:
        if count < 0:
            raise ValueError("LED count must not be negative")
        self.pixels: list[Pixel] = [(0, 0, 0)] * count
        self.displayed: list[Pixel] = list(self.pixels)
        self.frames_shown = 0

    def __len__(self) -> int:
        return len(self.pixels)

    def set_pixels(self, reds: Iterable[int], greens: Iterable[int],
                   blues: Iterable[int]) -> list[Pixel]:
        """Load one channel array per colour, gamma-corrected, and show them."""
        channels = [list(reds), list(greens), list(blues)]
        if any(len(channel) != len(self) for channel in channels):
            raise BasicRuntimeError("SETLEDRGB: WRONG ARRAY LENGTH")
        self.pixels = [
            (gamma(r), gamma(g), gamma(b)) for r, g, b in zip(*channels)
        ]
        return self.show()

    def fill(self, red: int, green: int, blue: int) -> list[Pixel]:
        """Set every pixel to one colour, clamped to 0..255, and show it."""
        pixel = (gamma(_constrain(red)), gamma(_constrain(green)),
                 gamma(_constrain(blue)))
        self.pixels = [pixel] * len(self)
        return self.show()

    def show(self) -> list[Pixel]:
        """Publish the current pixels and return the frame shown."""
        self.displayed = list(self.pixels)
        self.frames_shown += 1
        return list(self.displayed)