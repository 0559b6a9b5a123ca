"""Colour helpers working on 8-bit channels: gamma correction and HSV."""

from __future__ import annotations

import colorsys

_GAMMA_EXPONENT = 2.8

# Perceptual brightness curve for 8-bit channels, rounded half up.
_GAMMA8 = tuple(
    int((level / 255) ** _GAMMA_EXPONENT * 255 + 0.5) for level in range(256)
)


def _byte(value: int) -> int:
    """Keep the low eight bits, as storing into an 8-bit channel does."""
    return int(value) & 0xFF


def _scale(fraction: float) -> int:
    return min(255, max(0, int(round(fraction * 255))))


def gamma(value: int) -> int:
    """Return the gamma-corrected brightness for an 8-bit channel value."""
    return _GAMMA8[_byte(value)]


def hsv_to_rgb(hue: int, saturation: int, value: int) -> tuple[int, int, int]:
    """Convert 8-bit hue, saturation and value to 8-bit red, green and blue.

    The hue runs 0..255 around the full colour circle.
    """
    red, green, blue = colorsys.hsv_to_rgb(
        _byte(hue) / 256, _byte(saturation) / 255, _byte(value) / 255
    )
    return _scale(red), _scale(green), _scale(blue)


def rgb_to_hsv(red: int, green: int, blue: int) -> tuple[int, int, int]:
    """Convert 8-bit red, green and blue to 8-bit hue, saturation and value."""
    hue, saturation, value = colorsys.rgb_to_hsv(
        _byte(red) / 255, _byte(green) / 255, _byte(blue) / 255
    )
    return int(round(hue * 256)) % 256, _scale(saturation), _scale(value)