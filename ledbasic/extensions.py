"""Built-in functions and statements added to the BASIC interpreter."""

from __future__ import annotations

import math
import random
import time
from collections.abc import Callable, Iterable
from typing import Any

from .colors import hsv_to_rgb, rgb_to_hsv
from .errors import BasicRuntimeError
from .leds import LedStrip
from .lut import LookupTable
from .machine import Interpreter
from .values import BasicArray


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _require_array(value: Any, command: str) -> BasicArray:
    if not isinstance(value, BasicArray):
        raise BasicRuntimeError(f"{command}: BAD ARRAY POINTER")
    return value


def _assign(array: BasicArray, values: Iterable[int]) -> None:
    for position, value in enumerate(values, start=1):
        array[position] = value


def limit(value: int, low: int, high: int) -> int:
    """Clamp a value to low..high; a value above high gives high."""
    value = int(value)
    if value > high:
        return int(high)
    if value < low:
        return int(low)
    return value


def sin256(value: int) -> int:
    """Sine over a 0..255 circle, scaled to 0..255."""
    sine = math.sin((int(value) / 255.0) * 2 * math.pi)
    return int(((sine + 1) / 2) * 255)


def scale(value: int, in_min: int, in_max: int, out_min: int, out_max: int) -> int:
    """Map a value from one integer range onto another, truncating."""
    span = int(in_max) - int(in_min)
    if span == 0:
        raise BasicRuntimeError("SCALE: DIVISION BY ZERO")
    numerator = (int(value) - int(in_min)) * (int(out_max) - int(out_min))
    return _trunc_div(numerator, span) + int(out_min)


def set_array(array: BasicArray, start: int, end: int, value: int) -> None:
    """Set the elements start..end (one-based, inclusive) to a value."""
    array = _require_array(array, "SETARRAY")
    start, end = int(start), int(end)
    if start < 1 or end < 1 or start > end or end > len(array):
        raise BasicRuntimeError("SETARRAY: INDEX OUT OF BOUNDS")
    for position in range(start, end + 1):
        array[position] = value


def shift_array(array: BasicArray, amount: int, fill: int) -> None:
    """Shift right (positive) or left (negative), filling freed slots."""
    array = _require_array(array, "SHIFTARRAY")
    amount = int(amount)
    size = len(array)
    if abs(amount) > size:
        raise BasicRuntimeError("SHIFTARRAY: SHIFT AMOUNT LARGER THEN ARRAY SIZE")
    items = list(array)
    if amount > 0:
        shifted = [fill] * amount + items[:size - amount]
    elif amount < 0:
        count = -amount
        shifted = items[count:] + [fill] * count
    else:
        return
    _assign(array, shifted)


def rotate_array(array: BasicArray, amount: int) -> None:
    """Rotate right (positive) or left (negative) by a number of places."""
    array = _require_array(array, "ROTATEARRAY")
    size = len(array)
    if size == 0:
        return
    steps = int(amount) % size
    if steps == 0:
        return
    items = list(array)
    _assign(array, items[-steps:] + items[:-steps])


def copy_array(source: BasicArray, target: BasicArray) -> None:
    """Copy source into target, truncating or padding with zeros."""
    source = _require_array(source, "COPYARRAY")
    target = _require_array(target, "COPYARRAY")
    items = list(source)[:len(target)]
    items.extend([0] * (len(target) - len(items)))
    _assign(target, items)


def scale_limit_array(array: BasicArray, percent: int, low: int, high: int) -> None:
    """Scale every element by a percentage, truncating, then clamp it."""
    array = _require_array(array, "SCALELIMITARRAY")
    factor = int(percent) / 100.0
    scaled = []
    for item in array:
        value = int(item * factor)
        if value < low:
            value = int(low)
        if value > high:
            value = int(high)
        scaled.append(value)
    _assign(array, scaled)


def _register_prints(interpreter: Interpreter) -> None:
    def prints(message: Any) -> None:
        interpreter.output.write(f"{message}\n")

    interpreter.register_statement("PRINTS", prints)


def install_basic_extensions(interpreter: Interpreter) -> None:
    """Add the small desktop set: PRINTS, SCALE256, ABS and SETARRAY."""
    _register_prints(interpreter)
    interpreter.register_function("SCALE256", 1, lambda value: 2 * int(value))
    interpreter.register_function("ABS", 1, lambda value: abs(int(value)))
    interpreter.register_function("SETARRAY", 4, set_array)


def _milliseconds() -> int:
    return int(time.monotonic() * 1000)


def _convert_arrays(command: str, convert: Callable[[int, int, int], tuple[int, int, int]],
                    first: Any, second: Any, third: Any) -> None:
    arrays = [_require_array(array, command) for array in (first, second, third)]
    if len({len(array) for array in arrays}) != 1:
        raise BasicRuntimeError(f"{command}: ARRAY LENGTH NOT MATCHING")
    converted = [convert(*triple) for triple in zip(*arrays)]
    for array, channel in zip(arrays, zip(*converted)):
        _assign(array, channel)


def install_led_extensions(interpreter: Interpreter, strip: LedStrip | None = None,
                           lut: LookupTable | None = None,
                           clock: Callable[[], int] | None = None,
                           rng: random.Random | None = None) -> None:
    """Add the LED set: maths, timing, arrays, colours, the strip and the LUT.

    clock returns milliseconds; rng supplies RANDOM.
    """
    strip = strip if strip is not None else LedStrip()
    lut = lut if lut is not None else LookupTable(".")
    clock = clock if clock is not None else _milliseconds
    rng = rng if rng is not None else random.Random()

    def wait(milliseconds: int) -> int:
        deadline = clock() + max(0, int(milliseconds))
        while (now := clock()) < deadline:
            time.sleep((deadline - now) / 1000)
        return 0

    def timestamp(divider: int) -> int:
        divider = int(divider)
        if divider == 0:
            raise BasicRuntimeError("TIMESTAMP: DIVISION BY ZERO")
        return _trunc_div(int(clock()), divider)

    def random_between(low: int, high: int) -> int:
        low, high = int(low), int(high)
        return rng.randrange(low, high) if low < high else low

    def set_led_rgb(reds: Any, greens: Any, blues: Any) -> int:
        channels = [_require_array(array, "SETLEDRGB") for array in (reds, greens, blues)]
        strip.set_pixels(*channels)
        return 0

    def set_led_color(red: int, green: int, blue: int) -> int:
        strip.fill(red, green, blue)
        return 0

    def rgb_arrays_to_hsv(reds: Any, greens: Any, blues: Any) -> int:
        _convert_arrays("RGBTOHSVARRAY", rgb_to_hsv, reds, greens, blues)
        return 0

    def hsv_arrays_to_rgb(hues: Any, saturations: Any, values: Any) -> int:
        _convert_arrays("HSVTORGBARRAY", hsv_to_rgb, hues, saturations, values)
        return 0

    def lut_to_array(array: Any) -> int:
        array = _require_array(array, "LUTTOARRAY")
        if not lut.loaded:
            raise BasicRuntimeError("LUTTOARRAY: NO LUT LOADED")
        values = lut.values()[:len(array)]
        array.resize(len(values))
        _assign(array, values)
        return 0

    def array_to_lut(array: Any) -> int:
        lut.from_values(_require_array(array, "ARRAYTOLUT"))
        return 0

    _register_prints(interpreter)
    functions: dict[str, tuple[int, Callable[..., Any]]] = {
        "LIMIT256": (1, lambda value: limit(value, 0, 255)),
        "SCALE": (5, scale),
        "LIMIT": (3, limit),
        "ABS": (1, lambda value: abs(int(value))),
        "SIN256": (1, sin256),
        "SETARRAY": (4, set_array),
        "ROTATEARRAY": (2, rotate_array),
        "SHIFTARRAY": (3, shift_array),
        "COPYARRAY": (2, copy_array),
        "GETMAXLED": (1, lambda _ignored: len(strip)),
        "WAIT": (1, wait),
        "SETLEDRGB": (3, set_led_rgb),
        "SETLEDCOL": (3, set_led_color),
        "TIMESTAMP": (1, timestamp),
        "RANDOM": (2, random_between),
        "SCALELIMITARRAY": (4, scale_limit_array),
        "RGBTOHSVARRAY": (3, rgb_arrays_to_hsv),
        "HSVTORGBARRAY": (3, hsv_arrays_to_rgb),
        "LOADLUT": (1, lut.load),
        "SAVELUT": (1, lut.save),
        "LUTSIZE": (1, lut.size),
        "LUTTOARRAY": (1, lut_to_array),
        "ARRAYTOLUT": (1, array_to_lut),
        "LUT": (1, lut.value),
    }
    for name, (arity, func) in functions.items():
        interpreter.register_function(name, arity, func)