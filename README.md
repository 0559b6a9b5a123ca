# ledbasic

A compact integer BASIC. Each line is compiled into instructions for a small
stack machine and run there. A set of extension functions is included for
scripting an LED strip: array manipulation, HSV/RGB conversion, gamma
correction and a lookup table kept in CSV files.

## Installing

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Commands

### `ledbasic FILE`

```
ledbasic program.bas
```

Compiles the whole file, runs it, and then reads further lines from standard
input as immediate statements, showing a `N> ` prompt for each. Input ends at
end of file, at a line starting with CTRL+Z, or when `BYE` runs. The command
installs the small extension set: `PRINTS`, `SCALE256`, `ABS` and `SETARRAY`.

It exits with status 1 when the file has a syntax error and 0 otherwise.
Without a file argument, or when the file cannot be opened, it prints
`CANNOT OPEN` and exits with status 255.

### `ledbasic-shell [ROOT]`

Starts a small command shell that keeps its scripts and lookup-table files in
the directory `ROOT` (the current directory by default). It prints `Ready.`,
runs `startup.bas` from that directory if one exists, and then executes
command lines from standard input until it runs out:

| Command        | What it does                                                       |
|----------------|--------------------------------------------------------------------|
| `test ARGS...` | echoes its arguments                                               |
| `run`          | interactive BASIC session on the following input lines             |
| `run FILE`     | compiles and runs a script, then continues interactively           |
| `dir`          | lists the root directory, one level of subdirectories deep         |
| `list FILE`    | prints a file                                                      |
| `load FILE`    | writes the following input lines into a file until a CTRL+Z        |
| `del FILE`     | deletes a file                                                     |
| `ren OLD NEW`  | renames a file                                                     |

Scripts run from the shell have the full LED extension set installed.

## The language

All values are integers (string literals can be pushed and printed). Truth is
`-1`, falsehood `0`. Names and keywords are not case sensitive. A `#` starts a
comment. Numbers may be decimal, octal (leading `0`) or hexadecimal (`0x`).

```
# squares of 1..10
DIM A(10)
FOR I = 1 TO UBOUND(A)
  A(I) = I * I
END FOR

SUB SQUARE X
  RETURN X * X
END SUB

IF SQUARE(4) = 16
  FORMAT "four squared is %", SQUARE(4)
ELSE
  FORMAT "something is wrong"
END IF

> 7 / 2
PRINTS "done"
BYE
```

Statements:

* `NAME = expr`, `NAME(index) = expr` – assignment to a variable or to an
  array element; arrays are indexed from 1.
* `DIM NAME(size)` – create an array of zeros; `UBOUND(NAME)` gives its size.
* `SUB NAME a, b` … `END SUB`, `LOCAL x, y`, `RETURN [expr]` – subroutines
  with parameters and locals, callable as statements or in expressions.
  Subroutines can only be defined in a compiled file, not typed at the prompt.
* `WHILE expr` … `END WHILE`, `FOR I = a TO b` … `END FOR`.
* `IF expr THEN stmt`, or a block `IF expr` … `ELSE` / `ELSE IF expr` …
  `END IF`.
* `FORMAT "text", args` – each `%` or `$` in the text is replaced by the next
  argument.
* `> expr` – print a value.
* `BREAK`, `RESUME`, `BYE` – stop the program, continue after a fault or a
  break, and quit.

Operators, from lowest to highest binding: `AND OR`, `= < > <> <= =>`,
`+ -`, `* / \`. Division truncates toward zero and the backslash gives the
remainder. Note that "greater or equal" is written `=>`. Division or
remainder by zero and out-of-range array indices are run-time errors. Errors
are printed as `ERROR <line>: <message>`.

## LED extensions

`ledbasic.extensions.install_led_extensions` adds these functions:

* Maths: `LIMIT256(v)`, `LIMIT(v, lo, hi)`, `SCALE(v, inlo, inhi, outlo, outhi)`,
  `ABS(v)`, `SIN256(v)`, `RANDOM(lo, hi)` (`lo` inclusive, `hi` exclusive).
* Time: `TIMESTAMP(divider)` (milliseconds divided by `divider`),
  `WAIT(ms)`.
* Strip: `GETMAXLED(x)` (the argument is ignored), `SETLEDRGB(r, g, b)`
  (three arrays as long as the strip), `SETLEDCOL(r, g, b)`.
* Arrays: `SETARRAY(a, start, end, v)`, `SHIFTARRAY(a, n, fill)`,
  `ROTATEARRAY(a, n)`, `COPYARRAY(src, dst)`, `SCALELIMITARRAY(a, percent, lo, hi)`,
  `RGBTOHSVARRAY(r, g, b)`, `HSVTORGBARRAY(h, s, v)`.
* Lookup table: `LOADLUT(i)`, `SAVELUT(i)`, `LUTSIZE(i)`, `LUTTOARRAY(a)`,
  `ARRAYTOLUT(a)`, `LUT(pos)` (zero-based).

It also adds the `PRINTS expr` statement. Lookup tables are stored as
`LUT_<index>.csv` files of comma-separated integers.

## Using it from Python

```python
import io
from ledbasic.machine import Interpreter
from ledbasic.extensions import install_led_extensions
from ledbasic.leds import LedStrip

out = io.StringIO()
strip = LedStrip(8)
basic = Interpreter(out)
install_led_extensions(basic, strip)
basic.interpret(["SETLEDCOL(255, 0, 0)", "> GETMAXLED(0)"])
print(out.getvalue(), strip.displayed[0])
```

`Interpreter` offers `feed(line)` to compile and run single lines,
`run_program()`, `interpret(source, console)`, `variable(name)`, and the
extension points `register_function(name, arity, func)` and
`register_statement(name, func)`. `ledbasic.extensions` also exposes the
array helpers as plain functions (`set_array`, `shift_array`, `rotate_array`,
`copy_array`, `scale_limit_array`, `limit`, `scale`, `sin256`).
`ledbasic.values.BasicArray` is the one-based array type,
`ledbasic.lut.LookupTable` the lookup table, and `ledbasic.colors` holds
`gamma`, `hsv_to_rgb` and `rgb_to_hsv`. Syntax problems raise
`ledbasic.errors.BasicSyntaxError`, run-time faults
`ledbasic.errors.BasicRuntimeError`.

## What it does not do

`LedStrip` is an in-memory model: `show()` records the frame in `displayed`
and counts it in `frames_shown`, but nothing drives real LEDs. There are no
functions for reading or setting pins or analog inputs, and the shell talks
over standard input and output rather than a serial port.