"""An integer BASIC compiler and interpreter with LED strip, array and lookup-table extensions."""

__version__ = "0.1.0"