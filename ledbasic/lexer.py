"""Tokenizer for one line of BASIC source."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from .errors import BasicSyntaxError


class TokenType(IntEnum):
    """Kinds of token; END_OF_LINE marks the end of the input."""

    END_OF_LINE = 0
    NAME = 1
    NUMBER = 2
    STRING = 3
    LP = 4
    RP = 5
    COMMA = 6
    ADD = 7
    SUBS = 8
    MUL = 9
    DIV = 10
    MOD = 11
    EQ = 12
    LT = 13
    GT = 14
    NE = 15
    LE = 16
    GE = 17
    AND = 18
    OR = 19
    FORMAT = 20
    SUB = 21
    END = 22
    RETURN = 23
    LOCAL = 24
    WHILE = 25
    FOR = 26
    TO = 27
    IF = 28
    ELSE = 29
    THEN = 30
    DIM = 31
    UBOUND = 32
    BYE = 33
    BREAK = 34
    RESUME = 35


KEYWORDS = {
    kind.name: kind
    for kind in TokenType
    if TokenType.AND <= kind <= TokenType.RESUME
}

_SINGLE = {
    "(": TokenType.LP,
    ")": TokenType.RP,
    ",": TokenType.COMMA,
    "+": TokenType.ADD,
    "-": TokenType.SUBS,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "\\": TokenType.MOD,
    "=": TokenType.EQ,
    "<": TokenType.LT,
    ">": TokenType.GT,
}

_DOUBLE = {
    "<>": TokenType.NE,
    "<=": TokenType.LE,
    "=>": TokenType.GE,
}

_WHITESPACE = " \t\n\v\f\r"
_NUMBER = re.compile(r"0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*")


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


@dataclass(frozen=True)
class Token:
    """A token; value holds the number, the string body or the upper-case name."""

    kind: TokenType
    text: str = ""
    value: int | str | None = None


class Lexer:
    """Reads tokens from one source line, with one token of push-back."""

    def __init__(self, line: str, line_number: int = 0) -> None:
        self.line = line
        self.line_number = line_number
        self.token = Token(TokenType.END_OF_LINE)
        self._pos = 0
        self._pushed_back = False

    def next(self) -> Token:
        """Return the next token, or the one pushed back by unget."""
        if self._pushed_back:
            self._pushed_back = False
            return self.token
        self.token = self._scan()
        return self.token

    def unget(self) -> None:
        """Make the next call to next() return the last token again."""
        self._pushed_back = True

    def want(self, kind: TokenType) -> Token | None:
        """Consume and return the next token if it is of this kind."""
        token = self.next()
        if token.kind == kind:
            return token
        self.unget()
        return None

    def need(self, kind: TokenType) -> Token:
        """Consume a token of this kind or raise a syntax error."""
        token = self.want(kind)
        if token is None:
            raise BasicSyntaxError("SYNTAX ERROR", self.line_number)
        return token

    def _scan(self) -> Token:
        line = self.line
        while self._pos < len(line) and line[self._pos] in _WHITESPACE:
            self._pos += 1
        if self._pos >= len(line) or line[self._pos] in "#\0":
            return Token(TokenType.END_OF_LINE)

        start = self._pos
        char = line[start]

        if char.isascii() and char.isdigit():
            match = _NUMBER.match(line, start)
            text = match.group()
            self._pos = match.end()
            if text[:2].lower() == "0x":
                number = int(text, 16)
            elif text.startswith("0"):
                number = int(text, 8)
            else:
                number = int(text)
            return Token(TokenType.NUMBER, text, number)

        if char in _SINGLE:
            pair = line[start:start + 2]
            if pair in _DOUBLE:
                self._pos += 2
                return Token(_DOUBLE[pair], pair)
            self._pos += 1
            return Token(_SINGLE[char], char)

        if _is_alpha(char):
            end = start
            while end < len(line) and _is_alnum(line[end]):
                end += 1
            self._pos = end
            word = line[start:end].upper()
            if word in KEYWORDS:
                return Token(KEYWORDS[word], word)
            return Token(TokenType.NAME, word, word)

        if char == '"':
            end = line.find('"', start + 1)
            if end < 0:
                body = line[start + 1:]
                self._pos = len(line)
            else:
                body = line[start + 1:end]
                self._pos = end + 1
            return Token(TokenType.STRING, line[start:self._pos], body)

        raise BasicSyntaxError("BAD TOKEN", self.line_number)


def tokenize(line: str, line_number: int = 0) -> list[Token]:
    """Return every token of a line, without the end-of-line marker."""
    lexer = Lexer(line, line_number)
    tokens = []
    while (token := lexer.next()).kind != TokenType.END_OF_LINE:
        tokens.append(token)
    return tokens