"""Compiler and stack machine for the BASIC dialect."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, TextIO

from .errors import BasicError, BasicRuntimeError, BasicSyntaxError
from .lexer import Lexer, TokenType
from .values import BasicArray

T = TokenType

_LEVELS = (
    (T.AND, T.OR),
    (T.EQ, T.LT, T.GT, T.NE, T.LE, T.GE),
    (T.ADD, T.SUBS),
    (T.MUL, T.DIV, T.MOD),
)

_BREAK_CHAR = "\x1a"


class _Op(Enum):
    PUSH = auto()
    LOAD = auto()
    STORE = auto()
    ECHO = auto()
    FORMAT = auto()
    BINOP = auto()
    JMP = auto()
    FALSE = auto()
    FOR = auto()
    NEXT = auto()
    CALL = auto()
    RETURN = auto()
    SETRET = auto()
    RV = auto()
    DROP = auto()
    DIM = auto()
    LOADI = auto()
    STOREI = auto()
    UBOUND = auto()
    CALLFN = auto()
    STMT = auto()
    RESUME = auto()
    BREAK = auto()
    BYE = auto()


class _Mode(Enum):
    DIM = auto()
    SUB = auto()


@dataclass
class _Instruction:
    op: _Op
    arg: Any = None
    line: int = 0
    target: int | None = None


@dataclass
class _Sub:
    params: list[str]
    extra: list[str] = field(default_factory=list)
    address: int = 0

    @property
    def names(self) -> list[str]:
        return self.params + self.extra


@dataclass
class _Block:
    kind: TokenType
    top: int = 0
    test: int = 0
    name: str = ""
    ends: list[int] = field(default_factory=list)
    pending: int | None = None


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _binary(kind: TokenType, a: Any, b: Any, line: int) -> Any:
    if kind == T.ADD:
        return a + b
    if kind == T.SUBS:
        return a - b
    if kind == T.MUL:
        return a * b
    if kind == T.DIV:
        if not b:
            raise BasicRuntimeError("DIVISION BY ZERO", line)
        return _trunc_div(a, b)
    if kind == T.MOD:
        if not b:
            raise BasicRuntimeError("MODULUS OF ZERO", line)
        return a - b * _trunc_div(a, b)
    if kind == T.AND:
        return a & b
    if kind == T.OR:
        return a | b
    compare = {
        T.EQ: a == b, T.NE: a != b,
        T.LT: a < b, T.GT: a > b, T.LE: a <= b, T.GE: a >= b,
    }[kind]
    return -1 if compare else 0


class Interpreter:
    """Compiles BASIC lines into code and runs it on a value stack."""

    def __init__(self, output: TextIO | None = None) -> None:
        self.output = output if output is not None else sys.stdout
        self._code: list[_Instruction] = []
        self._cpc = 0
        self._pc = 0
        self._opc: int | None = None
        self._ipc = 0
        self._stack: list[Any] = []
        self._values: dict[str, Any] = {}
        self._modes: dict[str, _Mode] = {}
        self._subs: dict[str, _Sub] = {}
        self._ret: Any = 0
        self._blocks: list[_Block] = []
        self._compile = 0
        self._loading = False
        self._cursub: str | None = None
        self._temp = 0
        self._line_number = 0
        self._functions: dict[str, tuple[int, Callable[..., Any]]] = {}
        self._statements: dict[str, Callable[[Any], Any]] = {}

    # -- extension points ------------------------------------------------

    def register_function(self, name: str, arity: int, func: Callable[..., Any]) -> None:
        """Make NAME(args) call func(*args); its result is the call's value."""
        self._functions[name.upper()] = (arity, func)

    def register_statement(self, name: str, func: Callable[[Any], Any]) -> None:
        """Make the statement NAME expr call func with the expression's value."""
        self._statements[name.upper()] = func

    def variable(self, name: str) -> Any:
        """Return the current value of a variable; unknown ones are zero."""
        return self._values.get(name.upper(), 0)

    # -- driving ---------------------------------------------------------

    def feed(self, line: str) -> bool:
        """Compile one line and, unless inside a block, run it.

        Returns False once BYE has run, True otherwise.
        """
        self._line_number += 1
        lexer = Lexer(line, self._line_number)
        try:
            self._statement(lexer)
            if lexer.want(T.END_OF_LINE) is None:
                self._syntax("TOKENS AFTER STATEMENT")
        except BasicSyntaxError:
            if not self._loading:
                self._cpc = self._ipc
                self._blocks.clear()
                self._compile = 0
                self._temp = 0
            raise
        if self._compile:
            return True
        self._opc = self._pc
        self._pc = self._ipc
        self._emit(_Op.BREAK)
        return self._run()

    def run_program(self) -> bool:
        """Finish compiling and run the program from where it stands."""
        self._ipc = self._cpc + 1
        self._emit(_Op.BYE)
        self._compile = 0
        self._loading = False
        self._blocks.clear()
        self._temp = 0
        return self._run()

    def interpret(self, source: Iterable[str] | None = None,
                  console: Iterable[str] | None = None) -> int:
        """Compile and run source, then take immediate lines from console.

        Returns 1 for a syntax error in the source, 0 otherwise.
        """
        if source is not None:
            self._compile = 1
            self._loading = True
            for line in source:
                if line.startswith(_BREAK_CHAR):
                    break
                try:
                    self.feed(line)
                except BasicSyntaxError as error:
                    self._report(error)
                    return 1
            if not self._guarded(self.run_program):
                return 0
        for line in console or ():
            self.output.write(f"{self._line_number + 1}> ")
            if line.startswith(_BREAK_CHAR):
                break
            if not self._guarded(lambda: self.feed(line)):
                return 0
        self._guarded(self.run_program)
        return 0

    def _guarded(self, action: Callable[[], bool]) -> bool:
        try:
            return action()
        except BasicError as error:
            self._report(error)
            return True

    def _report(self, error: BasicError) -> None:
        self.output.write(f"{error}\n")

    # -- compiler --------------------------------------------------------

    def _syntax(self, message: str) -> None:
        raise BasicSyntaxError(message, self._line_number)

    def _emit(self, op: _Op, arg: Any = None) -> int:
        if len(self._code) > self._cpc:
            del self._code[self._cpc:]
        self._code.append(_Instruction(op, arg, self._line_number))
        self._cpc += 1
        return self._cpc - 1

    def _patch(self, index: int, target: int) -> None:
        self._code[index].target = target

    def _expr(self, lexer: Lexer, level: int = 0) -> None:
        def operand() -> None:
            if level + 1 < len(_LEVELS):
                self._expr(lexer, level + 1)
            else:
                self._base(lexer)

        operand()
        while True:
            token = lexer.next()
            if token.kind not in _LEVELS[level]:
                lexer.unget()
                return
            operand()
            self._emit(_Op.BINOP, token.kind)

    def _expr_list(self, lexer: Lexer) -> int:
        if lexer.want(T.END_OF_LINE) is not None:
            return 0
        count = 0
        while True:
            self._expr(lexer)
            count += 1
            if lexer.want(T.COMMA) is None:
                return count

    def _peek(self, lexer: Lexer) -> TokenType:
        kind = lexer.next().kind
        lexer.unget()
        return kind

    def _emit_call(self, name: str, count: int, keep: bool) -> None:
        if name in self._functions:
            arity = self._functions[name][0]
            if count != arity:
                plural = "ARGUMENT" if arity == 1 else "ARGUMENTS"
                self._syntax(f"{name}: {arity} {plural} REQUIRED")
            self._emit(_Op.CALLFN, (name, count))
            if not keep:
                self._emit(_Op.DROP, 1)
            return
        sub = self._subs.get(name)
        if self._modes.get(name) is not _Mode.SUB or sub is None or count != len(sub.params):
            self._syntax("BAD SUB/ARG COUNT")
        self._emit(_Op.CALL, name)
        if keep:
            self._emit(_Op.RV)

    def _base(self, lexer: Lexer) -> None:
        negate = lexer.want(T.SUBS) is not None
        if negate:
            self._emit(_Op.PUSH, 0)
        if (token := lexer.want(T.NUMBER)) is not None:
            self._emit(_Op.PUSH, token.value)
        elif (token := lexer.want(T.STRING)) is not None:
            self._emit(_Op.PUSH, token.value)
        elif (token := lexer.want(T.NAME)) is not None:
            name = token.value
            if lexer.want(T.LP) is None:
                self._emit(_Op.LOAD, name)
            elif self._modes.get(name) is _Mode.DIM:
                self._expr(lexer)
                lexer.need(T.RP)
                self._emit(_Op.LOADI, name)
            else:
                count = 0
                while self._peek(lexer) != T.RP:
                    self._expr(lexer)
                    count += 1
                    if lexer.want(T.COMMA) is None:
                        break
                lexer.need(T.RP)
                self._emit_call(name, count, keep=True)
        elif lexer.want(T.LP) is not None:
            self._expr(lexer)
            lexer.need(T.RP)
        elif lexer.want(T.UBOUND) is not None:
            lexer.need(T.LP)
            name = lexer.need(T.NAME).value
            lexer.need(T.RP)
            self._emit(_Op.UBOUND, name)
        else:
            self._syntax("BAD EXPRESSION")
        if negate:
            self._emit(_Op.BINOP, T.SUBS)

    def _statement(self, lexer: Lexer) -> None:
        token = lexer.next()
        kind = token.kind
        if kind == T.FORMAT:
            self._emit(_Op.PUSH, lexer.need(T.STRING).value)
            count = self._expr_list(lexer) if lexer.want(T.COMMA) else 0
            self._emit(_Op.FORMAT, count)
        elif kind == T.SUB:
            self._compile_sub(lexer)
        elif kind == T.LOCAL:
            if self._cursub is None:
                self._syntax("LOCAL OUTSIDE SUB")
            sub = self._subs[self._cursub]
            if lexer.want(T.END_OF_LINE) is None:
                while True:
                    sub.extra.append(lexer.need(T.NAME).value)
                    if lexer.want(T.COMMA) is None:
                        break
        elif kind == T.RETURN:
            if self._cursub is None:
                self._syntax("RETURN OUTSIDE SUB")
            if self._temp:
                self._emit(_Op.DROP, self._temp)
            if lexer.want(T.END_OF_LINE) is None:
                self._expr(lexer)
                self._emit(_Op.SETRET)
            self._emit(_Op.RETURN, self._cursub)
        elif kind == T.WHILE:
            self._compile += 1
            top = self._cpc
            self._expr(lexer)
            test = self._emit(_Op.FALSE)
            self._blocks.append(_Block(T.WHILE, top=top, test=test))
        elif kind == T.FOR:
            self._compile += 1
            name = lexer.need(T.NAME).value
            self._temp += 1
            lexer.need(T.EQ)
            self._expr(lexer)
            self._emit(_Op.STORE, name)
            lexer.need(T.TO)
            self._expr(lexer)
            top = self._emit(_Op.FOR, name)
            self._blocks.append(_Block(T.FOR, top=top, test=top, name=name))
        elif kind == T.IF:
            self._expr(lexer)
            test = self._emit(_Op.FALSE)
            if lexer.want(T.THEN) is not None:
                self._statement(lexer)
                self._patch(test, self._cpc)
            else:
                self._compile += 1
                self._blocks.append(_Block(T.IF, pending=test))
        elif kind == T.ELSE:
            if not self._blocks or self._blocks[-1].kind != T.IF:
                self._syntax("SYNTAX ERROR")
            block = self._blocks[-1]
            block.ends.append(self._emit(_Op.JMP))
            if block.pending is not None:
                self._patch(block.pending, self._cpc)
            block.pending = None
            if lexer.want(T.IF) is not None:
                self._expr(lexer)
                block.pending = self._emit(_Op.FALSE)
        elif kind == T.END:
            self._compile_end(lexer)
        elif kind == T.NAME:
            self._compile_name(lexer, token.value)
        elif kind == T.DIM:
            name = lexer.need(T.NAME).value
            self._modes[name] = _Mode.DIM
            lexer.need(T.LP)
            self._expr(lexer)
            lexer.need(T.RP)
            self._emit(_Op.DIM, name)
        elif kind == T.RESUME:
            has_value = lexer.want(T.END_OF_LINE) is None
            if has_value:
                self._expr(lexer)
            self._emit(_Op.RESUME, has_value)
        elif kind == T.BREAK:
            self._emit(_Op.BREAK)
        elif kind == T.BYE:
            self._emit(_Op.BYE)
        elif kind == T.GT:
            self._expr(lexer)
            self._emit(_Op.ECHO)
        elif kind != T.END_OF_LINE:
            self._syntax("BAD STATEMENT")

    def _compile_sub(self, lexer: Lexer) -> None:
        if not self._compile:
            self._syntax("SUB MUST BE COMPILED")
        self._compile += 1
        name = lexer.need(T.NAME).value
        self._modes[name] = _Mode.SUB
        self._cursub = name
        params = []
        if lexer.want(T.END_OF_LINE) is None:
            while True:
                params.append(lexer.need(T.NAME).value)
                if lexer.want(T.COMMA) is None:
                    break
        jump = self._emit(_Op.JMP)
        self._subs[name] = _Sub(params, address=self._cpc)
        self._blocks.append(_Block(T.SUB, test=jump, name=name))

    def _compile_end(self, lexer: Lexer) -> None:
        if not self._blocks:
            self._syntax("SYNTAX ERROR")
        block = self._blocks.pop()
        lexer.need(block.kind)
        self._compile -= 1
        if block.kind == T.SUB:
            self._emit(_Op.RETURN, block.name)
            self._patch(block.test, self._cpc)
        elif block.kind == T.WHILE:
            self._patch(block.test, self._cpc + 1)
            jump = self._emit(_Op.JMP)
            self._patch(jump, block.top)
        elif block.kind == T.FOR:
            self._patch(block.test, self._cpc + 2)
            self._emit(_Op.NEXT, block.name)
            jump = self._emit(_Op.JMP)
            self._patch(jump, block.top)
            self._temp -= 1
        else:
            for end in block.ends:
                self._patch(end, self._cpc)
            if block.pending is not None:
                self._patch(block.pending, self._cpc)

    def _compile_name(self, lexer: Lexer, name: str) -> None:
        if lexer.want(T.EQ) is not None:
            self._expr(lexer)
            self._emit(_Op.STORE, name)
        elif lexer.want(T.LP) is not None:
            self._expr(lexer)
            lexer.need(T.RP)
            lexer.need(T.EQ)
            self._expr(lexer)
            self._emit(_Op.STOREI, name)
        elif name in self._statements:
            self._expr(lexer)
            self._emit(_Op.STMT, name)
        else:
            self._emit_call(name, self._expr_list(lexer), keep=False)

    # -- machine ---------------------------------------------------------

    def _array(self, name: str, line: int) -> BasicArray:
        value = self._values.get(name)
        if not isinstance(value, BasicArray):
            raise BasicRuntimeError("NOT AN ARRAY", line)
        return value

    def _run(self) -> bool:
        while True:
            instruction = self._code[self._pc]
            self._pc += 1
            try:
                op = instruction.op
                if op is _Op.BREAK:
                    if self._opc is not None:
                        self._pc = self._opc
                    self._cpc = self._ipc
                    return True
                if op is _Op.BYE:
                    return False
                self._step(instruction)
            except BasicError as error:
                self._fault()
                raise error if error.line is not None else error.with_line(instruction.line)
            except (TypeError, IndexError) as error:
                self._fault()
                raise BasicRuntimeError("TYPE MISMATCH", instruction.line) from error

    def _fault(self) -> None:
        self._opc = self._pc
        self._cpc = self._ipc

    def _step(self, ins: _Instruction) -> None:
        stack = self._stack
        op, arg, line = ins.op, ins.arg, ins.line
        if op is _Op.PUSH:
            stack.append(arg)
        elif op is _Op.LOAD:
            stack.append(self._values.get(arg, 0))
        elif op is _Op.STORE:
            self._values[arg] = stack.pop()
        elif op is _Op.ECHO:
            self.output.write(f"{stack.pop()}\n")
        elif op is _Op.FORMAT:
            args = iter(stack[len(stack) - arg:])
            fmt = stack[-arg - 1]
            del stack[-arg - 1:]
            parts = []
            for char in str(fmt):
                if char in "%$":
                    value = next(args, None)
                    if value is None:
                        raise BasicRuntimeError("BAD FORMAT", line)
                    parts.append(str(value))
                else:
                    parts.append(char)
            self.output.write("".join(parts) + "\n")
        elif op is _Op.BINOP:
            right = stack.pop()
            left = stack.pop()
            stack.append(_binary(arg, left, right, line))
        elif op is _Op.JMP:
            self._pc = ins.target
        elif op is _Op.FALSE:
            if not stack.pop():
                self._pc = ins.target
        elif op is _Op.FOR:
            if self._values.get(arg, 0) >= stack[-1]:
                self._pc = ins.target
                stack.pop()
        elif op is _Op.NEXT:
            self._values[arg] = self._values.get(arg, 0) + 1
        elif op is _Op.CALL:
            sub = self._subs[arg]
            count = len(sub.params)
            if count:
                passed = stack[-count:]
                stack[-count:] = [self._values.get(p, 0) for p in sub.params]
                self._values.update(zip(sub.params, passed))
            stack.extend(self._values.get(name, 0) for name in sub.extra)
            stack.append(self._pc)
            self._pc = sub.address
        elif op is _Op.RETURN:
            self._pc = stack.pop()
            for name in reversed(self._subs[arg].names):
                self._values[name] = stack.pop()
        elif op is _Op.SETRET:
            self._ret = stack.pop()
        elif op is _Op.RV:
            stack.append(self._ret)
        elif op is _Op.DROP:
            del stack[len(stack) - arg:]
        elif op is _Op.DIM:
            self._values[arg] = BasicArray(stack.pop())
        elif op is _Op.LOADI:
            index = stack.pop()
            stack.append(self._array(arg, line)[index])
        elif op is _Op.STOREI:
            value = stack.pop()
            index = stack.pop()
            self._array(arg, line)[index] = value
        elif op is _Op.UBOUND:
            stack.append(len(self._array(arg, line)))
        elif op is _Op.CALLFN:
            name, count = arg
            args = stack[len(stack) - count:]
            del stack[len(stack) - count:]
            result = self._functions[name][1](*args)
            stack.append(0 if result is None else result)
        elif op is _Op.STMT:
            self._statements[arg](stack.pop())
        elif op is _Op.RESUME:
            if arg:
                stack.pop()
            if self._opc is not None:
                self._pc = self._opc
            self._opc = self._pc
            self._cpc = self._ipc