import pytest

from ledbasic.errors import BasicError, BasicRuntimeError, BasicSyntaxError


def test_message_with_line_number():
    error = BasicSyntaxError("SYNTAX ERROR", 7)
    assert str(error) == "ERROR 7: SYNTAX ERROR"
    assert error.line == 7
    assert error.message == "SYNTAX ERROR"


def test_message_without_line_number():
    error = BasicRuntimeError("BOUNDS")
    assert error.line is None
    assert str(error) == "ERROR: BOUNDS"


def test_with_line_keeps_kind_and_message():
    error = BasicRuntimeError("DIVISION BY ZERO").with_line(3)
    assert isinstance(error, BasicRuntimeError)
    assert str(error) == "ERROR 3: DIVISION BY ZERO"


@pytest.mark.parametrize("kind", [BasicSyntaxError, BasicRuntimeError])
def test_subclasses_share_basic_error_behaviour(kind):
    error = kind("BAD TOKEN").with_line(1)
    assert isinstance(error, BasicError)
    assert error.message == "BAD TOKEN"
    assert error.line == 1
    assert str(error) == "ERROR 1: BAD TOKEN"


def test_syntax_error_is_not_runtime_error():
    error = BasicSyntaxError("BAD STATEMENT", 2)
    assert not isinstance(error, BasicRuntimeError)
    assert str(error) == "ERROR 2: BAD STATEMENT"