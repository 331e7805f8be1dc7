import pytest

from treecalc.core.errors import (
    ErrorCode,
    InvalidNumber,
    InvalidSyntax,
    MissingCloseParen,
    TrailingTokens,
    UnexpectedEnd,
    UnknownFunction,
)
from treecalc.core.expressions import (
    AddExpression,
    ConstantExpression,
    FunctionExpression,
    MultiplyExpression,
    NegateExpression,
    PowerExpression,
    SubtractExpression,
    VariableExpression,
)
from treecalc.core.parser import ExpressionParser


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2+3*4", 14),
        ("(2+3)*4", 20),
        ("2^3^2", 512),
        ("-3+5", 2),
        ("10-4-3", 3),
        ("64/4/2", 8),
        ("2*3^2", 18),
        ("-2^2", 4),
        ("2^-1", 0.5),
        ("1.5 * 4", 6),
        ("  7 -\t( 2 + 3 )  ", 2),
        ("sqrt(16) + abs(-3)", 7),
        ("lg(1000) * ln(exp(2))", 6),
        ("sgn(-4) - sgn(0)", -1),
    ],
)
def test_parser_evaluates_with_precedence(text: str, expected: float) -> None:
    expression = ExpressionParser().parse(text)
    assert expression.evaluate() == pytest.approx(expected)


def test_parser_left_associative_chains() -> None:
    expression = ExpressionParser().parse("1 - 2 + 3")
    assert isinstance(expression, AddExpression)
    assert isinstance(expression.left, SubtractExpression)
    assert isinstance(expression.right, ConstantExpression)


def test_parser_exponent_is_right_associative() -> None:
    expression = ExpressionParser().parse("2^3^2")
    assert isinstance(expression, PowerExpression)
    assert isinstance(expression.left, ConstantExpression)
    assert isinstance(expression.right, PowerExpression)


def test_parser_builds_node_kinds() -> None:
    expression = ExpressionParser().parse("-x * cos(y)")
    assert isinstance(expression, MultiplyExpression)
    assert isinstance(expression.left, NegateExpression)
    assert isinstance(expression.left.get_child(), VariableExpression)
    assert isinstance(expression.right, FunctionExpression)
    assert expression.right.name == "cos"
    # function arguments hang on the right branch
    assert expression.right.left is None
    assert isinstance(expression.right.right, VariableExpression)


def test_parser_multi_letter_variables() -> None:
    expression = ExpressionParser().parse("rate * time")
    assert isinstance(expression.left, VariableExpression)
    assert expression.left.identifier == "rate"
    assert expression.evaluate({"rate": 3, "time": 4}) == 12


@pytest.mark.parametrize(
    "text, error, position",
    [
        ("", UnexpectedEnd, 0),
        ("   ", UnexpectedEnd, 3),
        ("4+", UnexpectedEnd, 2),
        ("2^", UnexpectedEnd, 2),
        ("(1+2", MissingCloseParen, 4),
        ("(1+2 3", MissingCloseParen, 5),
        ("sin(1", MissingCloseParen, 5),
        ("foo(1)", UnknownFunction, 0),
        ("2 * bar (3)", UnknownFunction, 4),
        ("1.", InvalidNumber, 2),
        (".5", InvalidNumber, 0),
        ("1.2.3", InvalidNumber, 3),
        ("2x", InvalidNumber, 1),
        ("2+*3", InvalidSyntax, 2),
        ("sin + 1", InvalidSyntax, 4),
        ("X + 1", InvalidSyntax, 0),
        ("1+2)", TrailingTokens, 3),
        ("4+3+3     3", TrailingTokens, 10),
    ],
)
def test_parser_exceptions(text: str, error: type, position: int) -> None:
    with pytest.raises(error) as info:
        ExpressionParser().parse(text)
    assert info.value.position == position


def test_parser_try_parse_success() -> None:
    result = ExpressionParser().try_parse("1 + 2")
    assert result.ok
    assert result.kind == ErrorCode.OK
    assert result.position is None
    assert result.expression is not None
    assert result.expression.evaluate() == 3


@pytest.mark.parametrize(
    "text, kind, position",
    [
        ("(1+2", ErrorCode.NO_CLOSE_BRACKET, 4),
        ("foo(1)", ErrorCode.UNIDENTIFIED_FUNCTION, 0),
        ("3..1", ErrorCode.NUMBER_ERROR, 2),
        ("1 +", ErrorCode.UNEXPECTED_END, 3),
        ("1 $ 2", ErrorCode.SYNTAX_ERROR, 2),
    ],
)
def test_parser_try_parse_failure(text: str, kind: ErrorCode, position: int) -> None:
    result = ExpressionParser().try_parse(text)
    assert not result.ok
    assert result.expression is None
    assert result.kind == kind
    assert result.position == position


def test_parser_can_be_reused_after_failure() -> None:
    parser = ExpressionParser()
    assert not parser.try_parse("(1").ok
    assert parser.parse("(1)").evaluate() == 1
