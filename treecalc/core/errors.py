from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Optional


class ErrorCode(IntEnum):
    """Error codes shared by the parser, the evaluator and the CLI. The value
    of a code is also the process exit code."""

    OK = 0
    NO_MEMORY = 1
    DESTRUCTED = 2
    NULL_INPUT = 3
    SYNTAX_ERROR = 4
    NO_CLOSE_BRACKET = 5
    NUMBER_ERROR = 6
    UNIDENTIFIED_FUNCTION = 7
    UNEXPECTED_END = 8
    INVALID_TREE = 9
    DIVISION_BY_ZERO = 10
    INVALID_POWER = 11
    EVALUATION_ERROR = 12
    UNBOUND_VARIABLE = 13
    INPUT_ERROR = 14
    OUTPUT_ERROR = 15


ERROR_MESSAGES: Mapping[ErrorCode, str] = MappingProxyType(
    {
        ErrorCode.OK: "OK",
        ErrorCode.NO_MEMORY: "Failed to allocate memory",
        ErrorCode.DESTRUCTED: "Calculator has already been destroyed",
        ErrorCode.NULL_INPUT: "A required input was not provided",
        ErrorCode.SYNTAX_ERROR: "Syntax error",
        ErrorCode.NO_CLOSE_BRACKET: "Close bracket ')' required here",
        ErrorCode.NUMBER_ERROR: "Wrong number",
        ErrorCode.UNIDENTIFIED_FUNCTION: "Unidentified function",
        ErrorCode.UNEXPECTED_END: "Unexpected end of expression",
        ErrorCode.INVALID_TREE: "Expression tree is malformed",
        ErrorCode.DIVISION_BY_ZERO: "Division by zero",
        ErrorCode.INVALID_POWER: "Invalid real exponentiation",
        ErrorCode.EVALUATION_ERROR: "Numeric evaluation failed",
        ErrorCode.UNBOUND_VARIABLE: "Variable has no value",
        ErrorCode.INPUT_ERROR: "Cannot read the input expression",
        ErrorCode.OUTPUT_ERROR: "Cannot write the graph or result file",
    }
)


class CalculatorError(Exception):
    """Base class for every error raised by treecalc."""

    code: ErrorCode = ErrorCode.SYNTAX_ERROR

    def __init__(self, message: Optional[str] = None):
        self.message = message if message is not None else ERROR_MESSAGES[self.code]

    def __str__(self):
        return self.message


# ## Fatal errors
#
# These indicate a programming error rather than bad user input.


class FatalError(CalculatorError):
    pass


class InvalidUse(FatalError):
    """An operation was called on a destroyed calculator, or without a
    required input."""

    def __init__(self, code: ErrorCode, message: Optional[str] = None):
        self.code = code
        super().__init__(message)


class InvalidTreeStructure(FatalError):
    code = ErrorCode.INVALID_TREE


# ## Syntax errors


class ParserException(CalculatorError):
    """A syntax failure at a given offset in the source text."""

    def __init__(self, message: Optional[str] = None, position: int = 0):
        super().__init__(message)
        self.position = position


class UnexpectedEnd(ParserException):
    code = ErrorCode.UNEXPECTED_END


class MissingCloseParen(ParserException):
    code = ErrorCode.NO_CLOSE_BRACKET


class InvalidNumber(ParserException):
    code = ErrorCode.NUMBER_ERROR


class UnknownFunction(ParserException):
    code = ErrorCode.UNIDENTIFIED_FUNCTION


class InvalidSyntax(ParserException):
    code = ErrorCode.SYNTAX_ERROR


class TrailingTokens(InvalidSyntax):
    pass


# ## Evaluation errors


class EvaluationError(CalculatorError):
    code = ErrorCode.EVALUATION_ERROR


class DivisionByZero(EvaluationError):
    code = ErrorCode.DIVISION_BY_ZERO


class InvalidPower(EvaluationError):
    code = ErrorCode.INVALID_POWER


class UnboundVariable(EvaluationError):
    code = ErrorCode.UNBOUND_VARIABLE
