from .cursor import END, Cursor
from .errors import (
    ERROR_MESSAGES,
    CalculatorError,
    DivisionByZero,
    ErrorCode,
    EvaluationError,
    FatalError,
    InvalidNumber,
    InvalidPower,
    InvalidSyntax,
    InvalidTreeStructure,
    InvalidUse,
    MissingCloseParen,
    ParserException,
    TrailingTokens,
    UnboundVariable,
    UnexpectedEnd,
    UnknownFunction,
)
from .expressions import (
    FUNCTIONS,
    AddExpression,
    BinaryExpression,
    ConstantExpression,
    DivideExpression,
    FunctionExpression,
    MathExpression,
    MultiplyExpression,
    NegateExpression,
    NodeType,
    PowerExpression,
    SubtractExpression,
    UnaryExpression,
    VariableExpression,
    format_number,
)
from .graph import to_dot, write_dot
from .parser import ExpressionParser, ParseResult
from .report import format_error
from .tree import LEFT, RIGHT, STOP, BinaryTreeNode
from .variables import MappingResolver, VariableTable, prompt_resolver
