from dataclasses import dataclass
from typing import Optional

from .cursor import END, Cursor, is_alpha, is_digit
from .errors import (
    ErrorCode,
    InvalidNumber,
    InvalidSyntax,
    MissingCloseParen,
    ParserException,
    TrailingTokens,
    UnexpectedEnd,
    UnknownFunction,
)
from .expressions import (
    FUNCTIONS,
    AddExpression,
    ConstantExpression,
    DivideExpression,
    FunctionExpression,
    MathExpression,
    MultiplyExpression,
    NegateExpression,
    PowerExpression,
    SubtractExpression,
    VariableExpression,
)

# Precedence checks
_IS_ADD = frozenset("+-")
_IS_MULT = frozenset("*/")
_IS_EXP = frozenset("^")


@dataclass(frozen=True)
class ParseResult:
    """The outcome of one parse attempt: either an expression tree or the
    syntax failure that stopped the parse."""

    text: str
    expression: Optional[MathExpression] = None
    error: Optional[ParserException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorCode:
        return self.error.code if self.error is not None else ErrorCode.OK

    @property
    def position(self) -> Optional[int]:
        return self.error.position if self.error is not None else None


# NOTE: This cannot be shared between threads because it stores state in self.cursor
class ExpressionParser:
    """Parser for converting text into binary trees. Trees encode the order of
    operations for an input, and allow evaluating it to determine the expression
    value.

    ### Grammar Rules

    Symbols:
    ```
    ( )    == Non-terminal
    { }*   == 0 or more occurrences
    { }?   == 0 or 1 occurrences
    [ ]    == Mandatory (1 must occur)
    |      == logical OR
    " "    == Terminal symbol (literal)
    ```

    Rules:
    ```
    (Number)       = [ digit ]+ { "." [ digit ]+ }?
    (Identifier)   = [ "a"-"z" ]+
    (Function)     = [ (Identifier) ] "(" (AddExp) ")"
    (Atom)         = [ "(" (AddExp) ")" | (Function) | (Number) | (Identifier) ]
    (UnaryExp)     = { "-" }? (Atom)
    (ExpExp)       = (UnaryExp) { "^" (ExpExp) }?
    (MultExp)      = (ExpExp) { { "*" | "/" } (ExpExp) }*
    (AddExp)       = (MultExp) { { "+" | "-" } (MultExp) }*
    (start)        = (AddExp)
    ```
    """

    cursor: Cursor

    def parse(self, input_text: str) -> MathExpression:
        """Parse a string representation of an expression into a tree
        that can be later evaluated.

        Returns : The evaluatable expression tree.

        # Raises
        ParserException: a subclass naming the kind of syntax error, with the
        offset of the offending character in `position`.
        """
        self.cursor = Cursor(input_text)
        if self.cursor.at_end():
            raise UnexpectedEnd(
                "Cannot parse an empty expression", self.cursor.position
            )

        expression = self.parse_add()
        if not self.cursor.at_end():
            position = self.cursor.position
            leftover = input_text[position:].strip()
            raise TrailingTokens(f"Trailing characters: {leftover}", position)
        return expression

    def try_parse(self, input_text: str) -> ParseResult:
        """Parse without raising for syntax errors. The returned result holds
        either the expression or the error."""
        try:
            return ParseResult(text=input_text, expression=self.parse(input_text))
        except ParserException as error:
            return ParseResult(text=input_text, error=error)

    def parse_add(self) -> MathExpression:
        exp = self.parse_mult()
        while self.check(_IS_ADD):
            op = self.cursor.advance()
            right = self.parse_mult()
            if op == "+":
                exp = AddExpression(exp, right)
            else:
                exp = SubtractExpression(exp, right)
        return exp

    def parse_mult(self) -> MathExpression:
        exp = self.parse_exponent()
        while self.check(_IS_MULT):
            op = self.cursor.advance()
            right = self.parse_exponent()
            if op == "*":
                exp = MultiplyExpression(exp, right)
            else:
                exp = DivideExpression(exp, right)
        return exp

    def parse_exponent(self) -> MathExpression:
        exp = self.parse_unary()
        if self.check(_IS_EXP):
            self.cursor.advance()
            # Recursing on the right makes chained exponents right-associative
            exp = PowerExpression(exp, self.parse_exponent())
        return exp

    def parse_unary(self) -> MathExpression:
        if self.cursor.peek() == "-":
            self.cursor.advance()
            return NegateExpression(self.parse_atom())
        return self.parse_atom()

    def parse_atom(self) -> MathExpression:
        ch = self.cursor.peek()
        if ch == END:
            raise UnexpectedEnd(
                "Expected a number, variable, function or parenthesis",
                self.cursor.position,
            )
        if ch == "(":
            self.cursor.advance()
            exp = self.parse_add()
            self.eat_close_paren()
            return exp
        if is_digit(ch) or ch == ".":
            return self.parse_number()
        if is_alpha(ch):
            return self.parse_identifier()
        raise InvalidSyntax(f"Unexpected character: {ch}", self.cursor.position)

    def parse_identifier(self) -> MathExpression:
        start = self.cursor.position
        name = self.eat_token(is_alpha)
        if self.cursor.peek() == "(":
            if name not in FUNCTIONS:
                raise UnknownFunction(f"Unidentified function: {name}", start)
            return self.parse_function(name)
        if name in FUNCTIONS:
            raise InvalidSyntax(
                f"Expected ( after function name: {name}", self.cursor.position
            )
        return VariableExpression(name)

    def parse_function(self, name: str) -> MathExpression:
        self.cursor.advance()
        exp = self.parse_add()
        self.eat_close_paren()
        return FunctionExpression(name, exp)

    def parse_number(self) -> MathExpression:
        self.cursor.skip_whitespace()
        start = self.cursor.position
        text = self.eat_token(is_digit)
        if text == "":
            raise InvalidNumber("A number must start with a digit", start)
        if self.cursor.peek_raw() == ".":
            self.cursor.advance_raw()
            fraction = self.eat_token(is_digit)
            if fraction == "":
                raise InvalidNumber(
                    "Expected digits after the decimal point", self.cursor.position
                )
            text = f"{text}.{fraction}"
        if self.cursor.peek_raw() == "." or is_alpha(self.cursor.peek_raw()):
            raise InvalidNumber(
                f"Unexpected character in number: {self.cursor.peek_raw()}",
                self.cursor.position,
            )
        return ConstantExpression(float(text))

    def eat_token(self, type_fn) -> str:
        """Eat all of the characters of a given type from the cursor until a
        different type is hit, and return the text."""
        res = ""
        while self.cursor.peek_raw() != END and type_fn(self.cursor.peek_raw()):
            res = res + self.cursor.advance_raw()
        return res

    def eat_close_paren(self) -> None:
        if self.cursor.peek() != ")":
            raise MissingCloseParen(
                "Close bracket ')' required here", self.cursor.position
            )
        self.cursor.advance()

    def check(self, chars: frozenset) -> bool:
        """Check if the next character is a member of a set of operators

        `Returns` True if the next non-space character is in the set else False"""
        return self.cursor.peek() in chars
