from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union

from wasabi import msg, table

from .config import CalculatorConfig
from .core.errors import (
    CalculatorError,
    ErrorCode,
    EvaluationError,
    FatalError,
    InvalidUse,
)
from .core.expressions import MathExpression, format_number
from .core.graph import write_dot
from .core.parser import ExpressionParser, ParseResult
from .core.report import format_error
from .core.variables import Resolver, VariableTable, prompt_resolver
from .slogging import with_logger


class CalculatorState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DESTROYED = "destroyed"


@with_logger
class Calculator:
    """Compile an expression into a tree and evaluate it.

    A calculator owns the tree of the last expression that compiled and the
    table of variable values it has seen. Unknown variables are passed to the
    `resolver`, which prompts on the console unless another one is given:

    ```python
    from treecalc import Calculator, MappingResolver

    calc = Calculator(resolver=MappingResolver({"x": 2}), silent=True)
    calc.compile("x^2 + 1")
    assert calc.calculate() == 5
    ```
    """

    state: CalculatorState
    expression: Optional[MathExpression]
    variables: VariableTable
    result: Optional[float]

    def __init__(
        self,
        *,
        config: Optional[CalculatorConfig] = None,
        resolver: Optional[Resolver] = prompt_resolver,
        variables: Optional[Mapping[str, Union[float, int]]] = None,
        silent: bool = False,
    ):
        self.state = CalculatorState.UNINITIALIZED
        if config is None:
            config = CalculatorConfig()
        if not isinstance(config, CalculatorConfig):
            raise ValueError("config must be a CalculatorConfig instance")
        self.config = config
        self.silent = silent
        self.parser = ExpressionParser()
        self.expression = None
        self.result = None
        self.variables = VariableTable(variables, resolver=resolver)
        self.state = CalculatorState.READY

    def __enter__(self) -> "Calculator":
        self._check_ready()
        return self

    def __exit__(self, *args) -> None:
        if self.state is not CalculatorState.DESTROYED:
            self.destroy()

    def _check_ready(self) -> None:
        if self.state is CalculatorState.DESTROYED:
            raise InvalidUse(ErrorCode.DESTRUCTED)
        if self.state is not CalculatorState.READY:
            raise InvalidUse(ErrorCode.NULL_INPUT, "Calculator is not initialized")

    def compile(self, text: str) -> ParseResult:
        """Parse `text` into the calculator's expression tree.

        On a syntax error the previous tree is kept, the error is logged and
        reported, and the returned result describes the failure."""
        self._check_ready()
        if text is None:
            raise InvalidUse(ErrorCode.NULL_INPUT, "No expression text was given")
        result = self.parser.try_parse(text)
        if result.error is not None:
            self.report_error(result.error, text=text, position=result.position)
            return result
        self.expression = result.expression
        return result

    def calculate(self) -> float:
        """Validate and evaluate the compiled expression.

        # Raises
        InvalidUse: if nothing has been compiled yet.
        InvalidTreeStructure: if the tree has nodes with the wrong arity.
        EvaluationError: if a numeric operation has no real result.
        """
        self._check_ready()
        if self.expression is None:
            raise InvalidUse(ErrorCode.NULL_INPUT, "No expression has been compiled")
        self.result = self.expression.validate().evaluate(self.variables)
        return self.result

    def to_text(self) -> str:
        """Serialize the compiled expression back into text."""
        self._check_ready()
        if self.expression is None:
            raise InvalidUse(ErrorCode.NULL_INPUT, "No expression has been compiled")
        return self.expression.to_text()

    def run(self, text: str) -> int:
        """Compile, evaluate and write out the result of an expression.

        Syntax and evaluation errors are reported and their code is returned.
        Fatal errors are logged and raised to the caller.

        Returns : The error code, `ErrorCode.OK` on success.
        """
        try:
            compiled = self.compile(text)
            if not compiled.ok:
                return compiled.kind
            if self.config.graph_file is not None:
                write_dot(self.expression, self.config.graph_file)
            value = self.calculate()
        except EvaluationError as error:
            self.report_error(error)
            return error.code
        except FatalError as error:
            self._log.critical("%s(%d): %s", error.code.name, error.code, error)
            raise
        self.write(value)
        return ErrorCode.OK

    def report_error(
        self,
        error: CalculatorError,
        text: Optional[str] = None,
        position: Optional[int] = None,
    ) -> None:
        """Log a recoverable error and print it to the console."""
        message = f"{error.code.name}({int(error.code)}): {error}"
        if text is not None and position is not None:
            self._log.error("%s\n%s", message, format_error(text, position))
        else:
            self._log.error("%s", message)
        if self.silent:
            return
        if position is not None:
            msg.fail(f"{error} (at position {position})")
        else:
            msg.fail(str(error))
        if text is not None and position is not None:
            print(format_error(text, position, colored=self.config.color))

    def write(self, value: float) -> None:
        """Write the calculated result to the console and the output file."""
        if self.expression is None:
            raise InvalidUse(ErrorCode.NULL_INPUT, "No expression has been compiled")
        line = f"{self.expression.to_text()} = {format_number(value)}"
        if self.config.output_file is not None:
            Path(self.config.output_file).write_text(f"{line}\n", encoding="utf8")
        if self.silent:
            return
        msg.good(f"Result: {format_number(value)}")
        if self.config.verbose:
            msg.text(line)
            if len(self.variables) > 0:
                data = [(name, format_number(val)) for name, val in self.variables.items()]
                print(table(data, header=("Variable", "Value"), divider=True))

    def destroy(self) -> None:
        """Release the tree and the variable table. The calculator cannot be
        used after this."""
        self._check_ready()
        self.expression = None
        self.result = None
        self.variables = VariableTable()
        self.state = CalculatorState.DESTROYED
