import math
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import click

from .cursor import is_alpha
from .errors import UnboundVariable

Resolver = Callable[[str], float]


class VariableTable:
    """Values for the named variables of an expression.

    Names are looked up lazily during evaluation. When a name is missing the
    injected `resolver` is asked for a value, which is stored so that later
    references to the same name reuse it. Entries keep the order in which they
    were first seen."""

    resolver: Optional[Resolver]

    def __init__(
        self,
        values: Optional[Mapping[str, Union[float, int]]] = None,
        *,
        resolver: Optional[Resolver] = None,
    ):
        self._values: Dict[str, float] = {}
        self.resolver = resolver
        if values is not None:
            for name, value in values.items():
                self.set(name, value)

    def set(self, name: str, value: Union[float, int]) -> float:
        """Store the value of `name`.

        # Raises
        UnboundVariable: if the value is NaN or infinite.
        """
        value = float(value)
        if not math.isfinite(value):
            raise UnboundVariable(f"Variable {name} must be a finite number, got {value}")
        self._values[name] = value
        return value

    def lookup(self, name: str) -> float:
        """Return the value of `name`, resolving and caching it on first use."""
        if name in self._values:
            return self._values[name]
        if self.resolver is None:
            raise UnboundVariable(f"No value for variable: {name}")
        return self.set(name, self.resolver(name))

    def names(self) -> List[str]:
        return list(self._values)

    def items(self) -> List[Tuple[str, float]]:
        return list(self._values.items())

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


class MappingResolver:
    """Resolve variables from a fixed mapping, for batch and test usage."""

    def __init__(self, values: Mapping[str, Union[float, int]]):
        self.values = dict(values)

    def __call__(self, name: str) -> float:
        if name not in self.values:
            raise UnboundVariable(f"No value for variable: {name}")
        return float(self.values[name])


class FiniteFloat(click.ParamType):
    """A float that is neither NaN nor infinite."""

    name = "number"

    def convert(self, value: Any, param, ctx) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not math.isfinite(number):
            self.fail(f"{value!r} is not a finite number", param, ctx)
        return number


FINITE_FLOAT = FiniteFloat()


def prompt_resolver(name: str) -> float:
    """Ask for the value of a variable on the console. Blocks until a valid
    finite number is entered."""
    return click.prompt(f"Enter the value of {name}", type=FINITE_FLOAT)


def parse_assignment(text: str) -> Tuple[str, float]:
    """Split a `name=value` string into its parts.

    # Raises
    ValueError: when the text is not an assignment of a number to a name.
    """
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name or not all(is_alpha(c) for c in name):
        raise ValueError(f"expected NAME=VALUE, got: {text}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"expected a finite number for {name}, got: {value}")
    return name, number
