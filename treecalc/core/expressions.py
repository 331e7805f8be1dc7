import math
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union, cast

import numpy as np

from .errors import (
    DivisionByZero,
    EvaluationError,
    InvalidPower,
    InvalidTreeStructure,
    UnboundVariable,
)
from .tree import RIGHT, BinaryTreeNode
from .variables import VariableTable

# Order of operations priorities. Higher numbers bind tighter.
OOO_FUNCTION = 4
OOO_UNARY = 3
OOO_EXPONENT = 2
OOO_MULTDIV = 1
OOO_ADDSUB = 0


class NodeType(IntEnum):
    """The tag of a node in an expression tree."""

    FUNCTION = 1
    OPERATOR = 2
    VARIABLE = 3
    NUMBER = 4


VariableContext = Union[VariableTable, Mapping[str, Union[float, int]]]

# Numpy floating point errors that abort an evaluation. Underflow quietly
# rounds to zero.
_FP_ERRORS = {"divide": "raise", "over": "raise", "invalid": "raise", "under": "ignore"}


def checked_math(name: str, fn: Callable, *args: float) -> float:
    """Apply `fn` to the arguments and raise `EvaluationError` instead of
    returning an infinite or NaN result."""
    with np.errstate(**_FP_ERRORS):
        try:
            result = fn(*[np.float64(arg) for arg in args])
        except FloatingPointError as error:
            raise EvaluationError(f"{name}: {error}")
    return float(result)


def format_number(value: float) -> str:
    """Decimal text for a number that the parser can read back. Integral values
    drop their fraction and nothing is ever written in exponent notation."""
    if math.isfinite(value) and value % 1 == 0:
        return f"{int(value)}"
    return np.format_float_positional(value, trim="-")


# The closed set of unary functions that can be called from an expression.
FUNCTIONS: Mapping[str, Callable] = MappingProxyType(
    {
        "sin": np.sin,
        "cos": np.cos,
        "tan": np.tan,
        "cot": lambda x: 1.0 / np.tan(x),
        "arcsin": np.arcsin,
        "arccos": np.arccos,
        "arctan": np.arctan,
        "arccot": lambda x: np.pi / 2 - np.arctan(x),
        "sinh": np.sinh,
        "cosh": np.cosh,
        "tanh": np.tanh,
        "coth": lambda x: 1.0 / np.tanh(x),
        "ln": np.log,
        "lg": np.log10,
        "exp": np.exp,
        "sqrt": np.sqrt,
        "abs": np.absolute,
        "sgn": np.sign,
    }
)


class MathExpression(BinaryTreeNode):
    """Math tree node that can be evaluated, validated and written back out
    as text."""

    left: Optional["MathExpression"]
    right: Optional["MathExpression"]
    parent: Optional["MathExpression"]

    @property
    def raw(self) -> str:
        """raw text representation of the expression."""
        return str(self)

    @property
    def node_type(self) -> NodeType:
        raise NotImplementedError("must be implemented in subclass")

    def evaluate(self, context: Optional[VariableContext] = None) -> float:
        """Evaluate the expression, resolving all variables to constant values"""
        raise NotImplementedError("must be implemented in subclass")

    def get_priority(self) -> int:
        """Return a number representing the order of operations priority
        of this node. Leaves and function calls never need parentheses."""
        return OOO_FUNCTION

    def self_parens(self) -> bool:
        """Return a boolean indicating whether this node should render itself with
        a set of enclosing parentheses or not. This is used when serializing an
        expression, to ensure the tree maintains the proper order of operations."""
        binary_parent = self.parent
        if not isinstance(binary_parent, BinaryExpression):
            return False

        self_pri = self.get_priority()
        parent_pri = binary_parent.get_priority()
        if self_pri != parent_pri:
            return self_pri < parent_pri
        # Equal priority: exponents group both ways, the other operators
        # only lose meaning when regrouped on the right.
        if isinstance(binary_parent, PowerExpression):
            return True
        return binary_parent.get_side(self) == RIGHT

    def validate(self) -> "MathExpression":
        """Check that every node in the tree has the children its type requires.

        # Raises
        InvalidTreeStructure: if any node has the wrong number of children.
        """

        def visit_fn(node, depth, data):
            node._validate_node()

        self.visit_postorder(visit_fn)
        return self

    def _validate_node(self) -> None:
        if self.left is not None or self.right is not None:
            raise InvalidTreeStructure(
                f"{self.__class__.__name__}: leaf nodes cannot have children"
            )

    def to_text(self) -> str:
        """Validate the tree and convert it into a textual expression that parses
        back into an equivalent tree."""
        return str(self.validate())

    def to_list(self, visit: str = "preorder") -> List["MathExpression"]:
        """Convert this node hierarchy into a list."""
        results = []

        def visit_fn(node, depth, data):
            return results.append(node)

        if visit == "inorder":
            self.visit_inorder(visit_fn)
        elif visit == "preorder":
            self.visit_preorder(visit_fn)
        elif visit == "postorder":
            self.visit_postorder(visit_fn)
        else:
            raise ValueError(f"invalid visit order: {visit}")
        return results

    def fold(self, fn: Callable[["MathExpression", Any, Any], Any]) -> Any:
        """Combine the tree bottom-up without recursing. `fn` is called once per
        node in postorder with the results of its left and right children, or
        None for a missing child, and the result for this node is returned."""
        results: Dict[int, Any] = {}

        def visit_fn(node, depth, data):
            left = results.pop(id(node.left), None) if node.left else None
            right = results.pop(id(node.right), None) if node.right else None
            results[id(node)] = fn(node, left, right)

        self.visit_postorder(visit_fn)
        return results[id(self)]

    def evaluate_node(
        self, context: Optional[VariableContext], left: Any, right: Any
    ) -> float:
        """Evaluate this node given the values of its children. Leaves evaluate
        themselves."""
        return self.evaluate(context)

    def render(self, left: Optional[str], right: Optional[str]) -> str:
        """Format this node given the text of its children."""
        return str(self)

    def _evaluate_tree(self, context: Optional[VariableContext]) -> float:
        return self.fold(lambda node, left, right: node.evaluate_node(context, left, right))

    def _render_tree(self) -> str:
        return self.fold(lambda node, left, right: node.render(left, right))


class UnaryExpression(MathExpression):
    """An expression that operates on one sub-expression"""

    def __init__(self, child: MathExpression = None, child_on_left: bool = False):
        super().__init__()
        self.left_child = child_on_left
        self.set_child(child)

    def set_child(self, child: MathExpression = None) -> MathExpression:
        if self.left_child:
            return self.set_left(child)  # type:ignore
        else:
            return self.set_right(child)  # type:ignore

    def get_child(self) -> Optional[MathExpression]:
        if self.left_child:
            return self.left
        else:
            return self.right

    @property
    def node_type(self) -> NodeType:
        return NodeType.FUNCTION

    def get_priority(self) -> int:
        return OOO_UNARY

    def _validate_node(self) -> None:
        other = self.right if self.left_child else self.left
        if self.get_child() is None or other is not None:
            raise InvalidTreeStructure(
                f"{self.__class__.__name__}: expected exactly one child"
            )

    def evaluate(self, context: Optional[VariableContext] = None) -> float:
        return self._evaluate_tree(context)

    def evaluate_node(
        self, context: Optional[VariableContext], left: Any, right: Any
    ) -> float:
        if self.get_child() is None:
            raise InvalidTreeStructure(
                "cannot evaluate unary expression without a valid child"
            )
        return self.operate(left if self.left_child else right)

    def operate(self, value: float) -> float:
        raise NotImplementedError("Must be implemented in subclass")

    def __str__(self) -> str:
        return self._render_tree()


# ### Negation


class NegateExpression(UnaryExpression):
    """Negate an expression, e.g. `4` becomes `-4`"""

    @property
    def name(self) -> str:
        return "-"

    def operate(self, value: float) -> float:
        return -value

    def render(self, left: Optional[str], right: Optional[str]) -> str:
        child = self.get_child()
        text = left if self.left_child else right
        # The grammar only allows an atom after a unary minus
        atom = isinstance(child, (VariableExpression, FunctionExpression)) or (
            isinstance(child, ConstantExpression)
            and child.value is not None
            and child.value >= 0
        )
        return "-{}".format(text) if atom else "-({})".format(text)


# ### Function


class FunctionExpression(UnaryExpression):
    """A call to one of the known `FUNCTIONS` by name."""

    def __init__(self, name: str = None, child: MathExpression = None):
        super().__init__(child)
        self.function_name = name

    @property
    def name(self) -> str:
        if self.function_name is None:
            raise InvalidTreeStructure("function node has no name")
        return self.function_name

    def get_priority(self) -> int:
        return OOO_FUNCTION

    def _validate_node(self) -> None:
        super()._validate_node()
        if self.function_name not in FUNCTIONS:
            raise InvalidTreeStructure(f"Unknown function: {self.function_name}")

    def operate(self, value: float) -> float:
        fn = FUNCTIONS.get(self.name, None)
        if fn is None:
            raise InvalidTreeStructure(f"Unknown function: {self.name}")
        return checked_math(self.name, fn, value)

    def render(self, left: Optional[str], right: Optional[str]) -> str:
        return "{}({})".format(self.name, left if self.left_child else right)


# ## Binary Expressions


class BinaryExpression(MathExpression):
    """An expression that operates on two sub-expressions"""

    def __init__(self, left=None, right=None):
        super().__init__(left=left, right=right)

    @property
    def node_type(self) -> NodeType:
        return NodeType.OPERATOR

    @property
    def name(self) -> str:
        raise NotImplementedError("Must be implemented in subclass")

    def evaluate(self, context: Optional[VariableContext] = None) -> float:
        return self._evaluate_tree(context)

    def evaluate_node(
        self, context: Optional[VariableContext], left: Any, right: Any
    ) -> float:
        self._check()
        return self.operate(left, right)

    def operate(self, one: float, two: float) -> float:
        raise NotImplementedError("Must be implemented in subclass")

    def _check(self) -> Tuple[MathExpression, MathExpression]:
        if self.left is None or self.right is None:
            raise InvalidTreeStructure(
                "{}: left/right children must both be valid".format(
                    self.__class__.__name__
                )
            )
        return self.left, self.right

    def _validate_node(self) -> None:
        self._check()

    def __str__(self) -> str:
        return self._render_tree()

    def render(self, left: Optional[str], right: Optional[str]) -> str:
        self._check()
        out = f"{left} {self.name} {right}"
        return f"({out})" if self.self_parens() else out


class AddExpression(BinaryExpression):
    """Add one and two"""

    @property
    def name(self) -> str:
        return "+"

    def get_priority(self) -> int:
        return OOO_ADDSUB

    def operate(self, one: float, two: float) -> float:
        return checked_math(self.name, np.add, one, two)


class SubtractExpression(BinaryExpression):
    """Subtract two from one"""

    @property
    def name(self) -> str:
        return "-"

    def get_priority(self) -> int:
        return OOO_ADDSUB

    def operate(self, one: float, two: float) -> float:
        return checked_math(self.name, np.subtract, one, two)


class MultiplyExpression(BinaryExpression):
    """Multiply one and two"""

    @property
    def name(self) -> str:
        return "*"

    def get_priority(self) -> int:
        return OOO_MULTDIV

    def operate(self, one: float, two: float) -> float:
        return checked_math(self.name, np.multiply, one, two)


class DivideExpression(BinaryExpression):
    """Divide one by two"""

    @property
    def name(self) -> str:
        return "/"

    def get_priority(self) -> int:
        return OOO_MULTDIV

    def operate(self, one: float, two: float) -> float:
        if two == 0:
            raise DivisionByZero(f"Division by zero: {self}")
        return checked_math(self.name, np.true_divide, one, two)


class PowerExpression(BinaryExpression):
    """Raise one to the power of two"""

    @property
    def name(self) -> str:
        return "^"

    def get_priority(self) -> int:
        return OOO_EXPONENT

    def operate(self, one: float, two: float) -> float:
        if one < 0 and not float(two).is_integer():
            raise InvalidPower(
                f"Cannot raise negative {format_number(one)} to the fractional "
                f"power {format_number(two)}"
            )
        if one == 0 and two < 0:
            raise DivisionByZero(f"Zero raised to a negative power: {self}")
        return checked_math(self.name, np.power, one, two)

    def render(self, left: Optional[str], right: Optional[str]) -> str:
        self._check()
        out = f"{left}{self.name}{right}"
        return f"({out})" if self.self_parens() else out


class ConstantExpression(MathExpression):
    """A Constant value node, where the value is accessible as `node.value`"""

    value: Optional[float]

    def __init__(self, value: Union[float, int] = None):
        super().__init__()
        self.value = float(value) if value is not None else None

    @property
    def name(self) -> str:
        if self.value is None:
            raise InvalidTreeStructure("constant node has no value")
        return format_number(self.value)

    @property
    def node_type(self) -> NodeType:
        return NodeType.NUMBER

    def _validate_node(self) -> None:
        super()._validate_node()
        if self.value is None:
            raise InvalidTreeStructure("constant node has no value")

    def evaluate(self, context: Optional[VariableContext] = None) -> float:
        if self.value is None:
            raise InvalidTreeStructure("constant node has no value")
        return self.value

    def __str__(self) -> str:
        return self.name


class VariableExpression(MathExpression):
    """A named value that is looked up when the expression is evaluated."""

    identifier: Optional[str]

    def __init__(self, identifier: str = None):
        super().__init__()
        self.identifier = identifier

    @property
    def name(self) -> str:
        return f"{self.identifier}"

    @property
    def node_type(self) -> NodeType:
        return NodeType.VARIABLE

    def _validate_node(self) -> None:
        super()._validate_node()
        if not self.identifier:
            raise InvalidTreeStructure("variable node has no name")

    def __str__(self) -> str:
        if not self.identifier:
            raise InvalidTreeStructure("variable node has no name")
        return self.identifier

    def evaluate(self, context: Optional[VariableContext] = None) -> float:
        if not self.identifier:
            raise InvalidTreeStructure("variable node has no name")
        name = cast(str, self.identifier)
        if isinstance(context, VariableTable):
            return context.lookup(name)
        if context and context.get(name, None) is not None:
            return float(context[name])

        raise UnboundVariable(f"cannot evaluate statement with None variable: {name}")
