from .about import __version__
from .calculator import Calculator, CalculatorState
from .config import CalculatorConfig
from .core import *  # noqa
