__title__ = "treecalc"
__version__ = "0.1.0"
__summary__ = "Treecalc - compile arithmetic expressions to trees, evaluate and print them"
__author__ = "Justin DuJardin"
__email__ = "justin@dujardinconsulting.com"
__license__ = "MIT"
