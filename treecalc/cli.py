"""Treecalc CLI
---

Calculate an expression read from a file, or typed at the prompt when no
file is given.
"""
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import click
from wasabi import msg

from . import about, slogging
from .calculator import Calculator
from .config import CalculatorConfig
from .core.errors import ERROR_MESSAGES, ErrorCode, FatalError
from .core.variables import parse_assignment, prompt_resolver


log = logging.getLogger(f"{slogging.ROOT_LOGGER}.cli")


def abort(code: ErrorCode, detail: str) -> NoReturn:
    """Log and print a failure that ends the process, then exit with `code`."""
    message = ERROR_MESSAGES[code]
    log.critical("%s(%d): %s: %s", code.name, int(code), message, detail)
    msg.fail(message, detail)
    sys.exit(int(code))


def read_expression(path: Optional[str]) -> str:
    """Read the expression from `path`, or prompt for it when no path is given."""
    if path is None:
        return click.prompt("Enter an expression", type=str)
    return Path(path).read_text(encoding="utf8").strip()


@click.command()
@click.version_option(version=about.__version__)
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option(
    "variables",
    "--var",
    multiple=True,
    metavar="NAME=VALUE",
    help="Give a variable a value instead of being prompted for it",
)
@click.option(
    "graph_file", "--graph", default=None, help="Write the tree as a Graphviz DOT file"
)
@click.option(
    "output_file", "--output", default=None, help="Write the result to this file"
)
@click.option(
    "log_file",
    "--log-file",
    default="calculator.log",
    help="Append errors to this log file",
)
@click.option(
    "verbose",
    "--verbose",
    is_flag=True,
    default=False,
    help="Print the parsed expression and the variables used",
)
def cli(
    path: Optional[str],
    variables: Tuple[str, ...],
    graph_file: Optional[str],
    output_file: Optional[str],
    log_file: str,
    verbose: bool,
):
    """
    Treecalc - calculate an arithmetic expression

    Reads the expression from PATH, or asks for it when PATH is not given.
    Variables without a value are prompted for.
    """
    try:
        values = dict(parse_assignment(text) for text in variables)
    except ValueError as error:
        raise click.BadParameter(str(error), param_hint="--var")

    config = CalculatorConfig(
        log_file=log_file,
        graph_file=graph_file,
        output_file=output_file,
        color=sys.stdout.isatty(),
        verbose=verbose,
    )
    slogging.setup(config.log_file, config.log_level)
    with Calculator(config=config, resolver=prompt_resolver, variables=values) as calc:
        try:
            text = read_expression(path)
        except OSError as error:
            abort(ErrorCode.INPUT_ERROR, str(error))
        try:
            code = calc.run(text)
        except OSError as error:
            abort(ErrorCode.OUTPUT_ERROR, str(error))
        except (MemoryError, RecursionError) as error:
            abort(ErrorCode.NO_MEMORY, type(error).__name__)
        except FatalError as error:
            # Already logged by the calculator
            msg.fail(f"{error.code.name}: {error}")
            sys.exit(int(error.code))
    sys.exit(int(code))


if __name__ == "__main__":
    cli()
