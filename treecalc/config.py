from typing import Optional

from pydantic import BaseModel


class CalculatorConfig(BaseModel):
    # Append-only file that records every error. Set to None to disable it.
    log_file: Optional[str] = "calculator.log"
    # Minimum level of records written to the log file
    log_level: str = "ERROR"
    # Write the compiled tree as a Graphviz DOT file after a successful parse
    graph_file: Optional[str] = None
    # Write "<expression> = <result>" to this file after evaluating
    output_file: Optional[str] = None
    # Highlight the caret of syntax diagnostics in the terminal
    color: bool = True
    # Print the serialized expression and the variable table with the result
    verbose: bool = False
