from pathlib import Path

import pytest
from click.testing import CliRunner

from treecalc import about, slogging
from treecalc.cli import cli


@pytest.fixture(autouse=True)
def reset_log_file():
    yield
    slogging.setup(None)


def write_expression(tmp_path: Path, text: str) -> str:
    path = tmp_path / "expression.txt"
    path.write_text(text, encoding="utf8")
    return str(path)


def log_args(tmp_path: Path):
    return ["--log-file", str(tmp_path / "calculator.log")]


def test_cli_version():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert about.__version__ in result.output


def test_cli_file_argument(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "(2+3)*4\n")
    result = runner.invoke(cli, [path] + log_args(tmp_path))
    assert result.exit_code == 0
    assert "Result: 20" in result.output
    # nothing is logged on success so the file is never created
    assert not (tmp_path / "calculator.log").exists()


def test_cli_prompts_for_expression(tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(cli, log_args(tmp_path), input="2^3^2\n")
    assert result.exit_code == 0
    assert "Enter an expression" in result.output
    assert "Result: 512" in result.output


def test_cli_prompts_for_variables(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "x * x + y")
    result = runner.invoke(cli, [path] + log_args(tmp_path), input="3\n1.5\n")
    assert result.exit_code == 0
    # each variable is asked for only once
    assert result.output.count("Enter the value of x") == 1
    assert result.output.count("Enter the value of y") == 1
    assert "Result: 10.5" in result.output


def test_cli_var_option(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "rate * time")
    args = [path, "--var", "rate=2.5", "--var", "time=4"] + log_args(tmp_path)
    result = runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Enter the value" not in result.output
    assert "Result: 10" in result.output


@pytest.mark.parametrize("value", ["x", "x=", "=3", "X=1", "x=abc"])
def test_cli_var_option_errors(tmp_path: Path, value: str):
    runner = CliRunner()
    path = write_expression(tmp_path, "1")
    result = runner.invoke(cli, [path, "--var", value] + log_args(tmp_path))
    assert result.exit_code == 2


@pytest.mark.parametrize(
    "text, exit_code",
    [
        ("(1+2", 5),
        ("foo(1)", 7),
        ("1..2", 6),
        ("2 *", 8),
        ("2 3", 4),
        ("5/0", 10),
        ("(-8)^(1/3)", 11),
        ("sqrt(-1)", 12),
    ],
)
def test_cli_error_exit_codes(tmp_path: Path, text: str, exit_code: int):
    runner = CliRunner()
    path = write_expression(tmp_path, text)
    result = runner.invoke(cli, [path] + log_args(tmp_path))
    assert result.exit_code == exit_code
    log_text = (tmp_path / "calculator.log").read_text(encoding="utf8")
    assert f"({exit_code})" in log_text


def test_cli_syntax_error_caret(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "2 + (3 * 4")
    result = runner.invoke(cli, [path] + log_args(tmp_path))
    assert result.exit_code == 5
    assert "2 + (3 * 4\n          ^" in result.output


def test_cli_log_file_is_appended(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "1/0")
    runner.invoke(cli, [path] + log_args(tmp_path))
    runner.invoke(cli, [path] + log_args(tmp_path))
    log_text = (tmp_path / "calculator.log").read_text(encoding="utf8")
    assert log_text.count("DIVISION_BY_ZERO(10)") == 2


def test_cli_graph_and_output(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "-x^2 + sin(0)")
    graph = tmp_path / "Equation.dot"
    output = tmp_path / "result.txt"
    args = [path, "--var", "x=3", "--graph", str(graph), "--output", str(output)]
    result = runner.invoke(cli, args + log_args(tmp_path))
    assert result.exit_code == 0
    dot = graph.read_text(encoding="utf8")
    assert dot.startswith('digraph "Equation" {')
    assert 'label="sin"' in dot
    assert output.read_text(encoding="utf8") == "-x^2 + sin(0) = 9\n"


def test_cli_verbose(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "(x)*2")
    args = [path, "--var", "x=4", "--verbose"] + log_args(tmp_path)
    result = runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "x * 2 = 8" in result.output
    assert "Variable" in result.output


@pytest.mark.parametrize("value", ["x=inf", "x=nan", "x=-inf"])
def test_cli_var_option_rejects_non_finite(tmp_path: Path, value: str):
    runner = CliRunner()
    path = write_expression(tmp_path, "x * 2")
    result = runner.invoke(cli, [path, "--var", value] + log_args(tmp_path))
    assert result.exit_code == 2


def test_cli_prompt_rejects_non_finite(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "x * 2")
    result = runner.invoke(cli, [path] + log_args(tmp_path), input="inf\nnan\n3\n")
    assert result.exit_code == 0
    assert result.output.count("Enter the value of x") == 3
    assert "Result: 6" in result.output


def test_cli_long_flat_sum(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "+".join(["2"] * 3000))
    result = runner.invoke(cli, [path] + log_args(tmp_path))
    assert result.exit_code == 0
    assert "Result: 6000" in result.output


def test_cli_missing_input_file(tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(cli, [str(tmp_path / "missing.txt")] + log_args(tmp_path))
    assert result.exit_code == 14
    log_text = (tmp_path / "calculator.log").read_text(encoding="utf8")
    assert "CRITICAL" in log_text
    assert "INPUT_ERROR(14)" in log_text


def test_cli_unwritable_output_file(tmp_path: Path):
    runner = CliRunner()
    path = write_expression(tmp_path, "1 + 1")
    # a directory cannot be written as a file
    args = [path, "--output", str(tmp_path)] + log_args(tmp_path)
    result = runner.invoke(cli, args)
    assert result.exit_code == 15
    assert "Cannot write the graph or result file" in result.output
    log_text = (tmp_path / "calculator.log").read_text(encoding="utf8")
    assert "OUTPUT_ERROR(15)" in log_text
