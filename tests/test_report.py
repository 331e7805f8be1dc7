import pytest

from treecalc import ExpressionParser, format_error
from treecalc.core.report import locate


def test_report_caret_under_position():
    assert format_error("(1+2", 4) == "(1+2\n    ^"
    assert format_error("foo(1)", 0) == "foo(1)\n^"


def test_report_keeps_tabs_in_padding():
    assert format_error("\t1 + $", 5) == "\t1 + $\n\t    ^"


def test_report_multiline_source():
    text = "1 +\n2 * (3"
    assert locate(text, len(text)) == ("2 * (3", 6)
    assert format_error(text, len(text)) == "2 * (3\n      ^"


def test_report_clamps_position():
    assert format_error("12", 99) == "12\n  ^"


@pytest.mark.parametrize("text", ["(1+2", "foo(1)", "1 $ 2", "3..1", "sin 3"])
def test_report_points_at_parse_failure(text: str):
    result = ExpressionParser().try_parse(text)
    source, marker = format_error(text, result.position).split("\n")
    assert source == text
    assert marker.endswith("^")
    assert len(marker) - 1 == result.position


def test_report_colored_caret():
    colored = format_error("1 +", 3, colored=True)
    assert colored.startswith("1 +\n   ")
    assert colored.rstrip().endswith("m") or colored.endswith("^")
