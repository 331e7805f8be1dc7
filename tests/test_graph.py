from treecalc import ExpressionParser, to_dot, write_dot


def test_graph_to_dot():
    expression = ExpressionParser().parse("2 * sin(x) - -1")
    dot = to_dot(expression)
    assert dot.startswith('digraph "Equation" {')
    assert dot.rstrip().endswith("}")
    nodes = expression.to_list()
    for node in nodes:
        assert f'"{node.id}" [label="{node.name}"' in dot
    # one edge per non-root node
    assert dot.count(" -> ") == len(nodes) - 1
    assert '[label="right"]' in dot and '[label="left"]' in dot


def test_graph_write_dot(tmp_path):
    expression = ExpressionParser().parse("x^2")
    out_path = write_dot(expression, tmp_path / "Equation.dot")
    assert out_path.is_file()
    assert out_path.read_text(encoding="utf8") == to_dot(expression)
