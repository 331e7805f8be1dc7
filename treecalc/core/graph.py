"""Graphviz export
---

Write an expression tree as a DOT digraph so it can be rendered with
`dot -Tpng Equation.dot -o Equation.png`.
"""
from pathlib import Path
from typing import Dict, List, Union

from .expressions import MathExpression, NodeType

NODE_STYLES: Dict[NodeType, str] = {
    NodeType.FUNCTION: 'shape=box, style=filled, fillcolor="#e8d4f8"',
    NodeType.OPERATOR: 'shape=circle, style=filled, fillcolor="#fff2b3"',
    NodeType.VARIABLE: 'shape=ellipse, style=filled, fillcolor="#cde8ff"',
    NodeType.NUMBER: 'shape=ellipse, style=filled, fillcolor="#d8f5d0"',
}


def to_dot(expression: MathExpression, title: str = "Equation") -> str:
    """Describe the tree as a DOT digraph. Nodes are keyed by their unique id
    and edges are labeled with the side of the parent they hang from."""
    lines: List[str] = [f'digraph "{title}" {{', "    node [fontname=Helvetica];"]
    for node in expression.to_list("preorder"):
        label = str(node.name).replace('"', '\\"')
        lines.append(f'    "{node.id}" [label="{label}", {NODE_STYLES[node.node_type]}];')
        for child in node.get_children():
            side = node.get_side(child)
            lines.append(f'    "{node.id}" -> "{child.id}" [label="{side}"];')
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(expression: MathExpression, path: Union[str, Path]) -> Path:
    out_path = Path(path)
    out_path.write_text(to_dot(expression), encoding="utf8")
    return out_path
