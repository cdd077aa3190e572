# calcexpr/ast_utils.py
import math
from typing import Any, Dict, List
from .nodes import Literal, Variable, Unary, Binary, Call, fold_postorder

def _shallow(node) -> Dict[str, Any]:
    # everything but the children
    if isinstance(node, Literal):
        return {"type": "Literal", "value": node.value}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    if isinstance(node, (Unary, Binary)):
        return {"type": type(node).__name__, "op": node.op.name, "symbol": node.op.value}
    if isinstance(node, Call):
        return {"type": "Call", "name": node.name, "arity": node.arity}
    return {"type": "Unknown", "repr": repr(node)}

def _attach(out: Dict[str, Any], node, kids: List[Any]) -> Dict[str, Any]:
    if isinstance(node, Unary):
        out["operand"] = kids[0]
    elif isinstance(node, Binary):
        out["left"], out["right"] = kids
    elif isinstance(node, Call):
        out["args"] = list(kids)
    return out

def ast_to_dict(node) -> Dict[str, Any]:
    """Nested dict view of ``node``. Operators appear by enum name with their symbol."""
    return fold_postorder(node, lambda n, kids: _attach(_shallow(n), n, kids))

def ast_to_table(node) -> List[Dict[str, Any]]:
    """Flat post-order view of ``node``.

    Each row has an ``id`` (its position in the list) and refers to its
    children by id, so the root is the last row. Unlike :func:`ast_to_dict`
    the nesting depth is constant, which keeps long chains JSON-encodable.
    """
    rows: List[Dict[str, Any]] = []

    def add(n, kid_ids):
        row = _attach(_shallow(n), n, kid_ids)
        row["id"] = len(rows)
        rows.append(row)
        return row["id"]

    fold_postorder(node, add)
    return rows

def _label(n) -> str:
    if isinstance(n, Literal):
        return f"Literal {n.value!r}"
    if isinstance(n, Variable):
        return f"Variable {n.name}"
    if isinstance(n, (Unary, Binary)):
        return f"{type(n).__name__} {n.op.name} ({n.op.value})"
    if isinstance(n, Call):
        return f"Call {n.name} arity={n.arity}"
    return type(n).__name__

def _child_labels(n) -> List[str]:
    if isinstance(n, Unary):
        return ["operand"]
    if isinstance(n, Binary):
        return ["left", "right"]
    if isinstance(n, Call):
        return [f"arg[{i}]" for i in range(n.arity)]
    return []

def ast_to_pretty(node, indent: str = "  ") -> str:
    lines = []
    stack = [(node, 0, None)]
    while stack:
        n, depth, label = stack.pop()
        pre = f"{label}: " if label else ""
        lines.append(f"{indent * depth}{pre}{_label(n)}")
        kids = list(zip(n.children(), _child_labels(n))) if isinstance(n, (Unary, Binary, Call)) else []
        for child, child_label in reversed(kids):
            stack.append((child, depth + 1, child_label))
    return "\n".join(lines)

def _literal_source(value: float) -> str:
    if math.isnan(value):
        return "(0.0 / 0.0)"
    if math.isinf(value):
        text = "1e999"
    else:
        text = repr(abs(value))
    return f"(-{text})" if value < 0 else text

def _source(n, parts: List[str]) -> str:
    if isinstance(n, Literal):
        return _literal_source(float(n.value))
    if isinstance(n, Variable):
        return n.name
    if isinstance(n, Unary):
        return f"({n.op.value}{parts[0]})"
    if isinstance(n, Binary):
        return f"({parts[0]} {n.op.value} {parts[1]})"
    if isinstance(n, Call):
        return f"{n.name}({', '.join(parts)})"
    raise TypeError(f"Unknown node {type(n)}")

def ast_to_source(node) -> str:
    """Render ``node`` as expression text.

    For trees produced by :func:`calcexpr.parser.parse` the output parses back
    to an equal tree. Hand-built literals that the grammar cannot spell do
    not: a NaN literal is written ``(0.0 / 0.0)`` and a negative one
    ``(-x)``, which re-parse as ``Binary`` and ``Unary`` nodes with the same
    value.

    Unary nodes and binary operands are parenthesised, so the output never
    depends on precedence or on where a sign may appear.
    """
    return fold_postorder(node, _source)
