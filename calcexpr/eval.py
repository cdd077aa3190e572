
import logging
import math

import numpy as np

from .environment import Environment, builtin_environment
from .nodes import Binary, BinaryOp, Call, Literal, Unary, UnaryOp, Variable, fold_postorder
from .parser import ParseResult, parse

logger = logging.getLogger(__name__)

OPS = {
    BinaryOp.ADD: np.add,
    BinaryOp.SUB: np.subtract,
    BinaryOp.MUL: np.multiply,
    BinaryOp.DIV: np.divide,
}

UNARY_OPS = {
    UnaryOp.PLUS: np.positive,
    UnaryOp.MINUS: np.negative,
}


def _resolve_name(env: Environment, name: str):
    cell = env.lookup_variable(name)
    if cell is not None:
        return cell.value
    value = env.lookup_constant(name)
    if math.isnan(value):
        logger.debug("unresolved name '%s'", name)
    return value


def _call(env: Environment, node: Call, args):
    spec = env.lookup_function(node.name, node.arity)
    if spec is None:
        logger.debug("no function '%s' of arity %d", node.name, node.arity)
        return np.nan
    try:
        return spec.invoke(args)
    except (ArithmeticError, ValueError) as e:
        logger.debug("%s/%d failed: %s", node.name, node.arity, e)
        return np.nan


def eval_node(env: Environment, node):
    """Evaluate ``node`` against ``env``.

    Never raises for unknown names, missing functions or arithmetic anomalies:
    those give NaN or infinities. Values pass through numpy ufuncs, so cells
    holding arrays evaluate element-wise. Callers should hold
    ``np.errstate(all="ignore")`` to silence floating point warnings.

    Operands are evaluated left to right, and call arguments before the
    function is looked up. The walk is iterative, so tree depth is bounded
    only by memory.
    """
    def step(n, vals):
        if isinstance(n, Literal):
            return n.value
        if isinstance(n, Variable):
            return _resolve_name(env, n.name)
        if isinstance(n, Binary):
            op = OPS.get(n.op)
            return op(vals[0], vals[1]) if op is not None else np.nan
        if isinstance(n, Unary):
            op = UNARY_OPS.get(n.op)
            return op(vals[0]) if op is not None else np.nan
        if isinstance(n, Call):
            return _call(env, n, vals)
        return np.nan

    return fold_postorder(node, step)


def evaluate(parsed, env=None) -> float:
    """Evaluate a parse result (or a bare AST node) to a float.

    ``env`` defaults to the builtin environment. An empty parse result
    evaluates to NaN.
    """
    if env is None:
        env = builtin_environment()
    root = parsed.root if isinstance(parsed, ParseResult) else parsed
    if root is None:
        return math.nan
    with np.errstate(all="ignore"):
        out = eval_node(env, root)
    return float(out)


def eval_expr(text: str) -> float:
    """Parse ``text``, evaluate it against the builtins and discard the tree."""
    parsed = parse(text)
    try:
        return evaluate(parsed)
    finally:
        parsed.release()
