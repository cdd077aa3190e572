"""Embeddable arithmetic expression evaluator.

Parse an expression once, then evaluate the tree against any number of
environments of variables, constants and functions.

>>> from calcexpr import Cell, Environment, VariableBinding, parse
>>> r = Cell(2.0)
>>> env = Environment.with_builtins()
>>> env.append_variables([VariableBinding("r", r)])
>>> round(env.evaluate(parse("pi*r*r")), 6)
12.566371
"""

from calcexpr.environment import BindingTable, Cell, Environment, VariableBinding, builtin_environment
from calcexpr.errors import BindingError, CalcExprError, FrozenEnvironmentError, ParseError
from calcexpr.eval import eval_expr, eval_node, evaluate
from calcexpr.nodes import MAX_ARITY, Binary, BinaryOp, Call, Literal, Node, Unary, UnaryOp, Variable
from calcexpr.parser import ParseResult, parse
from calcexpr.registry import ConstSpec, FuncSpec
from calcexpr.tokenizer import Token, TokenKind, Tokenizer, tokenize

__all__ = [
    # AST
    "Node",
    "Literal",
    "Variable",
    "Binary",
    "Unary",
    "Call",
    "BinaryOp",
    "UnaryOp",
    "MAX_ARITY",
    # tokenizer / parser
    "Token",
    "TokenKind",
    "Tokenizer",
    "tokenize",
    "ParseResult",
    "parse",
    # environment
    "Cell",
    "VariableBinding",
    "ConstSpec",
    "FuncSpec",
    "BindingTable",
    "Environment",
    "builtin_environment",
    # evaluation
    "eval_node",
    "evaluate",
    "eval_expr",
    # errors
    "CalcExprError",
    "ParseError",
    "BindingError",
    "FrozenEnvironmentError",
]
