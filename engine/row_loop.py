import logging
import numpy as np, pandas as pd
from calcexpr.environment import Cell, Environment, VariableBinding, builtin_environment
from calcexpr.eval import evaluate
from calcexpr.parser import ParseResult, parse

logger = logging.getLogger(__name__)


def _as_parsed(expr) -> ParseResult:
    if isinstance(expr, ParseResult):
        if not expr.ok:
            raise ValueError("cannot evaluate an empty parse result")
        return expr
    return parse(expr, strict=True)


def bind_columns(columns, env: Environment = None):
    """Build an environment whose variables are one Cell per column.

    Column bindings come first, so they shadow same-named entries of ``env``.
    """
    cells = {str(c): Cell(np.nan) for c in columns}
    bound = Environment()
    bound.append_variables([VariableBinding(name, cell) for name, cell in cells.items()])
    bound.extend(env if env is not None else builtin_environment())
    return bound, cells


def evaluate_rows(expr, frame: pd.DataFrame, env: Environment = None) -> pd.Series:
    """
    Evaluate one expression per row of ``frame``, columns bound by name.
    The tree is parsed once and re-evaluated after each cell update.
    """
    parsed = _as_parsed(expr)
    bound, cells = bind_columns(frame.columns, env)
    names = [str(c) for c in frame.columns]
    out = np.empty(len(frame), dtype=float)
    for i, row in enumerate(frame.itertuples(index=False, name=None)):
        for name, value in zip(names, row):
            cells[name].value = value
        out[i] = evaluate(parsed, bound)
    logger.debug("evaluated %r over %d rows", parsed.text, len(frame))
    return pd.Series(out, index=frame.index, name=parsed.text)
