import logging
import numpy as np, pandas as pd
from calcexpr.environment import Environment
from calcexpr.eval import eval_node
from .row_loop import _as_parsed, bind_columns

logger = logging.getLogger(__name__)


def evaluate_columns(expr, frame: pd.DataFrame, env: Environment = None) -> pd.Series:
    """
    Same contract as ``evaluate_rows`` but evaluates the tree once with every
    cell holding a whole column. Host functions must accept numpy arrays;
    the builtins do.
    """
    parsed = _as_parsed(expr)
    bound, cells = bind_columns(frame.columns, env)
    for c in frame.columns:
        cells[str(c)].value = frame[c].to_numpy(dtype=float)
    with np.errstate(all="ignore"):
        out = eval_node(bound, parsed.root)
    values = np.broadcast_to(np.asarray(out, dtype=float), (len(frame),))
    logger.debug("evaluated %r vectorized over %d rows", parsed.text, len(frame))
    return pd.Series(values.copy(), index=frame.index, name=parsed.text)
