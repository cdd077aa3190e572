
import numpy as np
from ..registry import register

@register("sdiv", arity=2, doc="safe divide; returns 0 where denom==0 or NaN")
def sdiv(a, b):
    if np.ndim(a) or np.ndim(b):
        a, b = np.broadcast_arrays(np.asarray(a, dtype=float), np.asarray(b, dtype=float))
        out = np.zeros(a.shape, dtype=float)
        mask = (b == 0) | np.isnan(b)
        np.divide(a, b, out=out, where=~mask)
        return out
    return 0.0 if (b == 0 or np.isnan(b)) else np.divide(a, b)
