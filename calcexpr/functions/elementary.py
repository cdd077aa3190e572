
import numpy as np
from ..registry import register

# one-argument numpy ufuncs; NaN in, NaN out, domain errors give NaN
_UNARY = [
    ("sqrt", np.sqrt, "square root"),
    ("cbrt", np.cbrt, "cube root"),
    ("abs", np.abs, "absolute value"),
    ("exp", np.exp, "e raised to x"),
    ("log", np.log, "natural logarithm"),
    ("log2", np.log2, "base-2 logarithm"),
    ("log10", np.log10, "base-10 logarithm"),
    ("sin", np.sin, "sine (radians)"),
    ("cos", np.cos, "cosine (radians)"),
    ("tan", np.tan, "tangent (radians)"),
    ("asin", np.arcsin, "inverse sine"),
    ("acos", np.arccos, "inverse cosine"),
    ("atan", np.arctan, "inverse tangent"),
    ("sinh", np.sinh, "hyperbolic sine"),
    ("cosh", np.cosh, "hyperbolic cosine"),
    ("tanh", np.tanh, "hyperbolic tangent"),
    ("floor", np.floor, "round toward -inf"),
    ("ceil", np.ceil, "round toward +inf"),
    ("round", np.rint, "round half to even"),
    ("sign", np.sign, "-1, 0 or 1"),
]

for _name, _fn, _doc in _UNARY:
    register(_name, arity=1, doc=_doc)(_fn)


@register("pow", arity=2, doc="x raised to y")
def pow_fn(x, y):
    return np.power(np.asarray(x, dtype=float), y)

@register("atan2", arity=2, doc="angle of the point (x, y) given as atan2(y, x)")
def atan2_fn(y, x):
    return np.arctan2(y, x)

@register("hypot", arity=2, doc="sqrt(x*x + y*y) without overflow")
def hypot_fn(x, y):
    return np.hypot(x, y)

@register("min", arity=2, doc="smaller of two values; NaN if either is NaN")
def min_fn(a, b):
    return np.minimum(a, b)

@register("max", arity=2, doc="larger of two values; NaN if either is NaN")
def max_fn(a, b):
    return np.maximum(a, b)

@register("fmod", arity=2, doc="remainder of x/y with the sign of x")
def fmod_fn(x, y):
    return np.fmod(x, y)

@register("clamp", arity=3, doc="clamp(x, lo, hi): x limited to [lo, hi]")
def clamp_fn(x, lo, hi):
    return np.minimum(np.maximum(x, lo), hi)
