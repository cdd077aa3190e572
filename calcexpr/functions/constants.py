
import numpy as np
from ..registry import register_constant

register_constant("pi", np.pi, doc="ratio of a circle's circumference to its diameter")
register_constant("e", np.e, doc="Euler's number")
