# importing the modules registers the builtins
from . import constants, elementary, safe_math  # noqa: F401
