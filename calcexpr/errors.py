"""Exception classes for calcexpr.

Evaluation never raises these: runtime problems surface as NaN or infinities.
They are raised at the parse boundary (when asked to) and when an environment
is handed malformed descriptors.
"""

from __future__ import annotations


class CalcExprError(Exception):
    """Base class for all calcexpr errors."""


class ParseError(CalcExprError):
    """Raised when an expression cannot be parsed.

    Parameters
    ----------
    message : str
        What went wrong.
    text : str | None
        The expression that failed to parse.
    """

    def __init__(self, message: str, text: str | None = None) -> None:
        self.message = message
        self.text = text
        super().__init__(self._format())

    def _format(self) -> str:
        if self.text is None:
            return self.message
        return f"{self.message} in {self.text!r}"


class BindingError(CalcExprError, ValueError):
    """Raised when a variable, constant or function descriptor is malformed."""


class FrozenEnvironmentError(CalcExprError, TypeError):
    """Raised on an attempt to append to a read-only environment."""
