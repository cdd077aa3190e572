"""Cursor-based tokenizer for arithmetic expressions.

Produces NUMBER, IDENTIFIER and single-character PUNCT tokens over a
``[begin, end)`` range of the source, followed by END. Any character that
cannot start a token produces INVALID.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Union

WHITESPACE = frozenset(" \t\n\r\f\v")
PUNCTUATION = frozenset("+-*/,()")

_NUMBER_RE = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class TokenKind(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    PUNCT = "punct"
    END = "end"
    INVALID = "invalid"


class Token(NamedTuple):
    kind: TokenKind
    value: Union[float, str, None]
    start: int
    end: int

    @property
    def is_end(self) -> bool:
        return self.kind is TokenKind.END


class Tokenizer:
    """Stateful cursor over ``text[begin:end]``.

    Each call to :meth:`advance` skips whitespace and returns the next token,
    which is also kept on :attr:`current`. Once an INVALID token has been
    produced the tokenizer stays invalid.
    """

    def __init__(self, text: str, begin: int = 0, end: Optional[int] = None):
        if end is None:
            end = len(text)
        if not 0 <= begin <= end <= len(text):
            raise ValueError(f"invalid range [{begin}, {end}) for text of length {len(text)}")
        self.text = text
        self.pos = begin
        self.end = end
        self.current: Optional[Token] = None

    def advance(self) -> Token:
        self.current = self._scan()
        return self.current

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.advance()
            yield tok
            if tok.kind in (TokenKind.END, TokenKind.INVALID):
                return

    def _scan(self) -> Token:
        if self.current is not None and self.current.kind is TokenKind.INVALID:
            return self.current

        text, end = self.text, self.end
        while self.pos < end and text[self.pos] in WHITESPACE:
            self.pos += 1
        start = self.pos
        if start == end:
            return Token(TokenKind.END, None, start, start)

        ch = text[start]
        if ch in PUNCTUATION:
            self.pos += 1
            return Token(TokenKind.PUNCT, ch, start, self.pos)

        if ch == "." or "0" <= ch <= "9":
            m = _NUMBER_RE.match(text, start, end)
            if m is None:
                # a lone '.'
                return Token(TokenKind.INVALID, None, start, start)
            self.pos = m.end()
            return Token(TokenKind.NUMBER, float(m.group()), start, self.pos)

        m = _IDENT_RE.match(text, start, end)
        if m is not None:
            self.pos = m.end()
            return Token(TokenKind.IDENTIFIER, m.group(), start, self.pos)

        return Token(TokenKind.INVALID, None, start, start)


def tokenize(text: str) -> list:
    """Return every token of ``text`` including the final END or INVALID."""
    return list(Tokenizer(text))
