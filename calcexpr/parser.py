"""Expression parser.

The grammar is run by a Lark LALR parser whose tokens come from
:class:`calcexpr.tokenizer.Tokenizer` through a custom lexer. The parse tree is
folded into :mod:`calcexpr.nodes` by :class:`ASTBuilder`.

Identifier names are copied into the AST, so a parsed tree does not keep the
source text alive and stays valid after the text is discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from lark import Lark, Token, v_args
from lark.exceptions import LarkError, UnexpectedEOF, UnexpectedInput
from lark.lexer import Lexer
from lark.visitors import Transformer_NonRecursive

from calcexpr.errors import ParseError
from calcexpr.nodes import Binary, BinaryOp, Call, Literal, Node, Unary, UnaryOp, Variable, count_nodes
from calcexpr.tokenizer import Tokenizer, TokenKind

logger = logging.getLogger(__name__)

# A sign is only allowed on the first operand of an additive expression:
# "-2*3" and "f(-1)" parse, "2*-3" and "1+-2" do not.
GRAMMAR = r"""
?start: additive

?additive: leading ((PLUS | MINUS) product)*
?leading: unary ((STAR | SLASH) primary)*
?product: primary ((STAR | SLASH) primary)*

?unary: (PLUS | MINUS) primary
      | primary

?primary: NUMBER                 -> number
        | NAME                   -> name
        | call
        | _LPAR additive _RPAR

call: NAME _LPAR [arguments] _RPAR
arguments: additive (_COMMA additive (_COMMA additive)?)?

%declare NUMBER NAME PLUS MINUS STAR SLASH _COMMA _LPAR _RPAR
"""

_PUNCT_TERMINALS = {
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    ",": "_COMMA",
    "(": "_LPAR",
    ")": "_RPAR",
}

_BINARY_OPS = {
    "PLUS": BinaryOp.ADD,
    "MINUS": BinaryOp.SUB,
    "STAR": BinaryOp.MUL,
    "SLASH": BinaryOp.DIV,
}

_UNARY_OPS = {"PLUS": UnaryOp.PLUS, "MINUS": UnaryOp.MINUS}


class TokenizerLexer(Lexer):
    """Feeds :class:`Tokenizer` output to Lark."""

    def __init__(self, lexer_conf):
        pass

    def lex(self, data):
        for tok in Tokenizer(data):
            if tok.kind is TokenKind.END:
                return
            if tok.kind is TokenKind.INVALID:
                raise ParseError(f"invalid character {data[tok.start]!r} at offset {tok.start}", text=data)
            lexeme = data[tok.start:tok.end]
            if tok.kind is TokenKind.NUMBER:
                yield Token("NUMBER", lexeme, start_pos=tok.start, end_pos=tok.end)
            elif tok.kind is TokenKind.IDENTIFIER:
                yield Token("NAME", lexeme, start_pos=tok.start, end_pos=tok.end)
            else:
                yield Token(_PUNCT_TERMINALS[lexeme], lexeme, start_pos=tok.start, end_pos=tok.end)


parser = Lark(GRAMMAR, start="start", parser="lalr", lexer=TokenizerLexer)


def _fold(first, rest):
    # rest alternates operator token, operand
    n = first
    it = iter(rest)
    for op, right in zip(it, it):
        n = Binary(_BINARY_OPS[op.type], n, right)
    return n


@v_args(inline=True)
class ASTBuilder(Transformer_NonRecursive):
    def number(self, tok): return Literal(float(tok))
    def name(self, tok): return Variable(str(tok))

    def call(self, name, args):
        return Call(str(name), tuple(args or ()))

    def arguments(self, *xs): return list(xs)

    def additive(self, first, *rest): return _fold(first, rest)
    def leading(self, first, *rest): return _fold(first, rest)
    def product(self, first, *rest): return _fold(first, rest)

    def unary(self, op, operand):
        return Unary(_UNARY_OPS[op.type], operand)


@dataclass
class ParseResult:
    """Outcome of :func:`parse`: the AST root, or ``None`` if parsing failed."""

    root: Optional[Node]
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.root is not None

    def __bool__(self) -> bool:
        return self.ok

    def release(self) -> None:
        """Drop the tree. Releasing twice is a no-op."""
        if self.root is None:
            return
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("releasing expression %r (%d nodes)", self.text, count_nodes(self.root))
        self.root = None


def _parse_tree(src: str) -> Node:
    if not src.strip():
        raise ParseError("empty expression", text=src)
    try:
        tree = parser.parse(src)
    except UnexpectedEOF as e:
        raise ParseError("unexpected end of expression", text=src) from e
    except UnexpectedInput as e:
        token = getattr(e, "token", None)
        raise ParseError(f"unexpected token {str(token)!r}", text=src) from e
    except LarkError as e:
        raise ParseError(f"parse error: {e}", text=src) from e
    result = ASTBuilder().transform(tree)
    if not isinstance(result, Node):
        raise ParseError(f"parser returned unexpected type: {type(result)}", text=src)
    return result


def parse(text: str, length: Optional[int] = None, *, strict: bool = False) -> ParseResult:
    """Parse an arithmetic expression.

    Parameters
    ----------
    text : str
        Expression source.
    length : int | None
        Parse only ``text[:length]``.
    strict : bool
        Raise :class:`ParseError` instead of returning an empty result.

    Returns
    -------
    ParseResult
        Holds the AST root, or ``None`` when the expression is invalid.

    Examples
    --------
    >>> parse("1 + 2*x").ok
    True
    >>> parse("2*-3").root is None
    True
    """
    if not isinstance(text, str):
        raise TypeError(f"expression must be str, not {type(text).__name__}")
    if length is not None:
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        text = text[:length]
    try:
        root = _parse_tree(text)
    except ParseError as e:
        if strict:
            raise
        logger.debug("parse failed: %s", e)
        return ParseResult(None, text)
    return ParseResult(root, text)
