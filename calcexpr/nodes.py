"""AST node types.

Every tree is a strict tree: children are owned by their parent and never
shared. Nodes are immutable once built, so one parsed tree may be evaluated
any number of times, from any number of threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Tuple, TypeVar

MAX_ARITY = 3

T = TypeVar("T")


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class UnaryOp(Enum):
    PLUS = "+"
    MINUS = "-"


class Node:
    """Base class for AST nodes."""

    def children(self) -> Tuple["Node", ...]:
        return ()


@dataclass(frozen=True)
class Literal(Node):
    value: float


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class Binary(Node):
    op: BinaryOp
    left: Node
    right: Node

    def children(self) -> Tuple[Node, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class Unary(Node):
    op: UnaryOp
    operand: Node

    def children(self) -> Tuple[Node, ...]:
        return (self.operand,)


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if len(self.args) > MAX_ARITY:
            raise ValueError(
                f"call to '{self.name}' has {len(self.args)} arguments, at most {MAX_ARITY} allowed"
            )
        # accept any sequence, store a tuple
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def arity(self) -> int:
        return len(self.args)

    def children(self) -> Tuple[Node, ...]:
        return self.args


def _children(node) -> Tuple[Node, ...]:
    return node.children() if isinstance(node, Node) else ()


def walk_postorder(node: Node) -> Iterator[Node]:
    """Yield every node below and including ``node``, children first.

    Uses an explicit stack, so left-deep chains of any length are fine.
    """
    stack = [(node, False)]
    while stack:
        n, expanded = stack.pop()
        kids = _children(n)
        if expanded or not kids:
            yield n
            continue
        stack.append((n, True))
        stack.extend((child, False) for child in reversed(kids))


def fold_postorder(node: Node, combine: Callable[[Node, List[T]], T]) -> T:
    """Reduce a tree bottom-up.

    ``combine(n, results)`` receives the already combined children of ``n``,
    left to right.
    """
    results: List[T] = []
    for n in walk_postorder(node):
        k = len(_children(n))
        if k:
            args = results[-k:]
            del results[-k:]
        else:
            args = []
        results.append(combine(n, args))
    return results[0]


def count_nodes(node: Node) -> int:
    return sum(1 for _ in walk_postorder(node))
