
from typing import Callable, List, NamedTuple, Sequence

from calcexpr.nodes import MAX_ARITY


class FuncSpec(NamedTuple):
    name: str
    arity: int      # 0..3
    impl: Callable
    doc: str = ""

    def invoke(self, args: Sequence):
        if len(args) != self.arity:
            raise TypeError(f"{self.name} expects {self.arity} arguments, got {len(args)}")
        if self.arity == 0:
            return self.impl()
        if self.arity == 1:
            return self.impl(args[0])
        if self.arity == 2:
            return self.impl(args[0], args[1])
        return self.impl(args[0], args[1], args[2])


class ConstSpec(NamedTuple):
    name: str
    value: float
    doc: str = ""


REGISTRY: List[FuncSpec] = []
CONSTANTS: List[ConstSpec] = []


def register(name, arity, doc=""):
    if not 0 <= arity <= MAX_ARITY:
        raise ValueError(f"arity of '{name}' must be between 0 and {MAX_ARITY}, got {arity}")
    def deco(fn):
        REGISTRY.append(FuncSpec(name, arity, fn, doc))
        return fn
    return deco


def register_constant(name, value, doc=""):
    CONSTANTS.append(ConstSpec(name, float(value), doc))


def list_functions():
    return [
        {"name": spec.name, "arity": spec.arity, "doc": spec.doc}
        for spec in sorted(REGISTRY, key=lambda s: (s.name, s.arity))
    ]


def list_constants():
    return [{"name": c.name, "value": c.value, "doc": c.doc} for c in sorted(CONSTANTS)]
