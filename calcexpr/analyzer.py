from dataclasses import dataclass, field
from typing import Dict, Set

from .nodes import Call, Variable, walk_postorder

@dataclass
class Analysis:
    names: Set[str] = field(default_factory=set)
    calls: Dict[str, Set[int]] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not self.names and not self.calls

def _add_call(an: Analysis, name: str, arity: int):
    an.calls.setdefault(name, set()).add(int(arity))

def analyze(node) -> Analysis:
    """Collect the variable/constant names and the (name, arity) calls in ``node``."""
    an = Analysis()
    for n in walk_postorder(node):
        if isinstance(n, Variable):
            an.names.add(n.name)
        elif isinstance(n, Call):
            _add_call(an, n.name, n.arity)
    return an

def unresolved(node, env) -> Analysis:
    """The names and calls of ``node`` that ``env`` cannot resolve.

    These are exactly the references that will evaluate to NaN.
    """
    an = analyze(node)
    missing = Analysis()
    for name in an.names:
        if env.lookup_variable(name) is None and env.constants.find(lambda c: c.name == name) is None:
            missing.names.add(name)
    for name, arities in an.calls.items():
        for arity in arities:
            if env.lookup_function(name, arity) is None:
                _add_call(missing, name, arity)
    return missing
