"""Binding environments.

An :class:`Environment` holds three independent append-only tables:
variables (name -> caller-owned :class:`Cell`), constants (name -> value) and
functions (name + arity -> callable). Lookup is a linear scan in insertion
order and the first match wins; duplicate names are allowed.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Generic, Iterable, Iterator, List, NamedTuple, Optional, TypeVar

from calcexpr.errors import BindingError, FrozenEnvironmentError
from calcexpr.nodes import MAX_ARITY
from calcexpr.registry import ConstSpec, FuncSpec

logger = logging.getLogger(__name__)

INITIAL_CAPACITY = 64

T = TypeVar("T")


class Cell:
    """A caller-owned numeric slot. Writes to ``value`` are seen by later evaluations."""

    __slots__ = ("value",)

    def __init__(self, value=0.0):
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


class VariableBinding(NamedTuple):
    name: str
    cell: Cell


class BindingTable(Generic[T]):
    """Append-only table with geometric capacity growth.

    Capacity is 0 until the first non-empty append, then at least
    ``INITIAL_CAPACITY``, doubling whenever an append would overflow it.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self.capacity = 0
        self._entries: List[T] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self._entries)

    def extend(self, entries: List[T]) -> None:
        if not entries:
            return
        needed = len(self._entries) + len(entries)
        if needed > self.capacity:
            new_capacity = max(self.capacity * 2, INITIAL_CAPACITY, needed)
            logger.debug("growing %s table from %d to %d", self.kind, self.capacity, new_capacity)
            self.capacity = new_capacity
        self._entries.extend(entries)

    def find(self, match: Callable[[T], bool]) -> Optional[T]:
        for entry in self._entries:
            if match(entry):
                return entry
        return None

    def clear(self) -> None:
        self._entries = []
        self.capacity = 0


def _query(name: str, length: Optional[int]) -> str:
    return name if length is None else name[:length]


def _check_name(kind: str, name) -> None:
    if not isinstance(name, str) or not name:
        raise BindingError(f"{kind} name must be a non-empty str, got {name!r}")


def _variable(entry) -> VariableBinding:
    if not isinstance(entry, VariableBinding):
        try:
            entry = VariableBinding(*entry)
        except TypeError as e:
            raise BindingError(f"malformed variable descriptor {entry!r}") from e
    _check_name("variable", entry.name)
    if not hasattr(entry.cell, "value"):
        raise BindingError(f"variable '{entry.name}' must be bound to a Cell, got {entry.cell!r}")
    return entry


def _constant(entry) -> ConstSpec:
    if not isinstance(entry, ConstSpec):
        try:
            entry = ConstSpec(*entry)
        except TypeError as e:
            raise BindingError(f"malformed constant descriptor {entry!r}") from e
    _check_name("constant", entry.name)
    try:
        value = float(entry.value)
    except (TypeError, ValueError) as e:
        raise BindingError(f"constant '{entry.name}' has non-numeric value {entry.value!r}") from e
    return entry._replace(value=value)


def _function(entry) -> FuncSpec:
    if not isinstance(entry, FuncSpec):
        try:
            entry = FuncSpec(*entry)
        except TypeError as e:
            raise BindingError(f"malformed function descriptor {entry!r}") from e
    _check_name("function", entry.name)
    if not isinstance(entry.arity, int) or not 0 <= entry.arity <= MAX_ARITY:
        raise BindingError(f"function '{entry.name}' arity must be 0..{MAX_ARITY}, got {entry.arity!r}")
    if not callable(entry.impl):
        raise BindingError(f"function '{entry.name}' target is not callable")
    return entry


class Environment:
    """Variables, constants and functions available to the evaluator.

    Not safe for appends concurrent with any other operation; concurrent
    evaluations against an environment that is not being appended to are fine.

    Examples
    --------
    >>> r = Cell(2.0)
    >>> env = Environment.with_builtins()
    >>> env.append_variables([VariableBinding("r", r)])
    >>> env.lookup_variable("r") is r
    True
    """

    def __init__(self):
        self.variables: BindingTable[VariableBinding] = BindingTable("variable")
        self.constants: BindingTable[ConstSpec] = BindingTable("constant")
        self.functions: BindingTable[FuncSpec] = BindingTable("function")
        self._frozen = False

    @classmethod
    def with_builtins(cls) -> "Environment":
        """A fresh, mutable environment pre-populated with the builtins."""
        env = cls()
        env.extend(builtin_environment())
        return env

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "Environment":
        self._frozen = True
        return self

    def _check_writable(self) -> None:
        if self._frozen:
            raise FrozenEnvironmentError("environment is read-only")

    # Each batch is validated as a whole before anything is appended.

    def append_variables(self, bindings: Iterable) -> None:
        self._check_writable()
        self.variables.extend([_variable(b) for b in bindings])

    def append_constants(self, constants: Iterable) -> None:
        self._check_writable()
        self.constants.extend([_constant(c) for c in constants])

    def append_functions(self, functions: Iterable) -> None:
        self._check_writable()
        self.functions.extend([_function(f) for f in functions])

    def extend(self, other: "Environment") -> None:
        """Append every entry of ``other``, after this environment's own."""
        self.append_variables(list(other.variables))
        self.append_constants(list(other.constants))
        self.append_functions(list(other.functions))

    def lookup_variable(self, name: str, length: Optional[int] = None) -> Optional[Cell]:
        q = _query(name, length)
        if not q:
            return None
        entry = self.variables.find(lambda v: v.name == q)
        return entry.cell if entry is not None else None

    def lookup_constant(self, name: str, length: Optional[int] = None) -> float:
        q = _query(name, length)
        if not q:
            return math.nan
        entry = self.constants.find(lambda c: c.name == q)
        return entry.value if entry is not None else math.nan

    def lookup_function(self, name: str, arity: int, length: Optional[int] = None) -> Optional[FuncSpec]:
        q = _query(name, length)
        if not q:
            return None
        return self.functions.find(lambda f: f.arity == arity and f.name == q)

    def evaluate(self, parsed) -> float:
        from calcexpr.eval import evaluate
        return evaluate(parsed, self)

    def release(self) -> None:
        """Drop the tables. Cells and function targets stay with the caller."""
        self._check_writable()
        self.variables.clear()
        self.constants.clear()
        self.functions.clear()

    def __repr__(self) -> str:
        return (
            f"Environment(variables={len(self.variables)}, constants={len(self.constants)}, "
            f"functions={len(self.functions)}, frozen={self._frozen})"
        )


_builtin_lock = threading.Lock()
_builtin: Optional[Environment] = None


def builtin_environment() -> Environment:
    """The read-only environment holding the builtin constants and functions."""
    global _builtin
    if _builtin is None:
        with _builtin_lock:
            if _builtin is None:
                import calcexpr.functions  # noqa: F401  (registers builtins)
                from calcexpr.registry import CONSTANTS, REGISTRY

                env = Environment()
                env.append_constants(CONSTANTS)
                env.append_functions(REGISTRY)
                _builtin = env.freeze()
    return _builtin
