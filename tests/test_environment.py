
import math
import pytest
from calcexpr.environment import INITIAL_CAPACITY, Cell, Environment, VariableBinding, builtin_environment
from calcexpr.errors import BindingError, FrozenEnvironmentError
from calcexpr.registry import ConstSpec, FuncSpec


def consts(n, prefix="c"):
    return [ConstSpec(f"{prefix}{i}", float(i)) for i in range(n)]

def test_new_environment_is_empty():
    env = Environment()
    assert len(env.variables) == len(env.constants) == len(env.functions) == 0
    assert env.constants.capacity == 0

def test_capacity_grows_geometrically():
    env = Environment()
    env.append_constants([])
    assert env.constants.capacity == 0
    env.append_constants(consts(1))
    assert env.constants.capacity == INITIAL_CAPACITY == 64
    env.append_constants(consts(63, "d"))
    assert env.constants.capacity == 64
    env.append_constants(consts(1, "e"))
    assert env.constants.capacity == 128
    assert len(env.constants) == 65

def test_capacity_covers_large_batches():
    env = Environment()
    env.append_variables([VariableBinding(f"v{i}", Cell(i)) for i in range(200)])
    assert env.variables.capacity == 200
    assert len(env.variables) == 200

def test_order_is_preserved():
    env = Environment()
    env.append_constants(consts(3))
    env.append_constants(consts(2, "z"))
    assert [c.name for c in env.constants] == ["c0", "c1", "c2", "z0", "z1"]

def test_lookups():
    cell = Cell(4.0)
    env = Environment()
    env.append_variables([VariableBinding("rate", cell)])
    env.append_constants([ConstSpec("k", 2.0)])
    f1 = FuncSpec("f", 1, abs)
    f2 = FuncSpec("f", 2, max)
    env.append_functions([f1, f2])
    assert env.lookup_variable("rate") is cell
    assert env.lookup_variable("rat") is None
    assert env.lookup_variable("rates") is None
    assert env.lookup_constant("k") == 2.0
    assert math.isnan(env.lookup_constant("q"))
    assert env.lookup_function("f", 1) is f1
    assert env.lookup_function("f", 2) is f2
    assert env.lookup_function("f", 3) is None

def test_lookup_with_length():
    cell = Cell(1.0)
    env = Environment()
    env.append_variables([VariableBinding("rate", cell)])
    env.append_constants([ConstSpec("pi", 3.0)])
    assert env.lookup_variable("rate_of_change", 4) is cell
    assert env.lookup_variable("rate_of_change", 5) is None
    assert env.lookup_constant("pix", 2) == 3.0
    assert env.lookup_variable("rate", 0) is None
    assert math.isnan(env.lookup_constant(""))

def test_tuple_descriptors():
    env = Environment()
    env.append_variables([("v", Cell(1.0))])
    env.append_constants([("k", 2)])
    env.append_functions([("sq", 1, lambda x: x * x)])
    assert env.lookup_variable("v").value == 1.0
    assert env.lookup_constant("k") == 2.0
    assert env.lookup_function("sq", 1).impl(3) == 9

@pytest.mark.parametrize("append,bad", [
    ("append_functions", FuncSpec("f", 4, abs)),
    ("append_functions", FuncSpec("f", -1, abs)),
    ("append_functions", FuncSpec("f", 1, "not callable")),
    ("append_functions", FuncSpec("", 1, abs)),
    ("append_constants", ConstSpec("k", "abc")),
    ("append_constants", ConstSpec(None, 1.0)),
    ("append_variables", VariableBinding("v", 3.0)),
    ("append_variables", ("v",)),
])
def test_malformed_descriptors(append, bad):
    env = Environment()
    with pytest.raises(BindingError):
        getattr(env, append)([bad])

def test_batches_are_all_or_nothing():
    env = Environment()
    with pytest.raises(ValueError):
        env.append_functions([FuncSpec("ok", 1, abs), FuncSpec("bad", 9, abs)])
    assert len(env.functions) == 0
    assert env.functions.capacity == 0

def test_release_clears_tables_not_cells():
    cell = Cell(3.0)
    env = Environment()
    env.append_variables([VariableBinding("x", cell)])
    env.append_constants(consts(2))
    env.release()
    assert len(env.variables) == 0
    assert env.variables.capacity == 0
    assert cell.value == 3.0
    env.append_constants(consts(1))
    assert env.lookup_constant("c0") == 0.0

def test_builtin_environment():
    env = builtin_environment()
    assert env is builtin_environment()
    assert env.frozen
    assert env.lookup_constant("pi") == 3.14159265358979323846
    sqrt = env.lookup_function("sqrt", 1)
    assert sqrt is not None
    assert sqrt.invoke([4.0]) == 2.0
    assert env.lookup_function("sqrt", 2) is None

def test_builtin_environment_is_read_only():
    env = builtin_environment()
    with pytest.raises(FrozenEnvironmentError):
        env.append_constants([ConstSpec("tau", 6.28)])
    with pytest.raises(TypeError):
        env.append_variables([VariableBinding("x", Cell())])
    with pytest.raises(FrozenEnvironmentError):
        env.release()
    assert math.isnan(env.lookup_constant("tau"))

def test_with_builtins_is_a_mutable_copy():
    env = Environment.with_builtins()
    assert not env.frozen
    env.append_constants([ConstSpec("tau", 6.28)])
    assert env.lookup_constant("tau") == 6.28
    assert env.lookup_constant("pi") == builtin_environment().lookup_constant("pi")
    assert math.isnan(builtin_environment().lookup_constant("tau"))

def test_extend_appends_after_own_entries():
    own = Cell(1.0)
    env = Environment()
    env.append_variables([VariableBinding("x", own)])
    other = Environment()
    other.append_variables([VariableBinding("x", Cell(2.0)), VariableBinding("y", Cell(3.0))])
    env.extend(other)
    assert env.lookup_variable("x") is own
    assert env.lookup_variable("y").value == 3.0
