import pytest

from tinyscript.environment import Environment
from tinyscript.errors import ScriptRuntimeError


def test_define_and_get():
    env = Environment()
    env.define('a', 1.0)
    assert env.get('a') == 1.0


def test_get_undefined():
    env = Environment()
    with pytest.raises(ScriptRuntimeError) as exc:
        env.get('x')
    assert str(exc.value) == 'Undefined variable x.'


def test_get_only_looks_at_own_frame():
    parent = Environment()
    parent.define('a', 1.0)
    child = Environment(parent)
    with pytest.raises(ScriptRuntimeError):
        child.get('a')
    assert child.get_at(1, 'a') == 1.0


def test_assign_at_updates_ancestor():
    parent = Environment()
    parent.define('a', 1.0)
    child = Environment(Environment(parent))
    child.assign_at(2, 'a', 5.0)
    assert parent.get('a') == 5.0


def test_assign_undefined():
    env = Environment()
    with pytest.raises(ScriptRuntimeError) as exc:
        env.assign('missing', 1.0)
    assert exc.value.message == 'Undefined variable missing.'


def test_shadowing():
    parent = Environment()
    parent.define('a', 'outer')
    child = Environment(parent)
    child.define('a', 'inner')
    assert child.get_at(0, 'a') == 'inner'
    assert child.get_at(1, 'a') == 'outer'


def test_redefine_overwrites():
    env = Environment()
    env.define('a', 1.0)
    env.define('a', 2.0)
    assert env.get('a') == 2.0


def test_ancestor_past_root():
    with pytest.raises(ScriptRuntimeError):
        Environment().ancestor(1)
