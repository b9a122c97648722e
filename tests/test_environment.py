import pytest

from ruten.environment import Environment
from ruten.errors import RutenError


def bound(env, name):
    return any(name in scope for scope in env.scopes)


def test_get_undefined_raises_name_error():
    env = Environment()
    with pytest.raises(RutenError) as excinfo:
        env.get('missing')
    assert excinfo.value.kind == 'NameError'
    assert str(excinfo.value) == 'name error: undefined variable: missing'


def test_set_rebinds_nearest_binding():
    env = Environment()
    env.define('x', 1.0)
    env.push_scope()
    env.set('x', 2.0)
    env.set('y', 3.0)
    assert env.scopes == [{'x': 2.0}, {'y': 3.0}]


def test_define_shadows_outer_binding():
    env = Environment()
    env.define('x', 1.0)
    env.push_scope()
    env.define('x', 'inner')
    assert env.get('x') == 'inner'
    assert env.scopes[0] == {'x': 1.0}


def test_snapshot_is_isolated_from_later_changes():
    env = Environment()
    env.define('x', 1.0)
    snap = env.snapshot()
    env.set('x', 2.0)
    env.define('y', 3.0)
    assert snap.get('x') == 1.0
    assert not bound(snap, 'y')


def test_changes_to_snapshot_do_not_leak_back():
    env = Environment()
    env.define('x', 1.0)
    env.push_scope()
    env.define('local', 'a')
    snap = env.snapshot()
    snap.set('x', 99.0)
    snap.set('local', 'b')
    snap.push_scope()
    assert env.get('x') == 1.0
    assert env.get('local') == 'a'
    assert len(env.scopes) == 2
    assert len(snap.scopes) == 3


def test_snapshot_shares_scopes_until_written():
    env = Environment()
    env.define('x', 1.0)
    snap = env.snapshot()
    assert snap.scopes[0] is env.scopes[0]
    snap.set('x', 2.0)
    assert snap.scopes[0] is not env.scopes[0]
    assert env.get('x') == 1.0
