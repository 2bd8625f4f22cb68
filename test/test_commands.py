"""
Test command objects
"""

import pytest

from logknife.commands import Follow, Include, Exclude, Highlight, JsonKey
from logknife.colorize import Red


def test_equality():
    assert Follow('foo') == Follow('foo')
    assert Follow('foo', 3) != Follow('foo')
    assert Include('rez') == Include('rez')
    assert Include('rez') != Exclude('rez')
    assert Highlight('a', 'red') == Highlight('a', 'red')
    assert JsonKey('level') == JsonKey('level')
    assert {'a': Follow('a')} == {'a': Follow('a')}


def test_str():
    assert str(Follow('/var/log/x', 5)) == 'follow /var/log/x 5'
    assert str(Include('^ERR')) == 'include ^ERR'
    assert str(Exclude('DEBUG')) == 'exclude DEBUG'
    assert str(Highlight('WARN')) == 'highlight WARN'
    assert str(Highlight('WARN', Red)) == 'highlight WARN red'
    assert str(JsonKey('msg')) == 'jsonkey msg'


def test_repr():
    assert repr(Exclude('x')) == "Exclude(pattern='x')"
    assert repr(Highlight('x')) == "Highlight(word='x', color=None)"


def test_follow_expands_path(monkeypatch):
    monkeypatch.setenv('LOGKNIFE_DIR', '/srv/logs')
    assert Follow('$LOGKNIFE_DIR/app.log').path == '/srv/logs/app.log'


@pytest.mark.parametrize('ctor,args', [
    (Follow, ['']),
    (Include, [None]),
    (Highlight, ['']),
    (JsonKey, ['']),
])
def test_invalid(ctor, args):
    with pytest.raises(ValueError):
        ctor(*args)
