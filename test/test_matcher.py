"""
Test built-in and regex pattern matching
"""

import pytest

from logknife.errors import ConfigurationError
from logknife.matcher import (
    matches, compile_pattern, SimplePattern, RegexPattern,
)


@pytest.mark.parametrize('pattern,text,expected', [
    ('^abc$', 'abc', True),
    ('^abc$', 'abcd', False),
    ('^abc$', 'xabc', False),
    ('a*b', '', False),
    ('a*b', 'b', True),
    ('a*b', 'aaab', True),
    ('a*b', 'aac', False),
    ('a.c', 'xxabcxx', True),
    ('a.c', 'ac', False),
    ('^a*$', 'aaa', True),
    ('^a*$', 'aab', False),
    ('^.*done$', 'task 12 done', True),
    ('.*', '', True),
    ('^$', '', True),
    ('^$', 'x', False),
    ('$', 'anything', True),
    ('', '', True),
    ('', 'text', True),
    ('x*', 'abc', True),
    ('^ab*c', 'ac', True),
    ('^ab*c', 'abbbc', True),
    ('^ab*c', 'abbbd', False),
])
def test_matches(pattern, text, expected):
    assert matches(pattern, text) is expected


@pytest.mark.parametrize('pattern', ['ERROR', 'a b', 'xyz', 'e', 'DEBUG'])
@pytest.mark.parametrize('text', [
    '', 'ERROR', '2024 ERROR DEBUG something', 'a b c', 'no match here',
])
def test_literal_pattern_is_substring_search(pattern, text):
    assert matches(pattern, text) is (pattern in text)


def test_unsupported_syntax_is_literal():
    assert matches('[abc]', 'x[abc]y')
    assert not matches('[abc]', 'a')
    assert matches('a|b', 'a|b')
    assert not matches('a|b', 'b')


def test_anchor_only_at_start():
    # a ^ after the first character is an ordinary character
    assert matches('a^b', 'a^b')
    assert not matches('a^b', 'ab')


def test_long_lines():
    line = 'a' * 5000 + 'x'
    assert matches('x$', line)
    assert matches('^a*x$', line)
    assert matches(line, line)
    assert not matches('^a*y', line)


def test_compile_pattern_variants():
    simple = compile_pattern('a|b')
    regex = compile_pattern('a|b', regex=True)
    assert isinstance(simple, SimplePattern)
    assert isinstance(regex, RegexPattern)
    assert not simple.matches('xb')
    assert regex.matches('xb')
    assert compile_pattern(simple) is simple


def test_regex_search_semantics():
    pattern = compile_pattern(r'\d{4}-\d\d', regex=True)
    assert pattern.matches('at 2024-01 something')
    assert not pattern.matches('at 24-01 something')


def test_invalid_regex():
    with pytest.raises(ConfigurationError):
        compile_pattern('(unclosed', regex=True)
    with pytest.raises(ValueError):
        compile_pattern('[a-', regex=True)


def test_pattern_equality():
    assert SimplePattern('abc') == SimplePattern('abc')
    assert SimplePattern('abc') != RegexPattern('abc')
    assert str(RegexPattern('abc')) == 'abc'
    assert len({SimplePattern('a'), SimplePattern('a')}) == 1
