"""
Pattern matching for include/exclude filters.

The built-in matcher understands a small regular expression subset:

    c    any literal character c
    .    any single character
    ^    start of the text (only as the first pattern character)
    $    end of the text (only as the last pattern character)
    *    zero or more repetitions of the previous character

Anything else, ``[abc]`` for example, is compared literally.
"""

import re
import logging

from .errors import ConfigurationError
from .util import build_repr

log = logging.getLogger()


def match_here(pattern: str, p: int, text: str, t: int) -> bool:
    """match pattern[p:] against the start of text[t:]"""
    while True:
        if p == len(pattern):
            return True
        if pattern[p] == '$' and p + 1 == len(pattern):
            return t == len(text)
        if p + 1 < len(pattern) and pattern[p + 1] == '*':
            return match_star(pattern[p], pattern, p + 2, text, t)
        if t < len(text) and pattern[p] in ('.', text[t]):
            p += 1
            t += 1
            continue
        return False


def match_star(c: str, pattern: str, p: int, text: str, t: int) -> bool:
    """
    match c* followed by pattern[p:] at text[t:]

    Zero repetitions are tried first, then one more character at a time
    until the rest of the pattern matches or c stops matching.
    """
    while True:
        if match_here(pattern, p, text, t):
            return True
        if t < len(text) and (c == '.' or text[t] == c):
            t += 1
        else:
            return False


def matches(pattern: str, text: str) -> bool:
    """search for pattern anywhere in text"""
    if pattern.startswith('^'):
        return match_here(pattern, 1, text, 0)
    # the empty suffix at the end of text is a valid start too
    for t in range(len(text) + 1):
        if match_here(pattern, 0, text, t):
            return True
    return False


class Pattern:
    """immutable pattern exposing a matches(text) test"""

    def __init__(self, pattern: str):
        self._pattern = pattern

    @property
    def pattern(self):
        return self._pattern

    def matches(self, text: str) -> bool:
        raise NotImplementedError

    def __eq__(self, other):
        return type(self) is type(other) and self.pattern == other.pattern

    def __hash__(self):
        return hash((type(self).__name__, self.pattern))

    def __str__(self):
        return self.pattern


class SimplePattern(Pattern):
    """built-in ^ $ . * matcher"""

    def matches(self, text):
        return matches(self.pattern, text)

    __repr__ = build_repr('SimplePattern', 'pattern')


class RegexPattern(Pattern):
    """python re module, search semantics"""

    def __init__(self, pattern: str):
        super().__init__(pattern)
        try:
            self.regex = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(
                'invalid pattern %r: %s' % (pattern, e)) from e

    def matches(self, text):
        return self.regex.search(text) is not None

    __repr__ = build_repr('RegexPattern', 'pattern')


def compile_pattern(pattern, regex=False) -> Pattern:
    """build the Pattern variant selected by regex"""
    if isinstance(pattern, Pattern):
        return pattern
    if not isinstance(pattern, str):
        raise ConfigurationError('pattern must be a string, not %r'
                                 % type(pattern).__name__)
    cls = RegexPattern if regex else SimplePattern
    compiled = cls(pattern)
    log.debug('compile_pattern(%r, regex=%s) => %r', pattern, regex, compiled)
    return compiled
