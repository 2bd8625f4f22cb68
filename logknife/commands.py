"""
Command objects a follow session is built from
"""
from collections import namedtuple
from types import SimpleNamespace

from .util import build_repr, expand_path

Color = namedtuple('Color', ['long', 'escape', 'short'])


class Follow(SimpleNamespace):
    """follow <path> [n] - follow path, printing the last n lines first"""

    def __init__(self, path: str, n: int = 0):
        if not path:
            raise ValueError('Invalid path %r' % path)
        super().__init__(path=expand_path(path), n=int(n))

    def __str__(self):
        return 'follow %s %d' % (self.path, self.n)


class Include:
    """Admit only lines matching a pattern - include <pattern>"""

    def __init__(self, pattern: str):
        if not isinstance(pattern, str):
            raise ValueError('Invalid pattern %r' % (pattern,))
        self.pattern = pattern

    def __eq__(self, other):
        return type(self) is type(other) and self.pattern == other.pattern

    @property
    def type(self):
        return self.__class__.__name__.lower()

    def __str__(self):
        return '%s %s' % (self.type, self.pattern)

    __repr__ = build_repr('Include', 'pattern')


class Exclude(Include):
    """Drop lines matching a pattern - exclude <pattern>"""

    __repr__ = build_repr('Exclude', 'pattern')


class Highlight:
    """Highlight exact word - highlight <word> [color]"""

    def __init__(self, word: str, color=None):
        if not word:
            raise ValueError('Invalid highlight word %r' % (word,))
        if color:
            assert isinstance(color, (Color, str))
        self.word = word
        self.color = color

    def __eq__(self, other):
        return type(self) is type(other) and \
               self.word == other.word and \
               self.color == other.color

    @property
    def type(self):
        return self.__class__.__name__.lower()

    def __str__(self):
        if self.color is None:
            return '%s %s' % (self.type, self.word)
        color = self.color if isinstance(self.color, str) else self.color.long
        return '%s %s %s' % (self.type, self.word, color)

    __repr__ = build_repr('Highlight', 'word', 'color')


class JsonKey:
    """Emphasize a JSON key - jsonkey <key>"""

    def __init__(self, key: str):
        if not key:
            raise ValueError('Invalid json key %r' % (key,))
        self.key = key

    def __eq__(self, other):
        return type(self) is type(other) and self.key == other.key

    def __str__(self):
        return 'jsonkey %s' % self.key

    __repr__ = build_repr('JsonKey', 'key')

