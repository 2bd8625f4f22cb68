"""
Line filter combining include and exclude patterns
"""

import logging
from typing import Iterable

from .matcher import Pattern, compile_pattern
from .util import build_repr, coerce_str as _str

log = logging.getLogger()


class LineFilter:
    """
    include and exclude patterns, in the order they were given.

    A line is admitted when there are no includes or at least one include
    matches, and no exclude matches.
    """

    def __init__(self, includes: Iterable = (), excludes: Iterable = (),
                 regex=False):
        self.includes = [compile_pattern(p, regex) for p in includes]
        self.excludes = [compile_pattern(p, regex) for p in excludes]

    def admit(self, line) -> bool:
        return admit(self, line)

    def __bool__(self):
        return bool(self.includes or self.excludes)

    __repr__ = build_repr('LineFilter', 'includes', 'excludes')


def _any_match(patterns, text):
    for pattern in patterns:  # type: Pattern
        if pattern.matches(text):
            return True
    return False


def admit(filter_config: LineFilter, line) -> bool:
    """decide if line passes filter_config"""
    text = _str(line).rstrip('\r\n')
    if filter_config.includes and \
            not _any_match(filter_config.includes, text):
        return False
    return not _any_match(filter_config.excludes, text)
