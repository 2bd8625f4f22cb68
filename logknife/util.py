"""
Common utility methods
"""

import os
import logging

log = logging.getLogger()


def expand_path(path):
    """expand environment variables and tilda in path"""
    if '$' in path:
        path = os.path.expandvars(path)
    if '~' in path:
        path = os.path.expanduser(path)
    return path


def coerce_str(data, errors='replace'):
    """coerce data to str type"""
    if not isinstance(data, str) and hasattr(data, 'decode'):
        data = data.decode('utf-8', errors)
    return data


def clamp(value, low, high):
    return max(low, min(high, value))


def build_repr(clz, *attributes):
    """generate __repr__ method for builder classes"""

    def method(self):
        init = ', '.join('%s=%r' % (a, getattr(self, a)) for a in attributes)
        return '%s(%s)' % (clz, init)

    return method


def trim_repr(obj, length=16, sep='...'):
    """returns a trimmed repr string of obj"""
    obj_repr = repr(obj)
    if len(obj_repr) <= 2 * length + len(sep):
        return obj_repr
    return obj_repr[:length] + sep + obj_repr[-length:]


class Closable:
    def __init__(self):
        self._closed = False

    @property
    def is_closed(self):
        return self._closed

    def close(self):
        log.debug('Closing %r', self)
        self._closed = True
