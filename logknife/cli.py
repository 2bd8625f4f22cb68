"""
Terminal output
"""
import sys
import logging

from .util import coerce_str as _str

log = logging.getLogger()


class Terminal:
    """Virtual terminal"""

    def __init__(self, stdout=None):
        self.stdout = stdout or sys.stdout

    def isatty(self):
        isatty = getattr(self.stdout, 'isatty', None)
        return bool(isatty and isatty())

    def emit(self, *strings, sep=' ', end='', flush=True):
        """Write string to stdout"""
        self.stdout.write(_str(sep.join(strings)))
        if end:
            self.stdout.write(_str(end))
        if flush:
            self.stdout.flush()

    def emit_line(self, line):
        """Write one output line"""
        self.emit(line, end='\n')
