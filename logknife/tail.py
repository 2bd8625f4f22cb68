"""
Locate and read the last lines of a file
"""

import io
import logging
import math

from .errors import ConfigurationError
from .util import clamp

log = logging.getLogger()

BLOCK_SIZE = 4096
MAX_TAIL_LINES = 100000


def tail_request(tail_lines=0, since_seconds=0, rate=10) -> int:
    """
    Number of trailing lines to print before following.

    An explicit tail_lines wins. Otherwise since_seconds of output is
    approximated as since_seconds * rate lines, clamped to
    [1, MAX_TAIL_LINES]. Zero means no tail.
    """
    try:
        tail_lines = int(tail_lines or 0)
        since_seconds = float(since_seconds or 0)
        rate = float(rate or 0)
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigurationError('invalid tail arguments: %s' % e) from e

    if math.isnan(since_seconds) or math.isnan(rate):
        raise ConfigurationError('since seconds and line rate must be '
                                 'numbers')
    if tail_lines < 0:
        raise ConfigurationError('tail lines must be >= 0, not %d'
                                 % tail_lines)
    if since_seconds < 0:
        raise ConfigurationError('since seconds must be >= 0, not %g'
                                 % since_seconds)
    if tail_lines:
        return tail_lines
    if not since_seconds:
        return 0
    if rate <= 0:
        raise ConfigurationError('line rate must be > 0, not %g' % rate)
    # clamp first, an infinite product has no int
    return int(clamp(since_seconds * rate, 1, MAX_TAIL_LINES))


def locate_tail_offset(fh, n: int, block_size: int = BLOCK_SIZE) -> int:
    """
    Byte offset of the start of the n-th line from the end of fh.

    fh must be a seekable binary file. The file is scanned backwards one
    block at a time counting newlines; 0 is returned when the file holds
    n lines or fewer. An unterminated last line counts as a line.
    """
    if n < 1:
        raise ValueError('tail line count must be >= 1, not %r' % (n,))

    size = fh.seek(0, io.SEEK_END)
    if size == 0:
        return 0

    fh.seek(size - 1)
    count = 0 if fh.read(1) == b'\n' else 1

    pos = size
    while pos > 0:
        read_size = min(block_size, pos)
        pos -= read_size
        fh.seek(pos)
        block = fh.read(read_size)
        idx = len(block)
        while True:
            idx = block.rfind(b'\n', 0, idx)
            if idx < 0:
                break
            count += 1
            if count > n:
                offset = pos + idx + 1
                log.debug('locate_tail_offset(n=%d) => %d of %d',
                          n, offset, size)
                return offset
    log.debug('locate_tail_offset(n=%d) => 0, only %d lines', n, count)
    return 0


def read_tail(fh, n: int, block_size: int = BLOCK_SIZE, complete=False):
    """
    yield the last n lines of fh, leaving fh at end of file.

    With complete set an unterminated last line is not yielded and fh is
    left at its start, so a follower picks it up once it is finished.
    """
    if n <= 0:
        fh.seek(0, io.SEEK_END)
        return
    fh.seek(locate_tail_offset(fh, n, block_size))
    for line in iter(fh.readline, b''):
        if complete and not line.endswith(b'\n'):
            fh.seek(-len(line), io.SEEK_CUR)
            return
        yield line
