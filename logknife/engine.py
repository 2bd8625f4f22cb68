"""
Main follow engine.
"""

import asyncio
import io
import logging
import os

from .colorize import render
from .errors import FatalReadError, OpenError, TransientReadError
from .tail import read_tail
from .util import Closable, build_repr, coerce_str as _str, trim_repr

log = logging.getLogger()

# follower states
SEEKED_TO_END = 'seeked-to-end'
READING = 'reading'
WAITING = 'waiting'
REWOUND = 'rewound'


def open_target(path):
    """open path for binary reading"""
    try:
        fh = open(path, 'rb')
    except OSError as e:
        raise OpenError('Failed to open %s: %s'
                        % (path, e.strerror or e)) from e
    log.debug('open_target(%r) => %r', path, fh)
    return fh


class Follower:
    """
    Read cursor over a growing file.

    Each call to poll() is one cycle: every complete line available at the
    cursor is yielded, then the file size is checked. A size below the last
    observed size (or below the cursor) means the file was truncated or
    rotated in place, and the cursor goes back to 0.
    """

    def __init__(self, fh, offset=None, max_stat_failures=5):
        self.fh = fh
        self.max_stat_failures = max_stat_failures
        self._stat_failures = 0
        self.last_size = os.fstat(fh.fileno()).st_size
        if offset is None:
            self.offset = fh.seek(0, io.SEEK_END)
        else:
            self.offset = offset
        self.state = SEEKED_TO_END

    def size(self):
        try:
            return os.fstat(self.fh.fileno()).st_size
        except (OSError, ValueError) as e:
            raise TransientReadError('size query failed: %s' % e) from e

    def poll(self):
        """yield complete lines available now, then check for truncation"""
        try:
            self.fh.seek(self.offset)
            for line in iter(self.fh.readline, b''):
                if not line.endswith(b'\n'):
                    break  # partial line, wait for the writer
                self.state = READING
                yield line
                self.offset += len(line)
        except OSError as e:
            log.debug('read error at offset %d: %s', self.offset, e)
        self.check_size()

    def check_size(self):
        self.state = WAITING
        try:
            size = self.size()
        except TransientReadError as e:
            self._stat_failures += 1
            log.debug('%s (%d of %d)', e, self._stat_failures,
                      self.max_stat_failures)
            if self._stat_failures >= self.max_stat_failures:
                raise FatalReadError(
                    'file unreadable after %d attempts: %s'
                    % (self._stat_failures, e)) from e
            return
        self._stat_failures = 0
        if size < self.last_size or size < self.offset:
            log.info('file truncated (%d -> %d bytes), reading from start',
                     self.last_size, size)
            self.offset = 0
            self.state = REWOUND
            # SEEK_END drops read-ahead holding pre-truncation bytes
            self.fh.seek(0, io.SEEK_END)
        self.last_size = size

    __repr__ = build_repr('Follower', 'offset', 'last_size', 'state')


class FollowService(Closable):
    """
    Tail then follow runtime.path, queueing admitted, colorized lines.

    The queue is FIFO so output order is read order; a line is queued
    before the follower moves past it.
    """

    def __init__(self, runtime, queue: asyncio.Queue = None):
        super().__init__()
        self.runtime = runtime
        self.line_filter = runtime.line_filter()
        self._queue = queue or asyncio.Queue()
        self._wake = asyncio.Event()
        self.emitted = 0

    def close(self):
        super().close()
        self._wake.set()

    def emit(self, raw):
        """filter and queue one raw line"""
        line = _str(raw).rstrip('\r\n')
        if not self.line_filter.admit(line):
            return False
        rt = self.runtime
        self._queue.put_nowait(render(
            line, rt.highlights, rt.json_keys, rt.json, rt.use_color))
        self.emitted += 1
        return True

    async def sleep(self):
        """wait one polling interval, or less if closed"""
        try:
            await asyncio.wait_for(self._wake.wait(),
                                   self.runtime.interval_ms / 1000)
        except asyncio.TimeoutError:
            pass

    async def search(self):
        """
        Emit the requested tail of the file, then poll for appended lines
        until closed.
        """
        try:
            with open_target(self.runtime.path) as fh:
                for raw in read_tail(fh, self.runtime.tail,
                                     complete=self.runtime.follow):
                    self.emit(raw)
                if not self.runtime.follow:
                    return
                follower = Follower(fh, offset=fh.tell())
                log.debug('follow %r from %r', self.runtime.path, follower)
                while not self.is_closed:
                    for raw in follower.poll():
                        log.debug('read %s', trim_repr(raw))
                        self.emit(raw)
                    await self.sleep()
        finally:
            self.close()
            self._queue.put_nowait(None)
            log.debug('finished follow %r -> emitted: %d',
                      self.runtime.path, self.emitted)

    async def loop(self, terminal):
        """pulls from the print queue and writes to terminal"""
        try:
            while True:
                line = await self._queue.get()
                if line is None:
                    break
                terminal.emit_line(line)
        except Exception:
            self.close()
            raise
        log.debug('finished output loop -> closed: %s', self.is_closed)

    async def run(self, terminal):
        # both finish: queued lines are written before a search error surfaces
        results = await asyncio.gather(
            self.search(), self.loop(terminal), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
