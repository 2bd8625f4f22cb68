"""
Test tail offset location and tail requests
"""

import pytest

from logknife.errors import ConfigurationError
from logknife.tail import (
    locate_tail_offset, read_tail, tail_request, MAX_TAIL_LINES,
)

five_lines = b'line 1\nline 2\nline 3\nline 4\nline 5\n'


@pytest.fixture
def make_file(tmp_path):
    def make(content, name='test.log'):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return make


def test_tail_three_of_five(make_file):
    path = make_file(five_lines)
    with open(path, 'rb') as fh:
        offset = locate_tail_offset(fh, 3)
        assert offset == five_lines.index(b'line 3')
        fh.seek(offset)
        assert fh.read().splitlines() == [b'line 3', b'line 4', b'line 5']


@pytest.mark.parametrize('n', [5, 6, 100])
def test_tail_longer_than_file(make_file, n):
    path = make_file(five_lines)
    with open(path, 'rb') as fh:
        assert locate_tail_offset(fh, n) == 0


def test_tail_one(make_file):
    path = make_file(five_lines)
    with open(path, 'rb') as fh:
        assert list(read_tail(fh, 1)) == [b'line 5\n']


def test_no_trailing_newline(make_file):
    path = make_file(b'a\nb\nc\nd')
    with open(path, 'rb') as fh:
        assert locate_tail_offset(fh, 3) == 2
        assert list(read_tail(fh, 3)) == [b'b\n', b'c\n', b'd']
        assert locate_tail_offset(fh, 4) == 0


def test_blank_lines(make_file):
    path = make_file(b'a\n\n\nb\n')
    with open(path, 'rb') as fh:
        assert list(read_tail(fh, 2)) == [b'\n', b'b\n']


def test_empty_file(make_file):
    path = make_file(b'')
    with open(path, 'rb') as fh:
        assert locate_tail_offset(fh, 10) == 0
        assert list(read_tail(fh, 10)) == []


def test_zero_lines_is_not_a_tail(make_file):
    path = make_file(five_lines)
    with open(path, 'rb') as fh:
        with pytest.raises(ValueError):
            locate_tail_offset(fh, 0)
        assert list(read_tail(fh, 0)) == []
        assert fh.tell() == len(five_lines)


def test_small_blocks_agree(make_file):
    content = b''.join(b'%d %s\n' % (i, b'x' * (i * 7 % 13))
                       for i in range(40))
    path = make_file(content)
    with open(path, 'rb') as fh:
        for n in range(1, 45):
            expected = locate_tail_offset(fh, n)
            for block_size in (1, 2, 3, 7, 64):
                assert locate_tail_offset(fh, n, block_size) == expected
            lines = content.splitlines(True)
            assert content[expected:] == b''.join(lines[-n:])


def test_idempotent(make_file):
    path = make_file(five_lines)
    with open(path, 'rb') as fh:
        assert locate_tail_offset(fh, 2) == locate_tail_offset(fh, 2)


def test_read_tail_leaves_handle_at_end(make_file):
    path = make_file(five_lines)
    with open(path, 'rb') as fh:
        lines = list(read_tail(fh, 2))
        assert lines == [b'line 4\n', b'line 5\n']
        assert fh.tell() == len(five_lines)


def test_read_tail_complete_stops_before_partial_line(make_file):
    path = make_file(b'one\ntwo\nhalf')
    with open(path, 'rb') as fh:
        assert list(read_tail(fh, 2, complete=True)) == [b'two\n']
        assert fh.tell() == 8
        assert list(read_tail(fh, 2)) == [b'two\n', b'half']
        assert fh.tell() == 12


@pytest.mark.parametrize('tail,since,rate,expected', [
    (0, 600, 2, 1200),
    (0, 10 ** 6, 10, MAX_TAIL_LINES),
    (0, 0.01, 1, 1),
    (5, 600, 2, 5),
    (0, 0, 10, 0),
    (None, None, 10, 0),
    (3, 0, 0, 3),
    (0, float('inf'), 2, MAX_TAIL_LINES),
    (0, 600, float('inf'), MAX_TAIL_LINES),
])
def test_tail_request(tail, since, rate, expected):
    assert tail_request(tail, since, rate) == expected


@pytest.mark.parametrize('tail,since,rate', [
    (-1, 0, 10),
    (0, -5, 10),
    (0, 60, 0),
    (0, 60, -1),
    ('many', 0, 10),
    (0, float('nan'), 10),
    (0, 60, float('nan')),
])
def test_tail_request_errors(tail, since, rate):
    with pytest.raises(ConfigurationError):
        tail_request(tail, since, rate)
