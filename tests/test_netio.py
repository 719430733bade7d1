import io
import socket

import pytest

from syslab.netio import RIO_BUFSIZE, RobustReader, write_all


class _Trickle:
    """A stream that hands out at most a few bytes per read."""

    def __init__(self, data, step=3):
        self._data = data
        self._step = step

    def read(self, size=-1):
        chunk = self._data[:min(size, self._step)]
        self._data = self._data[len(chunk):]
        return chunk


class _Interrupting(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self._interrupted = False

    def read(self, size=-1):
        if not self._interrupted:
            self._interrupted = True
            raise InterruptedError
        return super().read(size)


def test_readline_splits_lines():
    reader = RobustReader(io.BytesIO(b"GET / HTTP/1.0\r\nHost: a\r\n\r\n"))
    assert reader.readline() == b"GET / HTTP/1.0\r\n"
    assert reader.readline() == b"Host: a\r\n"
    assert reader.readline() == b"\r\n"
    assert reader.readline() == b""


def test_readline_last_line_without_newline():
    reader = RobustReader(io.BytesIO(b"first\nlast"))
    assert reader.readline() == b"first\n"
    assert reader.readline() == b"last"
    assert reader.readline() == b""


def test_readline_respects_maxlen():
    reader = RobustReader(io.BytesIO(b"abcdefgh\n"))
    assert reader.readline(4) == b"abc"
    assert reader.readline(100) == b"defgh\n"


def test_readline_tiny_maxlen_reads_nothing():
    reader = RobustReader(io.BytesIO(b"abc\n"))
    assert reader.readline(1) == b""
    assert reader.readline() == b"abc\n"


def test_read_collects_across_short_reads():
    data = b"0123456789" * 5
    reader = RobustReader(_Trickle(data))
    assert reader.read(len(data)) == data
    assert reader.read(10) == b""


def test_read_short_count_at_eof():
    reader = RobustReader(io.BytesIO(b"xyz"))
    assert reader.read(10) == b"xyz"


def test_read_and_readline_interleave():
    reader = RobustReader(io.BytesIO(b"line\nbody-bytes"))
    assert reader.readline() == b"line\n"
    assert reader.read(4) == b"body"
    assert reader.read(100) == b"-bytes"


def test_large_payload_spans_buffers():
    data = bytes(range(256)) * ((RIO_BUFSIZE * 3) // 256 + 1)
    reader = RobustReader(io.BytesIO(data))
    assert reader.read(len(data) + 10) == data


def test_interrupted_read_is_retried():
    reader = RobustReader(_Interrupting(b"ok\n"))
    assert reader.readline() == b"ok\n"


def test_iteration_yields_lines():
    reader = RobustReader(io.BytesIO(b"a\nb\nc"))
    assert list(reader) == [b"a\n", b"b\n", b"c"]


def test_socket_round_trip():
    left, right = socket.socketpair()
    with left, right:
        payload = b"hello\r\nworld\r\n"
        assert write_all(left, payload) == len(payload)
        left.shutdown(socket.SHUT_WR)
        reader = RobustReader(right)
        assert reader.readline() == b"hello\r\n"
        assert reader.readline() == b"world\r\n"
        assert reader.readline() == b""


def test_write_all_to_stream():
    out = io.BytesIO()
    assert write_all(out, b"payload") == len(b"payload")
    assert out.getvalue() == b"payload"


def test_write_all_stalled_stream_raises():
    class _Stalled:
        def write(self, data):
            return 0

    with pytest.raises(OSError):
        write_all(_Stalled(), b"x")