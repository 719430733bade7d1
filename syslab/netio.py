"""Buffered, robust reading and writing over sockets and binary streams."""

from __future__ import annotations

from typing import Protocol, Union

MAXLINE = 8192
MAXBUF = 8192
RIO_BUFSIZE = 8192
LISTENQ = 1024


class _Receiver(Protocol):
    def recv(self, bufsize: int) -> bytes: ...


class _Readable(Protocol):
    def read(self, size: int = ...) -> bytes: ...


Source = Union[_Receiver, _Readable]


class RobustReader:
    """Reads from a socket or binary stream through an internal buffer.

    Short counts happen only at end of file; interrupted reads are retried.
    """

    def __init__(self, stream: Source) -> None:
        self._stream = stream
        self._buffer = b""
        self._pos = 0

    def _fill(self) -> bool:
        """Refill the buffer; return False at end of file."""
        while True:
            try:
                if hasattr(self._stream, "recv"):
                    chunk = self._stream.recv(RIO_BUFSIZE)
                else:
                    chunk = self._stream.read(RIO_BUFSIZE)
            except InterruptedError:
                continue
            if not chunk:
                return False
            self._buffer = bytes(chunk)
            self._pos = 0
            return True

    def _available(self) -> int:
        return len(self._buffer) - self._pos

    def _take(self, n: int) -> bytes:
        """Return up to n buffered bytes, refilling once if the buffer is empty."""
        if self._available() <= 0 and not self._fill():
            return b""
        count = min(n, self._available())
        data = self._buffer[self._pos:self._pos + count]
        self._pos += count
        return data

    def read(self, n: int) -> bytes:
        """Read up to n bytes; fewer only if end of file is reached."""
        parts = []
        remaining = n
        while remaining > 0:
            data = self._take(remaining)
            if not data:
                break
            parts.append(data)
            remaining -= len(data)
        return b"".join(parts)

    def readline(self, maxlen: int = MAXLINE) -> bytes:
        """Read one line, newline included, of at most maxlen - 1 bytes.

        Returns b"" at end of file when nothing was read.
        """
        line = bytearray()
        while len(line) < maxlen - 1:
            byte = self._take(1)
            if not byte:
                break
            line += byte
            if byte == b"\n":
                break
        return bytes(line)

    def __iter__(self):
        while True:
            line = self.readline()
            if not line:
                return
            yield line


def write_all(sock, data: bytes) -> int:
    """Write every byte of data to a socket or binary stream; return the count."""
    data = bytes(data)
    if hasattr(sock, "sendall"):
        sock.sendall(data)
        return len(data)
    view = memoryview(data)
    while view:
        try:
            written = sock.write(view)
        except InterruptedError:
            continue
        if written is None:
            written = 0
        if written <= 0:
            raise OSError("write made no progress")
        view = view[written:]
    flush = getattr(sock, "flush", None)
    if flush is not None:
        flush()
    return len(data)