"""A simulated memory system with a heap that only grows."""

from __future__ import annotations

import mmap

MAX_HEAP = 20 * (1 << 20)
HEAP_BASE = 0x1000
WORD_SIZE = 4
_WORD_MASK = 0xFFFFFFFF


class OutOfMemoryError(MemoryError):
    """The heap cannot be extended by the requested amount."""


class MemoryHeap:
    """A byte-addressed heap of at most max_heap bytes, grown with sbrk."""

    def __init__(self, max_heap: int = MAX_HEAP) -> None:
        if max_heap < 0:
            raise ValueError("max_heap must not be negative")
        self.max_heap = max_heap
        self._storage = bytearray(max_heap)
        self._start = HEAP_BASE
        self._brk = 0

    def sbrk(self, incr: int) -> int:
        """Extend the heap by incr bytes and return the start of the new area."""
        if incr < 0 or self._brk + incr > self.max_heap:
            raise OutOfMemoryError("mem_sbrk failed. Ran out of memory...")
        old_brk = self._start + self._brk
        self._brk += incr
        return old_brk

    def reset_brk(self) -> None:
        """Make the heap empty again."""
        self._brk = 0

    def heap_lo(self) -> int:
        """Address of the first heap byte."""
        return self._start

    def heap_hi(self) -> int:
        """Address of the last heap byte."""
        return self._start + self._brk - 1

    def heapsize(self) -> int:
        """Current heap size in bytes."""
        return self._brk

    def pagesize(self) -> int:
        """The system's page size."""
        return mmap.PAGESIZE

    def _offset(self, addr: int, length: int) -> int:
        offset = addr - self._start
        if offset < 0 or length < 0 or offset + length > self.max_heap:
            raise IndexError(f"address {addr:#x} (+{length}) outside heap storage")
        return offset

    def read_word(self, addr: int) -> int:
        """Read the unsigned 32-bit little-endian word at addr."""
        offset = self._offset(addr, WORD_SIZE)
        return int.from_bytes(self._storage[offset:offset + WORD_SIZE], "little")

    def write_word(self, addr: int, value: int) -> None:
        """Write value, truncated to 32 bits, as a little-endian word at addr."""
        offset = self._offset(addr, WORD_SIZE)
        self._storage[offset:offset + WORD_SIZE] = (value & _WORD_MASK).to_bytes(
            WORD_SIZE, "little"
        )

    def read_bytes(self, addr: int, n: int) -> bytes:
        """Read n bytes starting at addr."""
        offset = self._offset(addr, n)
        return bytes(self._storage[offset:offset + n])

    def write_bytes(self, addr: int, data: bytes) -> None:
        """Write data starting at addr."""
        offset = self._offset(addr, len(data))
        self._storage[offset:offset + len(data)] = data

    def fill(self, addr: int, byte: int, n: int) -> None:
        """Set n bytes starting at addr to the low byte of byte."""
        offset = self._offset(addr, n)
        self._storage[offset:offset + n] = bytes([byte & 0xFF]) * n