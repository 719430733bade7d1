"""An explicit free list, first-fit allocator working on a simulated heap.

Every block carries a one-word header and a one-word footer holding its size
and allocated bit. Free blocks also hold the address of the next free block
in their first payload word and of the previous one in their second. The
prologue block stays at the tail of the free list as an allocated sentinel.
Freed blocks are coalesced with free neighbours at once.
"""

from __future__ import annotations

import logging
from typing import Iterator

from .memlib import MemoryHeap

WSIZE = 4
DSIZE = 8
CHUNKSIZE = 1 << 12
ALIGNMENT = 8
NULL = 0

log = logging.getLogger(__name__)


def _align(size: int) -> int:
    """Round size up to the nearest multiple of ALIGNMENT."""
    return (size + (ALIGNMENT - 1)) & ~0x7


SIZE_T_SIZE = _align(WSIZE)


def _pack(size: int, alloc: int) -> int:
    return size | alloc


class Allocator:
    """malloc, free and realloc on top of a MemoryHeap."""

    def __init__(self, heap: MemoryHeap) -> None:
        self.heap = heap
        self._heap_listp = NULL
        self._freelist_head = NULL

    # -- word access ------------------------------------------------------

    def _get(self, p: int) -> int:
        return self.heap.read_word(p)

    def _put(self, p: int, value: int) -> None:
        self.heap.write_word(p, value)

    def _size_at(self, p: int) -> int:
        return self._get(p) & ~0x7

    def _alloc_at(self, p: int) -> int:
        return self._get(p) & 0x1

    @staticmethod
    def _hdrp(bp: int) -> int:
        return bp - WSIZE

    def _ftrp(self, bp: int) -> int:
        return bp + self._size_at(self._hdrp(bp)) - DSIZE

    def _next_blkp(self, bp: int) -> int:
        return bp + self._size_at(bp - WSIZE)

    def _prev_blkp(self, bp: int) -> int:
        return bp - self._size_at(bp - DSIZE)

    def _next_free(self, bp: int) -> int:
        return self._get(bp)

    def _prev_free(self, bp: int) -> int:
        return self._get(bp + WSIZE)

    def _set_next_free(self, bp: int, nxt: int) -> None:
        self._put(bp, nxt)

    def _set_prev_free(self, bp: int, prev: int) -> None:
        self._put(bp + WSIZE, prev)

    # -- public interface -------------------------------------------------

    def init(self) -> None:
        """Set up an empty heap with one free chunk.

        Raises OutOfMemoryError if the heap cannot hold it.
        """
        start = self.heap.sbrk(6 * WSIZE)
        self._put(start, 0)                                  # alignment padding
        self._put(start + 1 * WSIZE, _pack(2 * DSIZE, 1))    # prologue header
        self._put(start + 2 * WSIZE, NULL)                   # free-list link
        self._put(start + 3 * WSIZE, NULL)                   # free-list link
        self._put(start + 4 * WSIZE, _pack(2 * DSIZE, 1))    # prologue footer
        self._put(start + 5 * WSIZE, _pack(0, 1))            # epilogue header
        self._heap_listp = start + 2 * WSIZE
        self._freelist_head = self._heap_listp
        self._extend_heap(CHUNKSIZE // WSIZE)

    def malloc(self, size: int) -> int | None:
        """Allocate size bytes and return the payload address.

        Returns None for a request of zero bytes; raises OutOfMemoryError when
        the heap cannot grow enough.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        if size == 0:
            return None
        asize = _align(size + SIZE_T_SIZE)
        bp = self._find_fit(asize)
        if bp is None:
            bp = self._extend_heap(max(asize, CHUNKSIZE) // WSIZE)
        self._place(bp, asize)
        return bp

    def free(self, ptr: int | None) -> None:
        """Release the block at ptr and merge it with free neighbours."""
        if ptr is None:
            return
        size = self._size_at(self._hdrp(ptr))
        self._put(self._hdrp(ptr), _pack(size, 0))
        self._put(self._ftrp(ptr), _pack(size, 0))
        self._coalesce(ptr)

    def realloc(self, ptr: int | None, size: int) -> int | None:
        """Move the block at ptr to a new block of size bytes, keeping its data.

        With ptr None this is malloc(size); with size 0 it is free(ptr) and
        returns None.
        """
        if ptr is None:
            return self.malloc(size)
        if size == 0:
            self.free(ptr)
            return None
        newptr = self.malloc(size)
        if newptr is None:
            return None
        copy_size = min(size, self._size_at(self._hdrp(ptr)))
        self.heap.write_bytes(newptr, self.heap.read_bytes(ptr, copy_size))
        self.free(ptr)
        return newptr

    # -- helpers ------------------------------------------------------------

    def _extend_heap(self, words: int) -> int:
        size = (words + 1) * WSIZE if words % 2 else words * WSIZE
        bp = self.heap.sbrk(size)
        self._put(self._hdrp(bp), _pack(size, 0))
        self._put(self._ftrp(bp), _pack(size, 0))
        self._put(self._hdrp(self._next_blkp(bp)), _pack(0, 1))
        return self._coalesce(bp)

    def _coalesce(self, bp: int) -> int:
        prev_alloc = self._alloc_at(self._ftrp(self._prev_blkp(bp)))
        next_alloc = self._alloc_at(self._hdrp(self._next_blkp(bp)))
        size = self._size_at(self._hdrp(bp))

        if prev_alloc and not next_alloc:
            nxt = self._next_blkp(bp)
            size += self._size_at(self._hdrp(nxt))
            self._remove_free_block(nxt)
            self._put(self._hdrp(bp), _pack(size, 0))
            self._put(self._ftrp(bp), _pack(size, 0))
        elif not prev_alloc and next_alloc:
            prev = self._prev_blkp(bp)
            size += self._size_at(self._hdrp(prev))
            self._remove_free_block(prev)
            self._put(self._ftrp(bp), _pack(size, 0))
            self._put(self._hdrp(prev), _pack(size, 0))
            bp = prev
        elif not prev_alloc and not next_alloc:
            prev = self._prev_blkp(bp)
            nxt = self._next_blkp(bp)
            size += self._size_at(self._hdrp(prev)) + self._size_at(self._ftrp(nxt))
            self._remove_free_block(prev)
            self._remove_free_block(nxt)
            self._put(self._hdrp(prev), _pack(size, 0))
            self._put(self._ftrp(nxt), _pack(size, 0))
            bp = prev

        self._insert_free_block(bp)
        return bp

    def _find_fit(self, size: int) -> int | None:
        bp = self._freelist_head
        while self._alloc_at(self._hdrp(bp)) == 0:
            if self._size_at(self._hdrp(bp)) >= size:
                return bp
            bp = self._next_free(bp)
        return None

    def _place(self, bp: int, asize: int) -> None:
        csize = self._size_at(self._hdrp(bp))
        self._remove_free_block(bp)
        if csize - asize >= 2 * DSIZE:
            self._put(self._hdrp(bp), _pack(asize, 1))
            self._put(self._ftrp(bp), _pack(asize, 1))
            rest = self._next_blkp(bp)
            self._put(self._hdrp(rest), _pack(csize - asize, 0))
            self._put(self._ftrp(rest), _pack(csize - asize, 0))
            self._insert_free_block(rest)
        else:
            self._put(self._hdrp(bp), _pack(csize, 1))
            self._put(self._ftrp(bp), _pack(csize, 1))

    def _insert_free_block(self, bp: int) -> None:
        self._set_prev_free(bp, NULL)
        self._set_next_free(bp, self._freelist_head)
        if self._freelist_head != NULL:
            self._set_prev_free(self._freelist_head, bp)
        self._freelist_head = bp

    def _remove_free_block(self, bp: int) -> None:
        prev = self._prev_free(bp)
        nxt = self._next_free(bp)
        if prev:
            self._set_next_free(prev, nxt)
        else:
            self._freelist_head = nxt
        if nxt:
            self._set_prev_free(nxt, prev)

    # -- consistency checking -------------------------------------------------

    def _blocks(self) -> Iterator[int]:
        bp = self._heap_listp
        while self._size_at(self._hdrp(bp)) > 0:
            yield bp
            bp = self._next_blkp(bp)

    def _free_list(self) -> Iterator[int]:
        bp = self._freelist_head
        while self._next_free(bp) != NULL:
            yield bp
            bp = self._next_free(bp)

    def _in_heap(self, ptr: int) -> bool:
        return self.heap.heap_lo() <= ptr <= self.heap.heap_hi()

    @staticmethod
    def _aligned(ptr: int) -> bool:
        return ptr % DSIZE == 0

    def check(self) -> bool:
        """Return True if the heap and free list are consistent."""
        free_list = list(self._free_list())

        if any(self._alloc_at(self._hdrp(bp)) for bp in free_list):
            log.error("Error: Allocated block in the free list.")
            return False

        for bp in self._blocks():
            if not self._alloc_at(self._hdrp(bp)) and not self._alloc_at(
                self._hdrp(self._next_blkp(bp))
            ):
                log.error("Error: Contiguous free blocks not coalesced.")
                return False

        members = set(free_list)
        for bp in self._blocks():
            if not self._alloc_at(self._hdrp(bp)) and bp not in members:
                log.error("Error: Free block not in the free list.")
                return False

        if any(not self._in_heap(bp) or not self._aligned(bp) for bp in free_list):
            log.error("Error: Pointer in the free list is not a valid free block.")
            return False

        for bp in self._blocks():
            nxt = self._next_blkp(bp)
            if (
                self._alloc_at(self._hdrp(bp))
                and self._alloc_at(self._hdrp(nxt))
                and bp + self._size_at(self._hdrp(bp)) > nxt
            ):
                log.error("Error: Allocated blocks overlap.")
                return False

        for bp in self._blocks():
            if not self._in_heap(bp) or not self._aligned(bp):
                log.error("Error: Pointer in heap block is not a valid heap address.")
                return False

        return True