"""Tracking allocated payload extents to catch misaligned or overlapping blocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

ALIGNMENT = 8


class RangeError(Exception):
    """A payload violates alignment, heap bounds or overlaps another payload."""


@dataclass(frozen=True)
class Range:
    """The inclusive extent of one payload."""

    lo: int
    hi: int


class RangeList:
    """The extents of every currently allocated payload."""

    def __init__(self, alignment: int = ALIGNMENT) -> None:
        self.alignment = alignment
        self._ranges: list[Range] = []

    def add(self, lo: int, size: int, heap_lo: int, heap_hi: int) -> Range:
        """Check a new payload of size bytes at lo and remember it.

        Raises RangeError if it is misaligned, lies outside [heap_lo, heap_hi],
        or has an end point inside an existing payload.
        """
        if size <= 0:
            raise ValueError("payload size must be positive")
        hi = lo + size - 1
        if lo % self.alignment != 0:
            raise RangeError(
                f"Payload address ({lo:#x}) not aligned to {self.alignment} bytes"
            )
        if not (heap_lo <= lo <= heap_hi and heap_lo <= hi <= heap_hi):
            raise RangeError(
                f"Payload ({lo:#x}:{hi:#x}) lies outside heap "
                f"({heap_lo:#x}:{heap_hi:#x})"
            )
        for other in self._ranges:
            if other.lo <= lo <= other.hi or other.lo <= hi <= other.hi:
                raise RangeError(
                    f"Payload ({lo:#x}:{hi:#x}) overlaps another payload "
                    f"({other.lo:#x}:{other.hi:#x})"
                )
        entry = Range(lo, hi)
        self._ranges.insert(0, entry)
        return entry

    def remove(self, lo: int) -> None:
        """Forget the payload starting at lo, if there is one."""
        for index, entry in enumerate(self._ranges):
            if entry.lo == lo:
                del self._ranges[index]
                return

    def clear(self) -> None:
        """Forget every payload."""
        self._ranges.clear()

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[Range]:
        return iter(self._ranges)