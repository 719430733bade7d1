import pytest

from syslab.memlib import MAX_HEAP, MemoryHeap, OutOfMemoryError


def test_default_size_matches_config():
    assert MemoryHeap().max_heap == MAX_HEAP == 20 * (1 << 20)


def test_new_heap_is_empty():
    heap = MemoryHeap(64)
    assert heap.heapsize() == 0
    assert heap.heap_hi() == heap.heap_lo() - 1


def test_sbrk_returns_old_break():
    heap = MemoryHeap(64)
    first = heap.sbrk(16)
    second = heap.sbrk(8)
    assert first == heap.heap_lo()
    assert second == first + 16
    assert heap.heapsize() == 24
    assert heap.heap_hi() == heap.heap_lo() + heap.heapsize() - 1


def test_sbrk_can_fill_exactly():
    heap = MemoryHeap(32)
    heap.sbrk(32)
    assert heap.heapsize() == 32


def test_sbrk_beyond_max_raises():
    heap = MemoryHeap(32)
    heap.sbrk(30)
    with pytest.raises(OutOfMemoryError):
        heap.sbrk(3)
    assert heap.heapsize() == 30


def test_sbrk_negative_raises():
    heap = MemoryHeap(32)
    heap.sbrk(8)
    with pytest.raises(OutOfMemoryError):
        heap.sbrk(-1)


def test_out_of_memory_is_memory_error():
    heap = MemoryHeap(0)
    with pytest.raises(MemoryError):
        heap.sbrk(1)


def test_reset_brk_empties_heap():
    heap = MemoryHeap(64)
    heap.sbrk(40)
    heap.reset_brk()
    assert heap.heapsize() == 0
    assert heap.sbrk(8) == heap.heap_lo()


def test_pagesize_is_power_of_two():
    size = MemoryHeap(8).pagesize()
    assert size > 0
    assert size & (size - 1) == 0


def test_word_round_trip():
    heap = MemoryHeap(64)
    addr = heap.sbrk(16) + 4
    heap.write_word(addr, 0xDEADBEEF)
    assert heap.read_word(addr) == 0xDEADBEEF


def test_word_is_little_endian():
    heap = MemoryHeap(64)
    addr = heap.sbrk(8)
    heap.write_word(addr, 0x01020304)
    assert heap.read_bytes(addr, 4) == b"\x04\x03\x02\x01"


def test_word_is_truncated_to_32_bits():
    heap = MemoryHeap(64)
    addr = heap.sbrk(8)
    heap.write_word(addr, (1 << 32) + 7)
    assert heap.read_word(addr) == 7


def test_fill_and_read_bytes():
    heap = MemoryHeap(64)
    addr = heap.sbrk(16)
    heap.fill(addr, 0x1AB, 5)
    assert heap.read_bytes(addr, 5) == b"\xab" * 5
    heap.write_bytes(addr + 5, b"xyz")
    assert heap.read_bytes(addr + 5, 3) == b"xyz"


def test_access_outside_storage_raises():
    heap = MemoryHeap(16)
    with pytest.raises(IndexError):
        heap.read_word(heap.heap_lo() - 4)
    with pytest.raises(IndexError):
        heap.write_word(heap.heap_lo() + 14, 1)


def test_negative_max_heap_rejected():
    with pytest.raises(ValueError):
        MemoryHeap(-1)