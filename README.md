# syslab

Small systems building blocks in one package, using only the Python standard
library (3.10 or later):

- `syslab.netio`: buffered, robust reading and writing over sockets and
  binary streams.
- `syslab.sockets`: opening client and listening TCP sockets for any address
  family.
- `syslab.cache`: a thread-safe, size-bounded LRU object cache.
- `syslab.tiny` (command `syslab-tiny`): an iterative HTTP/1.0 web server for
  static files and CGI programs.
- `syslab.adder` (command `syslab-adder`): a minimal CGI program that adds two
  numbers.
- `syslab.memlib`, `syslab.mm`, `syslab.checker`: a simulated heap, an
  explicit-free-list allocator on top of it, and a checker for payload
  extents.
- `syslab.ftimer`: average running time of a callable.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Robust I/O and sockets

`RobustReader` wraps a socket (anything with `recv`) or a binary stream
(anything with `read`) and reads through an internal 8192-byte buffer,
retrying interrupted reads:

```python
from syslab.netio import RobustReader, write_all
from syslab.sockets import open_clientfd

sock = open_clientfd("localhost", 8000)
write_all(sock, b"GET / HTTP/1.0\r\n\r\n")
reader = RobustReader(sock)
status = reader.readline(8192)   # one line, newline included; b"" at end of file
rest = reader.read(1024)         # up to 1024 bytes, fewer only at end of file
```

`readline(maxlen)` returns at most `maxlen - 1` bytes. Iterating over a reader
yields lines until end of file. `write_all(sock, data)` writes every byte to a
socket or stream and returns the count.

`open_clientfd(hostname, port)` tries every resolved address and returns the
first connected socket; it raises `socket.gaierror` when the name does not
resolve and `ConnectionError` when no address accepts.
`open_listenfd(port)` returns a socket with `SO_REUSEADDR` set, bound to every
local address and listening; it raises `OSError` when nothing can be bound.

## The object cache

```python
from syslab.cache import Cache

cache = Cache(max_size=10970)
cache.insert("http://example.com/", b"HTTP/1.0 200 OK\r\n\r\nhello")
entry = cache.find("http://example.com/")   # moves the entry to the front
print(entry.size, cache.keys(), len(cache), cache.size)
```

`Cache` holds `CacheEntry` objects (`key`, `value`, `size`). Inserting puts the
entry at the front, replacing any entry with the same key, and first evicts
least recently used entries until the new one fits. `evict(size)` makes room
for `size` bytes explicitly; `keys()` lists keys from most to least recently
used. The default limit is 10970 bytes. Hits, misses and evictions are logged
through `logging`.

## The tiny web server

```
syslab-tiny 8000
```

Files are served from the current directory, one connection at a time. Only
`GET` is supported; other methods get `501 Not Implemented`. A URI ending in
`/` serves `home.html` in that directory. The content type follows the file
name: `.html`, `.gif`, `.png` and `.jpg` are recognised, anything else is
sent as `text/plain`. Missing files get `404 Not found`; files that are not
regular or not readable get `403 Forbidden`.

A URI containing `cgi-bin` names a program to run: the part after `?` is
passed to it in the `QUERY_STRING` environment variable, and its output is
sent to the client after the status line and `Server` header. The program
must be a regular, executable file, otherwise the answer is `403 Forbidden`.

The pieces are also available as functions: `parse_uri`, `get_filetype`,
`error_response`, `read_request_headers`, `serve_static`, `serve_dynamic`,
`handle_connection` and `serve`.

## The adder CGI program

```
QUERY_STRING='15&27' syslab-adder
```

prints the `Connection`, `Content-length` and `Content-type` headers followed
by an HTML body containing `The answer is: 15 + 27 = 42`. Without
`QUERY_STRING` both numbers are 0; a query without `&` raises `ValueError`.
`render(query)` returns the same text and `parse_query(query)` returns the two
numbers. Put an executable that runs it under `cgi-bin/` to use it from the
tiny web server.

## The allocator

`MemoryHeap` models a heap of fixed maximum size that only grows through
`sbrk`; asking for more than is left raises `OutOfMemoryError`. Addresses are
plain integers starting at `heap_lo()`, and words are read and written with
`read_word` and `write_word`.

`Allocator` is a first-fit allocator with an explicit free list, boundary
tags, 8-byte alignment and immediate coalescing:

```python
from syslab.memlib import MemoryHeap
from syslab.mm import Allocator

heap = MemoryHeap(max_heap=20 * (1 << 20))
allocator = Allocator(heap)
allocator.init()
p = allocator.malloc(100)
p = allocator.realloc(p, 200)
allocator.free(p)
assert allocator.check()
```

`malloc(0)` returns `None`; `realloc(None, n)` is `malloc(n)` and
`realloc(p, 0)` frees `p` and returns `None`. `check()` returns whether the
heap and free list are consistent and logs the first problem it finds.

`RangeList` from `syslab.checker` remembers allocated payloads and raises
`RangeError` when a new one is misaligned, lies outside the heap or overlaps
another:

```python
from syslab.checker import RangeList

ranges = RangeList(alignment=8)
ranges.add(p, 100, heap.heap_lo(), heap.heap_hi())
ranges.remove(p)
```

## Timing

`ftimer_gettod(f, n)` and `ftimer_interval(f, n)` call `f()` `n` times (10 by
default) and return the average seconds per call, measured by the wall clock
and by a monotonic clock respectively.

## What is not included

- There is no proxy server command: the cache, the robust I/O and the socket
  helpers are here, but no program that accepts clients and forwards their
  requests.
- There is no trace-driven allocator benchmark: nothing here reads allocation
  trace files, replays them against the allocator, or computes utilisation,
  throughput or a performance index.
- There is no cycle-counter timing; only the clock-based timers in
  `syslab.ftimer`.