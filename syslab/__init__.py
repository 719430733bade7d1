"""Robust socket I/O, an LRU object cache, a tiny web server with a CGI adder, and a simulated-heap allocator."""

__version__ = "0.1.0"