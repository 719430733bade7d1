"""A minimal CGI program that adds two numbers together."""

from __future__ import annotations

import os
import re
import sys

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Parse a leading integer the lenient way, yielding 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_query(query: str | None) -> tuple[int, int]:
    """Split a query of the form "a&b" into two integers.

    A missing query yields (0, 0); a query without "&" is an error.
    """
    if query is None:
        return 0, 0
    first, sep, second = query.partition("&")
    if not sep:
        raise ValueError(f"query string has no '&': {query!r}")
    return _atoi(first), _atoi(second)


def render(query: str | None) -> str:
    """Return the CGI output: response headers followed by the body."""
    n1, n2 = parse_query(query)
    content = (
        "Welcome to add.com: "
        "THE Internet addition portal.\r\n<p>"
        f"The answer is: {n1} + {n2} = {n1 + n2}\r\n<p>"
        "Thanks for visiting!\r\n"
    )
    return (
        "Connection: close\r\n"
        f"Content-length: {len(content.encode())}\r\n"
        "Content-type: text/html\r\n\r\n"
        f"{content}"
    )


def main(argv: list[str] | None = None) -> int:
    """Write the response for QUERY_STRING to standard output."""
    output = render(os.environ.get("QUERY_STRING"))
    sys.stdout.write(output)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())