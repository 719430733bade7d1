"""A small iterative HTTP/1.0 web server for static files and CGI programs."""

from __future__ import annotations

import logging
import os
import socket
import stat
import subprocess
import sys

from .netio import MAXLINE, RobustReader, write_all
from .sockets import open_listenfd

log = logging.getLogger(__name__)

_FILETYPES = (
    (".html", "text/html"),
    (".gif", "image/gif"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
)


def parse_uri(uri: str) -> tuple[bool, str, str]:
    """Split a request URI into (is_static, filename, cgiargs).

    URIs containing "cgi-bin" are dynamic; their query string becomes the
    CGI arguments. Static URIs ending in "/" are served as home.html.
    """
    if "cgi-bin" not in uri:
        filename = "." + uri
        if uri.endswith("/"):
            filename += "home.html"
        return True, filename, ""
    path, _, cgiargs = uri.partition("?")
    return False, "." + path, cgiargs


def get_filetype(filename: str) -> str:
    """Derive the content type from the file name."""
    for marker, filetype in _FILETYPES:
        if marker in filename:
            return filetype
    return "text/plain"


def error_response(cause: str, errnum: str, shortmsg: str, longmsg: str) -> bytes:
    """Return a complete HTML error response."""
    body = (
        "<html><title>Tiny Error</title>"
        "<body bgcolor=ffffff>\r\n"
        f"{errnum}: {shortmsg}\r\n"
        f"<p>{longmsg}: {cause}\r\n"
        "<hr><em>The Tiny Web server</em>\r\n"
    ).encode("latin-1")
    head = (
        f"HTTP/1.0 {errnum} {shortmsg}\r\n"
        "Content-type: text/html\r\n"
        f"Content-length: {len(body)}\r\n\r\n"
    ).encode("latin-1")
    return head + body


def read_request_headers(reader: RobustReader) -> list[str]:
    """Read header lines up to the blank line that ends them.

    Returns the lines read, the terminating blank line excluded. Stops early
    at end of file.
    """
    headers = []
    while True:
        raw = reader.readline(MAXLINE)
        if not raw:
            break
        line = raw.decode("latin-1")
        log.debug("%s", line.rstrip("\r\n"))
        if line == "\r\n":
            break
        headers.append(line)
    return headers


def serve_static(conn, filename: str, filesize: int) -> None:
    """Send the response headers and the file's contents to conn."""
    filetype = get_filetype(filename)
    head = (
        "HTTP/1.0 200 OK\r\n"
        "Server: Tiny Web Server\r\n"
        "Connection: close\r\n"
        f"Content-length: {filesize}\r\n"
        f"Content-type: {filetype}\r\n\r\n"
    )
    write_all(conn, head.encode("latin-1"))
    log.info("Response headers:\n%s", head)
    with open(filename, "rb") as source:
        body = source.read(filesize)
    write_all(conn, body)


def serve_dynamic(conn, filename: str, cgiargs: str) -> None:
    """Run a CGI program with QUERY_STRING set and send its output to conn."""
    write_all(conn, b"HTTP/1.0 200 OK\r\n")
    write_all(conn, b"Server: Tiny Web Server\r\n")
    env = dict(os.environ, QUERY_STRING=cgiargs)
    try:
        result = subprocess.run(
            [filename], env=env, stdout=subprocess.PIPE, check=False
        )
    except OSError as exc:
        log.error("Execve error: %s", exc)
        return
    write_all(conn, result.stdout)


def handle_connection(conn) -> None:
    """Handle one HTTP request/response transaction on conn."""
    reader = RobustReader(conn)
    raw = reader.readline(MAXLINE)
    if not raw:
        return
    line = raw.decode("latin-1")
    log.info("%s", line.rstrip("\r\n"))
    tokens = line.split()
    method = tokens[0] if tokens else ""
    uri = tokens[1] if len(tokens) > 1 else ""
    if method.upper() != "GET":
        write_all(conn, error_response(
            method, "501", "Not Implemented", "Tiny does not implement this method"))
        return
    read_request_headers(reader)

    is_static, filename, cgiargs = parse_uri(uri)
    try:
        info = os.stat(filename)
    except OSError:
        write_all(conn, error_response(
            filename, "404", "Not found", "Tiny couldn't find this file"))
        return

    regular = stat.S_ISREG(info.st_mode)
    if is_static:
        if not regular or not info.st_mode & stat.S_IRUSR:
            write_all(conn, error_response(
                filename, "403", "Forbidden", "Tiny couldn't read the file"))
            return
        serve_static(conn, filename, info.st_size)
    else:
        if not regular or not info.st_mode & stat.S_IXUSR:
            write_all(conn, error_response(
                filename, "403", "Forbidden", "Tiny couldn't run the CGI program"))
            return
        serve_dynamic(conn, filename, cgiargs)


def serve(port: str | int) -> None:
    """Accept and handle connections on port, one at a time, forever."""
    with open_listenfd(port) as listener:
        while True:
            conn, address = listener.accept()
            with conn:
                try:
                    host, service = socket.getnameinfo(address, 0)
                except OSError:
                    host, service = str(address[0]), str(address[1])
                log.info("Accepted connection from (%s, %s)", host, service)
                try:
                    handle_connection(conn)
                except OSError as exc:
                    log.error("connection failed: %s", exc)


def main(argv: list[str] | None = None) -> int:
    """Run the server on the port given as the only argument."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("usage: tiny <port>", file=sys.stderr)
        return 1
    try:
        serve(args[0])
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"Open_listenfd error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())