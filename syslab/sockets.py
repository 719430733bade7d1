"""Opening client and listening TCP sockets, independent of address family."""

from __future__ import annotations

import socket

from .netio import LISTENQ


def _addresses(host: str | None, port: str | int, flags: int) -> list:
    """Resolve host and numeric port into stream socket addresses."""
    service = str(port)
    try:
        return socket.getaddrinfo(
            host, service, socket.AF_UNSPEC, socket.SOCK_STREAM, 0,
            flags | socket.AI_ADDRCONFIG,
        )
    except socket.gaierror:
        # AI_ADDRCONFIG hides every address on hosts with only a loopback interface.
        return socket.getaddrinfo(
            host, service, socket.AF_UNSPEC, socket.SOCK_STREAM, 0, flags
        )


def open_clientfd(hostname: str | None, port: str | int) -> socket.socket:
    """Connect to hostname on a numeric port and return the connected socket.

    Every resolved address is tried in turn. Raises socket.gaierror when the
    name cannot be resolved and ConnectionError when no address accepts.
    """
    last_error: OSError | None = None
    for family, socktype, proto, _, address in _addresses(
        hostname, port, socket.AI_NUMERICSERV
    ):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.connect(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock
    raise ConnectionError(f"could not connect to {hostname}:{port}") from last_error


def open_listenfd(port: str | int) -> socket.socket:
    """Return a socket listening on a numeric port on every local address.

    Raises socket.gaierror when the port cannot be resolved and OSError when
    no address can be bound or listened on.
    """
    last_error: OSError | None = None
    listener: socket.socket | None = None
    for family, socktype, proto, _, address in _addresses(
        None, port, socket.AI_PASSIVE | socket.AI_NUMERICSERV
    ):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        listener = sock
        break
    if listener is None:
        raise OSError(f"could not bind to port {port}") from last_error
    try:
        listener.listen(LISTENQ)
    except OSError:
        listener.close()
        raise
    return listener