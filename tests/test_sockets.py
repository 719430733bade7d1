import socket
import threading

import pytest

from syslab.sockets import open_clientfd, open_listenfd


def _port_of(sock):
    return sock.getsockname()[1]


def test_listen_and_connect_round_trip():
    with open_listenfd("0") as listener:
        port = _port_of(listener)
        accepted = {}

        def accept_one():
            conn, _ = listener.accept()
            with conn:
                accepted["data"] = conn.recv(1024)
                conn.sendall(b"pong")

        worker = threading.Thread(target=accept_one, daemon=True)
        worker.start()
        with open_clientfd("localhost", str(port)) as client:
            client.sendall(b"ping")
            reply = client.recv(1024)
        worker.join(timeout=5)
    assert accepted["data"] == b"ping"
    assert reply == b"pong"


def test_listener_reuses_address():
    with open_listenfd("0") as listener:
        assert listener.getsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR) > 0
        assert _port_of(listener) > 0


def test_listen_accepts_integer_port():
    with open_listenfd(0) as listener:
        assert listener.type == socket.SOCK_STREAM


def test_client_rejects_service_names():
    with pytest.raises(socket.gaierror):
        open_clientfd("localhost", "http")


def test_listen_rejects_service_names():
    with pytest.raises(socket.gaierror):
        open_listenfd("notaport")


def test_client_refused_raises_connection_error():
    probe = socket.create_server(("127.0.0.1", 0))
    port = _port_of(probe)
    probe.close()
    with pytest.raises(ConnectionError):
        open_clientfd("127.0.0.1", port)