"""Helpers for picking free local ports and binding listeners."""

from __future__ import annotations

import socket
import threading

DEFAULT_IP_ADDRESS = "127.0.0.1"

_MAX_ATTEMPTS = 64

_reserved_ports: set[int] = set()
_reserved_lock = threading.Lock()


def _bind_free(ip: str) -> socket.socket:
    """Bind a TCP socket on ``ip`` to a free port not handed out before."""
    for _ in range(_MAX_ATTEMPTS):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((ip, 0))
        except OSError:
            sock.close()
            raise
        port = sock.getsockname()[1]
        with _reserved_lock:
            if port not in _reserved_ports:
                _reserved_ports.add(port)
                return sock
        sock.close()
    raise OSError("No free port was found")


def new_random_port() -> int:
    """Return a free port that this process has not handed out before."""
    with _bind_free(DEFAULT_IP_ADDRESS) as sock:
        return sock.getsockname()[1]


def new_random_socket_addr() -> tuple[str, int]:
    """Return an ``(ip, port)`` address on 127.0.0.1 with a random free port."""
    return (DEFAULT_IP_ADDRESS, new_random_port())


def new_random_tcp_listener() -> socket.socket:
    """Return a listening TCP socket bound on 127.0.0.1 to a random port."""
    listener, _ = new_random_tcp_listener_with_socket_addr()
    return listener


def new_random_tcp_listener_with_socket_addr() -> tuple[socket.socket, tuple[str, int]]:
    """Return a listening TCP socket on 127.0.0.1 together with its address."""
    sock = _bind_free(DEFAULT_IP_ADDRESS)
    try:
        sock.listen()
    except OSError:
        sock.close()
        raise
    ip, port = sock.getsockname()[:2]
    return sock, (ip, port)